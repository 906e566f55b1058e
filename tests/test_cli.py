import io
import json

from rich.console import Console as RichConsole

from sitegen.__main__ import _build_parser, _load_pages, _write_output
from sitegen.cli.console import Console
from sitegen.events.models import (
    CompleteEvent,
    ErrorEvent,
    TokenUsage,
    ToolActivityEvent,
    ToolActivityResult,
    ToolCallMetrics,
)
from sitegen.schemas.site_spec import SiteSpec

from fakes import VALID_HTML


def _console():
    buffer = io.StringIO()
    return Console(RichConsole(file=buffer, width=120, color_system=None)), buffer


def test_renders_tool_activity_and_completion() -> None:
    console, buffer = _console()
    console.render(ToolActivityEvent(tool_name="write_page", status="start", args={"filename": "index.html"}))
    console.render(ToolActivityEvent(
        tool_name="write_page",
        status="end",
        result=ToolActivityResult(success=True, message="Successfully wrote index.html"),
    ))
    console.render(CompleteEvent(
        pages={"index.html": VALID_HTML},
        spec=SiteSpec.fallback(),
        usage=TokenUsage(input_tokens=100, output_tokens=50, total_tokens=150),
        tool_metrics=ToolCallMetrics(total_tool_calls=1, write_page_calls=1),
    ))
    output = buffer.getvalue()
    assert "Writing index.html" in output
    assert "Successfully wrote index.html" in output
    assert "Tool calls: 1" in output
    assert "Tokens: 150" in output


def test_renders_errors() -> None:
    console, buffer = _console()
    console.render(ErrorEvent(error="No pages were generated", usage=TokenUsage()))
    assert "Error: No pages were generated" in buffer.getvalue()


def test_parser_options() -> None:
    args = _build_parser().parse_args(["A bakery", "--out", "build", "--seed", "3", "--json"])
    assert args.request == "A bakery"
    assert args.out == "build"
    assert args.seed == 3
    assert args.json is True


def test_pages_round_trip_through_directories(tmp_path) -> None:
    out = tmp_path / "site"
    _write_output(out, {"index.html": VALID_HTML}, SiteSpec.fallback().to_wire())

    assert _load_pages(str(out)) == {"index.html": VALID_HTML}
    spec = json.loads((out / "spec.json").read_text(encoding="utf-8"))
    assert spec["colorPalette"]["primary"] == "#3b82f6"
    assert SiteSpec.model_validate(spec) == SiteSpec.fallback()
