import asyncio
import json

from sitegen.events.models import (
    SSE_DONE,
    CompleteEvent,
    StatusEvent,
    TokenUsage,
    ToolActivityEvent,
    ToolActivityResult,
    ToolCallMetrics,
    sse_stream,
)
from sitegen.schemas.site_spec import SiteSpec


def _payload(sse: str) -> dict:
    assert sse.startswith("data: ")
    assert sse.endswith("\n\n")
    return json.loads(sse[len("data: "):])


def test_status_event_to_sse() -> None:
    payload = _payload(StatusEvent(message="Starting website generation").to_sse())
    assert payload["type"] == "status"
    assert payload["message"] == "Starting website generation"
    assert payload["timestamp"].endswith("Z")


def test_complete_event_uses_camel_case_keys() -> None:
    event = CompleteEvent(
        pages={"index.html": "<html></html>"},
        spec=SiteSpec.fallback(),
        usage=TokenUsage(input_tokens=1, output_tokens=2, total_tokens=3),
        tool_metrics=ToolCallMetrics(fix_attempts_per_page={"index.html": 2}),
    )
    payload = _payload(event.to_sse())
    assert payload["usage"] == {"inputTokens": 1, "outputTokens": 2, "totalTokens": 3}
    assert payload["toolMetrics"]["fixAttemptsPerPage"] == {"index.html": 2}
    assert payload["spec"]["colorPalette"]["primary"] == "#3b82f6"
    assert payload["spec"]["typography"] == {"headingStyle": "modern", "bodyFont": "sans"}
    assert "designEffects" not in payload["spec"]


def test_tool_activity_omits_unset_fields() -> None:
    start = _payload(ToolActivityEvent(tool_name="read_page", status="start").to_sse())
    assert start["toolName"] == "read_page"
    assert "result" not in start

    end = ToolActivityEvent(
        tool_name="read_page",
        status="end",
        result=ToolActivityResult(success=False, message="Page not found"),
    )
    assert _payload(end.to_sse())["result"] == {"success": False, "message": "Page not found"}


def test_sse_stream_ends_with_done() -> None:
    async def events():
        yield StatusEvent(message="one")
        yield StatusEvent(message="two")

    async def collect():
        return [line async for line in sse_stream(events())]

    lines = asyncio.run(collect())
    assert len(lines) == 3
    assert _payload(lines[1])["message"] == "two"
    assert lines[-1] == SSE_DONE


def test_usage_snapshot_is_independent() -> None:
    usage = TokenUsage()
    usage.add(1, 2, 3)
    snapshot = usage.snapshot()
    usage.add(1, 1, 2)
    assert snapshot.total_tokens == 3
    assert usage.total_tokens == 5
