"""Entry point for the sitegen CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Dict, Optional


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitegen",
        description="Generate a multi-page website from a natural-language request",
    )
    parser.add_argument("request", help="What to build, or what to change")
    parser.add_argument("--out", "-o", default="site", help="Directory to write the pages into")
    parser.add_argument("--spec", help="Existing spec.json to modify")
    parser.add_argument("--pages", help="Directory of existing .html pages to modify")
    parser.add_argument("--seed", type=int, help="Design seed for reproducible creative directions")
    parser.add_argument("--json", action="store_true", help="Print raw SSE lines instead of a summary")
    return parser


def _load_pages(directory: Optional[str]) -> Dict[str, str]:
    if not directory:
        return {}
    return {
        path.name: path.read_text(encoding="utf-8")
        for path in sorted(Path(directory).glob("*.html"))
    }


def _write_output(out_dir: Path, pages: Dict[str, str], spec_wire: dict) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for filename, html in pages.items():
        (out_dir / Path(filename).name).write_text(html, encoding="utf-8")
    (out_dir / "spec.json").write_text(
        json.dumps(spec_wire, indent=2, ensure_ascii=False), encoding="utf-8"
    )


async def _run(args: argparse.Namespace) -> int:
    from sitegen.cli.console import Console
    from sitegen.config import get_settings, resolve_model
    from sitegen.events.models import CompleteEvent, ErrorEvent, sse_stream
    from sitegen.generation.orchestrator import GenerationDeps, generate_website
    from sitegen.generation.prompts import generate_design_seed
    from sitegen.schemas.site_spec import SiteSpec

    existing_spec = None
    if args.spec:
        existing_spec = SiteSpec.model_validate_json(Path(args.spec).read_text(encoding="utf-8"))
    existing_pages = _load_pages(args.pages)

    deps = GenerationDeps(design_seed=generate_design_seed(args.seed))
    console = Console()
    if not args.json:
        console.print_welcome(resolve_model(get_settings()).model, args.request)

    outcome = {"exit_code": 1}

    async def tap(events):
        async for event in events:
            if isinstance(event, CompleteEvent):
                _write_output(Path(args.out), event.pages, event.spec.to_wire())
                outcome["exit_code"] = 0
            elif isinstance(event, ErrorEvent):
                outcome["exit_code"] = 1
            yield event

    events = tap(generate_website(args.request, existing_spec, existing_pages or None, deps))
    if args.json:
        async for line in sse_stream(events):
            sys.stdout.write(line)
            sys.stdout.flush()
    else:
        async for event in events:
            console.render(event)
        if outcome["exit_code"] == 0:
            console.print_info(f"Pages written to {args.out}")
    return outcome["exit_code"]


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    from sitegen.config import get_settings
    from sitegen.log import setup_logging

    settings = get_settings()
    setup_logging(Path(settings.log_dir) if settings.log_dir else None, settings.log_level)

    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
