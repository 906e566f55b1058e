"""Rich console output for the generation CLI."""

from __future__ import annotations

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from ..events.models import (
    CompleteEvent,
    ErrorEvent,
    GenerationEvent,
    PageEvent,
    SpecEvent,
    StatusEvent,
    ThinkingEvent,
    TokenUsage,
    ToolActivityEvent,
    UsageEvent,
)


def _tool_call_summary(name: str, args: dict[str, Any] | None) -> str:
    """Build a compact one-line summary for a tool call."""
    args = args or {}
    filename = args.get("filename", "")
    if name == "plan_site":
        return f"Planning {args.get('name') or 'site'}"
    if name == "write_page":
        return f"Writing {filename}"
    if name == "edit_page":
        edits = args.get("edits") or []
        return f"Editing {filename} ({len(edits)} edit(s))"
    if name == "read_page":
        return f"Reading {filename}"
    if name == "validate_site":
        return "Reviewing site"
    return name


class Console:
    """Renders generation events to the terminal."""

    def __init__(self, console: RichConsole | None = None):
        self._console = console or RichConsole()

    def print_welcome(self, model: str, request: str):
        self._console.print()
        self._console.print(
            Panel(
                f"[bold]sitegen[/bold] - website generator\n"
                f"Model: [cyan]{model}[/cyan]\n"
                f"Request: [italic]{request[:200]}[/italic]",
                border_style="blue",
            )
        )
        self._console.print()

    def render(self, event: GenerationEvent):
        if isinstance(event, StatusEvent):
            self.print_info(event.message)
        elif isinstance(event, ToolActivityEvent):
            self.print_tool_activity(event)
        elif isinstance(event, SpecEvent):
            palette = event.spec.color_palette
            self._console.print(
                f"  [magenta]◆[/magenta] Plan: [bold]{event.spec.name}[/bold] "
                f"({len(event.spec.pages)} page(s), primary {palette.primary})"
            )
        elif isinstance(event, PageEvent):
            self._console.print(
                f"  [green]●[/green] Saved [bold]{event.filename}[/bold] ({len(event.html):,} chars)"
            )
        elif isinstance(event, ThinkingEvent):
            thought = event.content.strip().replace("\n", " ")
            if len(thought) > 100:
                thought = thought[:97] + "..."
            self._console.print(f"  [dim italic]{thought}[/dim italic]")
        elif isinstance(event, UsageEvent):
            pass
        elif isinstance(event, CompleteEvent):
            self.print_complete(event)
        elif isinstance(event, ErrorEvent):
            self.print_error(event.error)
            if event.usage is not None:
                self.print_usage(event.usage)

    def print_tool_activity(self, event: ToolActivityEvent):
        if event.status == "start":
            summary = _tool_call_summary(event.tool_name, event.args)
            self._console.print(f"  [yellow]⏳[/yellow] [dim]{summary}[/dim]")
            return
        result = event.result
        message = (result.message or "").split("\n")[0][:80] if result else ""
        if result is not None and not result.success:
            self._console.print(f"  [red]✗[/red] [red]{event.tool_name}: {message}[/red]")
        else:
            self._console.print(f"  [green]✓[/green] [dim]{event.tool_name}: {message}[/dim]")

    def print_complete(self, event: CompleteEvent):
        table = Table(title=f"{event.spec.name}", show_lines=False)
        table.add_column("Page")
        table.add_column("Size", justify="right")
        for filename in sorted(event.pages):
            table.add_row(filename, f"{len(event.pages[filename]):,}")
        self._console.print()
        self._console.print(table)
        metrics = event.tool_metrics
        self.print_info(
            f"Tool calls: {metrics.total_tool_calls} "
            f"(write: {metrics.write_page_calls}, edit: {metrics.edit_page_calls}, "
            f"validate: {metrics.validate_site_calls})"
        )
        self.print_usage(event.usage)

    def print_error(self, msg: str):
        self._console.print(f"[bold red]Error:[/bold red] {msg}")

    def print_info(self, msg: str):
        self._console.print(f"[dim]{msg}[/dim]")

    def print_usage(self, usage: TokenUsage):
        self._console.print(
            f"[dim]Tokens: {usage.total_tokens:,} "
            f"(input: {usage.input_tokens:,}, output: {usage.output_tokens:,})[/dim]"
        )
