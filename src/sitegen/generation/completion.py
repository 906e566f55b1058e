from __future__ import annotations

from typing import Optional, Union

from ..events.models import CompleteEvent, ErrorEvent, TokenUsage, ToolCallMetrics
from ..schemas.site_spec import SiteSpec
from .state import GenerationState

NO_PAGES_ERROR = "No pages were generated"


def resolve_completion(
    state: GenerationState,
    usage: TokenUsage,
    tool_metrics: ToolCallMetrics,
    run_failed: bool,
) -> Optional[Union[CompleteEvent, ErrorEvent]]:
    """Decide the terminal event of a session once the agent has finished.

    Returns None after a failed run: the bridge has already queued the
    error event and partial pages are not surfaced.
    """
    if run_failed:
        return None
    if not state.pages:
        return ErrorEvent(error=NO_PAGES_ERROR, usage=usage, tool_metrics=tool_metrics)
    return CompleteEvent(
        pages=dict(state.pages),
        spec=state.spec if state.spec is not None else SiteSpec.fallback(),
        usage=usage,
        tool_metrics=tool_metrics,
    )


__all__ = ["NO_PAGES_ERROR", "resolve_completion"]
