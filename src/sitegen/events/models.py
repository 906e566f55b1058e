from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..schemas.site_spec import SiteSpec
from .types import GenerationEventType


SSE_DONE = "data: [DONE]\n\n"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenUsage(_WireModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def add(self, input_tokens: int, output_tokens: int, total_tokens: int) -> None:
        self.input_tokens += input_tokens
        self.output_tokens += output_tokens
        self.total_tokens += total_tokens

    def snapshot(self) -> "TokenUsage":
        return self.model_copy()


class ToolCallMetrics(_WireModel):
    total_tool_calls: int = 0
    write_page_calls: int = 0
    edit_page_calls: int = 0
    validate_site_calls: int = 0
    pages_passed_validation: int = 0
    pages_failed_validation: int = 0
    fix_attempts_per_page: Dict[str, int] = Field(default_factory=dict)

    def snapshot(self) -> "ToolCallMetrics":
        return self.model_copy(deep=True)


class BaseEvent(_WireModel):
    type: GenerationEventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_sse(self) -> str:
        """Convert event to SSE format."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str) and timestamp.endswith("+00:00"):
            data["timestamp"] = timestamp[: -len("+00:00")] + "Z"
        return f"data: {json.dumps(data, ensure_ascii=False)}\n\n"


class StatusEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.STATUS
    message: str


class SpecEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.SPEC
    spec: SiteSpec


class PageEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.PAGE
    filename: str
    html: str


class ThinkingEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.THINKING
    content: str


class ToolActivityResult(_WireModel):
    success: bool
    message: Optional[str] = None


class ToolActivityEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.TOOL_ACTIVITY
    tool_name: str
    status: Literal["start", "end"]
    args: Optional[Dict[str, Any]] = None
    result: Optional[ToolActivityResult] = None


class UsageEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.USAGE
    usage: TokenUsage


class CompleteEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.COMPLETE
    pages: Dict[str, str]
    spec: SiteSpec
    usage: TokenUsage
    tool_metrics: ToolCallMetrics


class ErrorEvent(BaseEvent):
    type: GenerationEventType = GenerationEventType.ERROR
    error: str
    usage: Optional[TokenUsage] = None
    tool_metrics: Optional[ToolCallMetrics] = None


GenerationEvent = Union[
    StatusEvent,
    SpecEvent,
    PageEvent,
    ThinkingEvent,
    ToolActivityEvent,
    UsageEvent,
    CompleteEvent,
    ErrorEvent,
]


async def sse_stream(events: AsyncIterator[GenerationEvent]) -> AsyncIterator[str]:
    """Render a generation stream as SSE lines, terminated by ``[DONE]``."""
    async for event in events:
        yield event.to_sse()
    yield SSE_DONE


__all__ = [
    "SSE_DONE",
    "BaseEvent",
    "CompleteEvent",
    "ErrorEvent",
    "GenerationEvent",
    "PageEvent",
    "SpecEvent",
    "StatusEvent",
    "ThinkingEvent",
    "TokenUsage",
    "ToolActivityEvent",
    "ToolActivityResult",
    "ToolCallMetrics",
    "UsageEvent",
    "sse_stream",
]
