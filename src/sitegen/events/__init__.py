from .models import (
    SSE_DONE,
    BaseEvent,
    CompleteEvent,
    ErrorEvent,
    GenerationEvent,
    PageEvent,
    SpecEvent,
    StatusEvent,
    ThinkingEvent,
    TokenUsage,
    ToolActivityEvent,
    ToolActivityResult,
    ToolCallMetrics,
    UsageEvent,
    sse_stream,
)
from .types import TERMINAL_EVENT_TYPES, GenerationEventType

__all__ = [
    "SSE_DONE",
    "TERMINAL_EVENT_TYPES",
    "BaseEvent",
    "CompleteEvent",
    "ErrorEvent",
    "GenerationEvent",
    "GenerationEventType",
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
