from enum import Enum


class GenerationEventType(str, Enum):
    STATUS = "status"
    SPEC = "spec"
    PAGE = "page"
    THINKING = "thinking"
    TOOL_ACTIVITY = "tool_activity"
    USAGE = "usage"
    COMPLETE = "complete"
    ERROR = "error"


# Exactly one of these ends a session's stream.
TERMINAL_EVENT_TYPES = {
    GenerationEventType.COMPLETE.value,
    GenerationEventType.ERROR.value,
}
