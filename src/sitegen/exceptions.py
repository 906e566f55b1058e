from __future__ import annotations

from uuid import uuid4


def new_trace_id() -> str:
    return uuid4().hex


class TrackedError(Exception):
    def __init__(self, message: str, *, error_type: str, trace_id: str | None = None) -> None:
        self.error_type = error_type
        self.trace_id = trace_id or new_trace_id()
        super().__init__(message)


class EditTargetError(TrackedError):
    """An edit's search string matched zero times or more than once."""

    def __init__(
        self,
        message: str,
        *,
        index: int,
        total: int,
        occurrences: int,
        trace_id: str | None = None,
    ) -> None:
        self.index = index
        self.total = total
        self.occurrences = occurrences
        super().__init__(message, error_type="edit_target", trace_id=trace_id)

    @property
    def issue(self) -> str:
        return "Edit target not found" if self.occurrences == 0 else "Multiple matches found"


class AgentRunError(TrackedError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="agent_run", trace_id=trace_id)


__all__ = [
    "new_trace_id",
    "TrackedError",
    "EditTargetError",
    "AgentRunError",
]
