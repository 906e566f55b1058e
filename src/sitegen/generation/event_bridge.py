"""Translates raw agent callbacks into an ordered, pull-based event stream.

Usage::

    bridge = EventBridge(agent, state, prompt)
    async for event in bridge.stream():
        ...
    bridge.run_failed, bridge.usage, bridge.tool_metrics

The agent pushes events from inside its own task; the consumer pulls. A
FIFO deque holds translated events and an ``asyncio.Event`` wakes the
consumer. The wait is bounded so a wakeup set between the emptiness
check and the wait is never lost for longer than ``wait_timeout``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, AsyncIterator, Deque, Dict, Optional

from ..events.models import (
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
)
from ..exceptions import TrackedError
from ..schemas.site_spec import SiteSpec
from .agent import AgentEvent, AgentLike
from .state import GenerationState
from .tools import ToolName

logger = logging.getLogger(__name__)

_MESSAGE_PREVIEW = 200


def _first_number(source: Dict[str, Any], keys: tuple[str, ...]) -> Optional[int]:
    for key in keys:
        value = source.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value)
    return None


def _usage_source(usage: Any) -> Optional[Dict[str, Any]]:
    if usage is None:
        return None
    if isinstance(usage, dict):
        return usage
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    return dict(vars(usage)) if hasattr(usage, "__dict__") else None


class EventBridge:
    def __init__(
        self,
        agent: AgentLike,
        state: GenerationState,
        prompt: str,
        wait_timeout: float = 0.1,
    ) -> None:
        self._agent = agent
        self._state = state
        self._prompt = prompt
        self._wait_timeout = wait_timeout
        self._queue: Deque[GenerationEvent] = deque()
        self._wake = asyncio.Event()
        self._run_done = False
        self.agent_done = False
        self.run_failed = False
        self.usage = TokenUsage()
        self.tool_metrics = ToolCallMetrics()

    def _push(self, event: GenerationEvent) -> None:
        self._queue.append(event)
        self._wake.set()

    def on_agent_event(self, event: AgentEvent) -> None:
        """Subscriber callback. Never raises into the agent runtime."""
        try:
            self._translate(event)
        except Exception:
            logger.warning(
                "bridge_translate_error",
                extra={"data": {"event": getattr(event, "type", type(event).__name__)}},
                exc_info=True,
            )
        finally:
            self._wake.set()

    def _translate(self, event: AgentEvent) -> None:
        kind = getattr(event, "type", None)
        if kind != "message_update":
            logger.debug("agent_event", extra={"data": {"type": kind}})

        if kind == "agent_start":
            self._push(StatusEvent(message="Planning your website"))
        elif kind == "tool_execution_start":
            args = event.args if isinstance(event.args, dict) else None
            self._push(ToolActivityEvent(tool_name=event.tool_name, status="start", args=args))
        elif kind == "tool_execution_end":
            self._on_tool_end(event)
        elif kind == "message_update":
            self._on_message_update(event)
        elif kind == "message_end":
            self._on_message_end(event)
        elif kind == "agent_end":
            self.agent_done = True
            logger.debug(
                "agent_end",
                extra={"data": {
                    "pages": self._state.page_names(),
                    "spec": self._state.spec.name if self._state.spec else None,
                    "metrics": self.tool_metrics.model_dump(),
                }},
            )

    def _on_tool_end(self, event: Any) -> None:
        result = event.result
        details: Dict[str, Any] = getattr(result, "details", None) or {}
        is_error = bool(getattr(event, "is_error", False) or getattr(result, "is_error", False))
        self._record_metrics(event.tool_name, details)

        output = getattr(result, "output", "") or ""
        success = not is_error and details.get("valid") is not False
        self._push(ToolActivityEvent(
            tool_name=event.tool_name,
            status="end",
            result=ToolActivityResult(success=success, message=output[:_MESSAGE_PREVIEW] or None),
        ))

        spec = details.get("spec")
        if isinstance(spec, SiteSpec):
            self._push(SpecEvent(spec=spec))
            return

        filename = details.get("filename")
        html = details.get("html")
        if filename and html and details.get("saved") and self._state.pages.get(filename) == html:
            self._push(PageEvent(filename=filename, html=html))

    def _record_metrics(self, tool_name: str, details: Dict[str, Any]) -> None:
        metrics = self.tool_metrics
        metrics.total_tool_calls += 1
        if tool_name == ToolName.WRITE_PAGE.value:
            metrics.write_page_calls += 1
            if details.get("valid") is True:
                metrics.pages_passed_validation += 1
            elif details.get("valid") is False:
                metrics.pages_failed_validation += 1
        elif tool_name == ToolName.EDIT_PAGE.value:
            metrics.edit_page_calls += 1
            filename = details.get("filename")
            if filename:
                attempts = metrics.fix_attempts_per_page
                attempts[filename] = attempts.get(filename, 0) + 1
        elif tool_name == ToolName.VALIDATE_SITE.value:
            metrics.validate_site_calls += 1

    def _on_message_update(self, event: Any) -> None:
        content = getattr(event.message, "content", None) or []
        for block in content:
            if isinstance(block, dict) and block.get("type") == "thinking" and "thinking" in block:
                self._push(ThinkingEvent(content=block["thinking"]))

    def _on_message_end(self, event: Any) -> None:
        message = event.message
        if getattr(message, "role", None) != "assistant":
            return
        source = _usage_source(getattr(message, "usage", None))
        if source is None:
            return
        input_tokens = _first_number(source, ("input", "prompt_tokens", "input_tokens")) or 0
        output_tokens = _first_number(source, ("output", "completion_tokens", "output_tokens")) or 0
        total = _first_number(source, ("total_tokens", "totalTokens", "total"))
        if total is None:
            total = input_tokens + output_tokens
        self.usage.add(input_tokens, output_tokens, total)
        self._push(UsageEvent(usage=self.usage.snapshot()))

    async def _run(self) -> None:
        try:
            await self._agent.prompt(self._prompt)
        except Exception as exc:
            self.run_failed = True
            data: Dict[str, Any] = {"error": str(exc)}
            if isinstance(exc, TrackedError):
                data["error_type"] = exc.error_type
                data["trace_id"] = exc.trace_id
            logger.warning("agent_run_failed", extra={"data": data}, exc_info=True)
            self._push(ErrorEvent(
                error=str(exc) or type(exc).__name__,
                usage=self.usage.snapshot(),
                tool_metrics=self.tool_metrics.snapshot(),
            ))
        finally:
            self._run_done = True
            self._wake.set()

    async def stream(self) -> AsyncIterator[GenerationEvent]:
        unsubscribe = self._agent.subscribe(self.on_agent_event)
        task = asyncio.create_task(self._run())
        try:
            while True:
                if self._queue:
                    yield self._queue.popleft()
                    continue
                if self._run_done:
                    break
                self._wake.clear()
                if self._queue or self._run_done:
                    continue
                try:
                    await asyncio.wait_for(self._wake.wait(), self._wait_timeout)
                except asyncio.TimeoutError:
                    pass
        finally:
            # Abandoning the stream does not cancel the run.
            await task
            unsubscribe()


__all__ = ["EventBridge"]
