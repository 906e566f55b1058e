"""Agent runtime seam and the default OpenAI-compatible tool-calling agent.

The orchestrator only needs something that satisfies ``AgentLike``: it can
be subscribed to for raw agent events and prompted once. Tests plug in
scripted fakes; the CLI uses ``ToolCallingAgent``.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Protocol,
    Union,
)

import httpx
from openai import AsyncOpenAI

from ..config import ModelConfig, get_settings
from ..exceptions import AgentRunError
from ..log import log_model_call, log_tool_execution
from .tools import BaseTool, ToolResult, run_tool

logger = logging.getLogger(__name__)


@dataclass
class AgentMessage:
    role: str
    content: List[Dict[str, Any]] = field(default_factory=list)
    usage: Optional[Dict[str, Any]] = None


@dataclass
class AgentStart:
    type: ClassVar[str] = "agent_start"


@dataclass
class AgentEnd:
    type: ClassVar[str] = "agent_end"
    messages: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ToolExecutionStart:
    type: ClassVar[str] = "tool_execution_start"
    tool_call_id: str
    tool_name: str
    args: Any = None


@dataclass
class ToolExecutionEnd:
    type: ClassVar[str] = "tool_execution_end"
    tool_call_id: str
    tool_name: str
    result: ToolResult
    is_error: bool = False


@dataclass
class MessageUpdate:
    type: ClassVar[str] = "message_update"
    message: AgentMessage


@dataclass
class MessageEnd:
    type: ClassVar[str] = "message_end"
    message: AgentMessage


AgentEvent = Union[AgentStart, AgentEnd, ToolExecutionStart, ToolExecutionEnd, MessageUpdate, MessageEnd]
AgentCallback = Callable[[AgentEvent], Union[None, Awaitable[None]]]


class AgentLike(Protocol):
    def subscribe(self, callback: AgentCallback) -> Callable[[], None]:
        ...

    async def prompt(self, text: str) -> None:
        ...


@dataclass
class AgentSetup:
    system_prompt: str
    model: ModelConfig
    tools: List[BaseTool]
    thinking_level: str = "low"
    messages: List[Dict[str, Any]] = field(default_factory=list)


AgentFactory = Callable[[AgentSetup, Callable[[], Optional[str]]], AgentLike]

_REASONING_MODEL_PREFIXES = ("o1", "o3", "o4", "gpt-5")


class ToolCallingAgent:
    """Chat-completions loop that runs tool calls one at a time.

    Stops when the model answers without tool calls or after ``max_turns``
    model calls. Model errors propagate out of ``prompt``.
    """

    def __init__(
        self,
        setup: AgentSetup,
        get_api_key: Callable[[], Optional[str]],
        *,
        max_turns: int | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.setup = setup
        self._get_api_key = get_api_key
        self.max_turns = max_turns if max_turns is not None else get_settings().max_turns
        self._client = client
        self._subscribers: List[AgentCallback] = []
        self._tools: List[BaseTool] = list(setup.tools)

    def subscribe(self, callback: AgentCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def _emit(self, event: AgentEvent) -> None:
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if hasattr(result, "__await__"):
                    await result
            except Exception:
                logger.warning(
                    "callback_error",
                    extra={"data": {"event": event.type}},
                    exc_info=True,
                )

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self._get_api_key()
            if not api_key:
                raise AgentRunError(
                    f"No API key configured for model provider '{self.setup.model.name}'"
                )
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self.setup.model.base_url,
                timeout=httpx.Timeout(self.setup.model.timeout),
            )
        return self._client

    def _request_params(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        config = self.setup.model
        params: Dict[str, Any] = {
            "model": config.model,
            "messages": messages,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }
        if self._tools:
            params["tools"] = [tool.to_openai_schema() for tool in self._tools]
            params["tool_choice"] = "auto"
        if config.model.startswith(_REASONING_MODEL_PREFIXES):
            params["reasoning_effort"] = self.setup.thinking_level
            params.pop("temperature")
        return params

    async def prompt(self, text: str) -> None:
        messages: List[Dict[str, Any]] = [{"role": "system", "content": self.setup.system_prompt}]
        messages.extend(self.setup.messages)
        messages.append({"role": "user", "content": text})

        await self._emit(AgentStart())
        try:
            client = self._get_client()
            for step in range(1, self.max_turns + 1):
                started = time.monotonic()
                response = await client.chat.completions.create(**self._request_params(messages))
                choice = response.choices[0]
                message = choice.message
                tool_calls = list(message.tool_calls or [])
                usage = _usage_dict(response.usage)
                log_model_call(
                    self.setup.model.model, step, time.monotonic() - started, usage, len(tool_calls)
                )

                reasoning = getattr(message, "reasoning_content", None)
                if reasoning:
                    await self._emit(MessageUpdate(AgentMessage(
                        role="assistant",
                        content=[{"type": "thinking", "thinking": reasoning}],
                    )))

                blocks: List[Dict[str, Any]] = []
                if message.content:
                    blocks.append({"type": "text", "text": message.content})
                blocks.extend({"type": "toolCall", "name": tc.function.name} for tc in tool_calls)
                await self._emit(MessageEnd(AgentMessage(role="assistant", content=blocks, usage=usage)))

                messages.append(_assistant_entry(message.content, tool_calls))
                if not tool_calls:
                    break

                for tc in tool_calls:
                    result = await self._run_tool(tc.id, tc.function.name, tc.function.arguments)
                    messages.append(
                        {"role": "tool", "tool_call_id": tc.id, "content": result.to_content()}
                    )
            else:
                logger.warning("max_turns_reached", extra={"data": {"max_turns": self.max_turns}})
        finally:
            await self._emit(AgentEnd(messages=messages))

    async def _run_tool(self, call_id: str, name: str, raw_arguments: str | None) -> ToolResult:
        try:
            args = json.loads(raw_arguments or "{}")
        except json.JSONDecodeError as exc:
            args = None
            result = ToolResult(output=f"Invalid JSON arguments for {name}: {exc}", is_error=True)
        else:
            result = None

        await self._emit(ToolExecutionStart(tool_call_id=call_id, tool_name=name, args=args))
        started = time.monotonic()
        if result is None:
            result = await run_tool(self._tools, name, args)
        log_tool_execution(name, time.monotonic() - started, len(result.output), result.is_error)
        await self._emit(ToolExecutionEnd(
            tool_call_id=call_id, tool_name=name, result=result, is_error=result.is_error
        ))
        return result


def _usage_dict(usage: Any) -> Dict[str, Any]:
    if usage is None:
        return {}
    return {
        "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
        "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
        "total_tokens": getattr(usage, "total_tokens", 0) or 0,
    }


def _assistant_entry(content: Optional[str], tool_calls: List[Any]) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        entry["tool_calls"] = [
            {
                "id": tc.id,
                "type": "function",
                "function": {"name": tc.function.name, "arguments": tc.function.arguments},
            }
            for tc in tool_calls
        ]
    return entry


def default_agent_factory(setup: AgentSetup, get_api_key: Callable[[], Optional[str]]) -> AgentLike:
    return ToolCallingAgent(setup, get_api_key)


__all__ = [
    "AgentEnd",
    "AgentEvent",
    "AgentFactory",
    "AgentLike",
    "AgentMessage",
    "AgentSetup",
    "AgentStart",
    "MessageEnd",
    "MessageUpdate",
    "ToolCallingAgent",
    "ToolExecutionEnd",
    "ToolExecutionStart",
    "default_agent_factory",
]
