"""Scripted agents and sample data shared by the test modules."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from sitegen.generation.agent import (
    AgentEnd,
    AgentMessage,
    AgentSetup,
    AgentStart,
    MessageEnd,
    MessageUpdate,
    ToolExecutionEnd,
    ToolExecutionStart,
)

VALID_HTML = (
    "<!DOCTYPE html><html><head>"
    '<script src="https://cdn.tailwindcss.com"></script>'
    '<script defer src="https://cdn.jsdelivr.net/npm/alpinejs@3.x.x/dist/cdn.min.js"></script>'
    "</head><body><h1>Brew Lab</h1></body></html>"
)

PLAN_ARGS: Dict[str, Any] = {
    "name": "Brew Lab",
    "tagline": "Coffee, measured.",
    "type": "business",
    "industry": "specialty coffee",
    "audience": "commuters who care about beans",
    "tone": "casual",
    "colorPalette": {
        "primary": "#0f766e",
        "secondary": "#134e4a",
        "accent": "#f97316",
        "background": "#fffbeb",
        "text": "#1c1917",
    },
    "typography": {"headingStyle": "bold", "bodyFont": "sans"},
    "pages": [
        {
            "filename": "index.html",
            "title": "Home",
            "purpose": "Turn visitors into subscribers",
            "sections": [
                {
                    "type": "hero",
                    "headline": "Coffee, measured.",
                    "content": "Intro to the roastery",
                    "layout": "split",
                    "elements": ["button"],
                }
            ],
        }
    ],
    "features": ["Single origin", "Roasted weekly"],
}


@dataclass
class Step:
    tool: str
    args: Dict[str, Any]
    usage: Optional[Dict[str, Any]] = None
    thinking: Optional[str] = None


class FakeAgent:
    """Runs a fixed list of tool calls against the real tools, then optionally fails."""

    def __init__(self, setup: AgentSetup, script: List[Step], error: Union[str, Exception, None] = None) -> None:
        self.setup = setup
        self.script = script
        self.error = error
        self.prompts: List[str] = []
        self._subscribers: list = []

    def subscribe(self, callback):
        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _emit(self, event) -> None:
        for callback in list(self._subscribers):
            callback(event)

    async def prompt(self, text: str) -> None:
        self.prompts.append(text)
        tools = {tool.name.value: tool for tool in self.setup.tools}
        self._emit(AgentStart())
        for index, step in enumerate(self.script):
            await asyncio.sleep(0)
            if step.thinking:
                self._emit(MessageUpdate(AgentMessage(
                    role="assistant",
                    content=[{"type": "thinking", "thinking": step.thinking}],
                )))
            if step.usage is not None:
                self._emit(MessageEnd(AgentMessage(role="assistant", usage=step.usage)))
            call_id = f"call_{index}"
            self._emit(ToolExecutionStart(tool_call_id=call_id, tool_name=step.tool, args=step.args))
            result = await tools[step.tool].execute(**step.args)
            self._emit(ToolExecutionEnd(
                tool_call_id=call_id, tool_name=step.tool, result=result, is_error=result.is_error
            ))
        if isinstance(self.error, Exception):
            raise self.error
        if self.error is not None:
            raise RuntimeError(self.error)
        self._emit(AgentEnd())


class FakeAgentFactory:
    def __init__(self, script: List[Step], error: Optional[str] = None) -> None:
        self.script = script
        self.error = error
        self.agents: List[FakeAgent] = []
        self.api_keys: List[Optional[str]] = []

    def __call__(self, setup: AgentSetup, get_api_key) -> FakeAgent:
        self.api_keys.append(get_api_key())
        agent = FakeAgent(setup, self.script, self.error)
        self.agents.append(agent)
        return agent


async def drain(stream) -> list:
    return [event async for event in stream]
