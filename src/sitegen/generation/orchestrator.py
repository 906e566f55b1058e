from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional, Union

from ..config import ModelConfig, get_settings, resolve_model
from ..events.models import GenerationEvent, StatusEvent
from ..log import log_generation
from ..schemas.site_spec import SiteSpec
from .agent import AgentFactory, AgentSetup, default_agent_factory
from .completion import resolve_completion
from .event_bridge import EventBridge
from .prompts import build_system_prompt, build_user_prompt, is_modification
from .state import GenerationState
from .tools import create_tools

logger = logging.getLogger(__name__)


@dataclass
class GenerationDeps:
    """Injection points for one session. Unset fields fall back to settings."""

    agent_factory: Optional[AgentFactory] = None
    model: Optional[Union[str, ModelConfig]] = None
    api_key: Optional[str] = None
    design_seed: Optional[str] = None
    wait_timeout: Optional[float] = None


def _resolve_model(deps: GenerationDeps) -> tuple[ModelConfig, Optional[str]]:
    config = resolve_model(get_settings())
    if isinstance(deps.model, ModelConfig):
        config = deps.model
    elif deps.model:
        config = dataclasses.replace(config, model=deps.model)
    api_key = deps.api_key if deps.api_key is not None else config.api_key
    return config, api_key


async def generate_website(
    user_request: str,
    existing_spec: Optional[SiteSpec] = None,
    existing_pages: Optional[Dict[str, str]] = None,
    deps: Optional[GenerationDeps] = None,
) -> AsyncIterator[GenerationEvent]:
    """Run one generation session and stream its events.

    The stream always ends with exactly one terminal event: ``complete``
    when pages exist, otherwise ``error``.
    """
    deps = deps or GenerationDeps()
    settings = get_settings()
    state = GenerationState(spec=existing_spec, pages=dict(existing_pages or {}))

    model, api_key = _resolve_model(deps)
    tools = create_tools(state)
    factory = deps.agent_factory or default_agent_factory
    agent = factory(
        AgentSetup(
            system_prompt=build_system_prompt(deps.design_seed),
            model=model,
            tools=tools,
            thinking_level="low",
            messages=[],
        ),
        lambda: api_key,
    )

    yield StatusEvent(message="Starting website generation")

    modification = is_modification(existing_spec, existing_pages)
    logger.info(
        "generation_start",
        extra={"data": {
            "mode": "modification" if modification else "new_site",
            "model": model.model,
            "request_len": len(user_request),
            "existing_pages": sorted(existing_pages or {}),
            "existing_spec": existing_spec.name if existing_spec else None,
        }},
    )
    started = time.monotonic()

    wait_timeout = deps.wait_timeout if deps.wait_timeout is not None else settings.bridge_wait_timeout
    bridge = EventBridge(
        agent,
        state,
        build_user_prompt(user_request, existing_spec, existing_pages),
        wait_timeout=wait_timeout,
    )
    async for event in bridge.stream():
        yield event

    terminal = resolve_completion(state, bridge.usage, bridge.tool_metrics, bridge.run_failed)
    if bridge.run_failed:
        outcome = "failed"
    elif terminal is not None and terminal.type.value == "complete":
        outcome = "complete"
    else:
        outcome = "empty"
    log_generation(
        outcome,
        state.page_names(),
        state.spec.name if state.spec else None,
        time.monotonic() - started,
        bridge.tool_metrics.model_dump(),
        bridge.usage.model_dump(),
    )
    if terminal is not None:
        yield terminal


__all__ = ["GenerationDeps", "generate_website"]
