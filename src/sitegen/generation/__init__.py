from .agent import (
    AgentFactory,
    AgentLike,
    AgentSetup,
    ToolCallingAgent,
    default_agent_factory,
)
from .completion import resolve_completion
from .event_bridge import EventBridge
from .orchestrator import GenerationDeps, generate_website
from .state import GenerationState, PageDetails
from .tools import ToolName, ToolResult, create_tools, dispatch
from .validator import validate_html

__all__ = [
    "AgentFactory",
    "AgentLike",
    "AgentSetup",
    "EventBridge",
    "GenerationDeps",
    "GenerationState",
    "PageDetails",
    "ToolCallingAgent",
    "ToolName",
    "ToolResult",
    "create_tools",
    "default_agent_factory",
    "dispatch",
    "generate_website",
    "resolve_completion",
    "validate_html",
]
