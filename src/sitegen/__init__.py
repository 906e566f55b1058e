"""sitegen - turn a natural-language request into a validated multi-page website."""

from .events import GenerationEvent, GenerationEventType, sse_stream
from .generation import GenerationDeps, GenerationState, generate_website
from .schemas import SiteSpec

__version__ = "0.1.0"

__all__ = [
    "GenerationDeps",
    "GenerationEvent",
    "GenerationEventType",
    "GenerationState",
    "SiteSpec",
    "generate_website",
    "sse_stream",
]
