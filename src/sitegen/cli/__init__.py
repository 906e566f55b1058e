"""Terminal rendering for the generation CLI."""

from .console import Console

__all__ = ["Console"]
