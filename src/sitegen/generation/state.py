from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..schemas.site_spec import SiteSpec


@dataclass
class GenerationState:
    """Mutable record owned by exactly one generation session.

    Only tool executions mutate it. ``spec`` is replaced wholesale, never
    merged; ``pages`` maps filename to committed html.
    """

    spec: Optional[SiteSpec] = None
    pages: Dict[str, str] = field(default_factory=dict)
    validation_passed: bool = False

    def page_names(self) -> List[str]:
        return sorted(self.pages)

    def available_pages_text(self) -> str:
        return ", ".join(self.page_names()) or "none"


@dataclass
class PageDetails:
    """Structured payload a page tool hands to the event bridge."""

    filename: str
    html: str
    valid: Optional[bool] = None
    issues: Optional[List[str]] = None
    saved: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"filename": self.filename, "html": self.html}
        if self.valid is not None:
            result["valid"] = self.valid
        if self.issues is not None:
            result["issues"] = list(self.issues)
        result["saved"] = self.saved
        return result


__all__ = ["GenerationState", "PageDetails"]
