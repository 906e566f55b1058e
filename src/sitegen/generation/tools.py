"""Tools the agent uses to plan, write, edit, read and review a site.

Every tool is bound to one ``GenerationState`` and is the only code that
mutates it. Tool outcomes are reported back to the agent as text; none of
them raise for domain failures (bad HTML, missing page, ambiguous edit).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..exceptions import EditTargetError
from ..schemas.site_spec import SiteSpec
from .state import GenerationState, PageDetails
from .validator import validate_html


class ToolName(str, Enum):
    PLAN_SITE = "plan_site"
    WRITE_PAGE = "write_page"
    EDIT_PAGE = "edit_page"
    READ_PAGE = "read_page"
    VALIDATE_SITE = "validate_site"


@dataclass
class ToolResult:
    """Result from a tool execution."""

    output: str = ""
    details: Optional[Dict[str, Any]] = None
    is_error: bool = False

    def to_content(self) -> str:
        return self.output


class _Params(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WritePageParams(_Params):
    filename: str = Field(description="Filename like index.html")
    html: str = Field(
        description=(
            "Complete HTML content for the page. Must be valid, self-contained HTML with DOCTYPE, "
            "Tailwind CDN, and Alpine.js. MUST include section markers: <!-- SECTION: name --> "
            "before each major section and <!-- /SECTION: name --> after."
        )
    )


class EditOperation(_Params):
    old: str = Field(
        description="Exact string to find in the current page HTML. Must match exactly one location."
    )
    new: str = Field(description="Replacement string.")


class EditPageParams(_Params):
    filename: str = Field(description="Filename of the page to edit")
    edits: List[EditOperation] = Field(
        description=(
            "Array of search/replace operations to apply sequentially. "
            "Each 'old' string must match exactly once in the page."
        )
    )


class ReadPageParams(_Params):
    filename: str = Field(description="Filename of the page to read")


class PageReview(_Params):
    filename: str
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class ValidateSiteParams(_Params):
    pages: List[PageReview]
    overall_quality: Literal["excellent", "good", "needs_improvement"]
    summary: str = Field(description="Overall assessment")


def _format_validation_error(tool: str, exc: ValidationError) -> str:
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        lines.append(f"  - {location}: {error.get('msg', 'invalid value')}")
    return f"Invalid arguments for {tool}:\n" + "\n".join(lines)


def _bullets(items: List[str], indent: str = "") -> str:
    return "\n".join(f"{indent}- {item}" for item in items)


def _with_suggestions(output: str, warnings: List[str]) -> str:
    if not warnings:
        return output
    return f"{output}\n\nQuality suggestions (not blocking):\n{_bullets(warnings)}"


class BaseTool(ABC):
    """A named operation with pydantic-validated parameters."""

    name: ToolName
    description: str = ""
    params_model: Type[BaseModel]

    def __init__(self, state: GenerationState) -> None:
        self._state = state

    async def execute(self, **kwargs: Any) -> ToolResult:
        try:
            params = self.params_model.model_validate(kwargs)
        except ValidationError as exc:
            return ToolResult(output=_format_validation_error(self.name.value, exc), is_error=True)
        return await self.run(params)

    @abstractmethod
    async def run(self, params: Any) -> ToolResult:
        ...

    def to_openai_schema(self) -> Dict[str, Any]:
        """Convert to OpenAI function calling schema."""
        return {
            "type": "function",
            "function": {
                "name": self.name.value,
                "description": self.description,
                "parameters": self.params_model.model_json_schema(by_alias=True),
            },
        }


class PlanSite(BaseTool):
    name = ToolName.PLAN_SITE
    params_model = SiteSpec
    description = """Create a detailed plan for the website. Call this FIRST before generating any pages.

Be SPECIFIC and OPINIONATED. This is where you make the site unique:

COLORS: Don't pick safe defaults. A law firm doesn't need to be navy blue. A coffee shop doesn't need brown.
STRUCTURE: Don't default to hero, features, testimonials, CTA. What does THIS audience need first?
CONTENT: Plan specific, believable content. Headlines that communicate value, not just "Welcome to X".
PERSONALITY: What's the ONE thing that makes this site memorable?"""

    async def run(self, params: SiteSpec) -> ToolResult:
        self._state.spec = params
        palette = params.color_palette
        planned = "\n".join(f"- {page.filename}: {page.purpose}" for page in params.pages)
        output = (
            f'Site plan created for "{params.name}". Now generate each page using write_page.\n\n'
            f"Pages to generate:\n{planned}\n\n"
            "Use these exact colors:\n"
            f"- Primary: {palette.primary}\n"
            f"- Secondary: {palette.secondary}\n"
            f"- Accent: {palette.accent}\n"
            f"- Background: {palette.background}\n"
            f"- Text: {palette.text}"
        )
        return ToolResult(output=output, details={"spec": params})


class WritePage(BaseTool):
    name = ToolName.WRITE_PAGE
    params_model = WritePageParams
    description = """Write complete HTML for a single page from scratch. The HTML must be:
- Complete and self-contained with DOCTYPE
- Include Tailwind CSS CDN: <script src="https://cdn.tailwindcss.com"></script>
- Include Alpine.js: <script defer src="https://cdn.jsdelivr.net/npm/alpinejs@3.x.x/dist/cdn.min.js"></script>
- Use the exact colors from the site plan
- Use only Popsy illustrations (https://illustrations.popsy.co/{color}/{name}.svg) or inline SVGs for imagery
- Include section markers: <!-- SECTION: name --> before each major section and <!-- /SECTION: name --> after"""

    async def run(self, params: WritePageParams) -> ToolResult:
        filename, html = params.filename, params.html
        validation = validate_html(html)

        if not validation.valid:
            output = (
                f"HTML validation failed for {filename}:\n{_bullets(validation.issues)}\n\n"
                "Please fix these issues using edit_page or rewrite with write_page."
            )
            details = PageDetails(filename, html, valid=False, issues=validation.issues)
            return ToolResult(output=output, details=details.to_dict(), is_error=True)

        self._state.pages[filename] = html
        details = PageDetails(filename, html, valid=True, saved=True)
        return ToolResult(
            output=_with_suggestions(
                f"Successfully wrote {filename} ({len(html)} chars). Page saved.",
                validation.quality_warnings,
            ),
            details=details.to_dict(),
        )


def apply_edits(filename: str, html: str, edits: List[EditOperation]) -> str:
    """Apply ``edits`` in order to a copy of ``html``.

    Each ``old`` must occur exactly once in the text as modified by the
    earlier edits. Raises ``EditTargetError`` on the first edit that does not.
    """
    total = len(edits)
    for index, edit in enumerate(edits, start=1):
        occurrences = html.count(edit.old)
        if occurrences == 0:
            raise EditTargetError(
                f"Edit {index}/{total} failed for {filename}: Could not find the specified text. "
                "Use read_page to see current content and try again.",
                index=index,
                total=total,
                occurrences=occurrences,
            )
        if occurrences > 1:
            raise EditTargetError(
                f"Edit {index}/{total} failed for {filename}: Found multiple matches "
                f"({occurrences} occurrences). Provide a more specific/longer 'old' string "
                "that matches exactly once.",
                index=index,
                total=total,
                occurrences=occurrences,
            )
        html = html.replace(edit.old, edit.new, 1)
    return html


def _page_not_found(state: GenerationState, filename: str) -> str:
    return f'Page "{filename}" not found. Available pages: {state.available_pages_text()}'


class EditPage(BaseTool):
    name = ToolName.EDIT_PAGE
    params_model = EditPageParams
    description = (
        "Apply targeted search/replace edits to an existing page. Each edit's 'old' string must "
        "match exactly once. Use read_page first to see current content."
    )

    async def run(self, params: EditPageParams) -> ToolResult:
        filename = params.filename
        if filename not in self._state.pages:
            details = PageDetails(filename, "", valid=False, issues=["Page not found"])
            return ToolResult(
                output=_page_not_found(self._state, filename),
                details=details.to_dict(),
                is_error=True,
            )

        current = self._state.pages[filename]
        try:
            html = apply_edits(filename, current, params.edits)
        except EditTargetError as exc:
            details = PageDetails(filename, current, valid=False, issues=[exc.issue])
            return ToolResult(output=str(exc), details=details.to_dict(), is_error=True)

        # Committed even when invalid; the agent is told and may fix it.
        validation = validate_html(html)
        self._state.pages[filename] = html
        count = len(params.edits)

        if not validation.valid:
            output = (
                f"Applied {count} edit(s) to {filename}, but validation warnings found:\n"
                f"{_bullets(validation.issues)}\n\n"
                "Page saved. Consider fixing these issues."
            )
            output = _with_suggestions(output, validation.quality_warnings)
            details = PageDetails(filename, html, valid=False, issues=validation.issues, saved=True)
            return ToolResult(output=output, details=details.to_dict())

        details = PageDetails(filename, html, valid=True, saved=True)
        return ToolResult(
            output=_with_suggestions(
                f"Successfully applied {count} edit(s) to {filename}. Page saved.",
                validation.quality_warnings,
            ),
            details=details.to_dict(),
        )


class ReadPage(BaseTool):
    name = ToolName.READ_PAGE
    params_model = ReadPageParams
    description = (
        "Read the current HTML content of a page. Use this before edit_page to see the exact "
        "content you need to modify."
    )

    async def run(self, params: ReadPageParams) -> ToolResult:
        filename = params.filename
        if filename not in self._state.pages:
            return ToolResult(
                output=_page_not_found(self._state, filename),
                details={"filename": filename},
                is_error=True,
            )
        return ToolResult(output=self._state.pages[filename], details={"filename": filename})


class ValidateSite(BaseTool):
    name = ToolName.VALIDATE_SITE
    params_model = ValidateSiteParams
    description = (
        "Validate the complete site for quality and consistency. Call this after all pages are generated."
    )

    async def run(self, params: ValidateSiteParams) -> ToolResult:
        flagged = [page for page in params.pages if page.issues]
        if flagged or params.overall_quality == "needs_improvement":
            self._state.validation_passed = False
            per_page = "\n\n".join(
                f"{page.filename}:\n{_bullets(page.issues, indent='  ')}" for page in flagged
            )
            output = (
                f"Validation found issues:\n{params.summary}\n\n{per_page}\n\n"
                "Please fix these issues using edit_page."
            )
            return ToolResult(output=output, details={"passed": False})

        self._state.validation_passed = True
        return ToolResult(output=f"Validation passed. {params.summary}", details={"passed": True})


TOOL_CLASSES: Dict[ToolName, Type[BaseTool]] = {
    ToolName.PLAN_SITE: PlanSite,
    ToolName.WRITE_PAGE: WritePage,
    ToolName.EDIT_PAGE: EditPage,
    ToolName.READ_PAGE: ReadPage,
    ToolName.VALIDATE_SITE: ValidateSite,
}


def create_tools(state: GenerationState) -> List[BaseTool]:
    """Return the five tools bound to ``state``, in registry order."""
    return [tool_cls(state) for tool_cls in TOOL_CLASSES.values()]


async def run_tool(tools: Sequence[BaseTool], name: str, args: Any) -> ToolResult:
    """Run one named call against already-bound tool instances."""
    by_name = {tool.name.value: tool for tool in tools}
    try:
        tool = by_name[ToolName(name).value]
    except (ValueError, KeyError):
        known = ", ".join(by_name) or "none"
        return ToolResult(output=f"Unknown tool: {name}. Available tools: {known}", is_error=True)
    if args is None:
        args = {}
    if not isinstance(args, dict):
        return ToolResult(output=f"Arguments for {name} must be a JSON object", is_error=True)
    return await tool.execute(**args)


async def dispatch(state: GenerationState, name: str, args: Optional[Dict[str, Any]]) -> ToolResult:
    return await run_tool(create_tools(state), name, args)


__all__ = [
    "BaseTool",
    "EditOperation",
    "EditPage",
    "PlanSite",
    "ReadPage",
    "TOOL_CLASSES",
    "ToolName",
    "ToolResult",
    "ValidateSite",
    "WritePage",
    "apply_edits",
    "create_tools",
    "dispatch",
    "run_tool",
]
