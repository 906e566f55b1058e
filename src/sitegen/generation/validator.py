"""Content validator for generated pages.

Pure functions only. ``validate_html`` combines the structural checks and
the image-source policy into a pass/fail verdict; the quality checks are
advisory and never fail a page. Callers decide how strictly to enforce the
result: ``write_page`` rejects, ``edit_page`` only reports.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List
from urllib.parse import urlsplit


APPROVED_IMAGE_HOSTS = ("illustrations.popsy.co",)

POPSY_COLORS = (
    "amber",
    "blue",
    "cyan",
    "emerald",
    "fuchsia",
    "gray",
    "green",
    "indigo",
    "lime",
    "neutral",
    "orange",
    "pink",
    "purple",
    "red",
    "rose",
    "sky",
    "slate",
    "stone",
    "teal",
    "violet",
    "yellow",
    "zinc",
)

# (marker, issue) pairs, matched case-insensitively as substrings.
_STRUCTURE_CHECKS = (
    (("<!doctype html",), "Missing DOCTYPE declaration"),
    (("<html",), "Missing <html> tag"),
    (("<head>", "<head "), "Missing <head> section"),
    (("<body>", "<body "), "Missing <body> section"),
    (("tailwindcss",), "Missing Tailwind CSS CDN"),
    (("alpinejs",), "Missing Alpine.js CDN"),
)

_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", re.IGNORECASE)
_BG_IMAGE_RE = re.compile(r"background(?:-image)?:\s*url\([\"']?([^\"')]+)[\"']?\)", re.IGNORECASE)
_STYLE_URL_RE = re.compile(r"url\([\"']?(https?://[^\"')]+)[\"']?\)", re.IGNORECASE)

_SECTION_RE = re.compile(
    r"<(?:section|div)[^>]*class=\"[^\"]*\b(hero|features?|testimonials?|pricing|faq|cta|footer|about|contact|header|nav)\b[^\"]*\"[^>]*>",
    re.IGNORECASE,
)
_HERO_RE = re.compile(
    r"<(?:section|div)[^>]*class=\"[^\"]*\bhero\b[^\"]*\"[^>]*>([\s\S]*?)(?=<(?:section|div)[^>]*class=\"|</body|<footer)",
    re.IGNORECASE,
)
_LINK_RE = re.compile(r"<a\s[^>]*href=", re.IGNORECASE)
_BUTTON_RE = re.compile(r"<button", re.IGNORECASE)
_PY_RE = re.compile(r"<(?:section|div)[^>]*class=\"[^\"]*\bpy-(\d+)\b[^\"]*\"[^>]*>", re.IGNORECASE)
_POPSY_RE = re.compile(r"https://illustrations\.popsy\.co/([^/]+)/([^.\"'\s]+)\.svg", re.IGNORECASE)
_POPSY_NAME_BAD_RE = re.compile(r"[^a-z0-9-]")
_IMG_NO_ALT_RE = re.compile(r"<img(?![^>]*\balt=)[^>]*>", re.IGNORECASE)
_EMPTY_LINK_RE = re.compile(r"<a[^>]*>(\s*)</a>", re.IGNORECASE)
_HEADING_RE = re.compile(r"<h([1-6])[^>]*>", re.IGNORECASE)
_NEW_TAB_NO_REL_RE = re.compile(r"<a[^>]*target=\"_blank\"(?![^>]*rel=)[^>]*>", re.IGNORECASE)
_AOS_CSS_RE = re.compile(r"aos\.css|aos@[^\"']*\.css", re.IGNORECASE)
_AOS_JS_RE = re.compile(r"aos\.js|aos@[^\"']*\.js", re.IGNORECASE)
_LUCIDE_RE = re.compile(r"lucide", re.IGNORECASE)

_LIGHT_BG = (
    "bg-white",
    "bg-gray-50",
    "bg-gray-100",
    "bg-slate-50",
    "bg-slate-100",
    "bg-neutral-50",
    "bg-neutral-100",
    "bg-stone-50",
    "bg-stone-100",
    "bg-zinc-50",
    "bg-zinc-100",
)
_LIGHT_TEXT = (
    "text-white",
    "text-gray-50",
    "text-gray-100",
    "text-gray-200",
    "text-slate-50",
    "text-slate-100",
    "text-slate-200",
)
_DARK_BG = (
    "bg-black",
    "bg-gray-900",
    "bg-gray-800",
    "bg-slate-900",
    "bg-slate-800",
    "bg-neutral-900",
    "bg-neutral-800",
    "bg-zinc-900",
    "bg-zinc-800",
)
_DARK_TEXT = (
    "text-black",
    "text-gray-900",
    "text-gray-800",
    "text-gray-700",
    "text-slate-900",
    "text-slate-800",
    "text-slate-700",
)
_CLASS_ATTR_RE = re.compile(r"class=\"([^\"]*)\"", re.IGNORECASE)


@dataclass
class ImageValidation:
    valid: bool
    issues: List[str] = field(default_factory=list)
    unapproved_urls: List[str] = field(default_factory=list)


@dataclass
class HtmlValidation:
    valid: bool
    issues: List[str] = field(default_factory=list)
    quality_warnings: List[str] = field(default_factory=list)


def validate_structure(html: str) -> List[str]:
    """Return one issue per missing structural requirement."""
    lowered = (html or "").lower()
    issues: List[str] = []
    for markers, issue in _STRUCTURE_CHECKS:
        if not any(marker in lowered for marker in markers):
            issues.append(issue)
    return issues


def extract_image_urls(html: str) -> List[str]:
    """Collect image references: ``<img src>`` and CSS ``url(...)`` backgrounds."""
    urls: List[str] = []
    for pattern in (_IMG_SRC_RE, _BG_IMAGE_RE, _STYLE_URL_RE):
        for match in pattern.finditer(html or ""):
            url = match.group(1)
            if url not in urls:
                urls.append(url)
    return urls


def is_approved_image_source(url: str) -> bool:
    trimmed = (url or "").strip()
    if trimmed.startswith("data:"):
        return True
    try:
        parts = urlsplit(trimmed)
    except ValueError:
        return False
    if parts.scheme not in ("http", "https", ""):
        return False
    return (parts.hostname or "").lower() in APPROVED_IMAGE_HOSTS


def _is_root_relative(url: str) -> bool:
    return url.startswith("/") and not url.startswith("//")


def validate_image_urls(html: str) -> ImageValidation:
    unapproved: List[str] = []
    for url in extract_image_urls(html):
        if url in ("", "#") or _is_root_relative(url):
            continue
        if not is_approved_image_source(url):
            unapproved.append(url)

    if not unapproved:
        return ImageValidation(valid=True)

    issues = [
        f'Unapproved image source: "{_shorten(url)}". Use Popsy SVGs '
        "(https://illustrations.popsy.co/{color}/{name}.svg) or inline SVGs instead."
        for url in unapproved
    ]
    return ImageValidation(valid=False, issues=issues, unapproved_urls=unapproved)


def validate_html(html: str) -> HtmlValidation:
    issues = validate_structure(html)
    images = validate_image_urls(html)
    issues.extend(images.issues)
    return HtmlValidation(
        valid=not issues,
        issues=issues,
        quality_warnings=collect_quality_warnings(html),
    )


def collect_quality_warnings(html: str) -> List[str]:
    html = html or ""
    warnings: List[str] = []
    warnings.extend(_check_duplicate_sections(html))
    warnings.extend(_check_hero_cta(html))
    warnings.extend(_check_spacing(html))
    warnings.extend(_check_contrast(html))
    warnings.extend(_check_popsy_urls(html))
    warnings.extend(_check_accessibility(html))
    if not _AOS_CSS_RE.search(html):
        warnings.append("Missing AOS CSS CDN (aos.css) for scroll animations")
    if not _AOS_JS_RE.search(html):
        warnings.append("Missing AOS JS CDN (aos.js) for scroll animations")
    if not _LUCIDE_RE.search(html):
        warnings.append("Missing Lucide icons CDN for icon support")
    return warnings


def _shorten(url: str, limit: int = 60) -> str:
    return url if len(url) <= limit else f"{url[:limit]}..."


def _check_duplicate_sections(html: str) -> List[str]:
    # Plurals collapse so "feature" followed by "features" counts as a repeat.
    sections = [m.group(1).lower().rstrip("s") for m in _SECTION_RE.finditer(html)]
    return [
        f'Duplicate consecutive "{current}" sections detected - consider combining or varying section types'
        for previous, current in zip(sections, sections[1:])
        if previous == current
    ]


def _check_hero_cta(html: str) -> List[str]:
    warnings: List[str] = []
    for match in _HERO_RE.finditer(html):
        content = match.group(1)
        if not _LINK_RE.search(content) and not _BUTTON_RE.search(content):
            warnings.append("Hero section appears to be missing a CTA (link or button)")
    return warnings


def _check_spacing(html: str) -> List[str]:
    values = [int(m.group(1)) for m in _PY_RE.finditer(html)]
    warnings: List[str] = []
    for previous, current in zip(values, values[1:]):
        ratio = max(previous, current) / max(min(previous, current), 1)
        if ratio > 3:
            warnings.append(
                f"Inconsistent section spacing: py-{previous} followed by py-{current} "
                "- consider more uniform padding"
            )
    return warnings


def _check_contrast(html: str) -> List[str]:
    class_sets = [set(m.group(1).split()) for m in _CLASS_ATTR_RE.finditer(html)]
    warnings: List[str] = []
    for backgrounds, texts in ((_LIGHT_BG, _LIGHT_TEXT), (_DARK_BG, _DARK_TEXT)):
        for bg in backgrounds:
            for text in texts:
                if any(bg in classes and text in classes for classes in class_sets):
                    warnings.append(f"Potential contrast issue: {text} on {bg} may be hard to read")
                    break
    return warnings


def _check_popsy_urls(html: str) -> List[str]:
    warnings: List[str] = []
    for match in _POPSY_RE.finditer(html):
        color = match.group(1).lower()
        name = match.group(2).lower()
        if color not in POPSY_COLORS:
            warnings.append(
                f'Invalid Popsy color "{color}" - valid colors: {", ".join(POPSY_COLORS[:5])}...'
            )
        if len(name) < 2 or _POPSY_NAME_BAD_RE.search(name):
            warnings.append(f'Suspicious Popsy illustration name "{name}" - check spelling')
    return warnings


def _check_accessibility(html: str) -> List[str]:
    warnings: List[str] = []

    missing_alt = _IMG_NO_ALT_RE.findall(html)
    if missing_alt:
        warnings.append(f"{len(missing_alt)} image(s) missing alt attribute for accessibility")

    empty_links = _EMPTY_LINK_RE.findall(html)
    if empty_links:
        warnings.append(
            f"{len(empty_links)} link(s) with no text content - add descriptive text or aria-label"
        )

    headings = [int(m.group(1)) for m in _HEADING_RE.finditer(html)]
    if headings:
        if headings[0] != 1:
            warnings.append(
                f"First heading is h{headings[0]} - consider starting with h1 for proper document structure"
            )
        for previous, current in zip(headings, headings[1:]):
            if current > previous + 1:
                warnings.append(
                    f"Heading hierarchy skips from h{previous} to h{current} - avoid skipping levels"
                )
                break

    unsafe_new_tab = _NEW_TAB_NO_REL_RE.findall(html)
    if unsafe_new_tab:
        warnings.append(
            f'{len(unsafe_new_tab)} link(s) with target="_blank" missing rel="noopener noreferrer"'
        )
    return warnings


__all__ = [
    "APPROVED_IMAGE_HOSTS",
    "HtmlValidation",
    "ImageValidation",
    "collect_quality_warnings",
    "extract_image_urls",
    "is_approved_image_source",
    "validate_html",
    "validate_image_urls",
    "validate_structure",
]
