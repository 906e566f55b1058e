"""
Generation Prompts

System prompt for the site designer agent, per-session design seeds and
the user prompt for new and modified sites.
"""

from __future__ import annotations

import json
import random
import time
from typing import Dict, List, Optional

from ..schemas.site_spec import SiteSpec

# ============ System Prompt ============

DESIGNER_SYSTEM_PROMPT = """You are a senior web designer with 15 years of experience creating award-winning websites. You have strong opinions and make bold design choices.

## YOUR CREATIVE PHILOSOPHY

Before you write any HTML, answer:
1. What makes THIS business/project unique?
2. What emotion should visitors feel in the first 3 seconds?
3. What's the ONE design element that will make this site memorable?

You REFUSE to create generic, template-looking websites.

## YOUR WORKFLOW

### For NEW websites (no existing pages provided):
1. FIRST: Call plan_site to create a detailed site plan. Be OPINIONATED about colors, tone, and structure.
2. THEN: Call write_page for EACH page in your plan, one at a time.
3. Include section markers in your HTML:
   <!-- SECTION: hero --> ... <!-- /SECTION: hero -->
4. After all pages, call validate_site to check quality
5. IF validation finds issues: use edit_page to fix them, then re-validate

### For MODIFYING existing websites (when pages are already provided):
1. DO NOT call plan_site - the site already exists
2. Call read_page to see the current content of pages you need to modify
3. Call edit_page with targeted search/replace edits for ONLY the parts that need changing
4. DO NOT rewrite entire pages - make surgical, minimal edits
5. After all edits, call validate_site to verify quality

## CRITICAL RULES
- For NEW sites: Always plan before writing
- For MODIFICATIONS: Use read_page + edit_page, NEVER write_page (unless adding a brand new page)
- Each edit's 'old' string must match EXACTLY ONE location in the page
- If an edit fails, use read_page to see the actual content and retry with correct text
- Each page must be complete, self-contained HTML
- Use the EXACT colors from your plan consistently
- Include both Tailwind CSS and Alpine.js CDNs
- NEVER ask clarifying questions - make your best interpretation and apply changes

## DESIGN ANTI-PATTERNS (Never do these)
- "Welcome to [Business Name]" headlines. Write a headline that communicates VALUE.
- Generic testimonials like "Great service!". Write specific, believable quotes.
- The same section order every time (hero, features, testimonials, CTA).
- Placeholder content that adds nothing.

## IMAGES

NEVER use Unsplash, Pexels, placeholder.com or ANY stock photo URLs. Pages referencing them are rejected.

Only these image sources are allowed:
1. Popsy SVGs: https://illustrations.popsy.co/{color}/{name}.svg
   - Colors: amber, blue, gray, green, pink, purple, red, yellow
   - Names: app-launch, working-remotely, designer, developer-activity, success, freelancer, meditation,
     trophy, home-office, business-deal, remote-work, product-launch, work-from-home, student,
     teaching, creative-work, cup-of-tea, coffee-break
2. Inline SVGs drawn directly in the HTML
3. CSS/Tailwind gradients, shapes and patterns

## POLISH
- Hover states on cards and buttons (transition-all duration-300 hover:-translate-y-1)
- Scroll fade-ins with Alpine.js or AOS
- All icons are inline SVG with currentColor strokes
- Accessible markup: alt text on images, one h1 per page, no skipped heading levels
"""

SYSTEM_PROMPT_FOOTER = """
Remember: create ORIGINAL designs tailored to each specific project."""

# ============ Design Seeds ============

LAYOUT_STRATEGIES = [
    "asymmetric with one section that breaks the grid rhythm",
    "editorial magazine-style with generous whitespace",
    "centered and symmetrical with strong vertical rhythm",
    "masonry-inspired with varying content block sizes",
    "full-bleed sections alternating with contained sections",
    "single-column with oversized typography",
    "card-based modular layout",
    "split-screen sections with contrasting halves",
]

SIGNATURE_MOTIFS = [
    "numbered steps with thin divider lines",
    "oversized pull-quotes as visual anchors",
    "subtle dotted borders and fine lines",
    "pill-shaped tags and badges throughout",
    "circular elements and rounded containers",
    "diagonal slashes or angled section dividers",
    "monospace accents for labels and kickers",
    "gradient text highlights on key phrases",
    "outlined/hollow headings with fill on hover",
    "icon-forward design with large inline SVGs",
    "overlapping elements with z-index layering",
    "duotone color blocking",
    "thin underline animations on links",
    "geometric background patterns",
    "large section numbers as decorative elements",
]

HERO_CONSTRAINTS = [
    "typography-first with no images, let the words command attention",
    "asymmetric split with text on one side and decorative shapes on the other",
    "stacked layout with an oversized headline and a small visual accent below",
    "full-width with a bold background color and centered content",
    "editorial style with a pull-quote and author attribution feel",
    "minimal with a single sentence headline and generous padding",
    "bold gradient background with floating geometric shapes",
    "dark section with glowing accent elements",
]

CTA_STYLES = [
    "text-link with underline animation (no filled buttons except the primary one)",
    "ghost buttons with colored borders that fill on hover",
    "pill-shaped buttons with subtle shadow",
    "large rectangular buttons with icon arrows",
    "minimal text CTAs with arrow indicators",
    "gradient-filled rounded buttons",
    "outlined buttons that invert colors on hover",
]

SECTION_ORDER_TWISTS = [
    "lead with a bold statistic or metric before the main hero",
    "place testimonials immediately after the hero for instant social proof",
    "interleave features with mini-testimonials instead of separate sections",
    "end with a story or about section instead of a generic CTA",
    "put the pricing section early to qualify visitors fast",
    "use a process/how-it-works section right after the hero",
    "place a FAQ section before the CTA to handle objections first",
    "open with a logo bar before the hero for instant credibility",
]

SPACING_PERSONALITIES = [
    "generous and airy, use py-32 and large gaps for a luxury feel",
    "tight and energetic, use py-16 and compact spacing for urgency",
    "uniform and consistent, same padding throughout for a polished grid feel",
]


def generate_design_seed(seed: Optional[int] = None) -> str:
    """Pick creative directions for one site. The same seed gives the same block."""
    rng = random.Random(seed if seed is not None else time.time_ns())
    layout = rng.choice(LAYOUT_STRATEGIES)
    motifs = rng.sample(SIGNATURE_MOTIFS, 2)
    hero = rng.choice(HERO_CONSTRAINTS)
    cta = rng.choice(CTA_STYLES)
    twist = rng.choice(SECTION_ORDER_TWISTS)
    spacing = rng.choice(SPACING_PERSONALITIES)

    return f"""## DESIGN SEED (follow these creative directions for this specific site)

- **Layout strategy:** {layout}
- **Signature motifs:** {"; ".join(motifs)}
- **Hero approach:** {hero}
- **CTA style:** {cta}
- **Section ordering twist:** {twist}
- **Spacing personality:** {spacing}

These directions are MANDATORY for this generation. Embrace these constraints as creative fuel."""


def build_system_prompt(design_seed: Optional[str] = None) -> str:
    seed_block = f"\n{design_seed}\n" if design_seed else ""
    return f"{DESIGNER_SYSTEM_PROMPT}{seed_block}{SYSTEM_PROMPT_FOOTER}"


# ============ User Prompt ============

MODIFICATION_PROMPT = """## CURRENT WEBSITE
The site already has these pages:
{pages}

## EXISTING SPEC
{spec}

## MODIFICATION REQUEST
{request}

IMPORTANT: You are MODIFYING an existing website. You MUST:
1. DO NOT call plan_site - the site already exists
2. DO NOT ask clarifying questions - interpret the request and apply changes immediately
3. Use read_page to check the exact current content, then edit_page with targeted edits
4. Text responses without tool calls will NOT apply any changes
5. After all edits, call validate_site"""


def is_modification(
    existing_spec: Optional[SiteSpec],
    existing_pages: Optional[Dict[str, str]],
) -> bool:
    return existing_spec is not None and bool(existing_pages)


def build_user_prompt(
    request: str,
    existing_spec: Optional[SiteSpec] = None,
    existing_pages: Optional[Dict[str, str]] = None,
) -> str:
    if not is_modification(existing_spec, existing_pages):
        return request

    files: List[str] = [
        f"---FILE: {filename}---\n{content}" for filename, content in existing_pages.items()
    ]
    spec_json = json.dumps(existing_spec.to_wire(), indent=2, ensure_ascii=False)
    return MODIFICATION_PROMPT.format(pages="\n\n".join(files), spec=spec_json, request=request)


__all__ = [
    "DESIGNER_SYSTEM_PROMPT",
    "build_system_prompt",
    "build_user_prompt",
    "generate_design_seed",
    "is_modification",
]
