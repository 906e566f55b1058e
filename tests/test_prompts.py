from sitegen.generation.prompts import (
    build_system_prompt,
    build_user_prompt,
    generate_design_seed,
)
from sitegen.schemas.site_spec import SiteSpec

from fakes import PLAN_ARGS, VALID_HTML


def test_design_seed_is_deterministic() -> None:
    assert generate_design_seed(42) == generate_design_seed(42)
    seed = generate_design_seed(7)
    assert seed.startswith("## DESIGN SEED")
    assert "**Layout strategy:**" in seed
    assert "**CTA style:**" in seed


def test_system_prompt_includes_seed_block() -> None:
    seed = generate_design_seed(1)
    prompt = build_system_prompt(seed)
    assert seed in prompt
    assert "plan_site" in prompt
    assert build_system_prompt() != prompt


def test_user_prompt_for_new_site_is_the_request() -> None:
    assert build_user_prompt("A bakery site") == "A bakery site"


def test_spec_without_pages_is_not_a_modification() -> None:
    spec = SiteSpec.model_validate(PLAN_ARGS)
    assert build_user_prompt("A bakery site", spec, {}) == "A bakery site"


def test_modification_prompt_lists_files_spec_and_request() -> None:
    spec = SiteSpec.model_validate(PLAN_ARGS)
    prompt = build_user_prompt(
        "Make the hero darker",
        spec,
        {"index.html": VALID_HTML, "about.html": "<p>about</p>"},
    )
    assert f"---FILE: index.html---\n{VALID_HTML}" in prompt
    assert "---FILE: about.html---\n<p>about</p>" in prompt
    assert '"name": "Brew Lab"' in prompt
    assert '"headingStyle": "bold"' in prompt
    assert prompt.index("## EXISTING SPEC") < prompt.index("## MODIFICATION REQUEST")
    assert "DO NOT call plan_site" in prompt
    assert "edit_page" in prompt
