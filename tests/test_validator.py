from sitegen.generation.validator import (
    extract_image_urls,
    is_approved_image_source,
    validate_html,
    validate_image_urls,
    validate_structure,
)

from fakes import VALID_HTML


def test_complete_page_has_no_structure_issues() -> None:
    assert validate_structure(VALID_HTML) == []
    assert validate_html(VALID_HTML).valid is True


def test_empty_document_lists_every_missing_item() -> None:
    assert validate_structure("") == [
        "Missing DOCTYPE declaration",
        "Missing <html> tag",
        "Missing <head> section",
        "Missing <body> section",
        "Missing Tailwind CSS CDN",
        "Missing Alpine.js CDN",
    ]


def test_missing_interactivity_marker_is_the_only_issue() -> None:
    html = VALID_HTML.replace("alpinejs", "vue")
    result = validate_html(html)
    assert result.valid is False
    assert result.issues == ["Missing Alpine.js CDN"]


def test_structure_checks_are_case_insensitive() -> None:
    html = (
        "<!doctype HTML><HTML lang='en'><HEAD class='x'><script src='TailwindCSS'></script>"
        "<script src='AlpineJS'></script></HEAD><BODY></BODY></HTML>"
    )
    assert validate_structure(html) == []


def test_head_requires_a_real_tag() -> None:
    html = VALID_HTML.replace("<head>", "<header>")
    assert "Missing <head> section" in validate_structure(html)


def test_disallowed_image_host_is_reported_verbatim() -> None:
    url = "https://images.unsplash.com/photo-123.jpg"
    html = VALID_HTML.replace("</body>", f'<img src="{url}" alt="coffee"></body>')

    images = validate_image_urls(html)
    assert images.valid is False
    assert images.unapproved_urls == [url]
    assert url in images.issues[0]

    result = validate_html(html)
    assert result.valid is False
    assert len(result.issues) == 1
    assert result.issues[0].startswith("Unapproved image source")


def test_approved_sources_are_accepted() -> None:
    html = VALID_HTML.replace(
        "</body>",
        '<img src="https://illustrations.popsy.co/amber/success.svg" alt="a">'
        '<img src="data:image/png;base64,AAAA" alt="b">'
        '<img src="/static/logo.png" alt="c">'
        '<img src="#" alt="d">'
        "</body>",
    )
    assert validate_image_urls(html).valid is True
    assert validate_html(html).valid is True


def test_css_background_urls_are_checked() -> None:
    html = VALID_HTML.replace(
        "<body>",
        "<body><div style=\"background-image: url('https://example.com/bg.png')\"></div>",
    )
    assert extract_image_urls(html) == ["https://example.com/bg.png"]
    assert validate_image_urls(html).unapproved_urls == ["https://example.com/bg.png"]


def test_extract_image_urls_deduplicates_in_order() -> None:
    html = (
        '<img src="https://a.test/1.png"><img src="https://b.test/2.png">'
        '<img src="https://a.test/1.png">'
    )
    assert extract_image_urls(html) == ["https://a.test/1.png", "https://b.test/2.png"]


def test_is_approved_image_source() -> None:
    assert is_approved_image_source("https://illustrations.popsy.co/blue/designer.svg")
    assert is_approved_image_source("  data:image/svg+xml;utf8,<svg/>")
    assert not is_approved_image_source("https://placeholder.com/300")


def test_approved_host_must_be_the_url_origin() -> None:
    assert not is_approved_image_source("https://evil.example.com/illustrations.popsy.co/cat.jpg")
    assert not is_approved_image_source("https://illustrations.popsy.co.evil.example.com/cat.svg")
    assert is_approved_image_source("//illustrations.popsy.co/blue/designer.svg")

    url = "https://evil.example.com/illustrations.popsy.co/cat.jpg"
    html = VALID_HTML.replace("</body>", f'<img src="{url}" alt="cat"></body>')
    assert validate_image_urls(html).unapproved_urls == [url]


def test_protocol_relative_urls_are_not_root_relative() -> None:
    html = VALID_HTML.replace(
        "</body>",
        '<img src="//evil.example.com/cat.jpg" alt="cat">'
        '<img src="/static/logo.png" alt="logo">'
        "</body>",
    )
    images = validate_image_urls(html)
    assert images.valid is False
    assert images.unapproved_urls == ["//evil.example.com/cat.jpg"]


def test_quality_warnings_never_fail_a_page() -> None:
    html = VALID_HTML.replace(
        "</body>",
        '<img src="https://illustrations.popsy.co/amber/success.svg">'
        '<h3>Skipped</h3><a href="/x" target="_blank">Out</a></body>',
    )
    result = validate_html(html)
    assert result.valid is True
    warnings = "\n".join(result.quality_warnings)
    assert "1 image(s) missing alt attribute" in warnings
    assert "Heading hierarchy skips from h1 to h3" in warnings
    assert 'target="_blank" missing rel' in warnings
    assert "Missing Lucide icons CDN" in warnings


def test_quality_warnings_for_layout_and_colors() -> None:
    html = VALID_HTML.replace(
        "</body>",
        '<section class="hero py-8"><h2>No action here</h2></section>'
        '<section class="features py-32"><p>One</p></section>'
        '<section class="feature py-32"><p class="bg-white text-white">Two</p></section>'
        '<img src="https://illustrations.popsy.co/chartreuse/success.svg" alt="x">'
        "</body>",
    )
    warnings = "\n".join(validate_html(html).quality_warnings)
    assert "Hero section appears to be missing a CTA" in warnings
    assert "Inconsistent section spacing: py-8 followed by py-32" in warnings
    assert 'Duplicate consecutive "feature" sections' in warnings
    assert "text-white on bg-white" in warnings
    assert 'Invalid Popsy color "chartreuse"' in warnings
