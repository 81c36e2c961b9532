"""HTML sanitizing tests."""

from greenlife.services.sanitize import sanitize_html, strip_markup, strip_optional


def test_sanitize_keeps_basic_formatting():
    cleaned = sanitize_html(
        '<h2>Title</h2><p>Some <em>text</em> and <a href="https://example.org">a link</a></p>'
    )
    assert "<h2>Title</h2>" in cleaned
    assert "<em>text</em>" in cleaned
    assert '<a href="https://example.org">a link</a>' in cleaned


def test_sanitize_strips_scripts_and_handlers():
    cleaned = sanitize_html('<p onmouseover="steal()">Hi</p><script>alert(1)</script><img src=x>')
    assert "<script" not in cleaned
    assert "onmouseover" not in cleaned
    assert "<img" not in cleaned
    assert cleaned.startswith("<p>Hi</p>")


def test_strip_markup_removes_all_tags():
    assert strip_markup("  <b>Jane</b> Doe ") == "Jane Doe"


def test_strip_markup_returns_plain_text():
    assert strip_markup("Tom & Jerry") == "Tom & Jerry"
    assert strip_markup("Fish & chips are < great") == "Fish & chips are < great"


def test_strip_markup_never_grows_input():
    value = "&" * 50
    assert strip_markup(value) == value
    assert len(strip_markup("<b>a</b> & \"b\" < c > d")) <= len("<b>a</b> & \"b\" < c > d")


def test_strip_optional():
    assert strip_optional(None) is None
    assert strip_optional("<i></i>") is None
    assert strip_optional("Hello") == "Hello"
