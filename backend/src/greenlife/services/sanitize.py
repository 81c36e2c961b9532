"""HTML sanitizing for user-supplied text."""

from html import unescape

import bleach

# Markup allowed in post bodies
ALLOWED_TAGS = frozenset(
    {"p", "br", "b", "i", "em", "strong", "a", "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6"}
)
ALLOWED_ATTRIBUTES = {"a": ["href", "target", "rel"]}


def sanitize_html(content: str) -> str:
    """Keep basic formatting tags and drop everything else (scripts, styles, handlers)."""
    return bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True,
    )


def strip_markup(value: str) -> str:
    """Remove all tags from a plain-text form field.

    The result is plain text (never longer than the input) and has to be
    escaped wherever it is rendered as HTML.
    """
    return unescape(bleach.clean(value, tags=set(), strip=True)).strip()


def strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return strip_markup(value) or None
