"""Render stored course Markdown to sanitized HTML."""

from __future__ import annotations

import bleach
import markdown as md

_EXTRA_TAGS = {
    "p",
    "pre",
    "code",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "br",
    "img",
    "table",
    "thead",
    "tbody",
    "tr",
    "th",
    "td",
    "details",
    "summary",
}

ALLOWED_TAGS = frozenset(bleach.sanitizer.ALLOWED_TAGS) | _EXTRA_TAGS
ALLOWED_ATTRIBUTES = {
    **bleach.sanitizer.ALLOWED_ATTRIBUTES,
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title"],
    "code": ["class"],
    "pre": ["class"],
    "h1": ["id"],
    "h2": ["id"],
    "h3": ["id"],
    "h4": ["id"],
}


def render_markdown_to_safe_html(markdown_text: str) -> str:
    html = md.markdown(
        markdown_text or "",
        extensions=["fenced_code", "tables", "toc"],
        output_format="html5",
    )
    return bleach.clean(html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRIBUTES, strip=True)
