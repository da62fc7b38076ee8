"""Slug and sort-order derivation for course document names.

Document names may carry a lesson prefix, either spelled with Chinese
numerals (`第三课-…`) or as a leading decimal number (`03-…`). The prefix
drives ordering and is dropped from the slug; the raw name stays the title.
"""

from __future__ import annotations

import re

_NUMERAL_CHARS = "一二三四五六七八九十百千万"
NUMERAL_VALUES = {
    "一": 1,
    "二": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
    "十": 10,
}

NUMERAL_PREFIX_RE = re.compile(rf"^第[{_NUMERAL_CHARS}]+课[-:：\s]*")
NUMERAL_ORDER_RE = re.compile(rf"^第([{_NUMERAL_CHARS}]+)课")
DECIMAL_PREFIX_RE = re.compile(r"^[0-9]+[-:：.\s]*")
DECIMAL_ORDER_RE = re.compile(r"^([0-9]+)")
# Keep ASCII word characters, CJK unified ideographs (U+4E00..U+9FA5) and hyphens.
_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9_一-龥-]")
_WHITESPACE_RE = re.compile(r"\s+")

FALLBACK_SLUG = "untitled"


def _slug_text(text: str) -> str:
    text = _WHITESPACE_RE.sub("-", text.lower())
    return _DISALLOWED_RE.sub("", text)


def strip_lesson_prefix(name: str) -> str:
    stripped = NUMERAL_PREFIX_RE.sub("", name, count=1)
    stripped = DECIMAL_PREFIX_RE.sub("", stripped, count=1)
    return stripped.strip()


def generate_slug(name: str) -> str:
    """`"第一课-开场白"` -> `"开场白"`, `"02-Getting Started"` -> `"getting-started"`."""
    slug = _slug_text(strip_lesson_prefix(name))
    if not slug:
        slug = _slug_text(name)
    return slug or FALLBACK_SLUG


def extract_sort_order(name: str, index: int) -> int:
    """Lesson number from the name, else the 1-based discovery position."""
    match = NUMERAL_ORDER_RE.match(name)
    if match:
        value = NUMERAL_VALUES.get(match.group(1))
        if value:
            return value

    match = DECIMAL_ORDER_RE.match(name)
    if match:
        return int(match.group(1))

    return index + 1
