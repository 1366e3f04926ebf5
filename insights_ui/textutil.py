"""Small text helpers shared by the extractor and the renderers."""

from __future__ import annotations

import re

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")
_TAG_RE = re.compile(r"<[^>]+>")

# Digit-group separator per number-formatting locale
_GROUP_SEPARATORS: dict[str, str] = {
    "en-US": ",",
    "ko-KR": ",",
}


def parse_int(s: str | None) -> int:
    """Parse a leading integer, ignoring thousands separators.

    ``"1,234 messages"`` -> 1234.  Empty or unparsable input -> 0.
    """
    if not s:
        return 0
    match = _LEADING_INT_RE.match(s.replace(",", ""))
    return int(match.group(1)) if match else 0


def parse_float(s: str | None) -> float:
    if not s:
        return 0.0
    match = _LEADING_FLOAT_RE.match(s.replace(",", ""))
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def format_number(value: int | float, locale: str = "en-US") -> str:
    """Group digits the way ``Number.toLocaleString`` does for ``locale``."""
    sep = _GROUP_SEPARATORS.get(locale, ",")
    if isinstance(value, float) and not value.is_integer():
        text = f"{value:,.3f}".rstrip("0").rstrip(".")
    else:
        text = f"{int(value):,}"
    return text.replace(",", sep) if sep != "," else text


def html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def html_unescape(s: str) -> str:
    """Undo the four entities the report generator escapes."""
    return (
        s.replace("&lt;", "<")
        .replace("&gt;", ">")
        .replace("&quot;", '"')
        .replace("&amp;", "&")
    )


def strip_tags(s: str) -> str:
    return _TAG_RE.sub("", s).strip()
