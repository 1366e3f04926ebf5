"""
Recover a ReportData object from an Insights ``report.html``.

The report is markup written by a known generator, so every field is
pulled out by its own regex scanner instead of a DOM walk.  A scanner
that finds nothing leaves its field at the default; only a broken
``rawHourCounts`` literal is treated as a hard error.
"""

from __future__ import annotations

import json
import re

from .model import ReportData, check_hour_counts
from .textutil import html_unescape, parse_float, parse_int, strip_tags

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

SUBTITLE_RE = re.compile(r'<p class="subtitle">(.*?)</p>')
MESSAGES_RE = re.compile(r"([\d,]+)\s*messages")
SESSIONS_RE = re.compile(r"([\d,]+)\s*sessions")
DATE_RANGE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})\s*to\s*(\d{4}-\d{2}-\d{2})")

STAT_RE = re.compile(
    r'<div class="stat-value">(.*?)</div>\s*<div class="stat-label">(.*?)</div>'
)
LINES_RE = re.compile(r"\+?([\d,]+)\s*/\s*-?([\d,]+)")

GLANCE_SECTION_RE = re.compile(r'<div class="glance-section">[\s\S]*?</div>')
GLANCE_HEADING_RE = re.compile(r"<strong>(.*?)</strong>")
GLANCE_TEXT_RE = re.compile(r"</strong>([\s\S]*?)(?:<a |$)")

CHART_SPLIT_RE = re.compile(r'<div class="chart-title"[^>]*>')
BAR_RE = re.compile(
    r'<div class="bar-label">(.*?)</div>[\s\S]*?'
    r"width:([\d.]+)%[\s\S]*?"
    r"background:(#[0-9a-fA-F]+)[\s\S]*?"
    r'<div class="bar-value">([\d,]+)</div>'
)

BIG_WIN_RE = re.compile(
    r'<div class="big-win-title">(.*?)</div>\s*'
    r'<div class="big-win-desc">([\s\S]*?)</div>'
)
FRICTION_RE = re.compile(
    r'<div class="friction-title">(.*?)</div>\s*'
    r'<div class="friction-desc">([\s\S]*?)</div>\s*'
    r'(?:<ul class="friction-examples">([\s\S]*?)</ul>)?'
)
LIST_ITEM_RE = re.compile(r"<li>([\s\S]*?)</li>")
FEATURE_RE = re.compile(
    r'<div class="feature-title">(.*?)</div>\s*'
    r'<div class="feature-oneliner">([\s\S]*?)</div>\s*'
    r'<div class="feature-why">([\s\S]*?)</div>'
)
HORIZON_RE = re.compile(
    r'<div class="horizon-title">(.*?)</div>\s*'
    r'<div class="horizon-possible">([\s\S]*?)</div>\s*'
    r'<div class="horizon-tip">([\s\S]*?)</div>'
)
PROJECT_AREA_RE = re.compile(
    r'<span class="area-name">(.*?)</span>\s*'
    r'<span class="area-count">(.*?)</span>[\s\S]*?'
    r'<div class="area-desc">([\s\S]*?)</div>'
)

# The key-insight block sits inside the narrative div in current reports and
# after it in older ones, so stop at whichever comes first.
NARRATIVE_RE = re.compile(
    r'<div class="narrative">([\s\S]*?)(?:<div class="key-insight">|</div>)'
)
PARAGRAPH_RE = re.compile(r"<p>([\s\S]*?)</p>")
KEY_INSIGHT_RE = re.compile(r'<div class="key-insight">([\s\S]*?)</div>')
FUN_HEADLINE_RE = re.compile(r'<div class="fun-headline">([\s\S]*?)</div>')
FUN_DETAIL_RE = re.compile(r'<div class="fun-detail">([\s\S]*?)</div>')

HOUR_COUNTS_RE = re.compile(r"rawHourCounts\s*=\s*(\{[^}]+\})")
MEDIAN_RE = re.compile(r"Median:\s*([\d.]+)s")
AVERAGE_RE = re.compile(r"Average:\s*([\d.]+)s")

MULTI_BADGE_RE = re.compile(
    r'<div style="font-size: 24px; font-weight: 700; color: #7c3aed;">'
    r"([\d,%]+)</div>\s*<div[^>]*>(.*?)</div>"
)
# Caption keyword -> multiClauding key, checked in this order
MULTI_CAPTIONS: list[tuple[str, str]] = [
    ("Overlap", "overlapEvents"),
    ("Sessions", "sessionsInvolved"),
    ("Messages", "pctMessages"),
]

SECTION_INTRO_IDS: dict[str, str] = {
    "wins_intro": "section-wins",
    "friction_intro": "section-friction",
    "horizon_intro": "section-horizon",
}


class ReportFormatError(ValueError):
    """The report contains a data literal that cannot be decoded."""


# ---------------------------------------------------------------------------
# Scanners
# ---------------------------------------------------------------------------


def scan_summary(html: str) -> tuple[int, int, str, str]:
    """Return ``(messages, sessions, date_from, date_to)`` from the subtitle."""
    match = SUBTITLE_RE.search(html)
    if not match:
        return 0, 0, "", ""
    sub = match.group(1)
    msg = MESSAGES_RE.search(sub)
    sess = SESSIONS_RE.search(sub)
    dates = DATE_RANGE_RE.search(sub)
    return (
        parse_int(msg.group(1)) if msg else 0,
        parse_int(sess.group(1)) if sess else 0,
        dates.group(1) if dates else "",
        dates.group(2) if dates else "",
    )


def scan_stats(html: str) -> dict[str, str]:
    stats: dict[str, str] = {}
    for m in STAT_RE.finditer(html):
        stats[m.group(2).strip().lower()] = m.group(1).strip()
    return stats


def parse_lines_changed(value: str) -> tuple[int, int]:
    """``"+1,200/-45"`` -> ``(1200, 45)``; anything else -> ``(0, 0)``."""
    match = LINES_RE.search(value or "")
    if not match:
        return 0, 0
    return parse_int(match.group(1)), parse_int(match.group(2))


def scan_glance(html: str) -> dict[str, str]:
    glance: dict[str, str] = {}
    for section in GLANCE_SECTION_RE.findall(html):
        heading = GLANCE_HEADING_RE.search(section)
        if not heading:
            continue
        text = GLANCE_TEXT_RE.search(section)
        key = heading.group(1).strip().rstrip(":").strip().lower()
        glance[key] = strip_tags(text.group(1)) if text else ""
    return glance


def scan_bars(segment: str) -> list[dict]:
    return [
        {
            "label": m.group(1).strip(),
            "width": parse_float(m.group(2)),
            "color": m.group(3),
            "value": parse_int(m.group(4)),
        }
        for m in BAR_RE.finditer(segment)
    ]


def scan_charts(html: str) -> dict[str, list[dict]]:
    """Map each chart title to its bars; charts without bars are dropped."""
    charts: dict[str, list[dict]] = {}
    for segment in CHART_SPLIT_RE.split(html)[1:]:
        title_end = segment.find("</div>")
        if title_end == -1:
            continue
        bars = scan_bars(segment[title_end:])
        if bars:
            charts[segment[:title_end].strip()] = bars
    return charts


def scan_big_wins(html: str) -> list[dict]:
    return [
        {"title": m.group(1).strip(), "desc": m.group(2).strip()}
        for m in BIG_WIN_RE.finditer(html)
    ]


def scan_frictions(html: str) -> list[dict]:
    frictions = []
    for m in FRICTION_RE.finditer(html):
        examples = []
        if m.group(3):
            examples = [li.strip() for li in LIST_ITEM_RE.findall(m.group(3))]
        frictions.append(
            {"title": m.group(1).strip(), "desc": m.group(2).strip(), "examples": examples}
        )
    return frictions


def scan_features(html: str) -> list[dict]:
    return [
        {"title": m.group(1).strip(), "desc": m.group(2).strip(), "why": m.group(3).strip()}
        for m in FEATURE_RE.finditer(html)
    ]


def scan_horizons(html: str) -> list[dict]:
    return [
        {"title": m.group(1).strip(), "desc": m.group(2).strip(), "tip": m.group(3).strip()}
        for m in HORIZON_RE.finditer(html)
    ]


def scan_project_areas(html: str) -> list[dict]:
    return [
        {
            "name": html_unescape(m.group(1).strip()),
            "count": m.group(2).strip(),
            "desc": m.group(3).strip(),
        }
        for m in PROJECT_AREA_RE.finditer(html)
    ]


def scan_narrative(html: str) -> str:
    block = NARRATIVE_RE.search(html)
    if not block:
        return ""
    return "\n\n".join(strip_tags(p) for p in PARAGRAPH_RE.findall(block.group(1)))


def _block_text(pattern: re.Pattern, html: str) -> str:
    match = pattern.search(html)
    return strip_tags(match.group(1)) if match else ""


def scan_hour_counts(html: str) -> dict[str, int]:
    """Decode the ``rawHourCounts = {...}`` literal from the report script.

    Raises ReportFormatError if the literal is present but is not a flat
    JSON object mapping hours 0-23 to integer counts.
    """
    match = HOUR_COUNTS_RE.search(html)
    if not match:
        return {}
    try:
        raw = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise ReportFormatError(f"rawHourCounts is not valid JSON: {e}") from e
    try:
        return check_hour_counts(raw)
    except ValueError as e:
        raise ReportFormatError(f"rawHourCounts: {e}") from e


def scan_response_times(html: str) -> tuple[float, float]:
    median = MEDIAN_RE.search(html)
    avg = AVERAGE_RE.search(html)
    return (
        parse_float(median.group(1)) if median else 0.0,
        parse_float(avg.group(1)) if avg else 0.0,
    )


def scan_multi_clauding(html: str) -> dict[str, int]:
    """Read the three parallel-session badges, keyed by their caption."""
    result = {"overlapEvents": 0, "sessionsInvolved": 0, "pctMessages": 0}
    seen: set[str] = set()
    for m in MULTI_BADGE_RE.finditer(html):
        caption = m.group(2).strip()
        for keyword, key in MULTI_CAPTIONS:
            if keyword in caption:
                if key not in seen:
                    seen.add(key)
                    result[key] = parse_int(m.group(1).replace("%", ""))
                break
    return result


def scan_section_intro(html: str, section_id: str) -> str:
    match = re.search(
        rf'<h2 id="{re.escape(section_id)}">[\s\S]*?<p class="section-intro">([\s\S]*?)</p>',
        html,
    )
    return match.group(1).strip() if match else ""


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def parse_report(html: str) -> ReportData:
    """Extract everything the dashboard and video need from ``html``."""
    data = ReportData()

    (
        data.total_messages,
        data.total_sessions,
        data.date_from,
        data.date_to,
    ) = scan_summary(html)

    data.stats = scan_stats(html)
    data.lines_added, data.lines_removed = parse_lines_changed(
        data.stats.get("lines", "+0/-0")
    )
    data.files_changed = parse_int(data.stats.get("files", "0"))
    data.days = parse_int(data.stats.get("days", "0"))

    data.glance = scan_glance(html)
    data.charts = scan_charts(html)

    data.big_wins = scan_big_wins(html)
    data.frictions = scan_frictions(html)
    data.features = scan_features(html)
    data.horizons = scan_horizons(html)
    data.project_areas = scan_project_areas(html)

    data.narrative = scan_narrative(html)
    data.key_insight = _block_text(KEY_INSIGHT_RE, html)
    data.fun_ending = {
        "headline": _block_text(FUN_HEADLINE_RE, html),
        "detail": _block_text(FUN_DETAIL_RE, html),
    }

    data.raw_hour_counts = scan_hour_counts(html)
    data.median_response_time, data.avg_response_time = scan_response_times(html)
    data.multi_clauding = scan_multi_clauding(html)

    for attr, section_id in SECTION_INTRO_IDS.items():
        setattr(data, attr, scan_section_intro(html, section_id))

    return data
