"""
Fill a dashboard template from a ReportData object.

Templates use two kinds of marker:

    {{NAME}}                  scalar, replaced by a value from SCALAR_MARKERS
    {{#EACH_X}} ... {{/EACH_X}}   repeated once per item of a list field

The whole template is resolved in one regex pass, so text coming out of
the report is never scanned for markers again.
"""

from __future__ import annotations

import math
import re
from typing import Callable

from .i18n import Locale, translate
from .model import ReportData
from .textutil import format_number
from .timeofday import shift_hour_counts, time_period_counts

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TOKEN_RE = re.compile(
    r"\{\{#([A-Z0-9_]+)\}\}([\s\S]*?)\{\{/\1\}\}"  # block
    r"|\{\{([A-Z0-9_]+)\}\}"  # scalar
)
SCALAR_RE = re.compile(r"\{\{([A-Z0-9_]+)\}\}")

# Marker -> chart title in the source report
CHART_MARKERS: dict[str, str] = {
    "CHART_TOOLS": "Top Tools Used",
    "CHART_LANGUAGES": "Languages",
    "CHART_SESSION_TYPES": "Session Types",
    "CHART_WHAT_WANTED": "What You Wanted",
    "CHART_WHAT_HELPED": "What Helped Most (Claude's Capabilities)",
    "CHART_OUTCOMES": "Outcomes",
    "CHART_FRICTION_TYPES": "Primary Friction Types",
    "CHART_SATISFACTION": "Inferred Satisfaction (model-estimated)",
    "CHART_TOOL_ERRORS": "Tool Errors Encountered",
    "CHART_RESPONSE_TIME": "User Response Time Distribution",
}
TOOLS_CHART = "Top Tools Used"
LANGUAGES_CHART = "Languages"

DONUT_COLORS = [
    "#2f81f7",
    "#388bfd",
    "#39d2c0",
    "#3fb950",
    "#f0883e",
    "#db61a2",
    "#d29922",
    "#8b5cf6",
]
DONUT_MAX_SEGMENTS = 6
TIME_OF_DAY_COLOR = "#8b5cf6"
SIDEBAR_ROWS = 5


# ---------------------------------------------------------------------------
# Inline charts
# ---------------------------------------------------------------------------


def bar_widths(bars: list[dict]) -> list[float]:
    """Width of each bar as a percentage of the largest value, one decimal."""
    if not bars:
        return []
    top = max(b["value"] for b in bars) or 1
    return [round(b["value"] / top * 100, 1) for b in bars]


def _bar_row(label: str, width: float, color: str, value: str) -> str:
    return (
        f'      <div class="bar-row">\n'
        f'        <div class="bar-label">{label}</div>\n'
        f'        <div class="bar-track"><div class="bar-fill" '
        f'style="width:{width:.1f}%;background:{color}"></div></div>\n'
        f'        <div class="bar-value">{value}</div>\n'
        f"      </div>"
    )


def no_data_html(locale: Locale) -> str:
    return f'<div style="color:var(--text-dim);font-size:12px;">{locale.no_data}</div>'


def render_bar_rows(bars: list[dict] | None, locale: Locale) -> str:
    """Render horizontal bar rows, re-normalized to the largest bar."""
    if not bars:
        return no_data_html(locale)
    rows = []
    for bar, width in zip(bars, bar_widths(bars)):
        rows.append(
            _bar_row(
                translate(bar["label"], locale),
                width,
                bar["color"],
                format_number(bar["value"], locale.number_locale),
            )
        )
    return "\n".join(rows)


def render_time_of_day_rows(
    hour_counts: dict, locale: Locale, hour_offset: int | None = None
) -> str:
    """Bucket the hour histogram (shifted into the locale's time zone) into rows."""
    offset = locale.hour_offset if hour_offset is None else hour_offset
    periods = time_period_counts(shift_hour_counts(hour_counts, offset), locale)
    top = max(max(periods.values()), 1)
    return "\n".join(
        _bar_row(
            label,
            count / top * 100,
            TIME_OF_DAY_COLOR,
            format_number(count, locale.number_locale),
        )
        for label, count in periods.items()
    )


def _num(x: float) -> str:
    """Plain decimal with at most three places and no trailing zeros."""
    return f"{round(x, 3) + 0.0:.3f}".rstrip("0").rstrip(".")


def render_donut(items: list[dict], locale: Locale, size: int = 120) -> str:
    """Render a ring chart plus legend for ``[{label, value}, ...]``.

    Only the first six items get a segment; shares are taken against the
    total of every item.  Returns ``""`` when the total is zero.
    """
    total = sum(item["value"] for item in items)
    if total == 0:
        return ""

    cx = cy = size / 2
    r = size / 2 - 8
    circ = 2 * math.pi * r
    shown = items[:DONUT_MAX_SEGMENTS]
    nums = locale.number_locale

    segments = []
    offset = 0.0
    for i, item in enumerate(shown):
        dash = item["value"] / total * circ
        color = DONUT_COLORS[i % len(DONUT_COLORS)]
        segments.append(
            f'<circle cx="{_num(cx)}" cy="{_num(cy)}" r="{_num(r)}" fill="none" '
            f'stroke="{color}" stroke-width="16" '
            f'stroke-dasharray="{_num(dash)} {_num(circ - dash)}" '
            f'stroke-dashoffset="{_num(-offset)}" '
            f'transform="rotate(-90 {_num(cx)} {_num(cy)})"/>'
        )
        offset += dash

    svg = (
        f'<svg width="{size}" height="{size}" viewBox="0 0 {size} {size}">\n'
        f'    <circle cx="{_num(cx)}" cy="{_num(cy)}" r="{_num(r)}" fill="none" '
        f'stroke="rgba(255,255,255,0.05)" stroke-width="16"/>\n    '
        + "\n    ".join(segments)
        + f'\n    <text x="{_num(cx)}" y="{_num(cy - 4)}" text-anchor="middle" '
        f'fill="#f0f6fc" font-size="18" font-weight="700">{format_number(total, nums)}</text>\n'
        f'    <text x="{_num(cx)}" y="{_num(cy + 14)}" text-anchor="middle" '
        f'fill="#8b949e" font-size="10">{locale.total}</text>\n'
        f"  </svg>"
    )
    legend = "\n      ".join(
        f'<div class="legend-item"><span class="legend-dot" '
        f'style="background:{DONUT_COLORS[i % len(DONUT_COLORS)]}"></span>'
        f'{item["label"]} {format_number(item["value"], nums)} '
        f'({item["value"] / total * 100:.1f}%)</div>'
        for i, item in enumerate(shown)
    )
    return (
        '<div class="donut-wrap">\n    '
        + svg
        + '\n    <div class="donut-legend">\n      '
        + legend
        + "\n    </div>\n  </div>"
    )


def render_sidebar_stats(bars: list[dict], locale: Locale) -> str:
    return "\n".join(
        f'      <div class="sidebar-stat"><span class="sidebar-stat-label">{b["label"]}</span>'
        f'<span class="sidebar-stat-value">{format_number(b["value"], locale.number_locale)}</span></div>'
        for b in bars[:SIDEBAR_ROWS]
    )


# ---------------------------------------------------------------------------
# Marker values
# ---------------------------------------------------------------------------


def build_scalars(
    data: ReportData, locale: Locale, hour_offset: int | None = None
) -> dict[str, str]:
    """Compute the value of every scalar marker the templates may use."""
    nums = locale.number_locale
    mc = data.multi_clauding
    glance = data.glance
    tools = data.charts.get(TOOLS_CHART, [])
    languages = data.charts.get(LANGUAGES_CHART, [])

    scalars = {
        "TOTAL_MESSAGES": format_number(data.total_messages, nums),
        "TOTAL_SESSIONS": format_number(data.total_sessions, nums),
        "DATE_FROM": data.date_from,
        "DATE_TO": data.date_to,
        "DATE_RANGE": data.date_range or "",
        "TOTAL_DAYS": str(data.total_days or data.days),
        "LINES_ADDED": format_number(data.lines_added, nums),
        "LINES_REMOVED": format_number(data.lines_removed, nums),
        "FILES_CHANGED": format_number(data.files_changed, nums),
        "SESSIONS_PER_DAY": data.sessions_per_day,
        "MESSAGES_PER_DAY": data.messages_per_day,
        "MEDIAN_RESPONSE": _num(data.median_response_time),
        "AVG_RESPONSE": _num(data.avg_response_time),
        "MULTI_OVERLAP": format_number(mc.get("overlapEvents", 0), nums),
        "MULTI_SESSIONS": format_number(mc.get("sessionsInvolved", 0), nums),
        "MULTI_PCT": str(mc.get("pctMessages", 0)),
        "NARRATIVE": data.narrative,
        "KEY_INSIGHT": data.key_insight,
        "WINS_INTRO": data.wins_intro,
        "FRICTION_INTRO": data.friction_intro,
        "HORIZON_INTRO": data.horizon_intro,
        "FUN_HEADLINE": data.fun_ending.get("headline", ""),
        "FUN_DETAIL": data.fun_ending.get("detail", ""),
        "GLANCE_WORKING": glance.get("what's working", ""),
        "GLANCE_HINDERING": glance.get("what's hindering you", ""),
        "GLANCE_QUICKWINS": glance.get("quick wins to try", ""),
        "GLANCE_AMBITIOUS": glance.get("ambitious workflows", ""),
        "CHART_TIME_OF_DAY": render_time_of_day_rows(
            data.raw_hour_counts, locale, hour_offset
        ),
        "DONUT_TOOLS": render_donut(tools, locale),
        "DONUT_LANGUAGES": render_donut(languages, locale),
        "SIDEBAR_TOP_TOOLS": render_sidebar_stats(tools, locale),
        "SIDEBAR_LANGUAGES": render_sidebar_stats(languages, locale),
        "TOTAL_TOOL_CALLS": format_number(sum(t["value"] for t in tools), nums),
    }
    for marker, title in CHART_MARKERS.items():
        scalars[marker] = render_bar_rows(data.charts.get(title), locale)
    return scalars


def _friction_examples(examples: list[str]) -> str:
    return "\n            ".join(f"<li>{e}</li>" for e in examples)


# Block name -> (ReportData attribute, item -> {marker: value})
BLOCKS: dict[str, tuple[str, Callable[[dict], dict[str, str]]]] = {
    "EACH_BIG_WIN": (
        "big_wins",
        lambda w: {"WIN_TITLE": w.get("title", ""), "WIN_DESC": w.get("desc", "")},
    ),
    "EACH_FRICTION": (
        "frictions",
        lambda f: {
            "FRICTION_TITLE": f.get("title", ""),
            "FRICTION_DESC": f.get("desc", ""),
            "FRICTION_EXAMPLES": _friction_examples(f.get("examples", [])),
        },
    ),
    "EACH_FEATURE": (
        "features",
        lambda f: {
            "FEATURE_TITLE": f.get("title", ""),
            "FEATURE_DESC": f.get("desc", ""),
            "FEATURE_WHY": f.get("why", ""),
        },
    ),
    "EACH_HORIZON": (
        "horizons",
        lambda h: {
            "HORIZON_TITLE": h.get("title", ""),
            "HORIZON_DESC": h.get("desc", ""),
            "HORIZON_TIP": h.get("tip", ""),
        },
    ),
    "EACH_PROJECT_AREA": (
        "project_areas",
        lambda a: {
            "AREA_NAME": a.get("name", ""),
            "AREA_COUNT": str(a.get("count", "")),
            "AREA_DESC": a.get("desc", ""),
        },
    ),
}


# ---------------------------------------------------------------------------
# Template walk
# ---------------------------------------------------------------------------


def _substitute(text: str, values: dict[str, str]) -> str:
    """Replace known ``{{NAME}}`` markers; unknown ones stay as written."""
    return SCALAR_RE.sub(lambda m: values.get(m.group(1), m.group(0)), text)


def expand_template(
    template: str,
    scalars: dict[str, str],
    blocks: dict[str, list[dict[str, str]]],
) -> str:
    """Resolve every marker in ``template`` in a single left-to-right pass.

    ``blocks`` maps a block name to one marker dict per item.  Only the
    first ``{{#NAME}}...{{/NAME}}`` per name is expanded; later copies and
    blocks with no entry in ``blocks`` are kept, with their scalars
    resolved.
    """
    expanded: set[str] = set()

    def resolve(m: re.Match) -> str:
        name = m.group(1)
        if name is None:
            return scalars.get(m.group(3), m.group(0))
        if name not in blocks or name in expanded:
            return _substitute(m.group(0), scalars)
        expanded.add(name)
        body = m.group(2)
        return "\n".join(
            _substitute(body, {**scalars, **item}) for item in blocks[name]
        )

    return TOKEN_RE.sub(resolve, template)


def render_template(
    template: str,
    data: ReportData,
    locale: Locale,
    hour_offset: int | None = None,
) -> str:
    """Render a dashboard template for ``data`` in ``locale``."""
    scalars = build_scalars(data, locale, hour_offset)
    blocks = {
        name: [item_values(item) for item in getattr(data, attr)]
        for name, (attr, item_values) in BLOCKS.items()
    }
    return expand_template(template, scalars, blocks)
