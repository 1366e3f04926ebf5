"""The report data object shared by the extractor and every renderer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields

# Derived fields that are only present once both date endpoints are known
OPTIONAL_FIELDS = frozenset({"total_days", "date_range"})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _default_multi_clauding() -> dict[str, int]:
    return {"overlapEvents": 0, "sessionsInvolved": 0, "pctMessages": 0}


def _default_fun_ending() -> dict[str, str]:
    return {"headline": "", "detail": ""}


# JSON type each field must have in a snapshot; list fields hold objects
FIELD_TYPES: dict[str, type | tuple[type, ...]] = {
    "total_messages": int,
    "total_sessions": int,
    "date_from": str,
    "date_to": str,
    "stats": dict,
    "lines_added": int,
    "lines_removed": int,
    "files_changed": int,
    "days": int,
    "glance": dict,
    "charts": dict,
    "big_wins": list,
    "frictions": list,
    "features": list,
    "horizons": list,
    "narrative": str,
    "key_insight": str,
    "raw_hour_counts": dict,
    "median_response_time": (int, float),
    "avg_response_time": (int, float),
    "multi_clauding": dict,
    "fun_ending": dict,
    "project_areas": list,
    "wins_intro": str,
    "friction_intro": str,
    "horizon_intro": str,
    "sessions_per_day": str,
    "messages_per_day": str,
    "total_days": int,
    "date_range": str,
}


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def _check_type(key: str, value, expected: type | tuple[type, ...]):
    # bool is an int subclass but never a count
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ValueError(
            f"{key} must be {_type_name(expected)}, got {type(value).__name__}"
        )


def check_hour_counts(raw: dict) -> dict[str, int]:
    """Validate an ``{hour: count}`` record; hours 0-23, counts integers.

    Returns the record with string keys.  Raises ValueError otherwise.
    """
    counts: dict[str, int] = {}
    for hour, count in raw.items():
        try:
            h = int(hour)
        except (TypeError, ValueError):
            raise ValueError(f"hour {hour!r} is not an integer") from None
        if not 0 <= h <= 23:
            raise ValueError(f"hour {hour!r} is outside 0-23")
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValueError(f"count for hour {hour!r} is not an integer: {count!r}")
        counts[str(h)] = count
    return counts


def _check_charts(charts: dict):
    for title, bars in charts.items():
        _check_type(f"charts[{title!r}]", bars, list)
        for bar in bars:
            _check_type(f"charts[{title!r}] bar", bar, dict)
            _check_type(f"charts[{title!r}] bar label", bar.get("label"), str)
            _check_type(f"charts[{title!r}] bar color", bar.get("color"), str)
            _check_type(f"charts[{title!r}] bar value", bar.get("value"), (int, float))


@dataclass
class ReportData:
    total_messages: int = 0
    total_sessions: int = 0
    date_from: str = ""
    date_to: str = ""
    stats: dict[str, str] = field(default_factory=dict)
    lines_added: int = 0
    lines_removed: int = 0
    files_changed: int = 0
    days: int = 0
    glance: dict[str, str] = field(default_factory=dict)
    charts: dict[str, list[dict]] = field(default_factory=dict)
    big_wins: list[dict] = field(default_factory=list)
    frictions: list[dict] = field(default_factory=list)
    features: list[dict] = field(default_factory=list)
    horizons: list[dict] = field(default_factory=list)
    narrative: str = ""
    key_insight: str = ""
    raw_hour_counts: dict[str, int] = field(default_factory=dict)
    median_response_time: float = 0.0
    avg_response_time: float = 0.0
    multi_clauding: dict[str, int] = field(default_factory=_default_multi_clauding)
    fun_ending: dict[str, str] = field(default_factory=_default_fun_ending)
    project_areas: list[dict] = field(default_factory=list)
    wins_intro: str = ""
    friction_intro: str = ""
    horizon_intro: str = ""
    # Derived (see metrics.calculate_derived)
    sessions_per_day: str = "0.0"
    messages_per_day: str = "0.0"
    total_days: int | None = None
    date_range: str | None = None

    def to_dict(self) -> dict:
        """Return the JSON-ready form, keyed by camelCase field names."""
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in OPTIONAL_FIELDS and value is None:
                continue
            out[_camel(f.name)] = value
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, raw: dict) -> ReportData:
        """Build from a serialized snapshot; missing keys keep their defaults."""
        kwargs = {}
        for f in fields(cls):
            key = _camel(f.name)
            if key in raw and raw[key] is not None:
                value = raw[key]
                _check_type(key, value, FIELD_TYPES[f.name])
                if isinstance(value, list):
                    for item in value:
                        _check_type(f"{key} item", item, dict)
                kwargs[f.name] = value
        if "charts" in kwargs:
            _check_charts(kwargs["charts"])
        for name, count in kwargs.get("multi_clauding", {}).items():
            _check_type(f"multiClauding.{name}", count, int)
        if "raw_hour_counts" in kwargs:
            kwargs["raw_hour_counts"] = check_hour_counts(kwargs["raw_hour_counts"])
        data = cls(**kwargs)
        # Partial nested records from older snapshots
        data.multi_clauding = {**_default_multi_clauding(), **data.multi_clauding}
        data.fun_ending = {**_default_fun_ending(), **data.fun_ending}
        return data

    @classmethod
    def from_json(cls, text: str) -> ReportData:
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError("report data must be a JSON object")
        return cls.from_dict(raw)
