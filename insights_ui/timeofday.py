"""Fold the report's hour-of-day histogram into four day-part buckets."""

from __future__ import annotations

from collections import Counter

from .i18n import Locale

# (day-part key, first hour, end hour exclusive)
PERIODS: list[tuple[str, int, int]] = [
    ("morning", 6, 12),
    ("afternoon", 12, 18),
    ("evening", 18, 24),
    ("night", 0, 6),
]


def period_for_hour(hour: int) -> str:
    for key, lo, hi in PERIODS:
        if lo <= hour < hi:
            return key
    raise ValueError(f"hour out of range: {hour}")


def shift_hour_counts(counts: dict, offset: int) -> dict[int, int]:
    """Move every hour by ``offset`` (mod 24), summing hours that collide."""
    shifted: Counter = Counter()
    for hour, count in counts.items():
        shifted[(int(hour) + offset) % 24] += count
    return dict(shifted)


def time_period_counts(counts: dict, locale: Locale) -> dict[str, int]:
    """Bucket ``{hour: count}`` into the locale's Morning/Afternoon/Evening/Night labels."""
    totals = {key: 0 for key, _, _ in PERIODS}
    for hour, count in counts.items():
        totals[period_for_hour(int(hour) % 24)] += count
    return {locale.time_periods[key]: totals[key] for key, _, _ in PERIODS}
