"""Per-day rates and the display date range, computed from extracted fields."""

from __future__ import annotations

from datetime import date

from .i18n import Locale
from .model import ReportData


def _per_day(total: int, days: int) -> str:
    return f"{total / max(days, 1):.1f}"


def _inclusive_days(date_from: str, date_to: str) -> int | None:
    try:
        start = date.fromisoformat(date_from)
        end = date.fromisoformat(date_to)
    except ValueError:
        return None
    return (end - start).days + 1


def calculate_derived(data: ReportData, locale: Locale) -> ReportData:
    """Fill in sessionsPerDay, messagesPerDay, totalDays and dateRange.

    Safe to call more than once: derived fields are recomputed from the
    extracted ones, so rendering a snapshot in another language only
    changes the date-range separator.
    """
    data.sessions_per_day = _per_day(data.total_sessions, data.days)
    data.messages_per_day = _per_day(data.total_messages, data.days)
    if data.date_from and data.date_to:
        data.total_days = _inclusive_days(data.date_from, data.date_to)
        data.date_range = f"{data.date_from}{locale.date_separator}{data.date_to}"
    return data
