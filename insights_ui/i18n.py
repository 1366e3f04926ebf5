"""
Label sets for the two supported dashboard languages.

The dictionaries only cover labels the report generator is known to
emit.  Anything else passes through ``translate`` untouched, so a newer
report never loses a label, it just shows it in English.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DAY_PARTS = ("morning", "afternoon", "evening", "night")


class UnsupportedLocaleError(ValueError):
    pass


@dataclass(frozen=True)
class Locale:
    tag: str
    session_types: dict[str, str] = field(default_factory=dict)
    friction_types: dict[str, str] = field(default_factory=dict)
    error_types: dict[str, str] = field(default_factory=dict)
    time_periods: dict[str, str] = field(default_factory=dict)
    no_data: str = "No data"
    total: str = "Total"
    number_locale: str = "en-US"
    date_separator: str = " to "
    # Hours added to the report's Pacific-time histogram
    hour_offset: int = 0

    @property
    def template_name(self) -> str:
        return f"report-{self.tag}-template.html"

    @property
    def output_name(self) -> str:
        return f"report-{self.tag}.html"


LOCALES: dict[str, Locale] = {
    "en": Locale(
        tag="en",
        time_periods={
            "morning": "Morning (6-12)",
            "afternoon": "Afternoon (12-18)",
            "evening": "Evening (18-24)",
            "night": "Night (0-6)",
        },
    ),
    "ko": Locale(
        tag="ko",
        session_types={
            "Iterative Refinement": "반복 개선",
            "Multi Task": "다중 작업",
            "Exploration": "탐색",
            "Quick Question": "빠른 질문",
            "Single Task": "단일 작업",
            "Debugging": "디버깅",
            "Code Review": "코드 리뷰",
        },
        friction_types={
            "Wrong Approach": "잘못된 접근",
            "Misunderstood Request": "요청 오해",
            "Slow Response": "느린 응답",
            "Tool Error": "도구 오류",
        },
        error_types={
            "Command Failed": "명령 실패",
            "Other": "기타",
            "File Not Found": "파일 미발견",
            "User Rejected": "사용자 거부",
            "File Too Large": "파일 과대",
            "Edit Failed": "편집 실패",
        },
        time_periods={
            "morning": "오전 (6-12)",
            "afternoon": "오후 (12-18)",
            "evening": "저녁 (18-24)",
            "night": "심야 (0-6)",
        },
        no_data="데이터 없음",
        total="전체",
        number_locale="ko-KR",
        date_separator=" ~ ",
        # PT -> KST, same as the report's own "Tokyo (UTC+9)" option
        hour_offset=17,
    ),
}

DEFAULT_LOCALE = "en"

# English day-part label -> day-part key
DAY_PART_LABELS: dict[str, str] = {
    label: key for key, label in LOCALES[DEFAULT_LOCALE].time_periods.items()
}


def get_locale(tag: str) -> Locale:
    try:
        return LOCALES[tag]
    except KeyError:
        supported = ", ".join(sorted(LOCALES))
        raise UnsupportedLocaleError(
            f"Unsupported lang: {tag} (expected one of: {supported})"
        ) from None


def translate(label: str, locale: Locale) -> str:
    """Return the localized form of a chart label, or the label itself.

    Day-part labels are matched by their English display text, the form
    they take in the report's time-of-day chart.
    """
    for table in (
        locale.session_types,
        locale.friction_types,
        locale.error_types,
    ):
        if label in table:
            return table[label]
    key = DAY_PART_LABELS.get(label)
    if key is not None:
        return locale.time_periods.get(key, label)
    return label
