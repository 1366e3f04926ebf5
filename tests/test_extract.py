import pytest

from insights_ui.extract import (
    ReportFormatError,
    parse_lines_changed,
    parse_report,
    scan_charts,
    scan_hour_counts,
    scan_multi_clauding,
    scan_narrative,
)


class TestParseReport:
    def test_summary(self, report_html):
        data = parse_report(report_html)
        assert data.total_messages == 1234
        assert data.total_sessions == 56
        assert data.date_from == "2024-01-01"
        assert data.date_to == "2024-01-31"

    def test_stats(self, report_html):
        data = parse_report(report_html)
        assert data.stats["days"] == "31"
        assert data.stats["msgs/day"] == "39.8"
        assert (data.lines_added, data.lines_removed) == (500, 120)
        assert data.files_changed == 42
        assert data.days == 31

    def test_glance(self, report_html):
        glance = parse_report(report_html).glance
        assert glance["what's working"] == "You ship fast with tight loops."
        assert glance["what's hindering you"] == "Long debugging detours."
        assert set(glance) == {
            "what's working",
            "what's hindering you",
            "quick wins to try",
            "ambitious workflows",
        }

    def test_charts(self, report_html):
        charts = parse_report(report_html).charts
        tools = charts["Top Tools Used"]
        assert [b["label"] for b in tools] == ["Bash", "Read", "Edit"]
        assert [b["value"] for b in tools] == [10, 5, 3]
        assert tools[0]["color"] == "#0891b2"
        assert tools[1]["width"] == 50.0
        assert [b["value"] for b in charts["User Response Time Distribution"]] == [1200, 600]
        assert charts["Tool Errors Encountered"][0]["label"] == "Command Failed"

    def test_chart_without_bars_is_omitted(self, report_html):
        charts = parse_report(report_html).charts
        assert "Outcomes" not in charts
        assert not any(title.startswith("Multi-Clauding") for title in charts)

    def test_cards(self, report_html):
        data = parse_report(report_html)
        assert [w["title"] for w in data.big_wins] == ["Shipped the parser", "Fixed CI"]
        assert data.frictions[0]["examples"] == [
            "Edited the generated file",
            "Patched the test instead",
        ]
        assert data.frictions[1] == {
            "title": "Slow Response",
            "desc": "Long waits.",
            "examples": [],
        }
        assert data.features[0]["why"] == "<strong>Why for you:</strong> You lint by hand."
        assert data.horizons[0]["title"] == "Autonomous refactors"

    def test_project_areas(self, report_html):
        areas = parse_report(report_html).project_areas
        assert areas[0] == {
            "name": "Data & Pipelines",
            "count": "~5 sessions",
            "desc": "ETL jobs and reports.",
        }
        assert len(areas) == 2

    def test_narrative_and_insight(self, report_html):
        data = parse_report(report_html)
        assert data.narrative == "You work in short bursts.\n\nMost sessions end with a commit."
        assert data.key_insight == "Key pattern: Iterates quickly."

    def test_misc_sections(self, report_html):
        data = parse_report(report_html)
        assert data.raw_hour_counts == {"0": 1, "6": 2, "12": 3, "18": 4}
        assert data.median_response_time == 12.5
        assert data.avg_response_time == 30.2
        assert data.multi_clauding == {
            "overlapEvents": 7,
            "sessionsInvolved": 3,
            "pctMessages": 15,
        }
        assert data.fun_ending == {
            "headline": "1,234 messages!",
            "detail": "That is a lot of typing.",
        }
        assert data.wins_intro == "You did a lot this month."
        assert data.friction_intro == "Some friction around tests."
        assert data.horizon_intro == "Bigger things ahead."


class TestMissingSections:
    def test_empty_document_uses_defaults(self):
        data = parse_report("<html><body></body></html>")
        assert data.total_messages == 0
        assert data.date_from == ""
        assert data.charts == {}
        assert data.big_wins == []
        assert data.raw_hour_counts == {}
        assert data.multi_clauding == {
            "overlapEvents": 0,
            "sessionsInvolved": 0,
            "pctMessages": 0,
        }
        assert data.fun_ending == {"headline": "", "detail": ""}

    def test_lines_changed_fallback(self):
        assert parse_lines_changed("n/a") == (0, 0)
        assert parse_lines_changed("+1,200/-45") == (1200, 45)

    def test_narrative_absent(self):
        assert scan_narrative("<p>stray</p>") == ""

    def test_bar_free_chart(self):
        html = '<div class="chart-title">Outcomes</div><div class="empty">No data</div>'
        assert scan_charts(html) == {}


class TestHourCounts:
    def test_corrupt_literal_raises(self):
        with pytest.raises(ReportFormatError):
            scan_hour_counts("const rawHourCounts = {0: 1, oops};")

    def test_non_integer_count_raises(self):
        with pytest.raises(ReportFormatError):
            scan_hour_counts('const rawHourCounts = {"3": "many"};')

    @pytest.mark.parametrize("literal", ['{"night": 1}', '{"24": 1}', '{"-1": 2}'])
    def test_hour_keys_must_be_hours(self, literal):
        with pytest.raises(ReportFormatError, match="hour"):
            scan_hour_counts(f"const rawHourCounts = {literal};")

    def test_non_hour_key_fails_whole_parse(self, report_html):
        with pytest.raises(ReportFormatError):
            parse_report(report_html.replace('{"0":1,', '{"night":1,'))

    def test_corrupt_literal_fails_whole_parse(self, report_html):
        broken = report_html.replace('{"0":1,', "{0:1,")
        with pytest.raises(ReportFormatError):
            parse_report(broken)

    def test_is_value_error(self):
        assert issubclass(ReportFormatError, ValueError)


class TestMultiClauding:
    def test_first_match_per_caption_wins(self):
        badge = (
            '<div style="font-size: 24px; font-weight: 700; color: #7c3aed;">{}</div>'
            "<div>{}</div>"
        )
        html = badge.format("4", "Overlap Events") + badge.format("9", "Overlap Again")
        assert scan_multi_clauding(html)["overlapEvents"] == 4
