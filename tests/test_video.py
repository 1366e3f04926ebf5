import pytest
from click.testing import CliRunner

from insights_ui.extract import parse_report
from insights_ui.metrics import calculate_derived
from insights_ui.model import ReportData
from insights_ui.video import (
    SCENES,
    TOTAL_FRAMES,
    generate_svg,
    interpolate,
    main,
    scene_at,
    scene_tools,
    seeded_random,
    spring,
    transition_opacity,
)


@pytest.fixture
def data(report_html, en):
    return calculate_derived(parse_report(report_html), en)


class TestAnimation:
    def test_spring_starts_at_zero_and_settles(self):
        assert spring(0) == 0.0
        assert spring(-5) == 0.0
        assert spring(300) == pytest.approx(1.0, abs=1e-3)

    @pytest.mark.parametrize("damping,mass", [(20, 1.0), (30, 0.8)])
    def test_spring_without_overshoot(self, damping, mass):
        values = [spring(f, damping=damping, mass=mass) for f in range(0, 120)]
        assert all(0.0 <= v <= 1.0 + 1e-9 for v in values)
        assert values[-1] == pytest.approx(1.0, abs=1e-2)

    def test_interpolate_clamps(self):
        assert interpolate(5, (0, 10), (0, 100)) == 50
        assert interpolate(20, (0, 10), (0, 100), clamp_right=True) == 100
        assert interpolate(-5, (0, 10), (0, 100), clamp_left=True) == 0

    def test_seeded_random_is_stable(self):
        assert seeded_random(3) == seeded_random(3)
        assert 0 <= seeded_random(7) < 1

    def test_transition_opacity(self):
        assert transition_opacity(0, 120) == 0.0
        assert transition_opacity(60, 120) == 1.0
        assert transition_opacity(120, 120) == 0.0


class TestSchedule:
    def test_every_frame_in_exactly_one_scene(self):
        for frame in range(TOTAL_FRAMES):
            owners = [s for s, d, _ in SCENES if s <= frame < s + d]
            assert len(owners) == 1, frame
            assert scene_at(frame) is not None

    def test_past_the_end(self):
        assert scene_at(TOTAL_FRAMES) is None
        assert sum(d for _, d, _ in SCENES) == TOTAL_FRAMES


class TestFrames:
    def test_no_data(self):
        svg = generate_svg(ReportData(), 100)
        assert "No data provided. Pass insights JSON." in svg

    def test_tools_scene(self, data):
        svg = generate_svg(data, 330)
        assert svg.startswith("<svg")
        assert "Bash" in svg and "Edit" in svg

    def test_tools_scene_without_chart(self):
        assert "No data" in scene_tools(ReportData(total_messages=1), 30)

    def test_text_is_escaped(self, data):
        data.charts["Top Tools Used"][0]["label"] = "R&amp;D &lt;x&gt; <b>"
        assert "R&amp;D &lt;x&gt;<" in scene_tools(data, 60)


class TestCli:
    def test_single_frame(self, data, tmp_path):
        json_path = tmp_path / "insights.json"
        json_path.write_text(data.to_json(), encoding="utf-8")
        out = tmp_path / "preview.svg"
        result = CliRunner().invoke(main, [str(json_path), "--frame", "0", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8").startswith("<svg")

    def test_needs_frame_or_dir(self, data, tmp_path):
        json_path = tmp_path / "insights.json"
        json_path.write_text(data.to_json(), encoding="utf-8")
        result = CliRunner().invoke(main, [str(json_path)])
        assert result.exit_code == 2

    def test_frame_out_of_range(self, data, tmp_path):
        json_path = tmp_path / "insights.json"
        json_path.write_text(data.to_json(), encoding="utf-8")
        result = CliRunner().invoke(main, [str(json_path), "--frame", str(TOTAL_FRAMES)])
        assert result.exit_code == 2
