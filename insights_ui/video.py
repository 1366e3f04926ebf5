"""
insights-video - Animated 30-second recap of a Claude Code Insights report.

Every frame is a pure function of (data, frame number): the scene table
picks the active scene, the scene builds an SVG document, and nothing is
carried over between frames.  Frames can be previewed one at a time or
written as a sequence and assembled into an MP4.

Rendering pipeline:
  1. Python writes 900 SVG frames (30fps x 30s, 1920x1080)
  2. rsvg-convert rasterizes each SVG -> PNG
  3. ffmpeg assembles the PNG sequence -> H.264 MP4

USAGE:
    insights-ui --extract --out insights.json
    insights-video insights.json --frame 300 -o preview.svg
    insights-video insights.json --frames-dir frames/
    insights-video insights.json --frames-dir frames/ --mp4 insights.mp4

Requires rsvg-convert (librsvg) and ffmpeg for --mp4 only.
"""

from __future__ import annotations

import math
import shutil
import subprocess
import textwrap
from pathlib import Path
from typing import Callable

import click

from .model import ReportData
from .render import bar_widths
from .textutil import format_number, html_escape, html_unescape, strip_tags

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WIDTH, HEIGHT = 1920, 1080
FPS = 30
TOTAL_FRAMES = 900

BG = "#0a0e1a"
CARD_BG = "#131a2e"
ACCENT = "#60a5fa"
WHITE = "#f0f4ff"
MUTED = "#7b8ba8"
GREEN = "#34d399"
CYAN = "#22d3ee"
PURPLE = "#a78bfa"
YELLOW = "#fbbf24"
PINK = "#f472b6"

SERIES_COLORS = [ACCENT, CYAN, GREEN, PURPLE, YELLOW, PINK]
FONT = '"SF Pro Display", -apple-system, "Segoe UI", Roboto, sans-serif'

FADE_IN_FRAMES = 12
FADE_OUT_FRAMES = 10


# ---------------------------------------------------------------------------
# Animation helpers
# ---------------------------------------------------------------------------


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def interpolate(
    value: float,
    input_range: tuple[float, float],
    output_range: tuple[float, float],
    clamp_left: bool = False,
    clamp_right: bool = False,
    easing: Callable[[float], float] | None = None,
) -> float:
    """Map ``value`` linearly from ``input_range`` onto ``output_range``."""
    (x0, x1), (y0, y1) = input_range, output_range
    t = (value - x0) / (x1 - x0)
    if clamp_left and t < 0:
        t = 0.0
    if clamp_right and t > 1:
        t = 1.0
    if easing is not None:
        t = easing(t)
    return y0 + (y1 - y0) * t


def spring(
    frame: float,
    fps: int = FPS,
    damping: float = 10.0,
    mass: float = 1.0,
    stiffness: float = 100.0,
) -> float:
    """Position of a spring released from 0 towards 1, ``frame`` frames in.

    Closed-form damped harmonic oscillator; returns 0 before the start.
    """
    if frame <= 0:
        return 0.0
    t = frame / fps
    omega = math.sqrt(stiffness / mass)
    zeta = damping / (2 * math.sqrt(stiffness * mass))
    if zeta < 1:
        omega_d = omega * math.sqrt(1 - zeta * zeta)
        envelope = math.exp(-zeta * omega * t)
        return 1 - envelope * (
            math.cos(omega_d * t) + (zeta * omega / omega_d) * math.sin(omega_d * t)
        )
    if zeta == 1:
        return 1 - math.exp(-omega * t) * (1 + omega * t)
    root = math.sqrt(zeta * zeta - 1)
    r1 = -omega * (zeta - root)
    r2 = -omega * (zeta + root)
    return 1 - (r2 * math.exp(r1 * t) - r1 * math.exp(r2 * t)) / (r2 - r1)


def seeded_random(seed: float) -> float:
    """Deterministic pseudo-random value in [0, 1) for ``seed``."""
    x = math.sin(seed * 9301 + 49297) * 49297
    return x - math.floor(x)


def counter_value(value: int, frame: float, delay: int = 0) -> int:
    progress = spring(frame - delay, damping=30, mass=0.8)
    return round(value * min(progress, 1.0))


# ---------------------------------------------------------------------------
# SVG primitives
# ---------------------------------------------------------------------------


def _clean(s: str) -> str:
    """Report text (already HTML-escaped, maybe tagged) -> safe SVG text."""
    return html_escape(html_unescape(strip_tags(s)))


def svg_text(
    x: float,
    y: float,
    text: str,
    size: float = 48,
    fill: str = WHITE,
    weight: int = 400,
    anchor: str = "middle",
    opacity: float = 1.0,
) -> str:
    return (
        f'<text x="{x:.1f}" y="{y:.1f}" font-family=\'{FONT}\' font-size="{size}" '
        f'font-weight="{weight}" fill="{fill}" text-anchor="{anchor}" '
        f'opacity="{max(0.0, min(1.0, opacity)):.3f}">{text}</text>'
    )


def svg_rect(
    x: float,
    y: float,
    w: float,
    h: float,
    fill: str,
    rx: float = 16,
    opacity: float = 1.0,
) -> str:
    return (
        f'<rect x="{x:.1f}" y="{y:.1f}" width="{max(w, 0):.1f}" height="{max(h, 0):.1f}" '
        f'rx="{rx}" fill="{fill}" opacity="{max(0.0, min(1.0, opacity)):.3f}"/>'
    )


def svg_paragraph(
    x: float, y: float, text: str, width: int, size: float, line_height: float, **kw
) -> str:
    lines = textwrap.wrap(html_unescape(strip_tags(text)), width) or [""]
    return "\n".join(
        svg_text(x, y + i * line_height, html_escape(line), size, **kw)
        for i, line in enumerate(lines)
    )


def particle_field(frame: int, count: int = 60, color: str = ACCENT, seed: int = 0) -> str:
    dots = []
    for i in range(count):
        x = seeded_random(i + seed) * WIDTH
        y = seeded_random(i + seed + 100) * HEIGHT
        size = seeded_random(i + seed + 200) * 4 + 1
        dx = (seeded_random(i + seed + 300) - 0.5) * 2
        dy = (seeded_random(i + seed + 400) - 0.5) * 1.5
        base = seeded_random(i + seed + 500) * 0.5 + 0.1
        pulse = seeded_random(i + seed + 600) * 3 + 1
        px = (x + dx * frame) % WIDTH
        py = (y + dy * frame) % HEIGHT
        op = base * (0.6 + 0.4 * math.sin(frame * 0.05 * pulse))
        dots.append(
            f'<circle cx="{px:.1f}" cy="{py:.1f}" r="{size / 2:.2f}" '
            f'fill="{color}" opacity="{op:.3f}"/>'
        )
    return "\n".join(dots)


# ---------------------------------------------------------------------------
# Scenes
# ---------------------------------------------------------------------------


def scene_title(data: ReportData, f: int) -> str:
    title_in = spring(f - 10, damping=12, mass=0.6)
    sub_in = spring(f - 30, damping=15)
    line = interpolate(f, (25, 65), (0, 1), clamp_left=True, clamp_right=True)
    parts = [
        particle_field(f, 80, ACCENT, seed=1),
        svg_text(
            WIDTH / 2,
            HEIGHT / 2 - 40 + interpolate(title_in, (0, 1), (50, 0)),
            "Claude Code Insights",
            80,
            weight=900,
            opacity=title_in,
        ),
        svg_rect(WIDTH / 2 - 250 * line, HEIGHT / 2, 500 * line, 2, ACCENT, rx=1),
        svg_text(
            WIDTH / 2,
            HEIGHT / 2 + 80 + interpolate(sub_in, (0, 1), (30, 0)),
            _clean(f"{data.date_from} to {data.date_to}"),
            36,
            fill=MUTED,
            opacity=sub_in,
        ),
    ]
    return "\n".join(parts)


def scene_stats(data: ReportData, f: int) -> str:
    cards = [
        ("Messages", data.total_messages, ACCENT),
        ("Sessions", data.total_sessions, CYAN),
        ("Files", data.files_changed, GREEN),
        ("Days", data.days, PURPLE),
    ]
    card_w, gap = 380, 40
    left = (WIDTH - (card_w * len(cards) + gap * (len(cards) - 1))) / 2
    parts = [svg_text(WIDTH / 2, 260, "By the Numbers", 56, weight=800, opacity=spring(f))]
    for i, (label, value, color) in enumerate(cards):
        delay = i * 8
        pop = spring(f - delay - 5, damping=10, mass=0.5, stiffness=200)
        x = left + i * (card_w + gap)
        y = 400 + interpolate(pop, (0, 1), (80, 0))
        parts.append(svg_rect(x, y, card_w, 300, CARD_BG, opacity=pop))
        parts.append(
            svg_text(
                x + card_w / 2,
                y + 160,
                format_number(counter_value(value, f, delay)),
                84,
                fill=color,
                weight=800,
                opacity=pop,
            )
        )
        parts.append(svg_text(x + card_w / 2, y + 230, label, 30, fill=MUTED, opacity=pop))
    return "\n".join(parts)


def scene_tools(data: ReportData, f: int) -> str:
    tools = data.charts.get("Top Tools Used", [])[:6]
    parts = [svg_text(WIDTH / 2, 180, "Top Tools", 56, weight=800, opacity=spring(f))]
    if not tools:
        parts.append(svg_text(WIDTH / 2, HEIGHT / 2, "No data", 40, fill=MUTED))
        return "\n".join(parts)
    track_w = 1100
    for i, (tool, width) in enumerate(zip(tools, bar_widths(tools))):
        grow = spring(f - 10 - i * 10, damping=18, stiffness=120)
        slide = interpolate(grow, (0, 1), (-40, 0))
        color = SERIES_COLORS[i % len(SERIES_COLORS)]
        y = 280 + i * 120
        parts.append(
            svg_text(520 + slide, y + 40, _clean(tool["label"]), 36, anchor="end", opacity=grow)
        )
        parts.append(svg_rect(560, y, track_w, 56, CARD_BG, rx=28))
        parts.append(svg_rect(560, y, track_w * width / 100 * min(grow, 1.0), 56, color, rx=28))
        parts.append(
            svg_text(
                1700,
                y + 40,
                format_number(counter_value(tool["value"], f, 10 + i * 10)),
                36,
                fill=color,
                weight=700,
                anchor="start",
                opacity=grow,
            )
        )
    return "\n".join(parts)


def scene_languages(data: ReportData, f: int) -> str:
    langs = data.charts.get("Languages", [])[:6]
    parts = [svg_text(WIDTH / 2, 180, "Languages", 56, weight=800, opacity=spring(f))]
    total = sum(lang["value"] for lang in langs)
    if not total:
        parts.append(svg_text(WIDTH / 2, HEIGHT / 2, "No data", 40, fill=MUTED))
        return "\n".join(parts)

    sweep = min(spring(f - 5, damping=20, mass=1.5), 1.0)
    rotation = interpolate(f, (0, 150), (-100, -90), clamp_right=True, easing=ease_out_cubic)
    cx, cy, r = 640, 600, 260
    circ = 2 * math.pi * r
    offset = 0.0
    parts.append(
        f'<circle cx="{cx}" cy="{cy}" r="{r}" fill="none" stroke="{CARD_BG}" stroke-width="70"/>'
    )
    for i, lang in enumerate(langs):
        dash = lang["value"] / total * circ * sweep
        color = SERIES_COLORS[i % len(SERIES_COLORS)]
        parts.append(
            f'<circle cx="{cx}" cy="{cy}" r="{r}" fill="none" stroke="{color}" '
            f'stroke-width="70" stroke-dasharray="{dash:.2f} {circ - dash:.2f}" '
            f'stroke-dashoffset="{-offset:.2f}" '
            f'transform="rotate({rotation:.2f} {cx} {cy})"/>'
        )
        offset += dash
        slide = spring(f - 20 - i * 8, damping=15)
        y = 380 + i * 90
        pct = lang["value"] / total * 100
        parts.append(
            svg_rect(1180 + interpolate(slide, (0, 1), (30, 0)), y - 22, 24, 24, color, rx=12, opacity=slide)
        )
        parts.append(
            svg_text(
                1230 + interpolate(slide, (0, 1), (30, 0)),
                y,
                f"{_clean(lang['label'])}  {pct:.1f}%",
                36,
                anchor="start",
                opacity=slide,
            )
        )
    return "\n".join(parts)


def scene_wins(data: ReportData, f: int) -> str:
    parts = [svg_text(WIDTH / 2, 180, "Big Wins", 56, weight=800, opacity=spring(f))]
    for i, win in enumerate(data.big_wins[:3]):
        slide = spring(f - 10 - i * 15, damping=14, stiffness=120)
        x = 260 + interpolate(slide, (0, 1), (100, 0))
        y = 260 + i * 240
        parts.append(svg_rect(x, y, 1400, 200, CARD_BG, opacity=slide))
        parts.append(svg_rect(x, y, 8, 200, GREEN, rx=4, opacity=slide))
        parts.append(
            svg_text(x + 50, y + 70, _clean(win.get("title", "")), 40, weight=700, anchor="start", opacity=slide)
        )
        desc = strip_tags(win.get("desc", ""))
        if len(desc) > 160:
            desc = desc[:157] + "..."
        parts.append(
            svg_paragraph(x + 50, y + 120, desc, 80, 26, 36, fill=MUTED, anchor="start", opacity=slide)
        )
    return "\n".join(parts)


def scene_insight(data: ReportData, f: int) -> str:
    appear = spring(f - 5, damping=20)
    y = 420 + interpolate(appear, (0, 1), (30, 0))
    return "\n".join(
        [
            particle_field(f, 40, PURPLE, seed=7),
            svg_text(WIDTH / 2, 300, "Key Insight", 40, fill=PURPLE, weight=700, opacity=appear),
            svg_paragraph(WIDTH / 2, y, data.key_insight, 60, 48, 68, weight=600, opacity=appear),
        ]
    )


def scene_ending(data: ReportData, f: int) -> str:
    text_in = spring(f - 5, damping=15)
    badge_in = spring(f - 35)
    headline = data.fun_ending.get("headline", "")
    detail = data.fun_ending.get("detail", "")
    return "\n".join(
        [
            particle_field(f, 80, YELLOW, seed=11),
            svg_paragraph(
                WIDTH / 2,
                380 + interpolate(text_in, (0, 1), (40, 0)),
                headline,
                50,
                60,
                80,
                weight=800,
                opacity=text_in,
            ),
            svg_paragraph(WIDTH / 2, 620, detail, 80, 30, 44, fill=MUTED, opacity=text_in),
            svg_text(WIDTH / 2, 900, "Made with Claude Code", 28, fill=ACCENT, weight=600, opacity=badge_in),
        ]
    )


# (start frame, duration, scene)
SCENES: list[tuple[int, int, Callable[[ReportData, int], str]]] = [
    (0, 120, scene_title),
    (120, 150, scene_stats),
    (270, 180, scene_tools),
    (450, 150, scene_languages),
    (600, 120, scene_wins),
    (720, 90, scene_insight),
    (810, 90, scene_ending),
]


def scene_at(frame: int) -> tuple[Callable[[ReportData, int], str], int, int] | None:
    """Return ``(scene, local_frame, duration)`` for ``frame``, or None past the end."""
    for start, duration, scene in SCENES:
        if start <= frame < start + duration:
            return scene, frame - start, duration
    return None


def transition_opacity(local_frame: int, duration: int) -> float:
    fade_in = interpolate(local_frame, (0, FADE_IN_FRAMES), (0, 1), clamp_right=True)
    fade_out = interpolate(
        local_frame, (duration - FADE_OUT_FRAMES, duration), (1, 0), clamp_left=True
    )
    return max(0.0, min(fade_in, fade_out))


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


def _document(body: str) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{WIDTH}" height="{HEIGHT}" '
        f'viewBox="0 0 {WIDTH} {HEIGHT}">\n'
        f'<rect width="{WIDTH}" height="{HEIGHT}" fill="{BG}"/>\n'
        f"{body}\n</svg>\n"
    )


def generate_svg(data: ReportData, frame: int) -> str:
    """Build the complete SVG document for one frame."""
    if not data.total_messages:
        return _document(
            svg_text(WIDTH / 2, HEIGHT / 2, "No data provided. Pass insights JSON.", 32, fill=MUTED)
        )
    active = scene_at(frame)
    if active is None:
        return _document("")
    scene, local, duration = active
    opacity = transition_opacity(local, duration)
    scale = 1.0
    if local < FADE_IN_FRAMES:
        scale = interpolate(local, (0, FADE_IN_FRAMES), (1.03, 1), clamp_right=True, easing=ease_out_cubic)
    shift_x = WIDTH * (1 - scale) / 2
    shift_y = HEIGHT * (1 - scale) / 2
    return _document(
        f'<g opacity="{opacity:.3f}" transform="translate({shift_x:.2f} {shift_y:.2f}) scale({scale:.4f})">\n'
        f"{scene(data, local)}\n</g>"
    )


def render_frames(data: ReportData, frames_dir: Path, verbose: bool = False) -> list[Path]:
    frames_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for frame in range(TOTAL_FRAMES):
        path = frames_dir / f"frame_{frame:04d}.svg"
        path.write_text(generate_svg(data, frame), encoding="utf-8")
        paths.append(path)
        if verbose and frame % FPS == 0:
            click.echo(f"  [{frame}/{TOTAL_FRAMES}] {path.name}", err=True)
    return paths


def assemble_video(frames: list[Path], output: Path, verbose: bool = False) -> None:
    """Rasterize SVG frames with rsvg-convert and encode them with ffmpeg."""
    for tool in ("rsvg-convert", "ffmpeg"):
        if shutil.which(tool) is None:
            raise click.ClickException(f"{tool} not found on PATH (needed for --mp4).")

    for svg in frames:
        png = svg.with_suffix(".png")
        subprocess.run(
            ["rsvg-convert", "-w", str(WIDTH), "-h", str(HEIGHT), "-o", str(png), str(svg)],
            check=True,
        )
    if verbose:
        click.echo(f"  Rasterized {len(frames)} frames", err=True)

    pattern = frames[0].parent / "frame_%04d.png"
    result = subprocess.run(
        [
            "ffmpeg", "-y", "-loglevel", "error",
            "-framerate", str(FPS), "-i", str(pattern),
            "-c:v", "libx264", "-pix_fmt", "yuv420p", "-crf", "18",
            str(output),
        ],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise click.ClickException(f"ffmpeg failed: {result.stderr.strip()}")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--frame", type=click.IntRange(0, TOTAL_FRAMES - 1), default=None, help="Render a single preview frame")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None, help="Preview SVG path (with --frame)")
@click.option("--frames-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Write every frame here")
@click.option("--mp4", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Assemble frames into this MP4")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def main(
    data_path: Path,
    frame: int | None,
    output: Path | None,
    frames_dir: Path | None,
    mp4: Path | None,
    verbose: bool,
):
    """Render the insights recap video from extracted JSON data."""
    try:
        data = ReportData.from_json(data_path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise click.ClickException(f"Invalid report data in {data_path}: {e}") from e

    if frame is not None:
        out = output or Path(f"frame_{frame:04d}.svg")
        out.write_text(generate_svg(data, frame), encoding="utf-8")
        click.echo(f"Preview written to: {out}")
        return

    if frames_dir is None:
        raise click.UsageError("Pass --frame N for a preview or --frames-dir DIR for the full video.")

    click.echo(f"Rendering {TOTAL_FRAMES} frames to {frames_dir}...")
    frames = render_frames(data, frames_dir, verbose)
    if mp4:
        click.echo(f"Assembling {mp4}...")
        assemble_video(frames, mp4, verbose)
        click.echo(f"Video written to: {mp4}")
    else:
        click.echo(f"Wrote {len(frames)} frames.")


if __name__ == "__main__":
    main()
