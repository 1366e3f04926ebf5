"""
insights-ui - Turn a Claude Code Insights report into a localized dashboard.

MODES:
    --extract              Parse report.html -> JSON (stdout, or --out FILE)
    --render --lang en|ko  Render JSON -> dashboard HTML; reads --data FILE or stdin
    (no mode flag)         Extract and render in one step

USAGE:
    insights-ui                                   # report.html -> report-en.html
    insights-ui --lang ko                         # Korean labels, KST time of day
    insights-ui --extract --out insights.json
    insights-ui --extract | insights-ui --render --lang ko
    insights-ui --render --data insights.json --hour-offset 3   # PT -> ET
"""

from __future__ import annotations

from pathlib import Path

import click

from .extract import ReportFormatError, parse_report
from .i18n import DEFAULT_LOCALE, LOCALES, Locale, get_locale
from .metrics import calculate_derived
from .model import ReportData
from .render import render_template

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

USAGE_DIR = Path.home() / ".claude" / "usage-data"
REPORT_NAME = "report.html"
TEMPLATES_DIR = Path(__file__).parent / "templates"
LOG_PREFIX = "[insights-ui]"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def log(message: str, verbose: bool = True, level: str = "INFO"):
    """Print to stderr if verbose or if error; stdout is reserved for JSON."""
    if verbose or level == "ERROR":
        prefix = LOG_PREFIX if level == "INFO" else f"{LOG_PREFIX} [{level}]"
        click.echo(f"{prefix} {message}", err=True)


def read_report(path: Path, verbose: bool) -> ReportData:
    if not path.is_file():
        raise click.ClickException(
            f"{path} not found. Run /insights in Claude Code first."
        )
    log(f"Reading {path}", verbose)
    try:
        data = parse_report(path.read_text(encoding="utf-8"))
    except ReportFormatError as e:
        raise click.ClickException(f"{path} looks corrupt: {e}") from e
    log(
        f"Extracted {data.total_messages} messages, {data.total_sessions} sessions, "
        f"{len(data.charts)} charts",
        verbose,
    )
    return data


def read_data(data_path: Path | None, verbose: bool) -> ReportData:
    """Load a JSON snapshot from ``data_path`` or stdin."""
    if data_path is not None:
        if not data_path.is_file():
            raise click.ClickException(f"Data file not found: {data_path}")
        text = data_path.read_text(encoding="utf-8")
        source = str(data_path)
    else:
        stdin = click.get_text_stream("stdin")
        if stdin.isatty():
            raise click.UsageError(
                "No data provided. Pass --data FILE or pipe JSON via stdin."
            )
        text = stdin.read()
        source = "stdin"
    log(f"Loading data from {source}", verbose)
    try:
        return ReportData.from_json(text)
    except ValueError as e:
        raise click.ClickException(f"Invalid report data from {source}: {e}") from e


def load_template(locale: Locale) -> str:
    path = TEMPLATES_DIR / locale.template_name
    if not path.is_file():
        raise click.ClickException(f"Template not found: {path}")
    return path.read_text(encoding="utf-8")


def write_dashboard(
    data: ReportData,
    locale: Locale,
    usage_dir: Path,
    hour_offset: int | None,
    verbose: bool,
) -> Path:
    calculate_derived(data, locale)
    template = load_template(locale)
    log(f"Rendering {locale.template_name}", verbose)
    output = render_template(template, data, locale, hour_offset)
    out_path = usage_dir / locale.output_name
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(output, encoding="utf-8")
    log(f"Done: {out_path}")
    return out_path


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--extract", "mode_extract", is_flag=True, help="Parse report.html to JSON")
@click.option("--render", "mode_render", is_flag=True, help="Render JSON to a dashboard")
@click.option(
    "--lang",
    type=click.Choice(sorted(LOCALES)),
    default=DEFAULT_LOCALE,
    show_default=True,
    help="Dashboard language",
)
@click.option(
    "-i",
    "--input",
    "input_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Report to extract (default: <usage-dir>/report.html)",
)
@click.option(
    "--data",
    "data_path",
    type=click.Path(path_type=Path),
    default=None,
    help="JSON data for --render (default: stdin)",
)
@click.option(
    "--out",
    "out_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Write --extract JSON here instead of stdout",
)
@click.option(
    "--hour-offset",
    type=int,
    default=None,
    help="Hours to add to the Pacific-time histogram (default: per language)",
)
@click.option(
    "--usage-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=USAGE_DIR,
    show_default=True,
    help="Directory holding report.html and the rendered dashboards",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def main(
    mode_extract: bool,
    mode_render: bool,
    lang: str,
    input_path: Path | None,
    data_path: Path | None,
    out_path: Path | None,
    hour_offset: int | None,
    usage_dir: Path,
    verbose: bool,
):
    """Re-render a Claude Code Insights report as a localized dashboard."""
    if mode_extract and mode_render:
        raise click.UsageError("--extract and --render are mutually exclusive.")

    locale = get_locale(lang)

    report_path = input_path or usage_dir / REPORT_NAME

    if mode_extract:
        data = read_report(report_path, verbose)
        calculate_derived(data, locale)
        payload = data.to_json()
        if out_path:
            out_path.write_text(payload, encoding="utf-8")
            log(f"Extracted to {out_path}")
        else:
            click.echo(payload, nl=False)
        return

    if mode_render:
        data = read_data(data_path, verbose)
        write_dashboard(data, locale, usage_dir, hour_offset, verbose)
        return

    # Legacy: extract + render in one go
    data = read_report(report_path, verbose)
    write_dashboard(data, locale, usage_dir, hour_offset, verbose)


if __name__ == "__main__":
    main()
