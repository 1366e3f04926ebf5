"""Shared fixtures: a report in the markup the Insights generator writes."""

import pytest

from insights_ui.i18n import LOCALES


def bar_row(label: str, width: float, color: str, value: int) -> str:
    return (
        f'<div class="bar-row">\n'
        f'        <div class="bar-label">{label}</div>\n'
        f'        <div class="bar-track"><div class="bar-fill" '
        f'style="width:{width}%;background:{color}"></div></div>\n'
        f'        <div class="bar-value">{value}</div>\n'
        f"      </div>"
    )


def chart_card(title: str, rows: list[str]) -> str:
    body = "\n".join(rows) if rows else '<div class="empty">No data</div>'
    return (
        f'<div class="chart-card">\n'
        f'        <div class="chart-title">{title}</div>\n'
        f"        {body}\n"
        f"      </div>"
    )


def badge(value: str, caption: str) -> str:
    return (
        f'<div style="text-align: center;">\n'
        f'            <div style="font-size: 24px; font-weight: 700; color: #7c3aed;">{value}</div>\n'
        f'            <div style="font-size: 11px; color: #64748b; text-transform: uppercase;">{caption}</div>\n'
        f"          </div>"
    )


SAMPLE_REPORT = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Claude Code Insights</title></head>
<body>
  <div class="container">
    <h1>Claude Code Insights</h1>
    <p class="subtitle">1,234 messages across 56 sessions | 2024-01-01 to 2024-01-31</p>

    <div class="at-a-glance">
      <div class="glance-title">At a Glance</div>
      <div class="glance-sections">
        <div class="glance-section"><strong>What's working:</strong> You ship <strong>fast</strong> with tight loops. <a href="#section-wins" class="see-more">See more &rarr;</a></div>
        <div class="glance-section"><strong>What's hindering you:</strong> Long debugging detours. <a href="#section-friction" class="see-more">See more &rarr;</a></div>
        <div class="glance-section"><strong>Quick wins to try:</strong> Add a CLAUDE.md. <a href="#section-features" class="see-more">See more &rarr;</a></div>
        <div class="glance-section"><strong>Ambitious workflows:</strong> Parallel agents. <a href="#section-horizon" class="see-more">See more &rarr;</a></div>
      </div>
    </div>

    <div class="stats-row">
      <div class="stat"><div class="stat-value">1,234</div><div class="stat-label">Messages</div></div>
      <div class="stat"><div class="stat-value">+500/-120</div><div class="stat-label">Lines</div></div>
      <div class="stat"><div class="stat-value">42</div><div class="stat-label">Files</div></div>
      <div class="stat"><div class="stat-value">31</div><div class="stat-label">Days</div></div>
      <div class="stat"><div class="stat-value">39.8</div><div class="stat-label">Msgs/Day</div></div>
    </div>

    <h2 id="section-work">What You Work On</h2>
    <div class="project-areas">
      <div class="project-area">
          <div class="area-header">
            <span class="area-name">Data &amp; Pipelines</span>
            <span class="area-count">~5 sessions</span>
          </div>
          <div class="area-desc">ETL jobs and reports.</div>
        </div>
      <div class="project-area">
          <div class="area-header">
            <span class="area-name">CLI Tools</span>
            <span class="area-count">~3 sessions</span>
          </div>
          <div class="area-desc">Small utilities.</div>
        </div>
    </div>

    <div class="charts-row">
      {chart_card("What You Wanted", [bar_row("Fix Bug", 100.0, "#2563eb", 6), bar_row("Implement Feature", 50.0, "#2563eb", 3)])}
      {chart_card("Top Tools Used", [bar_row("Bash", 100.0, "#0891b2", 10), bar_row("Read", 50.0, "#0891b2", 5), bar_row("Edit", 30.0, "#0891b2", 3)])}
    </div>
    <div class="charts-row">
      {chart_card("Languages", [bar_row("Python", 100.0, "#10b981", 8), bar_row("Markdown", 25.0, "#10b981", 2)])}
      {chart_card("Session Types", [bar_row("Iterative Refinement", 100.0, "#8b5cf6", 4), bar_row("Single Task", 50.0, "#8b5cf6", 2)])}
    </div>

    <h2 id="section-usage">How You Use Claude Code</h2>
    <div class="narrative">
      <p>You work in <strong>short bursts</strong>.</p>
<p>Most sessions end with a commit.</p>
      <div class="key-insight"><strong>Key pattern:</strong> Iterates quickly.</div>
    </div>

    <div class="chart-card" style="margin: 24px 0;">
      <div class="chart-title">User Response Time Distribution</div>
      {bar_row("2-10s", 100.0, "#6366f1", 1200)}
      {bar_row("10-30s", 50.0, "#6366f1", 600)}
      <div style="font-size: 12px; color: #64748b; margin-top: 8px;">
        Median: 12.5s &bull; Average: 30.2s
      </div>
    </div>

    <div class="chart-card" style="margin: 24px 0;">
      <div class="chart-title">Multi-Clauding (Parallel Sessions)</div>
      <div style="display: flex; gap: 24px; margin: 12px 0;">
          {badge("7", "Overlap Events")}
          {badge("3", "Sessions Involved")}
          {badge("15%", "Of Messages")}
        </div>
    </div>

    <div class="charts-row">
      <div class="chart-card">
        <div class="chart-title" style="display: flex; align-items: center; gap: 12px;">
          User Messages by Time of Day
          <select id="timezone-select"><option value="0">PT (UTC-8)</option></select>
          <input type="number" id="custom-offset" placeholder="UTC offset" style="display: none; width: 80px;">
        </div>
        <div id="hour-histogram">
      {bar_row("Morning (6-12)", 50.0, "#8b5cf6", 2)}</div>
      </div>
      {chart_card("Tool Errors Encountered", [bar_row("Command Failed", 100.0, "#dc2626", 3)])}
    </div>

    <h2 id="section-wins">Impressive Things You Did</h2>
    <p class="section-intro">You did a lot this month.</p>
    <div class="big-wins">
      <div class="big-win">
          <div class="big-win-title">Shipped the parser</div>
          <div class="big-win-desc">Rewrote it in a day.</div>
        </div>
      <div class="big-win">
          <div class="big-win-title">Fixed CI</div>
          <div class="big-win-desc">Green builds again.</div>
        </div>
    </div>

    <div class="charts-row">
      {chart_card("Outcomes", [])}
    </div>

    <h2 id="section-friction">Where Things Go Wrong</h2>
    <p class="section-intro">Some friction around tests.</p>
    <div class="friction-categories">
      <div class="friction-category">
          <div class="friction-title">Wrong Approach</div>
          <div class="friction-desc">Started in the wrong module.</div>
          <ul class="friction-examples"><li>Edited the generated file</li><li>Patched the test instead</li></ul>
        </div>
      <div class="friction-category">
          <div class="friction-title">Slow Response</div>
          <div class="friction-desc">Long waits.</div>
        </div>
    </div>

    <h2 id="section-features">Existing CC Features to Try</h2>
    <div class="features-section">
      <div class="feature-card">
          <div class="feature-title">Hooks</div>
          <div class="feature-oneliner">Run commands on events.</div>
          <div class="feature-why"><strong>Why for you:</strong> You lint by hand.</div>
        </div>
    </div>

    <h2 id="section-horizon">On the Horizon</h2>
    <p class="section-intro">Bigger things ahead.</p>
    <div class="horizon-section">
      <div class="horizon-card">
          <div class="horizon-title">Autonomous refactors</div>
          <div class="horizon-possible">Let agents sweep the codebase.</div>
          <div class="horizon-tip"><strong>Getting started:</strong> Start with one module.</div>
        </div>
    </div>

    <div class="fun-ending">
      <div class="fun-headline"><strong>1,234</strong> messages!</div>
      <div class="fun-detail">That is a lot of typing.</div>
    </div>
  </div>
  <script>
    const rawHourCounts = {{"0":1,"6":2,"12":3,"18":4}};
  </script>
</body>
</html>
"""


@pytest.fixture
def report_html() -> str:
    return SAMPLE_REPORT


@pytest.fixture
def en():
    return LOCALES["en"]


@pytest.fixture
def ko():
    return LOCALES["ko"]
