"""
insights-ui - Re-render a Claude Code Insights report as a localized dashboard.

Reads ``~/.claude/usage-data/report.html`` (as written by /insights),
extracts its numbers, charts and narrative into a plain data object, and
renders that object into a dark-mode dashboard template or an animated
video.
"""

__version__ = "0.1.0"
