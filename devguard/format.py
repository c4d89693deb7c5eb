"""Terminal output formatting with box layout and width control."""

import shutil
import textwrap
from typing import List

import click

from .checks.base import Issue, Severity
from .report import FinalReport

_SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
    Severity.PASS: "green",
}


MAX_WIDTH = 72
MIN_WIDTH = 40


def _get_width() -> int:
    """Terminal width clamped to [MIN_WIDTH, MAX_WIDTH]."""
    columns = shutil.get_terminal_size((MAX_WIDTH, 24)).columns
    return max(MIN_WIDTH, min(MAX_WIDTH, columns))


def _wrap(text: str, indent: int, width: int, label: str = "") -> List[str]:
    """Wrap `label + text`; continuation lines start under the text, not the label."""
    first = " " * indent + label
    return textwrap.wrap(
        text,
        width=width,
        initial_indent=first,
        subsequent_indent=" " * len(first),
        break_on_hyphens=False,
    ) or [first.rstrip()]


def _score_color(score: int) -> str:
    if score >= 90:
        return "green"
    if score >= 75:
        return "yellow"
    return "red"


def _location(issue: Issue) -> str:
    if issue.file and issue.line is not None:
        return f" - {issue.file}:{issue.line}"
    if issue.file:
        return f" - {issue.file}"
    return ""


def _issue_lines(issue: Issue, width: int) -> List[str]:
    color = _SEVERITY_COLORS[issue.severity]
    head = f"[{issue.severity.value}] ({issue.category.value}) {issue.title}{_location(issue)}"
    lines = [click.style(ln, fg=color) for ln in _wrap(head, 2, width)]
    for ln in _wrap(issue.hint, 4, width, label="-> hint: "):
        lines.append(click.style(ln, dim=True))
    if issue.detail:
        for ln in _wrap(issue.detail, 4, width, label="details: "):
            lines.append(click.style(ln, dim=True))
    return lines


def _counts_line(report: FinalReport) -> str:
    c = report.counts
    return f" {c.critical} critical · {c.warning} warning · {c.info} info · {c.pass_} pass"


def format_human(report: FinalReport) -> str:
    """Build the human terminal output as a single string."""
    width = _get_width()
    lines = []

    lines.append("┌" + "─" * (width - 2) + "┐")
    lines.append(" devguard · repo health")
    lines.append("─" * width)
    score_str = f" Repo Health Score: {report.score}/100 ({report.label})"
    lines.append(click.style(score_str, fg=_score_color(report.score), bold=True))
    lines.append(click.style(_counts_line(report), dim=True))
    lines.append("─" * width)

    listed = False
    for severity in (Severity.CRITICAL, Severity.WARNING, Severity.INFO):
        grouped = [i for i in report.issues if i.severity == severity]
        if not grouped:
            continue
        listed = True
        header = f" {severity.value} ({len(grouped)})"
        lines.append(click.style(header, fg=_SEVERITY_COLORS[severity], bold=True))
        for issue in grouped:
            lines.extend(_issue_lines(issue, width))
    if not listed:
        lines.append(" No issues detected.")

    lines.append("─" * width)
    if report.exit.ok:
        lines.append(click.style(" exit: OK", fg="green"))
    else:
        for ln in _wrap(f"({report.exit.reason_line()})", 1, width, label="exit: FAILED "):
            lines.append(click.style(ln, fg="red"))
    lines.append("└" + "─" * (width - 2) + "┘")

    return "\n".join(lines)
