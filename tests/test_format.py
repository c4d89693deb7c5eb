"""Tests for the human renderer."""

from devguard.checks.base import Category, Issue, Severity
from devguard.config import Config
from devguard.engine import build_report
from devguard.format import _wrap, format_human


def test_wrap_hangs_continuation_under_text():
    lines = _wrap("alpha beta gamma delta epsilon", 4, 30, label="-> hint: ")
    assert lines[0].startswith("    -> hint: alpha")
    assert len(lines) > 1
    assert all(ln.startswith(" " * 13) and not ln[13].isspace() for ln in lines[1:])
    assert all(len(ln) <= 30 for ln in lines)


def test_wrap_empty_text_keeps_label():
    assert _wrap("", 1, 40, label="exit: FAILED ") == [" exit: FAILED"]


def test_format_human_lists_hint_and_detail_but_not_pass():
    issues = [
        Issue(
            severity=Severity.INFO,
            category=Category.GIT,
            title="unable to read git status",
            hint="run `git status` manually to inspect repository state",
            detail="failed to read git status: index locked",
        ),
        Issue(severity=Severity.PASS, category=Category.GIT, title="current branch: main", hint="no action needed"),
    ]
    out = format_human(build_report(issues, Config()))
    assert "Repo Health Score: 95/100 (Excellent)" in out
    assert "[INFO] (Git) unable to read git status" in out
    assert "-> hint: run `git status`" in out
    assert "details: failed to read git status" in out
    assert "current branch: main" not in out
    assert "exit: OK" in out
