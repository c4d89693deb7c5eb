"""Final report: counts, exit verdict and JSON shape."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable

from .checks.base import Issue, Severity
from .config import GeneralConfig


@dataclass(frozen=True)
class Counts:
    critical: int = 0
    warning: int = 0
    info: int = 0
    pass_: int = 0
    total: int = 0

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> "Counts":
        issues = list(issues)
        by_sev = {sev: 0 for sev in Severity}
        for issue in issues:
            by_sev[issue.severity] += 1
        return cls(
            critical=by_sev[Severity.CRITICAL],
            warning=by_sev[Severity.WARNING],
            info=by_sev[Severity.INFO],
            pass_=by_sev[Severity.PASS],
            total=len(issues),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "warning": self.warning,
            "info": self.info,
            "pass": self.pass_,
            "total": self.total,
        }


@dataclass(frozen=True)
class ExitStatus:
    ok: bool
    reasons: tuple[str, ...] = ()

    def reason_line(self) -> str:
        return "; ".join(self.reasons)


@dataclass(frozen=True)
class ConfigSummary:
    fail_on: str
    min_score: int

    def to_dict(self) -> dict[str, Any]:
        return {"fail_on": self.fail_on, "min_score": self.min_score}


@dataclass(frozen=True)
class FinalReport:
    """Sole output of a run. Holds no reference to the repository snapshot."""

    score: int
    label: str
    counts: Counts
    issues: tuple[Issue, ...]
    config: ConfigSummary
    exit: ExitStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label,
            "counts": self.counts.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "config": self.config.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def evaluate_exit(score: int, issues: Iterable[Issue], general: GeneralConfig) -> ExitStatus:
    """Fail on low score and/or fail_on policy. Reasons accumulate."""
    reasons: list[str] = []
    if score < general.min_score:
        reasons.append(f"score {score} is below min_score {general.min_score}")

    if general.fail_on != "none" and any(i.severity.meets_fail_on(general.fail_on) for i in issues):
        if general.fail_on == "warning":
            reasons.append("found warning-or-higher issues")
        else:
            reasons.append("found critical issues")

    return ExitStatus(ok=not reasons, reasons=tuple(reasons))
