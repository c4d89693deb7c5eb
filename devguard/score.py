"""Health score, deterministic and explainable."""

from .checks.base import Issue, Severity

# Penalty per finding; PASS never costs anything.
SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 30,
    Severity.WARNING: 15,
    Severity.INFO: 5,
    Severity.PASS: 0,
}

# (lower bound, label), highest first
LABELS = (
    (90, "Excellent"),
    (75, "Good"),
    (50, "Fair"),
)
FALLBACK_LABEL = "At Risk"


def calculate_score(issues: list[Issue]) -> int:
    """
    Score 0-100 from issue severities.
    Starts at 100, subtracts a fixed weight per issue, clamps to [0, 100].
    """
    penalty = sum(SEVERITY_WEIGHTS[issue.severity] for issue in issues)
    return max(0, min(100, 100 - penalty))


def label_for_score(score: int) -> str:
    for lower, label in LABELS:
        if score >= lower:
            return label
    return FALLBACK_LABEL
