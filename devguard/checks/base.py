"""Base types for checks: severity, category, issue."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"
    PASS = "PASS"

    @property
    def rank(self) -> int:
        """Sort rank: CRITICAL first, PASS last."""
        return _SEVERITY_RANK[self]

    def meets_fail_on(self, fail_on: str) -> bool:
        """True if this severity trips the fail_on policy (warning | error | none)."""
        if fail_on == "warning":
            return self in (Severity.CRITICAL, Severity.WARNING)
        if fail_on == "error":
            return self is Severity.CRITICAL
        return False


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
    Severity.PASS: 3,
}


class Category(str, Enum):
    SECRETS = "Secrets"
    ENV = "Env"
    GIT = "Git"
    SUPABASE = "Supabase"
    VERCEL = "Vercel"
    STRIPE = "Stripe"


@dataclass(frozen=True)
class Issue:
    """One normalized finding."""

    severity: Severity
    category: Category
    title: str  # short and stable; part of the identity key
    hint: str
    detail: Optional[str] = None
    file: Optional[str] = None  # root-relative, forward slashes
    line: Optional[int] = None  # 1-based

    @property
    def identity(self) -> tuple:
        """Dedup key; detail and hint are not part of it."""
        return (self.severity, self.category, self.title, self.file, self.line)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "severity": self.severity.value,
            "category": self.category.value,
            "title": self.title,
        }
        if self.detail is not None:
            out["detail"] = self.detail
        if self.file is not None:
            out["file"] = self.file
        if self.line is not None:
            out["line"] = self.line
        out["hint"] = self.hint
        return out
