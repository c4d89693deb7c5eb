"""Vercel provider: env blocks in vercel.json, committed .vercel metadata."""

from __future__ import annotations

from typing import Optional

from ..checks.base import Category, Issue, Severity
from ..config import Config
from ..logging import get_logger
from ..models import RepoContext
from ..scanner.git import GitError
from ..scanner.parsers import contains_key, parse_json_file
from .base import Provider

log = get_logger("vercel")


class VercelProvider(Provider):
    name = "vercel"
    category = Category.VERCEL

    def is_enabled(self, config: Config) -> bool:
        return config.providers.vercel.enabled

    def detect(self, ctx: RepoContext) -> bool:
        return (
            (ctx.root / "vercel.json").is_file()
            or ctx.has_vercel_dir
            or ctx.package_json_contains('"vercel"')
        )

    def run_checks(self, ctx: RepoContext, config: Config) -> list[Issue]:
        issues: list[Issue] = []

        data = parse_json_file(ctx.root / "vercel.json")
        if data is not None and contains_key(data, "env"):
            issues.append(Issue(
                severity=Severity.INFO,
                category=Category.VERCEL,
                title="vercel.json contains env keys",
                hint="prefer Vercel dashboard environment variables instead of committed env fields",
                file="vercel.json",
            ))

        dot_vercel = ctx.root / ".vercel"
        if dot_vercel.exists():
            tracked = _tracked_under(ctx, ".vercel")
            if tracked is True:
                issues.append(Issue(
                    severity=Severity.WARNING,
                    category=Category.VERCEL,
                    title=".vercel directory appears tracked",
                    hint="remove .vercel from git and add it to .gitignore",
                    file=".vercel",
                ))
            elif tracked is None:
                issues.append(Issue(
                    severity=Severity.INFO,
                    category=Category.VERCEL,
                    title=".vercel directory exists locally",
                    hint="confirm .vercel is gitignored to avoid leaking local metadata",
                    file=".vercel",
                ))
        return issues


def _tracked_under(ctx: RepoContext, rel: str) -> Optional[bool]:
    """Whether git tracks anything under rel; None when unknown."""
    if ctx.git_repo is None:
        return None
    try:
        return ctx.git_repo.has_tracked_prefix(ctx.root / rel)
    except GitError as exc:
        log.debug("tracking status unknown for %s: %s", rel, exc)
        return None
