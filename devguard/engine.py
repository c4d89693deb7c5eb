"""Check engine: builds the snapshot, runs the checks for a profile and aggregates the report."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .checks import env_hygiene, git_health
from .checks.base import Issue, Severity
from .config import Config
from .logging import get_logger
from .models import RepoContext, RunProfile
from .providers import all_providers, get_provider
from .report import ConfigSummary, Counts, FinalReport, evaluate_exit
from .scanner import build_context, scan_secrets
from .score import calculate_score, label_for_score

log = get_logger("engine")


def dedupe_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Drop exact duplicates by identity; first occurrence wins."""
    seen: set[tuple] = set()
    out: list[Issue] = []
    for issue in issues:
        if issue.identity in seen:
            continue
        seen.add(issue.identity)
        out.append(issue)
    return out


def sort_key(issue: Issue) -> tuple:
    # Absent file/line sort before present ones.
    return (
        issue.severity.rank,
        issue.category.value,
        issue.file is not None,
        issue.file or "",
        issue.line is not None,
        issue.line or 0,
        issue.title,
    )


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    return sorted(issues, key=sort_key)


def run_provider_checks(ctx: RepoContext, config: Config) -> list[Issue]:
    """Every provider that is enabled and detected, concatenated."""
    issues: list[Issue] = []
    for provider in all_providers():
        if not provider.is_enabled(config):
            log.debug("provider %s disabled in config", provider.name)
            continue
        if not provider.detect(ctx):
            log.debug("provider %s not detected", provider.name)
            continue
        log.debug("running provider %s", provider.name)
        issues.extend(provider.run_checks(ctx, config))
    return issues


def run_verify(ctx: RepoContext, config: Config, name: str, force: bool) -> list[Issue]:
    """Run a single provider, or explain why it did not run."""
    provider = get_provider(name)
    if provider is None:
        raise ValueError(f"unknown provider: {name}")
    if not provider.is_enabled(config):
        return [Issue(
            severity=Severity.INFO,
            category=provider.category,
            title=f"{provider.name} provider disabled in config",
            hint=f"set [providers.{provider.name}].enabled = true to run {provider.name} checks",
        )]
    if not force and not provider.detect(ctx):
        return [Issue(
            severity=Severity.INFO,
            category=provider.category,
            title=f"{provider.name} not detected",
            hint=f"no {provider.name} project markers found (use --force to run anyway)",
        )]
    return provider.run_checks(ctx, config)


def collect_issues(ctx: RepoContext, config: Config, profile: RunProfile) -> list[Issue]:
    """Raw, unaggregated issues for a profile."""
    issues: list[Issue] = []
    if profile.kind in ("full", "secrets"):
        issues.extend(scan_secrets(ctx, config))
    if profile.kind in ("full", "env"):
        issues.extend(env_hygiene.check(ctx, config))
    if profile.kind in ("full", "git"):
        issues.extend(git_health.check(ctx, config))
    if profile.kind == "full":
        issues.extend(run_provider_checks(ctx, config))
    elif profile.kind == "verify":
        issues.extend(run_verify(ctx, config, profile.provider or "", profile.force))
    return issues


def build_report(issues: Iterable[Issue], config: Config) -> FinalReport:
    """Dedupe, sort, score and judge a set of issues."""
    final = sort_issues(dedupe_issues(issues))
    score = calculate_score(final)
    return FinalReport(
        score=score,
        label=label_for_score(score),
        counts=Counts.from_issues(final),
        issues=tuple(final),
        config=ConfigSummary(
            fail_on=config.general.fail_on,
            min_score=config.general.min_score,
        ),
        exit=evaluate_exit(score, final, config.general),
    )


def run(repo_root: str | Path, config: Config, profile: RunProfile | None = None) -> FinalReport:
    """
    Scan repo_root and return the final report.
    Raises FileNotFoundError / NotADirectoryError / OSError when the root is unusable.
    """
    profile = profile or RunProfile.full()
    ctx = build_context(repo_root, config)
    issues = collect_issues(ctx, config, profile)
    log.debug("%s run collected %d raw issues", profile.kind, len(issues))
    return build_report(issues, config)
