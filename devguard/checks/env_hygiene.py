"""Check: required env vars, dotenv/example drift, forbidden env files in git."""

from __future__ import annotations

from ..config import Config
from ..models import RepoContext
from ..scanner.fs import iter_files, relative_path
from ..scanner.parsers import read_dotenv
from .base import Category, Issue, Severity


def check_required_keys(ctx: RepoContext, config: Config) -> list[Issue]:
    return [
        Issue(
            severity=Severity.WARNING,
            category=Category.ENV,
            title=f"missing required env var {key}",
            hint=f"add {key} to local dotenv files and CI environment settings",
        )
        for key in config.env.required
        if not ctx.has_env_key(key)
    ]


def collect_example_keys(ctx: RepoContext, config: Config) -> tuple[set[str], bool]:
    """Keys from example/template env files, and whether any such file exists."""
    keys: set[str] = set()
    found_any = False
    for name in config.env.example_files:
        path = ctx.root / name
        if not path.is_file():
            continue
        found_any = True
        entries = read_dotenv(path)
        for entry in entries or ():
            keys.add(entry.key)
    return keys, found_any


def check_example_drift(ctx: RepoContext, config: Config) -> list[Issue]:
    """Symmetric difference between dotenv keys and example keys. Skipped without example files."""
    example_keys, has_examples = collect_example_keys(ctx, config)
    if not has_examples:
        return []

    env_keys = set(ctx.dotenv_keys)
    issues: list[Issue] = []
    for key in sorted(env_keys - example_keys):
        issues.append(Issue(
            severity=Severity.WARNING,
            category=Category.ENV,
            title=f"env example missing key {key}",
            hint="add this key to .env.example or .env.template",
            detail="the key exists in dotenv files but not in example files",
        ))
    for key in sorted(example_keys - env_keys):
        issues.append(Issue(
            severity=Severity.WARNING,
            category=Category.ENV,
            title=f"example file contains key {key} not found in dotenv files",
            hint="either add this key to active dotenv files or remove stale example entries",
            detail="keeping example files aligned avoids onboarding and CI drift",
        ))
    return issues


def check_forbidden_files(ctx: RepoContext, config: Config) -> list[Issue]:
    """
    Forbidden env files anywhere in the tree.
    Unknown tracking status is reported as Critical: it may be committed.
    """
    forbidden = {name.lower() for name in config.env.forbid_commit}
    if not forbidden:
        return []

    issues: list[Issue] = []
    for path in iter_files(ctx.root, config.scan.exclude):
        if path.name.lower() not in forbidden or not path.is_file() or path.is_symlink():
            continue
        rel = relative_path(ctx.root, path)
        tracked = ctx.tracked_status(path)
        if tracked is True:
            issues.append(Issue(
                severity=Severity.CRITICAL,
                category=Category.ENV,
                title="forbidden env file appears tracked",
                hint="remove it from git index and add the path to .gitignore",
                file=rel,
            ))
        elif tracked is None:
            issues.append(Issue(
                severity=Severity.CRITICAL,
                category=Category.ENV,
                title="forbidden env file exists",
                hint="remove this file or secure it before sharing the repository",
                detail="git tracking status could not be verified",
                file=rel,
            ))
    return issues


def check(ctx: RepoContext, config: Config) -> list[Issue]:
    """Run every env hygiene check."""
    return [
        *check_required_keys(ctx, config),
        *check_example_drift(ctx, config),
        *check_forbidden_files(ctx, config),
    ]
