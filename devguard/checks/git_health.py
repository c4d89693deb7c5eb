"""Check: git working tree, HEAD state, oversized files."""

from __future__ import annotations

from ..config import Config
from ..models import RepoContext
from ..scanner.fs import iter_files, regular_file_size, relative_path
from ..scanner.git import GitError, GitRepo
from .base import Category, Issue, Severity

LARGE_FILE_BYTES = 5 * 1024 * 1024


def check_working_tree(repo: GitRepo) -> Issue:
    try:
        dirty = repo.is_dirty()
    except GitError as exc:
        return Issue(
            severity=Severity.INFO,
            category=Category.GIT,
            title="unable to read git status",
            hint="run `git status` manually to inspect repository state",
            detail=str(exc),
        )
    if dirty:
        return Issue(
            severity=Severity.INFO,
            category=Category.GIT,
            title="working tree has changes",
            hint="commit or stash changes before running release checks",
            detail="modified or untracked files were detected",
        )
    return Issue(
        severity=Severity.PASS,
        category=Category.GIT,
        title="working tree is clean",
        hint="no action needed",
    )


def check_head(repo: GitRepo) -> Issue:
    try:
        head = repo.head()
    except GitError as exc:
        return Issue(
            severity=Severity.INFO,
            category=Category.GIT,
            title="unable to resolve HEAD",
            hint="run `git rev-parse --abbrev-ref HEAD` manually",
            detail=str(exc),
        )
    if head.detached:
        return Issue(
            severity=Severity.WARNING,
            category=Category.GIT,
            title="detached HEAD state",
            hint="check out a branch before regular development or release work",
        )
    return Issue(
        severity=Severity.PASS,
        category=Category.GIT,
        title=f"current branch: {head.branch}",
        hint="no action needed",
        detail="head points to a named branch",
    )


def check_large_files(ctx: RepoContext, config: Config) -> list[Issue]:
    issues: list[Issue] = []
    for path in iter_files(ctx.root, config.scan.exclude):
        size = regular_file_size(path)
        if size is None or size <= LARGE_FILE_BYTES:
            continue
        issues.append(Issue(
            severity=Severity.WARNING,
            category=Category.GIT,
            title="large file detected (>5MB)",
            hint="consider git-lfs or artifact storage for large files",
            detail=f"size: {size / (1024 * 1024):.2f} MB",
            file=relative_path(ctx.root, path),
        ))
    return issues


def check(ctx: RepoContext, config: Config) -> list[Issue]:
    """Git hygiene. Without a repository this is a single Info notice."""
    if ctx.git_repo is None:
        return [Issue(
            severity=Severity.INFO,
            category=Category.GIT,
            title="not a git repo",
            hint="initialize git to enable repository hygiene checks",
        )]
    return [
        check_working_tree(ctx.git_repo),
        check_head(ctx.git_repo),
        *check_large_files(ctx, config),
    ]
