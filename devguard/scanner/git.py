"""Git repository handle, a thin wrapper over the git CLI."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..logging import get_logger

log = get_logger("git")

GIT_TIMEOUT_SECONDS = 30


class GitError(RuntimeError):
    """A git command failed or git is unavailable."""


@dataclass(frozen=True)
class HeadState:
    branch: Optional[str]  # None when HEAD is detached

    @property
    def detached(self) -> bool:
        return self.branch is None


def _run_git(cwd: Path, *args: str) -> subprocess.CompletedProcess:
    """Run git in cwd. Raises GitError when the binary is missing or times out."""
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired, OSError) as exc:
        raise GitError(f"git {args[0]} failed: {exc}") from exc


def _check(result: subprocess.CompletedProcess, what: str) -> str:
    if result.returncode != 0:
        msg = (result.stderr or result.stdout or "").strip() or f"exit code {result.returncode}"
        raise GitError(f"{what}: {msg}")
    return result.stdout


@dataclass(frozen=True)
class GitRepo:
    """An enclosing git work tree discovered from some directory."""

    workdir: Path

    @classmethod
    def discover(cls, start: Path) -> Optional["GitRepo"]:
        """Walk upward from start to find a work tree. None if there is none or git is missing."""
        try:
            result = _run_git(start, "rev-parse", "--show-toplevel")
        except GitError as exc:
            log.debug("git unavailable: %s", exc)
            return None
        if result.returncode != 0 or not result.stdout.strip():
            log.debug("no git repository above %s", start)
            return None
        return cls(workdir=Path(result.stdout.strip()).resolve())

    def is_dirty(self) -> bool:
        """Modified, staged or untracked (non-ignored) files present."""
        out = _check(
            _run_git(self.workdir, "status", "--porcelain", "--untracked-files=all"),
            "failed to read git status",
        )
        return bool(out.strip())

    def head(self) -> HeadState:
        """Resolve HEAD. Raises GitError when it cannot be resolved (e.g. no commits yet)."""
        _check(
            _run_git(self.workdir, "rev-parse", "--verify", "HEAD"),
            "failed to resolve HEAD",
        )
        result = _run_git(self.workdir, "symbolic-ref", "--quiet", "--short", "HEAD")
        if result.returncode == 0 and result.stdout.strip():
            return HeadState(branch=result.stdout.strip())
        if result.returncode == 1:
            return HeadState(branch=None)
        _check(result, "failed to read HEAD reference")
        return HeadState(branch=None)

    def _relative(self, path: Path) -> Optional[str]:
        absolute = path if path.is_absolute() else self.workdir / path
        try:
            return absolute.relative_to(self.workdir).as_posix()
        except ValueError:
            return None

    def is_tracked(self, path: Path) -> bool:
        """True if path is in the index. Paths outside the work tree are never tracked."""
        rel = self._relative(path)
        if rel is None:
            return False
        out = _check(
            _run_git(self.workdir, "ls-files", "--cached", "-z", "--", rel),
            "failed to read git index",
        )
        return rel in out.split("\0")

    def has_tracked_prefix(self, prefix: Path) -> bool:
        """True if any indexed path is prefix itself or lives under it."""
        rel = self._relative(prefix)
        if rel is None:
            return False
        out = _check(
            _run_git(self.workdir, "ls-files", "--cached", "-z", "--", rel),
            "failed to read git index",
        )
        return any(entry for entry in out.split("\0"))
