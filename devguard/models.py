"""Structured snapshot of a repository and the run profile."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .logging import get_logger

if TYPE_CHECKING:
    from .scanner.git import GitRepo

log = get_logger("models")


@dataclass(frozen=True)
class DotenvVar:
    """One KEY=value pair from a dotenv file."""

    key: str
    value: str
    file: str  # root-relative
    line: int


@dataclass(frozen=True)
class RepoContext:
    """Read-only facts about the repository, built once per run."""

    root: Path  # canonical
    package_json: Optional[str] = None
    dotenv_vars: tuple[DotenvVar, ...] = ()
    dotenv_keys: frozenset[str] = frozenset()
    git_repo: Optional["GitRepo"] = None
    has_supabase_dir: bool = False
    has_vercel_dir: bool = False

    def package_json_contains(self, needle: str) -> bool:
        return self.package_json is not None and needle in self.package_json

    def has_env_key(self, key: str) -> bool:
        """Key set in any parsed dotenv file or in the process environment."""
        return key in self.dotenv_keys or key in os.environ

    def tracked_status(self, path: Path) -> Optional[bool]:
        """
        Whether git tracks path: True / False, or None when there is no
        repository or the lookup failed. Callers must not treat None as False.
        """
        if self.git_repo is None:
            return None
        absolute = path if path.is_absolute() else self.root / path
        from .scanner.git import GitError

        try:
            return self.git_repo.is_tracked(absolute)
        except GitError as exc:
            log.debug("tracking status unknown for %s: %s", path, exc)
            return None


@dataclass(frozen=True)
class RunProfile:
    """Which check groups a run executes."""

    kind: str  # full | secrets | env | git | verify
    provider: Optional[str] = None  # for kind == "verify"
    force: bool = False

    @classmethod
    def full(cls) -> "RunProfile":
        return cls("full")

    @classmethod
    def secrets_only(cls) -> "RunProfile":
        return cls("secrets")

    @classmethod
    def env_only(cls) -> "RunProfile":
        return cls("env")

    @classmethod
    def git_only(cls) -> "RunProfile":
        return cls("git")

    @classmethod
    def verify(cls, provider: str, force: bool = False) -> "RunProfile":
        return cls("verify", provider=provider, force=force)
