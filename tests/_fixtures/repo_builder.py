"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import os
import shutil
import subprocess
import textwrap
from pathlib import Path
from typing import Mapping

import pytest

from devguard.config import Config
from devguard.models import RepoContext
from devguard.scanner import build_context

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


class RepoBuilder:
    """Utility for writing files into a throwaway repository and snapshotting it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def git(self, *args: str) -> str:
        env = {
            **os.environ,
            "GIT_AUTHOR_NAME": "devguard",
            "GIT_AUTHOR_EMAIL": "devguard@example.com",
            "GIT_COMMITTER_NAME": "devguard",
            "GIT_COMMITTER_EMAIL": "devguard@example.com",
        }
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=self.root,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def init_git(self) -> None:
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")

    def commit_all(self, message: str = "init") -> None:
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)

    def context(self, config: Config | None = None) -> RepoContext:
        """Return a fresh snapshot of the repository contents."""
        return build_context(self.root, config or Config())

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["RepoBuilder", "requires_git"]
