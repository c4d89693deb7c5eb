"""Repo scanner: builds the RepoContext snapshot for one run."""

from __future__ import annotations

from pathlib import Path

from ..config import Config
from ..logging import get_logger
from ..models import DotenvVar, RepoContext
from .fs import relative_path
from .git import GitRepo
from .parsers import read_dotenv

log = get_logger("repo")


def _canonical_root(path: Path) -> Path:
    """Fail fast on a missing or non-directory path, then resolve symlinks."""
    if not path.exists():
        raise FileNotFoundError(f"path does not exist: {path}")
    if not path.is_dir():
        raise NotADirectoryError(f"path is not a directory: {path}")
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise OSError(f"failed to canonicalize {path}: {exc}") from exc


def _read_package_json(root: Path) -> str | None:
    try:
        return (root / "package.json").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def build_context(path: str | Path, config: Config) -> RepoContext:
    """Scan a repository root and return its read-only snapshot."""
    root = _canonical_root(Path(path))
    log.debug("building snapshot for %s", root)

    dotenv_vars: list[DotenvVar] = []
    dotenv_keys: set[str] = set()
    for name in config.env.dotenv_files:
        env_path = root / name
        entries = read_dotenv(env_path)
        if entries is None:
            continue
        rel = relative_path(root, env_path)
        for entry in entries:
            dotenv_keys.add(entry.key)
            dotenv_vars.append(DotenvVar(key=entry.key, value=entry.value, file=rel, line=entry.line))

    git_repo = GitRepo.discover(root)
    if git_repo is None:
        log.debug("no git repository found for %s", root)

    return RepoContext(
        root=root,
        package_json=_read_package_json(root),
        dotenv_vars=tuple(dotenv_vars),
        dotenv_keys=frozenset(dotenv_keys),
        git_repo=git_repo,
        has_supabase_dir=(root / "supabase").is_dir(),
        has_vercel_dir=(root / ".vercel").is_dir(),
    )
