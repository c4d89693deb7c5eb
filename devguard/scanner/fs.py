"""Filesystem helpers for walking the tree, bounded text reads and line numbers."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..logging import get_logger

log = get_logger("fs")

BINARY_SAMPLE_BYTES = 8192


def iter_files(root: Path, exclude: Iterable[str] = ()) -> Iterator[Path]:
    """
    Yield every file under root in a stable order.
    Directories whose name matches an exclude entry (case-insensitive) are pruned
    at every depth. Symlinked directories are not followed.
    """
    excluded = {name.lower() for name in exclude}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d.lower() not in excluded)
        for name in sorted(filenames):
            yield Path(dirpath) / name


def regular_file_size(path: Path) -> Optional[int]:
    """Size of a regular file (not a symlink), or None."""
    try:
        st = path.lstat()
    except OSError:
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return st.st_size


def is_likely_binary(data: bytes) -> bool:
    """A null byte in the first 8 KiB marks the content as binary."""
    return b"\0" in data[:BINARY_SAMPLE_BYTES]


def read_text_file(path: Path, max_bytes: int) -> Optional[str]:
    """
    Read a regular text file up to max_bytes.
    Returns None for non-regular, oversized, unreadable or binary files.
    """
    size = regular_file_size(path)
    if size is None or size > max_bytes:
        return None
    try:
        data = path.read_bytes()
    except OSError as exc:
        log.debug("skipping unreadable file %s: %s", path, exc)
        return None
    if is_likely_binary(data):
        return None
    return data.decode("utf-8", errors="replace")


def relative_path(root: Path, path: Path) -> str:
    """Root-relative path with forward slashes; the path itself if outside root."""
    try:
        rel = path.relative_to(root)
    except ValueError:
        rel = path
    return str(rel).replace("\\", "/")


def line_number(text: str, offset: int) -> int:
    """1-based line of a character offset. O(offset); fine under the file size cap."""
    return text.count("\n", 0, offset) + 1


def line_containing(text: str, offset: int) -> str:
    """Full text of the line holding offset, without its line terminator."""
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end == -1:
        end = len(text)
    return text[start:end].rstrip("\r")
