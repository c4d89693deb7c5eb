"""Parsers for dotenv and JSON config files."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..logging import get_logger

log = get_logger("parsers")


@dataclass(frozen=True)
class DotenvEntry:
    key: str
    value: str
    line: int  # 1-based


def parse_dotenv(content: str) -> list[DotenvEntry]:
    """Parse KEY=value lines. Comments, blank lines and lines without '=' or a key are skipped."""
    entries: list[DotenvEntry] = []
    for idx, raw in enumerate(content.split("\n"), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue
        entries.append(DotenvEntry(key=key, value=_strip_quotes(value.strip()), line=idx))
    return entries


def _strip_quotes(value: str) -> str:
    """Strip one layer of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def read_dotenv(path: Path) -> Optional[list[DotenvEntry]]:
    """Parse a dotenv file; None if it is missing or unreadable as text."""
    if not path.is_file():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.debug("skipping unreadable dotenv file %s: %s", path, exc)
        return None
    return parse_dotenv(content)


def parse_json_file(path: Path) -> Optional[Any]:
    """Load a JSON file; None if missing, unreadable or invalid."""
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        log.debug("ignoring unparsable JSON file %s: %s", path, exc)
        return None


def contains_key(value: Any, key: str) -> bool:
    """True if any nested object (dict) in value has key."""
    if isinstance(value, dict):
        if key in value:
            return True
        return any(contains_key(child, key) for child in value.values())
    if isinstance(value, list):
        return any(contains_key(child, key) for child in value)
    return False
