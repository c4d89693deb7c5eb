"""Load extra secret patterns from the YAML file named by `scan.patterns_file`."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import ConfigError
from ..logging import get_logger
from .base import Severity

log = get_logger("custom_patterns")

_SEVERITIES = {
    "critical": Severity.CRITICAL,
    "warning": Severity.WARNING,
    "info": Severity.INFO,
}
DEFAULT_HINT = "remove the matched value from source and rotate it if it is a credential"


@dataclass(frozen=True)
class CustomPattern:
    """An operator-supplied regex detector."""

    id: str
    regex: re.Pattern
    severity: Severity
    title: str
    hint: str


def _load_entries(path: Path) -> list[Any]:
    """Raw pattern entries. The file is operator config, so problems with it are fatal."""
    if not path.is_file():
        raise ConfigError(f"patterns file not found at {path} (scan.patterns_file)")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed parsing patterns file {path}: {exc}") from exc
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("patterns"), list):
        return data["patterns"]
    raise ConfigError(f"failed parsing patterns file {path}: expected a list of patterns")


def _compile(entry: Any) -> CustomPattern | None:
    if not isinstance(entry, dict) or not entry.get("id") or not entry.get("pattern"):
        log.warning("skipping custom pattern without id or pattern: %r", entry)
        return None
    pattern_id = str(entry["id"])
    try:
        regex = re.compile(str(entry["pattern"]))
    except re.error as exc:
        log.warning("skipping custom pattern %s: invalid regex: %s", pattern_id, exc)
        return None
    # An empty match would flag every line of every file.
    if regex.search("") is not None:
        log.warning("skipping custom pattern %s: it matches the empty string", pattern_id)
        return None

    sev = str(entry.get("severity", "warning")).lower()
    severity = _SEVERITIES.get(sev)
    if severity is None:
        log.warning("custom pattern %s: unknown severity %r, using warning", pattern_id, sev)
        severity = Severity.WARNING
    return CustomPattern(
        id=pattern_id,
        regex=regex,
        severity=severity,
        title=str(entry.get("title") or f"custom pattern {pattern_id} matched")[:200],
        hint=str(entry.get("hint") or DEFAULT_HINT),
    )


def load_custom_patterns(path: Path) -> list[CustomPattern]:
    """
    Compile the valid entries of a patterns file.
    Entries without an id or pattern, with an invalid regex, or matching the
    empty string are logged and skipped. A missing or malformed file raises ConfigError.
    """
    patterns = []
    for entry in _load_entries(path):
        pattern = _compile(entry)
        if pattern is not None:
            patterns.append(pattern)
    log.debug("loaded %d custom patterns from %s", len(patterns), path)
    return patterns
