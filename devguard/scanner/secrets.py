"""Secret scanner: regex detectors for credential-shaped strings in text files."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..checks.base import Category, Issue, Severity
from ..checks.custom_patterns import CustomPattern, load_custom_patterns
from ..config import Config
from ..logging import get_logger
from ..models import RepoContext
from .fs import iter_files, line_containing, line_number, read_text_file, relative_path

log = get_logger("secrets")


class SecretKind(str, Enum):
    STRIPE_LIVE = "stripe_live"
    STRIPE_TEST = "stripe_test"
    VERCEL_TOKEN = "vercel_token"
    AWS_ACCESS_KEY = "aws_access_key"
    PRIVATE_KEY_BLOCK = "private_key_block"
    SUPABASE_JWT = "supabase_jwt"


# Compiled once at import; shared read-only.
STRIPE_LIVE_RE = re.compile(r"sk_live_[0-9A-Za-z]{16,}")
STRIPE_TEST_RE = re.compile(r"sk_test_[0-9A-Za-z]{16,}")
VERCEL_ASSIGNMENT_RE = re.compile(r"""(?i)\bvercel_token\b\s*[:=]\s*["']?[A-Za-z0-9._-]{10,}""")
VERCEL_TOKEN_RE = re.compile(r"\bv1\.[A-Za-z0-9._-]{20,}\b")
VERCEL_MARKER_RE = re.compile(r"(?i)\bvercel[_-]?token\b")
AWS_ACCESS_KEY_RE = re.compile(r"\bAKIA[0-9A-Z]{16}\b")
PRIVATE_KEY_RE = re.compile(r"-----BEGIN (?:RSA|EC|OPENSSH|PRIVATE) KEY-----")
JWT_RE = re.compile(r"\beyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\b")

SUPABASE_MARKER = "supabase"
SERVICE_ROLE_MARKER = "service_role"
JWT_LINE_KEYWORDS = ("role", "key", "token", "url", "secret", "anon", "jwt")

# Plain detectors: every match is a hit.
_DIRECT_DETECTORS: Sequence[tuple[SecretKind, re.Pattern]] = (
    (SecretKind.STRIPE_LIVE, STRIPE_LIVE_RE),
    (SecretKind.STRIPE_TEST, STRIPE_TEST_RE),
    (SecretKind.AWS_ACCESS_KEY, AWS_ACCESS_KEY_RE),
    (SecretKind.PRIVATE_KEY_BLOCK, PRIVATE_KEY_RE),
    (SecretKind.VERCEL_TOKEN, VERCEL_ASSIGNMENT_RE),
)

TITLES = {
    SecretKind.STRIPE_LIVE: "Stripe live key pattern detected",
    SecretKind.STRIPE_TEST: "Stripe test key pattern detected",
    SecretKind.VERCEL_TOKEN: "Vercel token-like value detected",
    SecretKind.AWS_ACCESS_KEY: "AWS access key pattern detected",
    SecretKind.PRIVATE_KEY_BLOCK: "Private key block detected",
    SecretKind.SUPABASE_JWT: "Supabase JWT-like key detected",
}

HINTS = {
    SecretKind.STRIPE_LIVE: "rotate the key and move it to a secret manager or deployment env",
    SecretKind.STRIPE_TEST: "keep test keys in local env files and out of tracked files",
    SecretKind.VERCEL_TOKEN: "prefer Vercel dashboard env configuration instead of committed tokens",
    SecretKind.AWS_ACCESS_KEY: "revoke and rotate the key, then remove it from git history",
    SecretKind.PRIVATE_KEY_BLOCK: "remove private key material from source and rotate credentials",
    SecretKind.SUPABASE_JWT: "store Supabase JWT secrets in server-side env only",
}


def is_keyish_line(line: str) -> bool:
    """
    True if the line still names a credential after JWT literals are masked out.
    A JWT quoted in prose ("supabase docs example: eyJ...") has no such keyword left.
    """
    masked = JWT_RE.sub(" ", line).lower()
    return any(keyword in masked for keyword in JWT_LINE_KEYWORDS)


def scan_text_for_hits(content: str) -> list[tuple[SecretKind, int]]:
    """Run the built-in detectors over content. Returns (kind, line) pairs, unique per file."""
    hits: list[tuple[SecretKind, int]] = []
    seen: set[tuple[SecretKind, int]] = set()

    def add(kind: SecretKind, offset: int) -> None:
        key = (kind, line_number(content, offset))
        if key not in seen:
            seen.add(key)
            hits.append(key)

    for kind, regex in _DIRECT_DETECTORS:
        for m in regex.finditer(content):
            add(kind, m.start())

    if VERCEL_MARKER_RE.search(content):
        for m in VERCEL_TOKEN_RE.finditer(content):
            add(SecretKind.VERCEL_TOKEN, m.start())

    if SUPABASE_MARKER in content.lower():
        for m in JWT_RE.finditer(content):
            if is_keyish_line(line_containing(content, m.start())):
                add(SecretKind.SUPABASE_JWT, m.start())

    return hits


def scan_text_for_custom_hits(
    content: str, patterns: Iterable[CustomPattern]
) -> list[tuple[CustomPattern, int]]:
    """(pattern, line) pairs for repository-supplied patterns, unique per pattern id and line."""
    hits: list[tuple[CustomPattern, int]] = []
    seen: set[tuple[str, int]] = set()
    for pattern in patterns:
        for m in pattern.regex.finditer(content):
            line = line_number(content, m.start())
            if (pattern.id, line) in seen:
                continue
            seen.add((pattern.id, line))
            hits.append((pattern, line))
    return hits


def _severity_for(kind: SecretKind, content: str, config: Config) -> Severity:
    if kind is SecretKind.STRIPE_LIVE:
        stripe = config.providers.stripe
        return Severity.CRITICAL if stripe.enabled and stripe.warn_live_keys else Severity.WARNING
    if kind in (SecretKind.AWS_ACCESS_KEY, SecretKind.PRIVATE_KEY_BLOCK):
        return Severity.CRITICAL
    if kind is SecretKind.SUPABASE_JWT:
        return Severity.CRITICAL if SERVICE_ROLE_MARKER in content.lower() else Severity.WARNING
    return Severity.WARNING


def issue_for_hit(kind: SecretKind, line: int, file: str, content: str, config: Config) -> Issue:
    return Issue(
        severity=_severity_for(kind, content, config),
        category=Category.SECRETS,
        title=TITLES[kind],
        hint=HINTS[kind],
        file=file,
        line=line,
    )


def scan_secrets(
    ctx: RepoContext,
    config: Config,
    custom_patterns: Optional[Sequence[CustomPattern]] = None,
) -> list[Issue]:
    """Walk the repo and emit one Secrets issue per (kind, line, file) hit."""
    patterns_file = Path(config.scan.patterns_file).resolve() if config.scan.patterns_file else None
    if custom_patterns is None:
        custom_patterns = load_custom_patterns(patterns_file) if patterns_file else []
    max_bytes = config.scan.max_file_bytes
    issues: list[Issue] = []
    scanned = 0

    for path in iter_files(ctx.root, config.scan.exclude):
        if patterns_file is not None and path == patterns_file:
            continue
        content = read_text_file(path, max_bytes)
        if content is None:
            continue
        scanned += 1
        rel = relative_path(ctx.root, path)
        for kind, line in scan_text_for_hits(content):
            issues.append(issue_for_hit(kind, line, rel, content, config))
        for pattern, line in scan_text_for_custom_hits(content, custom_patterns):
            issues.append(Issue(
                severity=pattern.severity,
                category=Category.SECRETS,
                title=pattern.title,
                hint=pattern.hint,
                file=rel,
                line=line,
            ))

    log.debug("secret scan: %d text files, %d hits", scanned, len(issues))
    return issues
