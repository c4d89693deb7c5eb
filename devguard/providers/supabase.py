"""Supabase provider: migrations, service-role leaks in client code, required env vars."""

from __future__ import annotations

import re

from ..checks.base import Category, Issue, Severity
from ..config import Config
from ..models import RepoContext
from ..scanner.fs import iter_files, line_number, read_text_file, relative_path
from .base import Provider

SERVICE_ROLE_RE = re.compile(
    r"(?i)\b(service_role|SUPABASE_SERVICE_ROLE_KEY|SUPABASE_SERVICE_ROLE)\b"
)
CLIENT_ROOTS = ("src", "app", "pages")
REQUIRED_KEYS = ("SUPABASE_URL", "SUPABASE_ANON_KEY")


class SupabaseProvider(Provider):
    name = "supabase"
    category = Category.SUPABASE

    def is_enabled(self, config: Config) -> bool:
        return config.providers.supabase.enabled

    def detect(self, ctx: RepoContext) -> bool:
        return (
            (ctx.root / "supabase" / "config.toml").exists()
            or ctx.has_supabase_dir
            or ctx.package_json_contains("@supabase/supabase-js")
        )

    def run_checks(self, ctx: RepoContext, config: Config) -> list[Issue]:
        settings = config.providers.supabase
        issues: list[Issue] = []
        if settings.require_migrations:
            issues.extend(_check_migrations(ctx, config))
        if settings.forbid_service_role_in_client:
            issues.extend(_scan_client_for_service_role(ctx, config))
        for key in REQUIRED_KEYS:
            if key in config.env.required and not ctx.has_env_key(key):
                issues.append(Issue(
                    severity=Severity.WARNING,
                    category=Category.SUPABASE,
                    title=f"missing required Supabase env var {key}",
                    hint=f"add {key} to local env files and CI",
                    detail="provider check expected this key because it is listed in env.required",
                ))
        return issues


def _check_migrations(ctx: RepoContext, config: Config) -> list[Issue]:
    migrations_dir = config.providers.supabase.migrations_dir
    path = ctx.root / migrations_dir
    if not path.is_dir():
        return [Issue(
            severity=Severity.WARNING,
            category=Category.SUPABASE,
            title="missing migrations directory",
            hint=f"create {migrations_dir} and commit SQL migration files",
            detail="this helps keep schema changes reproducible",
        )]
    has_sql = any(p.suffix.lower() == ".sql" and p.is_file() for p in iter_files(path))
    if has_sql:
        return []
    return [Issue(
        severity=Severity.WARNING,
        category=Category.SUPABASE,
        title="no SQL migration files found",
        hint="add at least one .sql migration file",
        file=relative_path(ctx.root, path),
    )]


def _scan_client_for_service_role(ctx: RepoContext, config: Config) -> list[Issue]:
    """
    One Critical per unique (file, line) that references the service role.
    Client roots are walked in full; scan.exclude does not apply here.
    """
    issues: list[Issue] = []
    seen: set[tuple[str, int]] = set()
    for client_root in CLIENT_ROOTS:
        base = ctx.root / client_root
        if not base.is_dir():
            continue
        for path in iter_files(base):
            content = read_text_file(path, config.scan.max_file_bytes)
            if content is None:
                continue
            rel = relative_path(ctx.root, path)
            for m in SERVICE_ROLE_RE.finditer(content):
                line = line_number(content, m.start())
                if (rel, line) in seen:
                    continue
                seen.add((rel, line))
                issues.append(Issue(
                    severity=Severity.CRITICAL,
                    category=Category.SUPABASE,
                    title="service role reference found in client code",
                    hint="remove service role access from client bundles and use a secure backend endpoint",
                    file=rel,
                    line=line,
                ))
    return issues
