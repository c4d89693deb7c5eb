"""Tests for Supabase, Vercel and Stripe providers."""

from devguard.checks.base import Category, Severity
from devguard.config import Config
from devguard.providers import all_providers, get_provider
from devguard.providers.stripe import StripeProvider
from devguard.providers.supabase import SupabaseProvider
from devguard.providers.vercel import VercelProvider
from devguard.scanner.git import GitError, GitRepo
from tests._fixtures.repo_builder import requires_git

LIVE_KEY = "sk_live_" + "a1B2c3D4" * 3
TEST_KEY = "sk_test_" + "a1B2c3D4" * 3


def test_registry_order_and_lookup():
    assert [p.name for p in all_providers()] == ["supabase", "vercel", "stripe"]
    assert isinstance(get_provider("Vercel"), VercelProvider)
    assert get_provider("heroku") is None


def test_supabase_detection(repo_builder):
    provider = SupabaseProvider()
    assert not provider.detect(repo_builder.context())
    repo_builder.write({"package.json": '{"dependencies": {"@supabase/supabase-js": "^2"}}'})
    assert provider.detect(repo_builder.context())


def test_supabase_missing_migrations_dir(repo_builder):
    repo_builder.write({"supabase/config.toml": "project_id = 'x'\n"})
    config = Config()
    issues = SupabaseProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.category, i.title) for i in issues] == [
        (Severity.WARNING, Category.SUPABASE, "missing migrations directory"),
    ]


def test_supabase_migrations_without_sql(repo_builder):
    repo_builder.write({"supabase/migrations/README.md": "todo\n"})
    config = Config()
    issues = SupabaseProvider().run_checks(repo_builder.context(config), config)
    assert [(i.title, i.file) for i in issues] == [
        ("no SQL migration files found", "supabase/migrations"),
    ]


def test_supabase_migrations_with_sql(repo_builder):
    repo_builder.write({"supabase/migrations/20240101_init.sql": "create table t (id int);\n"})
    config = Config()
    assert SupabaseProvider().run_checks(repo_builder.context(config), config) == []


def test_supabase_migration_check_can_be_disabled(repo_builder):
    config = Config()
    config.providers.supabase.require_migrations = False
    assert SupabaseProvider().run_checks(repo_builder.context(config), config) == []


def test_supabase_service_role_in_client_code(repo_builder):
    repo_builder.write({
        "supabase/migrations/001.sql": "select 1;\n",
        "src/lib/client.ts": (
            "import { createClient } from '@supabase/supabase-js'\n"
            "const key = process.env.SUPABASE_SERVICE_ROLE_KEY // service_role\n"
        ),
        "server/admin.ts": "const key = process.env.SUPABASE_SERVICE_ROLE_KEY\n",
    })
    config = Config()
    issues = SupabaseProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.title, i.file, i.line) for i in issues] == [
        (Severity.CRITICAL, "service role reference found in client code", "src/lib/client.ts", 2),
    ]


def test_supabase_required_keys_only_when_configured(repo_builder):
    repo_builder.write({"supabase/migrations/001.sql": "select 1;\n"})
    config = Config()
    assert SupabaseProvider().run_checks(repo_builder.context(config), config) == []

    config.env.required = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
    repo_builder.write({".env": "SUPABASE_URL=https://x.supabase.co\n"})
    issues = SupabaseProvider().run_checks(repo_builder.context(config), config)
    assert [i.title for i in issues] == ["missing required Supabase env var SUPABASE_ANON_KEY"]


def test_vercel_json_env_is_info(repo_builder):
    repo_builder.write({"vercel.json": '{"build": {"env": {"API_URL": "https://x"}}}'})
    config = Config()
    provider = VercelProvider()
    ctx = repo_builder.context(config)
    assert provider.detect(ctx)
    assert [(i.severity, i.title, i.file) for i in provider.run_checks(ctx, config)] == [
        (Severity.INFO, "vercel.json contains env keys", "vercel.json"),
    ]


def test_vercel_dir_without_repo_is_info(repo_builder):
    repo_builder.write({".vercel/project.json": "{}"})
    config = Config()
    issues = VercelProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.title, i.file) for i in issues] == [
        (Severity.INFO, ".vercel directory exists locally", ".vercel"),
    ]


@requires_git
def test_vercel_dir_tracked_is_warning(repo_builder):
    repo_builder.init_git()
    repo_builder.write({".vercel/project.json": "{}"})
    repo_builder.commit_all()
    config = Config()
    issues = VercelProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.title) for i in issues] == [
        (Severity.WARNING, ".vercel directory appears tracked"),
    ]


@requires_git
def test_vercel_dir_untracked_is_silent(repo_builder):
    repo_builder.init_git()
    repo_builder.write({".gitignore": ".vercel\n", ".vercel/project.json": "{}"})
    config = Config()
    assert VercelProvider().run_checks(repo_builder.context(config), config) == []


def test_stripe_detection_by_env(repo_builder, monkeypatch):
    provider = StripeProvider()
    assert not provider.detect(repo_builder.context())
    monkeypatch.setenv("STRIPE_SECRET_KEY", "x")
    assert provider.detect(repo_builder.context())


def test_stripe_live_test_and_mixed(repo_builder):
    repo_builder.write({
        ".env": f"STRIPE_SECRET_KEY={LIVE_KEY}\n",
        ".env.local": f"# local\nSTRIPE_SECRET_KEY={TEST_KEY}\n",
    })
    config = Config()
    issues = StripeProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.title, i.file, i.line) for i in issues] == [
        (Severity.CRITICAL, "live Stripe key found in dotenv file", ".env", 1),
        (Severity.WARNING, "test Stripe key found in dotenv file", ".env.local", 2),
        (Severity.WARNING, "mixed Stripe modes detected", None, None),
    ]


def test_stripe_live_key_warning_when_live_warnings_disabled(repo_builder):
    repo_builder.write({".env": f"STRIPE_SECRET_KEY={LIVE_KEY}\n"})
    config = Config()
    config.providers.stripe.warn_live_keys = False
    issues = StripeProvider().run_checks(repo_builder.context(config), config)
    assert [i.severity for i in issues] == [Severity.WARNING]


@requires_git
def test_vercel_dir_lookup_failure_is_info(repo_builder, monkeypatch):
    def fail(self, prefix):
        raise GitError("failed to read git index: boom")

    repo_builder.init_git()
    repo_builder.write({".vercel/project.json": "{}"})
    repo_builder.commit_all()
    monkeypatch.setattr(GitRepo, "has_tracked_prefix", fail)
    config = Config()
    issues = VercelProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.title, i.file) for i in issues] == [
        (Severity.INFO, ".vercel directory exists locally", ".vercel"),
    ]


def test_supabase_client_scan_ignores_scan_exclude(repo_builder):
    """Build output under a client root is still read."""
    repo_builder.write({
        "supabase/migrations/001.sql": "select 1;\n",
        "src/build/bundle.js": "const k = 'service_role'\n",
        "app/node_modules/lib/index.js": "SUPABASE_SERVICE_ROLE_KEY\n",
    })
    config = Config()
    issues = SupabaseProvider().run_checks(repo_builder.context(config), config)
    assert [(i.severity, i.file, i.line) for i in issues] == [
        (Severity.CRITICAL, "src/build/bundle.js", 1),
        (Severity.CRITICAL, "app/node_modules/lib/index.js", 1),
    ]
