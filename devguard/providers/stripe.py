"""Stripe provider: live/test secret keys in dotenv assignments."""

from __future__ import annotations

from ..checks.base import Category, Issue, Severity
from ..config import Config
from ..models import RepoContext
from ..scanner.secrets import STRIPE_LIVE_RE, STRIPE_TEST_RE
from .base import Provider


class StripeProvider(Provider):
    name = "stripe"
    category = Category.STRIPE

    def is_enabled(self, config: Config) -> bool:
        return config.providers.stripe.enabled

    def detect(self, ctx: RepoContext) -> bool:
        return (
            ctx.package_json_contains('"stripe"')
            or ctx.has_env_key("STRIPE_SECRET_KEY")
            or ctx.has_env_key("STRIPE_PUBLISHABLE_KEY")
        )

    def run_checks(self, ctx: RepoContext, config: Config) -> list[Issue]:
        live_severity = (
            Severity.CRITICAL if config.providers.stripe.warn_live_keys else Severity.WARNING
        )
        issues: list[Issue] = []
        found_live = found_test = False

        for var in ctx.dotenv_vars:
            if STRIPE_LIVE_RE.search(var.value):
                found_live = True
                issues.append(Issue(
                    severity=live_severity,
                    category=Category.STRIPE,
                    title="live Stripe key found in dotenv file",
                    hint="move live keys to deployment secrets and rotate exposed values",
                    file=var.file,
                    line=var.line,
                ))
            if STRIPE_TEST_RE.search(var.value):
                found_test = True
                issues.append(Issue(
                    severity=Severity.WARNING,
                    category=Category.STRIPE,
                    title="test Stripe key found in dotenv file",
                    hint="keep test keys in local-only env files and out of source control",
                    file=var.file,
                    line=var.line,
                ))

        if found_live and found_test:
            issues.append(Issue(
                severity=Severity.WARNING,
                category=Category.STRIPE,
                title="mixed Stripe modes detected",
                hint="separate test and live credentials by environment",
                detail="both sk_live_* and sk_test_* were found across dotenv files",
            ))
        return issues
