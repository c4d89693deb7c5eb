"""Repo scanner: builds the repository snapshot and scans it for secrets."""

from .repo import build_context
from .secrets import scan_secrets

__all__ = ["build_context", "scan_secrets"]
