"""Platform providers and the fixed registry."""

from __future__ import annotations

from typing import Optional

from .base import Provider
from .stripe import StripeProvider
from .supabase import SupabaseProvider
from .vercel import VercelProvider


def all_providers() -> list[Provider]:
    """Every provider, in evaluation order."""
    return [SupabaseProvider(), VercelProvider(), StripeProvider()]


def get_provider(name: str) -> Optional[Provider]:
    for provider in all_providers():
        if provider.name == name.lower():
            return provider
    return None


__all__ = [
    "Provider",
    "StripeProvider",
    "SupabaseProvider",
    "VercelProvider",
    "all_providers",
    "get_provider",
]
