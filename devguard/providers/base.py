"""Base class for platform providers."""

from abc import ABC, abstractmethod

from ..checks.base import Category, Issue
from ..config import Config
from ..models import RepoContext


class Provider(ABC):
    """Contract for a check bundle scoped to one external platform."""

    name: str = ""
    category: Category

    @abstractmethod
    def is_enabled(self, config: Config) -> bool:
        """Return True when the provider's section is enabled in config."""

    @abstractmethod
    def detect(self, ctx: RepoContext) -> bool:
        """Return True when the repository shows markers of this platform."""

    @abstractmethod
    def run_checks(self, ctx: RepoContext, config: Config) -> list[Issue]:
        """Produce issues for this platform. Must not depend on other providers."""
