"""devguard: repository footgun scanner for modern stacks."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("devguard")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
