"""Configuration loading for devguard (devguard.toml)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_FILENAME = "devguard.toml"
FAIL_ON_VALUES = ("warning", "error", "none")


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or cannot be parsed."""


@dataclass
class GeneralConfig:
    fail_on: str = "warning"  # warning | error | none
    min_score: int = 80
    json: bool = False


@dataclass
class ScanConfig:
    exclude: list[str] = field(
        default_factory=lambda: ["node_modules", "target", ".git", "dist", "build", ".next"]
    )
    max_file_size_kb: int = 512
    patterns_file: str = ""  # YAML of extra secret patterns; relative to the config file

    @property
    def max_file_bytes(self) -> int:
        return self.max_file_size_kb * 1024


@dataclass
class EnvConfig:
    required: list[str] = field(default_factory=lambda: ["DATABASE_URL"])
    forbid_commit: list[str] = field(
        default_factory=lambda: [".env", ".env.local", ".env.production", "serviceAccount.json"]
    )
    dotenv_files: list[str] = field(
        default_factory=lambda: [".env", ".env.local", ".env.development", ".env.production"]
    )
    example_files: list[str] = field(default_factory=lambda: [".env.example", ".env.template"])


@dataclass
class SupabaseConfig:
    enabled: bool = True
    require_migrations: bool = True
    migrations_dir: str = "supabase/migrations"
    forbid_service_role_in_client: bool = True


@dataclass
class VercelConfig:
    enabled: bool = True


@dataclass
class StripeConfig:
    enabled: bool = True
    warn_live_keys: bool = True


@dataclass
class ProvidersConfig:
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    vercel: VercelConfig = field(default_factory=VercelConfig)
    stripe: StripeConfig = field(default_factory=StripeConfig)


@dataclass
class Config:
    """Represents the settings defined in devguard.toml."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    env: EnvConfig = field(default_factory=EnvConfig)
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)


def load_config(path: Optional[Path] = None, cwd: Optional[Path] = None) -> Config:
    """
    Load configuration.
    An explicit path must exist. Without one, ./devguard.toml is used when present,
    otherwise the built-in defaults.
    """
    if path is not None:
        if not path.exists():
            raise ConfigError(f"config file not found at {path} (passed with --config)")
        return read_config(path)

    local = (cwd or Path.cwd()) / CONFIG_FILENAME
    if local.exists():
        return read_config(local)
    return Config()


def read_config(path: Path) -> Config:
    """Read and validate one TOML config file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed reading config file {path}: {exc}") from exc
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"failed parsing config file {path}: {exc}") from exc
    try:
        cfg = config_from_dict(data)
    except ConfigError as exc:
        raise ConfigError(f"failed parsing config file {path}: {exc}") from exc
    if cfg.scan.patterns_file and not Path(cfg.scan.patterns_file).is_absolute():
        cfg.scan.patterns_file = str(path.parent / cfg.scan.patterns_file)
    return cfg


def config_from_dict(data: dict[str, Any]) -> Config:
    """Build a Config from parsed TOML; missing keys keep their defaults."""
    cfg = Config()

    general = _section(data, "general")
    if "fail_on" in general:
        fail_on = _as_str(general["fail_on"], "general.fail_on")
        if fail_on not in FAIL_ON_VALUES:
            raise ConfigError(
                f"general.fail_on must be one of {', '.join(FAIL_ON_VALUES)}, got {fail_on!r}"
            )
        cfg.general.fail_on = fail_on
    if "min_score" in general:
        min_score = _as_int(general["min_score"], "general.min_score")
        if not 0 <= min_score <= 255:
            raise ConfigError(f"general.min_score must be within 0..255, got {min_score}")
        cfg.general.min_score = min_score
    if "json" in general:
        cfg.general.json = _as_bool(general["json"], "general.json")

    scan = _section(data, "scan")
    if "exclude" in scan:
        cfg.scan.exclude = _as_str_list(scan["exclude"], "scan.exclude")
    if "max_file_size_kb" in scan:
        size = _as_int(scan["max_file_size_kb"], "scan.max_file_size_kb")
        if size < 0:
            raise ConfigError(f"scan.max_file_size_kb must not be negative, got {size}")
        cfg.scan.max_file_size_kb = size
    if "patterns_file" in scan:
        cfg.scan.patterns_file = _as_str(scan["patterns_file"], "scan.patterns_file")

    env = _section(data, "env")
    for key in ("required", "forbid_commit", "dotenv_files", "example_files"):
        if key in env:
            setattr(cfg.env, key, _as_str_list(env[key], f"env.{key}"))

    providers = _section(data, "providers")
    supabase = _section(providers, "supabase", "providers.supabase")
    for key in ("enabled", "require_migrations", "forbid_service_role_in_client"):
        if key in supabase:
            setattr(cfg.providers.supabase, key, _as_bool(supabase[key], f"providers.supabase.{key}"))
    if "migrations_dir" in supabase:
        cfg.providers.supabase.migrations_dir = _as_str(
            supabase["migrations_dir"], "providers.supabase.migrations_dir"
        )

    vercel = _section(providers, "vercel", "providers.vercel")
    if "enabled" in vercel:
        cfg.providers.vercel.enabled = _as_bool(vercel["enabled"], "providers.vercel.enabled")

    stripe = _section(providers, "stripe", "providers.stripe")
    for key in ("enabled", "warn_live_keys"):
        if key in stripe:
            setattr(cfg.providers.stripe, key, _as_bool(stripe[key], f"providers.stripe.{key}"))

    return cfg


def default_config_toml() -> str:
    """Render the default configuration as TOML text."""
    cfg = Config()
    sections = [
        ("general", {
            "fail_on": cfg.general.fail_on,
            "min_score": cfg.general.min_score,
            "json": cfg.general.json,
        }),
        ("scan", {
            "exclude": cfg.scan.exclude,
            "max_file_size_kb": cfg.scan.max_file_size_kb,
            "patterns_file": cfg.scan.patterns_file,
        }),
        ("env", {
            "required": cfg.env.required,
            "forbid_commit": cfg.env.forbid_commit,
            "dotenv_files": cfg.env.dotenv_files,
            "example_files": cfg.env.example_files,
        }),
        ("providers.supabase", {
            "enabled": cfg.providers.supabase.enabled,
            "require_migrations": cfg.providers.supabase.require_migrations,
            "migrations_dir": cfg.providers.supabase.migrations_dir,
            "forbid_service_role_in_client": cfg.providers.supabase.forbid_service_role_in_client,
        }),
        ("providers.vercel", {"enabled": cfg.providers.vercel.enabled}),
        ("providers.stripe", {
            "enabled": cfg.providers.stripe.enabled,
            "warn_live_keys": cfg.providers.stripe.warn_live_keys,
        }),
    ]
    lines: list[str] = []
    for name, values in sections:
        if lines:
            lines.append("")
        lines.append(f"[{name}]")
        for key, value in values.items():
            lines.append(f"{key} = {_toml_value(value)}")
    return "\n".join(lines) + "\n"


def write_default_config(path: Path) -> None:
    """Write the default config to path; never overwrite an existing file."""
    if path.exists():
        raise ConfigError(f"refusing to overwrite existing config file: {path}")
    try:
        path.write_text(default_config_toml(), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed writing {path}: {exc}") from exc


def _toml_value(value: Any) -> str:
    # JSON string escapes are valid TOML basic-string escapes.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    return json.dumps(str(value))


def _section(data: dict[str, Any], key: str, label: str | None = None) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"[{label or key}] must be a table")
    return value


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer")
    return value


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false")
    return value


def _as_str_list(value: Any, name: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{name} must be a list of strings")
    return list(value)
