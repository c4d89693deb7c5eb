"""CLI entry point: load config, run a profile, print the report and exit with a verdict."""

from pathlib import Path
from typing import NoReturn

import typer

from . import __version__
from .config import CONFIG_FILENAME, ConfigError, load_config, write_default_config
from .engine import run
from .format import format_human
from .logging import configure_logging
from .models import RunProfile

EXIT_OK = 0
EXIT_POLICY_FAILED = 1
EXIT_FATAL = 2

app = typer.Typer(help="Repository footgun scanner for modern stacks.", no_args_is_help=True)
scan_app = typer.Typer(help="Targeted scans.", no_args_is_help=True)
env_app = typer.Typer(help="Environment variable hygiene.", no_args_is_help=True)
git_app = typer.Typer(help="Git repository health.", no_args_is_help=True)
app.add_typer(scan_app, name="scan")
app.add_typer(env_app, name="env")
app.add_typer(git_app, name="git")

PathOpt = typer.Option(Path("."), "--path", "-p", help="Repo path (default: .)")
ConfigOpt = typer.Option(None, "--config", "-c", help=f"Config file (default: ./{CONFIG_FILENAME} if present)")
JsonOpt = typer.Option(False, "--json", "-j", help="Output as JSON")
VerboseOpt = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr")
ForceOpt = typer.Option(False, "--force", help="Run even if the platform is not detected")


def _err(msg: str) -> NoReturn:
    """Print a fatal setup error and exit 2."""
    typer.echo(f"error: {msg}", err=True)
    raise typer.Exit(EXIT_FATAL)


def _resolve_root(path: Path) -> Path:
    """Relative --path is taken from the current directory."""
    return path if path.is_absolute() else Path.cwd() / path


def _run_profile(
    profile: RunProfile,
    path: Path,
    config_path: Path | None,
    json_out: bool,
    verbose: bool,
) -> None:
    configure_logging(verbose=verbose)
    try:
        config = load_config(config_path, Path.cwd())
        report = run(_resolve_root(path), config, profile)
    except (ConfigError, OSError) as e:
        _err(str(e))

    if json_out or config.general.json:
        typer.echo(report.to_json())
    else:
        typer.echo(format_human(report))

    raise typer.Exit(EXIT_OK if report.exit.ok else EXIT_POLICY_FAILED)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"devguard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Detect leaked credentials, env drift, risky git state and provider misconfigurations."""


@app.command("check")
def check_cmd(
    path: Path = PathOpt,
    config: Path | None = ConfigOpt,
    json_out: bool = JsonOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Run every check and provider against the repository."""
    _run_profile(RunProfile.full(), path, config, json_out, verbose)


@app.command("init")
def init_cmd() -> None:
    """Write a default devguard.toml in the current directory."""
    target = Path.cwd() / CONFIG_FILENAME
    try:
        write_default_config(target)
    except ConfigError as e:
        _err(str(e))
    typer.echo(f"created {target}")


@scan_app.command("secrets")
def scan_secrets_cmd(
    path: Path = PathOpt,
    config: Path | None = ConfigOpt,
    json_out: bool = JsonOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Scan text files for credential-shaped strings."""
    _run_profile(RunProfile.secrets_only(), path, config, json_out, verbose)


@env_app.command("validate")
def env_validate_cmd(
    path: Path = PathOpt,
    config: Path | None = ConfigOpt,
    json_out: bool = JsonOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Check required keys, example drift and forbidden env files."""
    _run_profile(RunProfile.env_only(), path, config, json_out, verbose)


@git_app.command("health")
def git_health_cmd(
    path: Path = PathOpt,
    config: Path | None = ConfigOpt,
    json_out: bool = JsonOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Check working tree, HEAD and large files."""
    _run_profile(RunProfile.git_only(), path, config, json_out, verbose)


def _add_verify_command(provider: str, help_text: str) -> None:
    """Register `devguard <provider> verify`."""
    sub = typer.Typer(help=help_text, no_args_is_help=True)

    @sub.command("verify", help=f"Run only the {provider} provider checks.")
    def verify_cmd(
        path: Path = PathOpt,
        config: Path | None = ConfigOpt,
        json_out: bool = JsonOpt,
        verbose: bool = VerboseOpt,
        force: bool = ForceOpt,
    ) -> None:
        _run_profile(RunProfile.verify(provider, force=force), path, config, json_out, verbose)

    app.add_typer(sub, name=provider)


_add_verify_command("supabase", "Supabase project checks.")
_add_verify_command("vercel", "Vercel project checks.")
_add_verify_command("stripe", "Stripe key checks.")


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
