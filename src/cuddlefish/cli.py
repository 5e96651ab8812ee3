"""Command line interface for cuddlefish."""

import json
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from pydantic import ValidationError

from cuddlefish.config import Config
from cuddlefish.exceptions import CuddlefishError
from cuddlefish.models import RepoStatus
from cuddlefish.vcs.git import GitRepo
from cuddlefish.versioning import default_status_to_version, derive_version, load_strategy

app = typer.Typer(help="Version metadata from git describe.", no_args_is_help=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _print_status(status: Optional[RepoStatus], as_json: bool) -> None:
    if status is None:
        typer.echo("Unknown repository status", err=True)
        raise typer.Exit(1)

    data = status.to_dict()
    if as_json:
        typer.echo(json.dumps(data, indent=2))
        return
    for key, value in data.items():
        if isinstance(value, str):
            value = value.rstrip("\n")
        typer.echo(f"{key}: {value}")


@app.callback()
def main_callback(
    ctx: typer.Context,
    git: Optional[str] = typer.Option(None, "--git", help="git executable (default: git on PATH)"),
    repo: Optional[Path] = typer.Option(None, "--repo", help="Repository path (default: .)"),
    pattern: Optional[str] = typer.Option(
        None, "--pattern", help="Regex with tag, ahead, ref and dirty groups for describe output"
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Read tag, distance, dirty state and commit from a git repository."""
    overrides: dict[str, Any] = {
        "git": git,
        "repo": repo,
        "describe_pattern": pattern,
        "config_file": config_file,
        "log_level": log_level,
    }
    try:
        config = Config(**{k: v for k, v in overrides.items() if v is not None})
    except (CuddlefishError, ValidationError) as e:
        _fail(str(e))

    _configure_logging(config.log_level)
    ctx.obj = config


def _repo(ctx: typer.Context) -> GitRepo:
    return GitRepo.from_config(ctx.obj)


@app.command()
def describe(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the status as JSON"),
) -> None:
    """Print the parsed git describe status."""
    try:
        status = _repo(ctx).describe()
    except (CuddlefishError, OSError) as e:
        _fail(str(e))
    _print_status(status, as_json)


@app.command()
def status(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the status as JSON"),
) -> None:
    """Print the describe status plus HEAD's message and timestamp when clean."""
    try:
        result = _repo(ctx).status()
    except (CuddlefishError, OSError) as e:
        _fail(str(e))
    _print_status(result, as_json)


@app.command()
def branch(ctx: typer.Context) -> None:
    """Print the current branch name."""
    try:
        name = _repo(ctx).current_branch()
    except OSError as e:
        _fail(str(e))

    if not name:
        typer.echo("Unknown branch", err=True)
        raise typer.Exit(1)
    typer.echo(name)


@app.command()
def version(
    ctx: typer.Context,
    strategy: Optional[str] = typer.Option(
        None, "--strategy", help="module:function status-to-version strategy"
    ),
    project_version: Optional[str] = typer.Option(
        None,
        "--project-version",
        help="Declared project version, passed to the strategy and printed when the status is unknown",
    ),
) -> None:
    """Print the version derived from the repository status."""
    config: Config = ctx.obj
    try:
        strategy_path = strategy or config.status_to_version
        status_to_version = load_strategy(strategy_path) if strategy_path else default_status_to_version
        derived = derive_version(_repo(ctx).describe(), status_to_version, version=project_version)
    except (CuddlefishError, OSError) as e:
        _fail(str(e))

    if derived is None:
        typer.echo("Unknown repository status", err=True)
        raise typer.Exit(1)
    typer.echo(derived)


# Entry point for console script
def main() -> Any:
    return app()
