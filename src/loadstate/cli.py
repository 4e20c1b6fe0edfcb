"""loadstate command-line interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .config import Config, ConfigError, load_config, resolve_config_path
from .loader import BootError, BootLoader
from .logging import configure_logging
from .registry import LoadRegistry

app = typer.Typer(help="Track and boot modules loaded into this process.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None
    verbose: bool = False


@app.callback()
def _loadstate(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to config (env LOADSTATE_CONFIG or ~/.config/loadstate/config.yaml).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Log at DEBUG level."),
    ] = False,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved, verbose=verbose)


@app.command()
def boot(
    ctx: typer.Context,
    names: Annotated[
        list[str] | None,
        typer.Argument(help="Sources to evaluate, relative to output_dir (defaults to config 'boot')."),
    ] = None,
) -> None:
    """Evaluate boot sources in order, skipping those already loaded."""

    state = _state(ctx)
    config = _load_config(state.config_path)
    _configure_logging(config, state)

    registry = LoadRegistry(config.preloaded)
    loader = BootLoader(registry, config.output_dir)
    targets = list(names) if names else list(config.boot)
    if not targets:
        LOGGER.warning("No boot sources configured. Add a 'boot' list or pass names explicitly.")
        typer.secho("Nothing to boot.", fg=typer.colors.YELLOW)
        return

    try:
        evaluated = set(loader.load(targets))
    except BootError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc

    for name in dict.fromkeys(targets):
        marker = "● loaded" if name in evaluated else "○ already loaded"
        typer.echo(f"  {marker}: {name}")
    typer.echo(f"Loaded modules: {len(registry)}")


@app.command()
def status(ctx: typer.Context) -> None:
    """Display configuration and which boot sources are ready."""

    state = _state(ctx)
    config = _load_config(state.config_path)
    registry = LoadRegistry(config.preloaded)
    loader = BootLoader(registry, config.output_dir)

    typer.echo("→ loadstate Status")
    typer.echo(f"Version: {__version__}")
    typer.echo(f"Config path: {state.config_path or resolve_config_path(None)}")
    typer.echo(f"Output dir: {config.output_dir}")
    typer.echo(f"Preloaded: {len(registry)}")
    typer.echo("")
    typer.echo("Boot sources:")
    for name in config.boot:
        if registry.is_loaded(name):
            label = "preloaded"
        elif loader.source_path(name).is_file():
            label = "ready"
        else:
            label = "missing"
        typer.echo(f"  - {name}: {label}")


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_config(path: Path | None) -> Config:
    try:
        return load_config(path)
    except ConfigError as exc:
        _config_failure(exc)


def _configure_logging(config: Config, state: CLIState) -> None:
    try:
        configure_logging(config.logging, config.root_dir, verbose=state.verbose)
    except ConfigError as exc:
        _config_failure(exc)
    LOGGER.debug("Logging configured (root dir %s)", config.root_dir)


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
