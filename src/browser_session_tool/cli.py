"""Command line interface for browser-session-tool."""

from __future__ import annotations

import asyncio
import json
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from .config import load_config
from .errors import BrowserSessionToolError
from .factory import build_engine
from .models import RunPolicy, RunResult
from .orchestrator.engine import CommandEngine
from .reporting.console import ConsoleReporter
from .shortcuts import load_shortcut

app = typer.Typer(help="Browser Session Tool entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("browser-session-tool"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


async def _run_shortcut(
    engine: CommandEngine,
    commands: list[dict[str, Any]],
    policy: RunPolicy,
) -> RunResult:
    try:
        return await engine.run(commands, policy)
    finally:
        await engine.close()


@app.command()
def run(
    shortcut: Annotated[
        Path,
        typer.Argument(help="YAML shortcut file with a top-level 'commands' list."),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with configuration and placeholder values.",
        ),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
    browser: Annotated[
        Optional[str],
        typer.Option("--browser", "-b", help="chromium, firefox, webkit, chrome, edge or safari."),
    ] = None,
    continue_on_failure: Annotated[
        bool,
        typer.Option("--continue-on-failure", help="Keep going after a failing step."),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result log as JSON."),
    ] = False,
) -> None:
    """Run the commands of a shortcut file in one browser session."""

    overrides: dict[str, Any] = {}
    if headless is not None or browser is not None:
        overrides.setdefault("browser", {})
        if headless is not None:
            overrides["browser"]["headless"] = headless
        if browser is not None:
            overrides["browser"]["engine"] = browser
    if env_file is not None:
        overrides["secrets_file"] = str(env_file)

    config = load_config(config_path, env_file=env_file, **overrides)
    reporter = ConsoleReporter()
    policy = RunPolicy.CONTINUE_ON_FAILURE if continue_on_failure else RunPolicy.ABORT_ON_FAILURE

    try:
        commands = load_shortcut(shortcut, [config.shortcuts_dir, config.base_dir])
        engine = build_engine(config)
        result = asyncio.run(_run_shortcut(engine, commands, policy))
    except BrowserSessionToolError as exc:
        if exc.result is not None and exc.result.results:
            reporter.report(exc.result)
        reporter.error(str(exc))
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(result.to_wire(), indent=2, default=str))
    else:
        reporter.report(result)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Binding address for the HTTP service."),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", help="HTTP port for the service."),
    ] = None,
    reload: Annotated[
        bool,
        typer.Option("--reload", help="Enable auto-reload (development only)."),
    ] = False,
) -> None:
    """Expose the command engine over HTTP."""

    import uvicorn

    from .service import app as service_app, state

    service_config = state.config.service
    uvicorn.run(
        service_app,
        host=host or service_config.host,
        port=port or service_config.port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
