# src/lfscheck/cli.py
"""lfscheck Command Line Interface.

Usage:
    # Synthesize test OIDs (runs the setup check first)
    lfscheck --url=https://lfs.example.com/api

    # Derive the API URL from a clone URL
    lfscheck --clone=git@git.example.com:org/repo.git

    # Replay known OIDs without modifying the server
    lfscheck --url=https://lfs.example.com/api exists.txt missing.txt
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from lfscheck import __version__
from lfscheck.checks import build_default_registry
from lfscheck.client import LfsApiClient
from lfscheck.contracts.errors import ConfigurationError, SetupFailedError
from lfscheck.core.config import load_settings
from lfscheck.endpoint import Endpoint
from lfscheck.identifiers import IdentifierSet, construct_test_oids, load_test_oids, save_test_oids
from lfscheck.reporting import create_reporter
from lfscheck.runner import CheckRunner

__all__ = ["app"]

CONFIG_ERROR_EXIT_CODE = 2

app = typer.Typer(
    name="lfscheck",
    help="Test a Git LFS API server for compliance.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"lfscheck version {__version__}")
        raise typer.Exit()


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(CONFIG_ERROR_EXIT_CODE)


def _resolve_endpoint(url: str | None, clone: str | None) -> Endpoint:
    if url and not clone:
        return Endpoint.from_api_url(url)
    if clone and not url:
        return Endpoint.from_clone_url(clone)
    raise ConfigurationError("Must supply either --url or --clone (and not both)")


def _acquire_oids(files: list[Path], count: int, seed: int) -> IdentifierSet:
    if files:
        exist_file, missing_file = (f.expanduser() for f in files)
        return load_test_oids(exist_file, missing_file)
    return construct_test_oids(count=count, seed=seed)


@app.command()
def check(
    files: Annotated[
        list[Path] | None,
        typer.Argument(
            metavar="[EXISTS_FILE MISSING_FILE]",
            help="Files listing OIDs that exist and OIDs that are missing on the server, one per line.",
            show_default=False,
        ),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="URL of the API (must supply this or --clone)."),
    ] = None,
    clone: Annotated[
        str | None,
        typer.Option("--clone", "-c", help="Clone URL from which to find API (must supply this or --url)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML settings file."),
    ] = None,
    save: Annotated[
        Path | None,
        typer.Option(
            "--save",
            help="Save synthesized OIDs to <PREFIX>_exists and <PREFIX>_missing.",
            metavar="PREFIX",
        ),
    ] = None,
    count: Annotated[
        int | None,
        typer.Option("--count", help="Number of present and of missing OIDs to synthesize.", min=1),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for OID synthesis (defaults to the count)."),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--no-strict", help="Exit with status 1 if any check fails."),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: 'console' or 'json'."),
    ] = None,
    list_checks: Annotated[
        bool,
        typer.Option("--list-checks", help="List registered checks and exit."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging on stderr."),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Output structured JSON logs."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Test a Git LFS API server for compliance.

    Without file arguments, test OIDs are synthesized deterministically and
    a setup step runs first (this may modify server contents). With both
    file arguments, OIDs are read from the files and the server is not
    modified.
    """
    from lfscheck.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")

    registry = build_default_registry()
    if list_checks:
        for name in registry.names:
            typer.echo(name)
        return

    files = files or []
    try:
        endpoint = _resolve_endpoint(url, clone)
        if len(files) not in (0, 2):
            raise ConfigurationError("Must supply either no file arguments or both the exists AND missing file")
        settings = load_settings(
            config_file.expanduser() if config_file is not None else None,
            cli_overrides={
                "count": count,
                "seed": seed,
                "strict": strict,
                "output_format": output_format,
            },
        )
        reporter = create_reporter(settings.output_format, settings.line_width)
        reporter.mode_selected(synthesized=not files)
        ids = _acquire_oids(files, settings.count, settings.effective_seed)
        if save is not None:
            if ids.synthesized:
                save_test_oids(ids, save.expanduser())
            else:
                typer.secho(
                    "Warning: --save ignored because OIDs were read from files.",
                    fg=typer.colors.YELLOW,
                    err=True,
                )
    except ConfigurationError as e:
        raise _fail(str(e)) from e

    runner = CheckRunner(registry, reporter, strict=settings.strict)
    with LfsApiClient(
        endpoint,
        timeout=settings.timeout,
        object_size=settings.object_size,
        user_agent=settings.user_agent,
    ) as client:
        try:
            summary = runner.run(client, ids)
        except SetupFailedError as e:
            typer.secho("Failed to set up test data, aborting", fg=typer.colors.RED, err=True)
            raise typer.Exit(CONFIG_ERROR_EXIT_CODE) from e

    if summary.exit_code:
        raise typer.Exit(summary.exit_code)


if __name__ == "__main__":
    app()
