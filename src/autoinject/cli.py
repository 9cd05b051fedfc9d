# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
autoinject CLI

Collects the Python sources under a root directory, runs one generation pass
and writes the generated registration module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from autoinject.compilation import Compilation
from autoinject.config import GeneratorSettings
from autoinject.errors import AutoInjectError, ConfigurationError
from autoinject.generator import GenerationResult, generate
from autoinject.logging import LoggingSettings, configure_logging, get_logger

app = typer.Typer(help="autoinject: generate DI registrations from lifetime markers.")

logger = get_logger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every exclusion."),
) -> None:
    """Configure logging for every command."""
    try:
        settings = LoggingSettings.load()
    except ValidationError as e:
        raise _fail(
            ConfigurationError.wrap(e, message="Invalid logging settings")
        ) from e
    if verbose:
        settings = settings.verbose()
    configure_logging(settings)


def _run(root: Path, output: Path | None) -> tuple[GenerationResult, Path]:
    settings = GeneratorSettings.load()
    target = output or root / settings.artifact_name
    compilation = Compilation.from_directory(
        root, exclude_dirs=settings.exclude_dirs, exclude_files=[target]
    )
    return generate(compilation, settings), target


def _fail(error: AutoInjectError) -> typer.Exit:
    logger.error("Generation pass failed", extra={"code": error.code.code})
    typer.secho(str(error), fg=typer.colors.RED, err=True)
    return typer.Exit(code=2)


@app.command("generate")
def generate_command(
    root: Path = typer.Argument(..., help="Source root to scan."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Where to write the generated module."
    ),
    check: bool = typer.Option(
        False, "--check", help="Fail if the generated module is missing or stale."
    ),
) -> None:
    """Generate the registration module for ROOT."""
    try:
        result, target = _run(root, output)
    except AutoInjectError as e:
        raise _fail(e) from e

    if result.source is None:
        if check and target.exists():
            typer.secho(
                f"{target} is stale: no marked classes remain", fg=typer.colors.YELLOW
            )
            raise typer.Exit(code=1)
        if target.exists():
            target.unlink()
            logger.info("Removed stale artifact", extra={"artifact": str(target)})
            typer.secho(
                f"No marked classes remain; removed {target}", fg=typer.colors.YELLOW
            )
            return
        typer.echo("No marked classes found; nothing generated.")
        return

    if check:
        current = target.read_text(encoding="utf-8") if target.exists() else None
        if current != result.source.text:
            typer.secho(f"{target} is out of date", fg=typer.colors.YELLOW)
            raise typer.Exit(code=1)
        typer.echo(f"{target} is up to date")
        return

    target.write_text(result.source.text, encoding="utf-8")
    typer.secho(
        f"Wrote {len(result.pairings)} registration(s) to {target}",
        fg=typer.colors.GREEN,
    )


@app.command()
def show(
    root: Path = typer.Argument(..., help="Source root to scan."),
) -> None:
    """Print the registration module for ROOT without writing it."""
    try:
        result, _ = _run(root, None)
    except AutoInjectError as e:
        raise _fail(e) from e

    if result.source is None:
        typer.echo("No marked classes found; nothing generated.", err=True)
        return
    typer.echo(result.source.text, nl=False)


@app.command()
def exclusions(
    root: Path = typer.Argument(..., help="Source root to scan."),
) -> None:
    """List marked classes that were left out of the registrations."""
    try:
        result, _ = _run(root, None)
    except AutoInjectError as e:
        raise _fail(e) from e

    if not result.exclusions:
        typer.echo("No exclusions.")
        return
    for exclusion in result.exclusions:
        typer.echo(str(exclusion))


if __name__ == "__main__":
    app()
