"""Validate command for checking job files.

This module provides the `validate` command that checks a JSON job file for
syntax, schema and material configuration errors without packing anything.
"""

from pathlib import Path
from typing import Annotated

import typer

from stonecut.application.config import ConfigError, config_to_request, load_job
from stonecut.domain.services import MaterialConfigurationError, resolve_material_ids

validate_app = typer.Typer()


def _display_load_error(error: ConfigError) -> None:
    """Display a job loading error.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path") or "(root)"
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)


@validate_app.command(name="validate")
def validate(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a slab optimization job file.

    Checks the job file for:
    - JSON syntax errors
    - Schema validation errors (missing fields, invalid values, etc.)
    - Slab configuration errors (kerf too wide, no usable area)
    - Pieces without a material or with an unconfigured material

    Exit codes:
        0 - Job is valid
        1 - Job has errors (cannot be optimized)

    Example:
        stonecut validate kitchen.json
    """
    typer.echo(f"Validating {job_file}...")
    typer.echo()

    try:
        job = load_job(job_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    try:
        request = config_to_request(job)
        resolve_material_ids(request.pieces, request.slabs, request.primary_material_id)
    except MaterialConfigurationError as e:
        typer.echo("Errors:", err=True)
        typer.echo(f"  {e}", err=True)
        for piece_id in e.piece_ids:
            typer.echo(f"    Piece: {piece_id}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo("Errors:", err=True)
        typer.echo(f"  {e}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"Job is valid: {len(job.pieces)} pieces, {len(job.materials)} materials."
    )


# Standalone command function for direct registration
def validate_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a slab optimization job file.

    Exit codes:
        0 - Job is valid
        1 - Job has errors (cannot be optimized)

    Example:
        stonecut validate kitchen.json
    """
    validate(job_file)
