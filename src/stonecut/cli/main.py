"""Typer CLI for slab optimization."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from stonecut.application.config import (
    ConfigError,
    config_to_request,
    load_job,
    result_to_schema,
)
from stonecut.cli.commands import validate_command
from stonecut.infrastructure import OptimizationResult, SlabOptimizationService

app = typer.Typer(
    name="stonecut",
    help="Lay out stone benchtop pieces on slabs with minimal waste.",
)

# Register validate command
app.command(name="validate")(validate_command)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _echo_summary(result: OptimizationResult) -> None:
    """Print a short human-readable summary to stderr."""
    for group in result.material_groups:
        typer.echo(
            f"{group.material_name}: {group.slab_count} slab(s) of "
            f"{group.slab_width:g}x{group.slab_height:g}mm, "
            f"{group.waste_percent:.1f}% waste",
            err=True,
        )
    typer.echo(
        f"Total: {result.total_slabs} slab(s), {result.waste_percent:.1f}% waste, "
        f"{len(result.placements)} placed, {len(result.unplaced_pieces)} unplaced",
        err=True,
    )
    if result.lamination_summary is not None:
        summary = result.lamination_summary
        typer.echo(
            f"Lamination: {summary.total_strips} strip(s), "
            f"{summary.total_strip_area_m2:.2f} m2",
            err=True,
        )
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)


@app.command()
def optimize(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the JSON result to this file"),
    ] = None,
    indent: Annotated[
        int,
        typer.Option("--indent", min=0, max=8, help="JSON indentation"),
    ] = 2,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log packing detail to stderr"),
    ] = False,
) -> None:
    """Optimize a job and output the slab layout as JSON.

    Exit codes:
        0 - Every piece was placed
        1 - The job could not be loaded or is misconfigured
        2 - Optimization finished but some pieces could not be placed

    Example:
        stonecut optimize kitchen.json -o layout.json
    """
    _configure_logging(verbose)

    try:
        job = load_job(job_file)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        request = config_to_request(job)
        result = SlabOptimizationService().optimize(request)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    json_text = result_to_schema(result).model_dump_json(indent=indent or None)

    if output_file is not None:
        output_file.write_text(json_text + "\n", encoding="utf-8")
        typer.echo(f"Layout written to {output_file}", err=True)
    else:
        typer.echo(json_text)

    _echo_summary(result)

    if result.unplaced_pieces:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
