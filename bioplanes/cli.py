"""CLI interface for bioplanes."""

import sys
from pathlib import Path

import click
from loguru import logger

from bioplanes.config import configure_java, configure_logging
from bioplanes.coords import Coordinate
from bioplanes.dataset import DatasetView
from bioplanes.exceptions import BioplanesError


def _parse_coordinate(pairs):
    """Build a coordinate from AXIS=VALUE pairs."""
    indices = {}
    for pair in pairs:
        axis, sep, value = pair.partition("=")
        if not sep or not axis:
            raise click.BadParameter(f"Expected AXIS=VALUE, got {pair!r}")
        try:
            indices[axis.strip()] = int(value)
        except ValueError:
            raise click.BadParameter(f"Index for {axis} must be an integer, got {value!r}")
    try:
        return Coordinate(indices)
    except (TypeError, ValueError) as e:
        raise click.BadParameter(str(e))


def _format_coordinate(coord):
    if not len(coord):
        return "(single plane)"
    return ", ".join(f"{role.label}={value}" for role, value in coord.items_sorted())


def _open(input, scene):
    configure_java()
    return DatasetView.open(str(input), scene=scene)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """bioplanes - coordinate-addressed bioimage planes."""
    configure_logging("DEBUG" if verbose else None)


@cli.command()
@click.argument("input", type=click.Path(exists=True, path_type=Path))
@click.option("--scene", default=0, type=int, help="Scene index (default: 0)")
def info(input, scene):
    """
    Show the dataset summary: axes, channels, calibration and bounds.
    """
    try:
        with _open(input, scene) as view:
            summary = view.summary
            click.echo(f"Dataset: {summary.prefix}")
            click.echo(f"Format: {summary.format_name}")
            click.echo(f"Planes: {summary.plane_count}")
            axes = ", ".join(
                f"{role.label}={view.get_axis_length(role)}" for role in view.axes
            )
            click.echo(f"Axes: {axes or '(none)'}")
            click.echo(f"Channels: {', '.join(summary.channel_names)}")
            click.echo(f"Pixel size (um): {summary.pixel_size_um}")
            click.echo(f"Z step (um): {summary.z_step_um}")
            click.echo(f"Max indices: {_format_coordinate(view.get_max_indices())}")
            if view.mapper.fallback:
                click.echo("⚠ Planes are addressed by time only (axis-mismatch fallback)")
    except BioplanesError as e:
        click.echo(f"✗ Error processing {input}: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("input", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--match",
    "-m",
    multiple=True,
    help="Only list coordinates matching AXIS=VALUE (repeatable)",
)
@click.option("--scene", default=0, type=int, help="Scene index (default: 0)")
def coords(input, match, scene):
    """
    List the coordinate of every image, in raster order.
    """
    query = _parse_coordinate(match)
    try:
        with _open(input, scene) as view:
            count = 0
            for coord in view.iter_coords():
                if coord.is_subspace_of(query):
                    click.echo(_format_coordinate(coord))
                    count += 1
            logger.info(f"{view.name}: {count} coordinate(s) listed")
    except BioplanesError as e:
        click.echo(f"✗ Error processing {input}: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("input", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--coord",
    "-c",
    "coord_pairs",
    multiple=True,
    help="Plane coordinate as AXIS=VALUE (repeatable, omitted axes are 0)",
)
@click.option("--scene", default=0, type=int, help="Scene index (default: 0)")
def plane(input, coord_pairs, scene):
    """
    Decode one plane and print its geometry and value range.
    """
    coord = _parse_coordinate(coord_pairs)
    try:
        with _open(input, scene) as view:
            image = view.get_image(coord)
            if image is None:
                click.echo(f"✗ No plane at {_format_coordinate(coord)}", err=True)
                sys.exit(1)
            click.echo(f"✓ Plane {_format_coordinate(image.coordinate)}")
            click.echo(f"  shape={image.pixels.shape}, dtype={image.pixels.dtype}")
            click.echo(f"  bit depth={image.bit_depth}, bytes/pixel={image.bytes_per_pixel}")
            click.echo(f"  min={image.pixels.min()}, max={image.pixels.max()}")
    except BioplanesError as e:
        click.echo(f"✗ Error processing {input}: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
