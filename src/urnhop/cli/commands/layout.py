"""
Layout Command - Emit the radial layout of a neighborhood as JSON.

The output is meant for renderers (SVG, canvas, IDE panels); it carries
node coordinates, edges and angular lanes.
"""

import asyncio

import click

from ...config import CatalogConfig
from ...core.exceptions import UrnhopError
from ...graph.layout import DEFAULT_HEIGHT, DEFAULT_WIDTH
from ..utils import connect_neighborhood, connection_options, report_failure


@click.command()
@click.argument("urn")
@click.option("--width", default=DEFAULT_WIDTH, type=float, show_default=True, help="Canvas width")
@click.option("--height", default=DEFAULT_HEIGHT, type=float, show_default=True, help="Canvas height")
@connection_options
def layout(urn: str, width: float, height: float, config: CatalogConfig) -> None:
    """Compute node positions and lanes for the neighborhood of URN."""
    try:
        builder = asyncio.run(connect_neighborhood(config, urn))
    except (UrnhopError, ValueError) as e:
        report_failure(e, as_json=True)
        return

    click.echo(builder.layout(width, height).model_dump_json(indent=2))
