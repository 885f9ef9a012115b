"""
Show Command - Print the neighborhood of one entity.
"""

import asyncio
import json

import click
from rich.console import Console

from ...config import CatalogConfig
from ...core.exceptions import UrnhopError
from ...graph.sections import build_sections
from ..formatting import render_neighborhood
from ..utils import connect_neighborhood, connection_options, report_failure

console = Console()


@click.command()
@click.argument("urn")
@click.option("--json", "as_json", is_flag=True, help="Output the neighborhood as JSON")
@click.option("-f", "--filter", "query", default="", help="Only list neighbors matching TEXT")
@connection_options
def show(urn: str, as_json: bool, query: str, config: CatalogConfig) -> None:
    """
    Resolve URN and list its parents and dependencies.

    Dependencies found inside the entity's own payload are grouped by the
    aspect that references them.
    """
    try:
        builder = asyncio.run(connect_neighborhood(config, urn))
    except (UrnhopError, ValueError) as e:
        report_failure(e, as_json)
        return

    neighborhood = builder.neighborhood
    entities = builder.cache.snapshot()

    if as_json:
        data = neighborhood.to_dict()
        data["entities"] = {
            key: entity.model_dump(include={"id", "type", "name"})
            for key, entity in sorted(entities.items())
        }
        click.echo(json.dumps(data, indent=2))
        return

    sections = build_sections(neighborhood, entities, query)
    console.print(render_neighborhood(neighborhood, entities, sections))
