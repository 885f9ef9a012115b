"""
Explore Command - Walk the catalog interactively.

At the prompt:
    <n>        hop to neighbor number n
    b <i>      jump back to breadcrumb i
    c <urn>    reconnect at another entity (clears history)
    <urn>      hop to any identifier, e.g. one seen in a payload
    q          quit
"""

import asyncio
from typing import List, Optional, Tuple

import click
from rich.console import Console

from ...config import CatalogConfig
from ...core.exceptions import CatalogApiError, UrnhopError
from ...core.types import NavigationMode
from ...core.urn import is_urn
from ...graph.layout import order_neighbors
from ...graph.neighborhood import NeighborhoodBuilder
from ...graph.sections import build_sections
from ..formatting import render_breadcrumbs, render_neighborhood
from ..utils import connection_options, create_client, echo_error, echo_warning

console = Console()

Intent = Tuple[str, NavigationMode, Optional[int]]


def parse_command(text: str, numbered: List[str], stack: List[str]) -> Optional[Intent]:
    """
    Translate one prompt line into a navigation intent.

    Returns None for input that cannot be understood.
    """
    text = text.strip()
    if text.isdigit():
        idx = int(text)
        if 1 <= idx <= len(numbered):
            return numbered[idx - 1], NavigationMode.NODE, None
        return None

    head, _, rest = text.partition(" ")
    rest = rest.strip()
    if head == "b" and rest.isdigit():
        idx = int(rest)
        if 0 <= idx < len(stack):
            return stack[idx], NavigationMode.BREADCRUMB, idx
        return None
    if head == "c" and rest:
        return rest, NavigationMode.CONNECT, None
    if is_urn(text):
        return text, NavigationMode.NODE, None
    return None


def _display(builder: NeighborhoodBuilder) -> List[str]:
    """Print the current state; returns neighbors in hop-number order."""
    neighborhood = builder.neighborhood
    entities = builder.cache.snapshot()
    numbered = order_neighbors(neighborhood, entities).ordered

    console.print()
    console.print(render_breadcrumbs(builder.breadcrumbs()))
    console.print(render_neighborhood(
        neighborhood,
        entities,
        build_sections(neighborhood, entities),
        numbered=numbered,
    ))
    return numbered


async def _session(config: CatalogConfig, urn: str) -> None:
    async with create_client(config) as client:
        builder = NeighborhoodBuilder(client)
        try:
            await builder.navigate(urn, NavigationMode.CONNECT)
        except (UrnhopError, ValueError) as e:
            echo_error(e.describe() if isinstance(e, CatalogApiError) else str(e))
            return

        numbered = _display(builder)
        while True:
            text = await asyncio.to_thread(click.prompt, "hop", default="q", show_default=False)
            if text.strip() in ("q", "quit", "exit"):
                return

            intent = parse_command(text, numbered, builder.stack)
            if intent is None:
                echo_warning(f"Not understood: {text!r} (number, 'b <i>', 'c <urn>', <urn> or 'q')")
                continue

            target, mode, breadcrumb_index = intent
            try:
                await builder.navigate(target, mode, breadcrumb_index)
            except UrnhopError as e:
                echo_error(e.describe() if isinstance(e, CatalogApiError) else str(e))
                continue
            numbered = _display(builder)


@click.command()
@click.argument("urn")
@connection_options
def explore(urn: str, config: CatalogConfig) -> None:
    """
    Interactively walk the relationship neighborhood starting at URN.
    """
    asyncio.run(_session(config, urn))
