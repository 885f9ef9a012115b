"""
urnhop - Relationship neighborhood explorer for metadata catalogs.

urnhop resolves a catalog entity by its URN, merges its incoming and
outgoing relationships with the references embedded in its own payload,
and lets an operator walk that graph one hop at a time.

Key Components:
- core: Data types, URN semantics and the navigation stack
- client: Catalog API client with endpoint-generation fallbacks
- graph: Neighborhood builder, radial layout and structure sections
- cli: Command line interface

Usage:
    from urnhop import CatalogClient, NeighborhoodBuilder

    async with CatalogClient("http://localhost:8080") as client:
        builder = NeighborhoodBuilder(client)
        neighborhood = await builder.navigate(urn, mode="connect")
"""

__version__ = "0.1.0"

from .client.catalog import CatalogClient
from .core.types import (
    Entity, GraphLane, NavigationMode, Neighborhood,
    NodeRole, PositionedNode, RelationshipEdge,
)
from .graph.neighborhood import EntityCache, NeighborhoodBuilder

__all__ = [
    "__version__",
    "CatalogClient",
    "Entity",
    "EntityCache",
    "GraphLane",
    "NavigationMode",
    "Neighborhood",
    "NeighborhoodBuilder",
    "NodeRole",
    "PositionedNode",
    "RelationshipEdge",
]
