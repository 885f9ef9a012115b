"""
Core modules for urnhop.

This package contains the fundamental building blocks:
- types: Data structures (Entity, RelationshipEdge, Neighborhood, etc.)
- urn: Identifier parsing and embedded reference extraction
- navigation: Breadcrumb stack transitions
- exceptions: Error hierarchy
"""

from .exceptions import CatalogApiError, ResponseShapeError, UrnhopError
from .navigation import advance, previous_of
from .types import (
    Direction, Entity, GraphLane, NavigationMode, Neighborhood,
    NodeRole, PositionedNode, RadialLayout, RelatedEntity, RelationshipEdge,
)
from .urn import extract_urns, group_by_aspect, parse_name, parse_type

__all__ = [
    # Types
    "Direction", "Entity", "GraphLane", "NavigationMode", "Neighborhood",
    "NodeRole", "PositionedNode", "RadialLayout", "RelatedEntity", "RelationshipEdge",
    # URN semantics
    "extract_urns", "group_by_aspect", "parse_name", "parse_type",
    # Navigation
    "advance", "previous_of",
    # Errors
    "CatalogApiError", "ResponseShapeError", "UrnhopError",
]
