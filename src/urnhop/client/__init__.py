"""Catalog API client and response-shape parsers."""

from .catalog import (
    LEGACY_RELATIONSHIP_TYPES, CatalogClient,
    entity_endpoints, relationship_endpoints,
)

__all__ = [
    "CatalogClient",
    "LEGACY_RELATIONSHIP_TYPES",
    "entity_endpoints",
    "relationship_endpoints",
]
