"""
Graph assembly and geometry.

- neighborhood: Builds one Neighborhood per navigation action
- layout: Radial positions and angular lanes
- sections: Grouped list view of a Neighborhood
"""

from .layout import compute_radial_layout, order_neighbors
from .neighborhood import EntityCache, NeighborhoodBuilder, placeholder_entity
from .sections import Section, SectionItem, build_sections

__all__ = [
    "EntityCache",
    "NeighborhoodBuilder",
    "Section",
    "SectionItem",
    "build_sections",
    "compute_radial_layout",
    "order_neighbors",
    "placeholder_entity",
]
