"""
Neighborhood Builder.

Turns one navigation intent into one consistent graph snapshot. It merges
three independent reference sources for the centered entity:

- incoming relationships (parents)
- outgoing relationships (dependencies)
- identifiers embedded in the entity's own payload (dependencies, grouped
  by aspect)

Nothing is committed until every required fetch has succeeded. Neighbors
that cannot be resolved are replaced by placeholders instead of failing
the whole action.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from ..core.exceptions import CatalogApiError
from ..core.navigation import advance, previous_of
from ..core.types import (
    Direction, Entity, NavigationMode, Neighborhood,
    RadialLayout, RelatedEntity, RelationshipEdge,
)
from ..core.urn import extract_urns, group_by_aspect, labels_by_urn, parse_name, parse_type
from .layout import DEFAULT_HEIGHT, DEFAULT_WIDTH, compute_radial_layout

logger = logging.getLogger(__name__)

PREVIOUS_SELECTION_LABEL = "previous_selection"
JSON_REFERENCE_LABEL = "json_reference"
ASPECT_LABEL_PREFIX = "aspect:"


class CatalogResolver(Protocol):
    """What the builder needs from a catalog client."""

    async def resolve_entity(self, urn: str) -> Entity:
        ...

    async def resolve_relationships(self, urn: str, direction: Direction) -> List[RelatedEntity]:
        ...


def placeholder_entity(urn: str) -> Entity:
    """Stand-in for a neighbor whose lookup failed; derived from the identifier only."""
    return Entity(
        id=urn,
        type=parse_type(urn),
        name=parse_name(urn),
        raw={"urn": urn, "unavailable": True},
    )


class EntityCache:
    """
    Session-wide map of identifier to resolved Entity.

    Entries are only ever replaced whole, never modified in place.
    """

    def __init__(self):
        self._entities: Dict[str, Entity] = {}

    def get(self, urn: str) -> Optional[Entity]:
        return self._entities.get(urn)

    def merge(self, entities: Dict[str, Entity]) -> None:
        """Overwrite existing entries; refreshed payloads may be more complete."""
        self._entities.update(entities)

    def snapshot(self) -> Dict[str, Entity]:
        return dict(self._entities)

    def clear(self) -> None:
        self._entities.clear()

    def __contains__(self, urn: str) -> bool:
        return urn in self._entities

    def __len__(self) -> int:
        return len(self._entities)


def dedupe_edges(edges: Iterable[RelationshipEdge]) -> List[RelationshipEdge]:
    """Keep the first edge for each (source, target, label) triple."""
    seen = set()
    unique: List[RelationshipEdge] = []
    for edge in edges:
        if edge.key in seen:
            continue
        seen.add(edge.key)
        unique.append(edge)
    return unique


def build_edges(
    center: str,
    incoming: Sequence[RelatedEntity],
    outgoing: Sequence[RelatedEntity],
    references: Sequence[str],
    aspect_labels: Dict[str, List[str]],
    previous: Optional[str],
) -> List[RelationshipEdge]:
    """
    Assemble the deduplicated edge list of a neighborhood.

    A synthetic previous-selection edge is added only when no other edge
    already links the previous node and the center.
    """
    edges: List[RelationshipEdge] = []
    edges.extend(RelationshipEdge(source=rel.urn, target=center, label=rel.label) for rel in incoming)
    edges.extend(RelationshipEdge(source=center, target=rel.urn, label=rel.label) for rel in outgoing)

    for urn in references:
        labels = aspect_labels.get(urn)
        label = f"{ASPECT_LABEL_PREFIX}{'|'.join(labels)}" if labels else JSON_REFERENCE_LABEL
        edges.append(RelationshipEdge(source=center, target=urn, label=label))

    if previous and previous != center:
        if not any(edge.connects(previous, center) for edge in edges):
            edges.append(RelationshipEdge(source=previous, target=center, label=PREVIOUS_SELECTION_LABEL))

    return dedupe_edges(edges)


class NeighborhoodBuilder:
    """
    Owns the navigation session: entity cache, breadcrumb stack and the
    currently displayed neighborhood.

    Overlapping navigation actions are allowed. Each action takes a
    sequence number when it starts; when it finishes, its result is only
    committed if no newer action has already committed. The displayed
    state therefore always reflects the most recent intent that completed.
    """

    def __init__(self, client: CatalogResolver, cache: Optional[EntityCache] = None):
        self.client = client
        self.cache = cache if cache is not None else EntityCache()
        self.stack: List[str] = []
        self.neighborhood: Optional[Neighborhood] = None
        self._issued = 0
        self._committed = 0

    @property
    def center(self) -> Optional[str]:
        return self.neighborhood.center if self.neighborhood else None

    async def navigate(
        self,
        urn: str,
        mode: NavigationMode | str = NavigationMode.NODE,
        breadcrumb_index: Optional[int] = None,
    ) -> Optional[Neighborhood]:
        """
        Run one navigation action.

        Returns:
            The published Neighborhood, or None if a newer action committed first.

        Raises:
            ValueError: Blank identifier.
            CatalogApiError: The target or its relationships could not be
                resolved. No state is changed.
        """
        target = urn.strip()
        if not target:
            raise ValueError("Enter a URN to connect.")
        mode = NavigationMode(mode)

        self._issued += 1
        token = self._issued

        center = await self.client.resolve_entity(target)
        incoming, outgoing = await asyncio.gather(
            self.client.resolve_relationships(center.id, Direction.INCOMING),
            self.client.resolve_relationships(center.id, Direction.OUTGOING),
        )

        references = sorted(urn for urn in extract_urns(center.raw) if urn != center.id)
        aspect_labels = labels_by_urn(group_by_aspect(center.raw), exclude=center.id)

        next_stack = advance(self.stack, center.id, mode, breadcrumb_index)
        previous = previous_of(next_stack, center.id)

        parents = frozenset(rel.urn for rel in incoming)
        dependencies = frozenset([*(rel.urn for rel in outgoing), *references])

        neighbor_ids = set(parents | dependencies)
        if previous:
            neighbor_ids.add(previous)
        neighbor_ids.discard(center.id)
        resolved = await self._resolve_neighbors(sorted(neighbor_ids))

        neighborhood = Neighborhood(
            center=center.id,
            previous=previous,
            parents=parents,
            dependencies=dependencies,
            aspect_labels_by_urn=aspect_labels,
            edges=build_edges(center.id, incoming, outgoing, references, aspect_labels, previous),
        )

        if token <= self._committed:
            logger.debug(f"Discarding stale navigation to {center.id} (action {token}, committed {self._committed})")
            return None

        entities: Dict[str, Entity] = {center.id: center}
        for requested, entity in resolved:
            entities[entity.id] = entity
            entities.setdefault(requested, entity)

        self.cache.merge(entities)
        self.stack = next_stack
        self.neighborhood = neighborhood
        self._committed = token
        logger.debug(
            f"Centered on {center.id}: {len(parents)} parents, "
            f"{len(dependencies)} dependencies, {len(neighborhood.edges)} edges"
        )
        return neighborhood

    async def _resolve_neighbors(self, urns: Sequence[str]) -> List[Tuple[str, Entity]]:
        """Resolve all neighbors concurrently, substituting placeholders for failures."""

        async def resolve(urn: str) -> Tuple[str, Entity]:
            try:
                return urn, await self.client.resolve_entity(urn)
            except CatalogApiError as e:
                logger.info(f"Neighbor {urn} unavailable, using placeholder: {e.message}")
                return urn, placeholder_entity(urn)

        return list(await asyncio.gather(*(resolve(urn) for urn in urns)))

    def breadcrumbs(self) -> List[Tuple[int, str, str]]:
        """The navigation stack as (index, urn, display name) entries."""
        crumbs = []
        for idx, urn in enumerate(self.stack):
            entity = self.cache.get(urn)
            crumbs.append((idx, urn, entity.name if entity else parse_name(urn)))
        return crumbs

    def layout(self, width: float = DEFAULT_WIDTH, height: float = DEFAULT_HEIGHT) -> RadialLayout:
        """Radial layout of the current neighborhood."""
        return compute_radial_layout(self.neighborhood, self.cache.snapshot(), width, height)

    def reset(self) -> None:
        """Forget everything, as on a full application reset."""
        self.cache.clear()
        self.stack = []
        self.neighborhood = None
        self._committed = self._issued
