"""
Structure sections.

A list view of the same neighborhood the radial layout draws: the previous
selection, the parents, then one section per dependency aspect group.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from ..core.types import Entity, Neighborhood
from .layout import UNCATEGORIZED_LABEL, label_sort_key


@dataclass
class SectionItem:
    urn: str
    aspect_label: Optional[str] = None


@dataclass
class Section:
    """A titled, ordered group of neighbor identifiers."""

    title: str
    items: List[SectionItem] = field(default_factory=list)


def _matches(item: SectionItem, entities: Mapping[str, Entity], query: str) -> bool:
    entity = entities.get(item.urn)
    haystacks = [
        item.urn,
        item.aspect_label or "",
        entity.name if entity else "",
        entity.type if entity else "",
    ]
    return any(query in text.lower() for text in haystacks)


def build_sections(
    neighborhood: Optional[Neighborhood],
    entities: Mapping[str, Entity],
    query: str = "",
) -> List[Section]:
    """
    Group the neighbors of a neighborhood into display sections.

    The previous selection is listed once, in its own section. A non-blank
    `query` keeps items whose identifier, aspect label, name or type
    contains it (case-insensitive) and drops sections left empty.
    """
    if neighborhood is None:
        return []

    center = neighborhood.center
    previous = neighborhood.previous if neighborhood.previous != center else None
    sections: List[Section] = []

    if previous:
        sections.append(Section(title="Previous", items=[SectionItem(urn=previous)]))

    parents = [SectionItem(urn=urn) for urn in sorted(neighborhood.parents) if urn != previous]
    if parents:
        sections.append(Section(title=f"Parents ({len(parents)})", items=parents))

    groups: dict[str, List[SectionItem]] = {}
    for urn in sorted(neighborhood.dependencies):
        if urn == previous:
            continue
        label = neighborhood.primary_aspect_label(urn, UNCATEGORIZED_LABEL)
        groups.setdefault(label, []).append(SectionItem(urn=urn, aspect_label=label))

    for label in sorted(groups, key=label_sort_key):
        items = groups[label]
        sections.append(Section(title=f"{label} ({len(items)})", items=items))

    needle = query.strip().lower()
    if not needle:
        return sections

    filtered = []
    for section in sections:
        items = [item for item in section.items if _matches(item, entities, needle)]
        if items:
            filtered.append(Section(title=section.title, items=items))
    return filtered
