"""
Human-readable rendering of neighborhoods for the terminal.
"""

from typing import List, Mapping, Sequence, Tuple

from rich.markup import escape
from rich.tree import Tree

from ..core.types import Entity, Neighborhood, NodeRole
from ..graph.sections import Section

ROLE_STYLES = {
    NodeRole.CENTER: "bold cyan",
    NodeRole.PARENT: "yellow",
    NodeRole.DEPENDENCY: "green",
    NodeRole.BOTH: "magenta",
    NodeRole.PREVIOUS: "blue",
}


def _entity_label(urn: str, entities: Mapping[str, Entity], role: NodeRole) -> str:
    entity = entities.get(urn)
    style = ROLE_STYLES[role]
    if entity is None:
        return f"[{style}]{escape(urn)}[/{style}]"
    suffix = " [red](unavailable)[/red]" if entity.unavailable else ""
    return f"[{style}]{escape(entity.name)}[/{style}] [dim]{escape(entity.type)} · {escape(urn)}[/dim]{suffix}"


def render_breadcrumbs(crumbs: Sequence[Tuple[int, str, str]]) -> str:
    """`[0] a › [1] b › [2] c` with the current entry last."""
    return " › ".join(f"\\[{idx}] {escape(name)}" for idx, _urn, name in crumbs)


def render_neighborhood(
    neighborhood: Neighborhood,
    entities: Mapping[str, Entity],
    sections: List[Section],
    numbered: Sequence[str] = (),
) -> Tree:
    """
    Build a rich Tree of the neighborhood's sections.

    When `numbered` is given, items are prefixed with their 1-based position
    in that sequence so the operator can hop to them by number.
    """
    numbers = {urn: i for i, urn in enumerate(numbered, start=1)}
    tree = Tree(_entity_label(neighborhood.center, entities, NodeRole.CENTER))

    if not sections:
        tree.add("[dim]No related entities[/dim]")
        return tree

    for section in sections:
        branch = tree.add(f"[bold]{section.title}[/bold]")
        for item in section.items:
            label = _entity_label(item.urn, entities, neighborhood.role_of(item.urn))
            if item.urn in numbers:
                label = f"[bold]{numbers[item.urn]:>3}[/bold] {label}"
            branch.add(label)
    return tree
