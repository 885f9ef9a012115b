"""
Radial Layout Engine.

Places the centered entity in the middle of a fixed canvas and its
neighbors on a circle around it, then computes the angular lanes that
group neighbors by relationship category.

The layout is a pure function of (neighborhood, entities, canvas size):
ordering relies only on explicit sorts, so identical input always yields
identical coordinates.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from ..core.types import Entity, GraphLane, Neighborhood, NodeRole, PositionedNode, RadialLayout

DEFAULT_WIDTH = 980.0
DEFAULT_HEIGHT = 660.0

# Ring radius as a fraction of the smaller canvas dimension
RADIUS_RATIO = 0.34

# Lane overhang on each side of a node, as a fraction of the angular step
LANE_PADDING_RATIO = 0.22

# Angles start at the top of the canvas
START_ANGLE = -math.pi / 2

UNCATEGORIZED_LABEL = "Uncategorized"
PREVIOUS_LANE_LABEL = "Previous"
PARENTS_LANE_LABEL = "Parents"

PREVIOUS_LANE_COLOR = "#c4b5fd"
PARENTS_LANE_COLOR = "#fed7aa"
LANE_COLOR_PALETTE = ("#bfdbfe", "#ddd6fe", "#bae6fd", "#bbf7d0", "#fde68a", "#fecdd3")


def label_sort_key(label: str) -> Tuple[str, str]:
    """Case-insensitive order with a code-point tie-break."""
    return label.casefold(), label


@dataclass
class DependencyGroup:
    """Dependencies sharing the same primary aspect label."""

    label: str
    urns: List[str]


@dataclass
class NeighborOrdering:
    """Ring order of the neighbors plus the slices that form lanes."""

    previous: Optional[str]
    parents: List[str]
    groups: List[DependencyGroup]

    @property
    def ordered(self) -> List[str]:
        head = [self.previous] if self.previous else []
        flat = [*head, *self.parents]
        for group in self.groups:
            flat.extend(group.urns)
        return flat


def order_neighbors(neighborhood: Neighborhood, entities: Mapping[str, Entity]) -> NeighborOrdering:
    """
    Order the plottable neighbors around the ring.

    Previous selection first, then parents, then dependencies grouped by
    aspect label (case-insensitive, so "Uncategorized" sorts among the
    lowercase labels). Identifiers are sorted lexicographically within each
    block and appear only once, in the first block that claims them.
    Neighbors missing from `entities` are left out.
    """
    center = neighborhood.center
    placed = {center}

    previous = neighborhood.previous
    if previous and previous != center and previous in entities:
        placed.add(previous)
    else:
        previous = None

    parents = []
    for urn in sorted(neighborhood.parents):
        if urn in placed or urn not in entities:
            continue
        placed.add(urn)
        parents.append(urn)

    by_label: Dict[str, List[str]] = {}
    for urn in sorted(neighborhood.dependencies):
        if urn in placed or urn not in entities:
            continue
        label = neighborhood.primary_aspect_label(urn, UNCATEGORIZED_LABEL)
        by_label.setdefault(label, []).append(urn)

    groups = [DependencyGroup(label=label, urns=by_label[label])
              for label in sorted(by_label, key=label_sort_key)]
    return NeighborOrdering(previous=previous, parents=parents, groups=groups)


def _angle(index: int, step: float) -> float:
    return index * step + START_ANGLE


def _lane(label: str, first: int, last: int, step: float, color: str) -> GraphLane:
    padding = step * LANE_PADDING_RATIO
    return GraphLane(
        label=label,
        start_angle=_angle(first, step) - padding,
        end_angle=_angle(last, step) + padding,
        color=color,
    )


def compute_lanes(ordering: NeighborOrdering) -> List[GraphLane]:
    """
    Angular segments covering the previous node, the parents block and
    each dependency group. Empty categories produce no lane.
    """
    ordered = ordering.ordered
    if not ordered:
        return []

    step = 2 * math.pi / len(ordered)
    index = {urn: i for i, urn in enumerate(ordered)}
    lanes: List[GraphLane] = []

    if ordering.previous:
        i = index[ordering.previous]
        lanes.append(_lane(PREVIOUS_LANE_LABEL, i, i, step, PREVIOUS_LANE_COLOR))

    if ordering.parents:
        lanes.append(_lane(
            PARENTS_LANE_LABEL,
            index[ordering.parents[0]],
            index[ordering.parents[-1]],
            step,
            PARENTS_LANE_COLOR,
        ))

    for color_idx, group in enumerate(ordering.groups):
        color = LANE_COLOR_PALETTE[color_idx % len(LANE_COLOR_PALETTE)]
        lanes.append(_lane(group.label, index[group.urns[0]], index[group.urns[-1]], step, color))

    return lanes


def compute_radial_layout(
    neighborhood: Optional[Neighborhood],
    entities: Mapping[str, Entity],
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
) -> RadialLayout:
    """
    Compute node positions and lanes for a neighborhood.

    Returns an empty layout when there is no neighborhood or the center
    entity has not been resolved.
    """
    if neighborhood is None or neighborhood.center not in entities:
        return RadialLayout(width=width, height=height)

    cx = width / 2
    cy = height / 2
    radius = min(width, height) * RADIUS_RATIO

    nodes = [PositionedNode(
        entity=entities[neighborhood.center],
        x=cx,
        y=cy,
        role=NodeRole.CENTER,
    )]

    ordering = order_neighbors(neighborhood, entities)
    ordered = ordering.ordered
    step = 2 * math.pi / len(ordered) if ordered else 0.0
    for i, urn in enumerate(ordered):
        angle = _angle(i, step)
        nodes.append(PositionedNode(
            entity=entities[urn],
            x=cx + radius * math.cos(angle),
            y=cy + radius * math.sin(angle),
            role=neighborhood.role_of(urn),
        ))

    return RadialLayout(
        width=width,
        height=height,
        nodes=nodes,
        edges=list(neighborhood.edges),
        lanes=compute_lanes(ordering),
    )
