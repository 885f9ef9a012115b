"""
Core type definitions for urnhop.

Every value that crosses a module boundary (entities, relationship edges,
neighborhood snapshots, positioned nodes) is a pydantic model. Models that
the display layer reads are frozen so they cannot be patched in place.
"""

from enum import StrEnum
from typing import Any, Dict, FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field


class NavigationMode(StrEnum):
    """How a navigation action was triggered."""
    CONNECT = "connect"
    NODE = "node"
    BREADCRUMB = "breadcrumb"


class Direction(StrEnum):
    """Relationship direction relative to the resolved entity."""
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"


class NodeRole(StrEnum):
    """Visual role of a node in the radial layout."""
    CENTER = "center"
    PARENT = "parent"
    DEPENDENCY = "dependency"
    BOTH = "both"
    PREVIOUS = "previous"


class Entity(BaseModel):
    """
    One resolved catalog entity.

    `type` and `name` are derived from `id` by the URN parsing rules,
    never from payload content. `raw` keeps the payload verbatim.
    """
    id: str
    type: str
    name: str
    raw: Any = None

    model_config = ConfigDict(frozen=True)

    @property
    def unavailable(self) -> bool:
        """True for placeholders synthesized after a failed lookup."""
        return isinstance(self.raw, dict) and self.raw.get("unavailable") is True

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Entity):
            return self.id == other.id
        return False


class RelatedEntity(BaseModel):
    """One normalized item of a relationships response."""
    urn: str
    label: str

    model_config = ConfigDict(frozen=True)


class RelationshipEdge(BaseModel):
    """
    Directed, labeled edge between two identifiers.

    Two edges are duplicates when their (source, target, label) triples match.
    """
    source: str
    target: str
    label: str

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.target, self.label)

    def connects(self, a: str, b: str) -> bool:
        """Check whether this edge links `a` and `b` in either direction."""
        return (self.source == a and self.target == b) or (
            self.source == b and self.target == a
        )


class Neighborhood(BaseModel):
    """
    Graph snapshot centered on one identifier.

    Rebuilt from scratch on every successful navigation action.
    `parents` and `dependencies` may overlap.
    """
    center: str
    previous: str | None = None
    parents: FrozenSet[str] = Field(default_factory=frozenset)
    dependencies: FrozenSet[str] = Field(default_factory=frozenset)
    aspect_labels_by_urn: Dict[str, List[str]] = Field(default_factory=dict)
    edges: List[RelationshipEdge] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def is_parent(self, urn: str) -> bool:
        return urn in self.parents

    def is_dependency(self, urn: str) -> bool:
        return urn in self.dependencies

    def role_of(self, urn: str) -> NodeRole:
        """
        Resolve the visual role of a neighbor.

        The previous selection always wins; an identifier that is both a
        parent and a dependency gets the combined role.
        """
        if urn == self.center:
            return NodeRole.CENTER
        if self.previous is not None and urn == self.previous:
            return NodeRole.PREVIOUS
        is_parent = self.is_parent(urn)
        is_dependency = self.is_dependency(urn)
        if is_parent and is_dependency:
            return NodeRole.BOTH
        if is_parent:
            return NodeRole.PARENT
        return NodeRole.DEPENDENCY

    def primary_aspect_label(self, urn: str, default: str = "Uncategorized") -> str:
        labels = self.aspect_labels_by_urn.get(urn)
        return labels[0] if labels else default

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with sets rendered as sorted lists."""
        return {
            "center": self.center,
            "previous": self.previous,
            "parents": sorted(self.parents),
            "dependencies": sorted(self.dependencies),
            "aspect_labels_by_urn": {
                urn: list(labels)
                for urn, labels in sorted(self.aspect_labels_by_urn.items())
            },
            "edges": [edge.model_dump() for edge in self.edges],
        }


class PositionedNode(BaseModel):
    """A neighborhood node with canvas coordinates."""
    entity: Entity
    x: float
    y: float
    role: NodeRole

    model_config = ConfigDict(frozen=True)


class GraphLane(BaseModel):
    """Angular segment of the radial layout grouping related neighbors."""
    label: str
    start_angle: float
    end_angle: float
    color: str

    model_config = ConfigDict(frozen=True)


class RadialLayout(BaseModel):
    """Presentation-ready geometry computed from a Neighborhood."""
    width: float
    height: float
    nodes: List[PositionedNode] = Field(default_factory=list)
    edges: List[RelationshipEdge] = Field(default_factory=list)
    lanes: List[GraphLane] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def node_for(self, urn: str) -> PositionedNode | None:
        for node in self.nodes:
            if node.entity.id == urn:
                return node
        return None
