"""Unit tests for the Neighborhood Builder."""

import asyncio
from typing import Dict, List

import pytest

from urnhop.core.exceptions import CatalogApiError
from urnhop.core.types import (
    Direction, Entity, NavigationMode, NodeRole, RelatedEntity, RelationshipEdge,
)
from urnhop.graph.neighborhood import (
    EntityCache, NeighborhoodBuilder, build_edges, dedupe_edges, placeholder_entity,
)

DATASET = "urn:li:dataset:(urn:li:dataPlatform:hive,fct_users,PROD)"
JOB = "urn:li:dataJob:job1"
DOWNSTREAM = "urn:li:dataset:downstream1"
OWNER = "urn:li:corpuser:owner1"


class FakeResolver:
    """In-memory resolver with optional per-entity gates for ordering tests."""

    def __init__(self):
        self.entities: Dict[str, dict] = {}
        self.incoming: Dict[str, List[RelatedEntity]] = {}
        self.outgoing: Dict[str, List[RelatedEntity]] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.failing_relationships = set()

    def add(self, urn: str, **raw) -> None:
        self.entities[urn] = {"urn": urn, **raw}

    def relate(self, source: str, target: str, label: str) -> None:
        self.outgoing.setdefault(source, []).append(RelatedEntity(urn=target, label=label))
        self.incoming.setdefault(target, []).append(RelatedEntity(urn=source, label=label))

    async def resolve_entity(self, urn: str) -> Entity:
        if urn in self.gates:
            await self.gates[urn].wait()
        if urn not in self.entities:
            raise CatalogApiError("Failed to fetch entity from catalog.", attempted_endpoints=["/e"])
        raw = self.entities[urn]
        return Entity(id=raw["urn"], type="t", name=urn.rsplit(":", 1)[-1], raw=raw)

    async def resolve_relationships(self, urn: str, direction: Direction) -> List[RelatedEntity]:
        if (urn, direction) in self.failing_relationships:
            raise CatalogApiError("Failed.", attempted_endpoints=["/r"], direction=direction.value)
        table = self.incoming if direction == Direction.INCOMING else self.outgoing
        return list(table.get(urn, []))


@pytest.fixture
def resolver():
    fake = FakeResolver()
    for urn in ("a", "b", "c"):
        fake.add(f"urn:li:tag:{urn}")
    fake.relate("urn:li:tag:a", "urn:li:tag:b", "Contains")
    fake.relate("urn:li:tag:b", "urn:li:tag:c", "Contains")
    return fake


A, B, C = "urn:li:tag:a", "urn:li:tag:b", "urn:li:tag:c"


class TestScenario:
    @pytest.mark.asyncio
    async def test_hive_dataset_neighborhood(self, scenario_server):
        async with scenario_server.client() as client:
            builder = NeighborhoodBuilder(client)
            neighborhood = await builder.navigate(DATASET, NavigationMode.CONNECT)

        assert neighborhood.center == DATASET
        assert neighborhood.previous is None
        assert neighborhood.parents == {JOB}
        assert neighborhood.dependencies == {DOWNSTREAM, OWNER}
        assert neighborhood.aspect_labels_by_urn[OWNER] == ["ownership"]
        assert neighborhood.edges == [
            RelationshipEdge(source=JOB, target=DATASET, label="Produces"),
            RelationshipEdge(source=DATASET, target=DOWNSTREAM, label="DownstreamOf"),
            RelationshipEdge(source=DATASET, target=OWNER, label="aspect:ownership"),
        ]
        assert builder.stack == [DATASET]
        for urn in (DATASET, JOB, DOWNSTREAM, OWNER):
            assert urn in builder.cache
            assert not builder.cache.get(urn).unavailable


class TestNavigation:
    @pytest.mark.asyncio
    async def test_previous_gets_synthetic_edge_only_when_unlinked(self, resolver):
        resolver.add("urn:li:tag:far")
        builder = NeighborhoodBuilder(resolver)

        await builder.navigate(A, NavigationMode.CONNECT)
        linked = await builder.navigate(B)
        assert linked.previous == A
        assert not any(edge.label == "previous_selection" for edge in linked.edges)

        await builder.navigate("urn:li:tag:far", NavigationMode.NODE)
        unlinked = builder.neighborhood
        assert unlinked.previous == B
        assert unlinked.edges == [
            RelationshipEdge(source=B, target="urn:li:tag:far", label="previous_selection"),
        ]
        assert builder.stack == [A, B, "urn:li:tag:far"]
        assert B in builder.cache

    @pytest.mark.asyncio
    async def test_breadcrumb_jump(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        await builder.navigate(A, NavigationMode.CONNECT)
        await builder.navigate(B)
        await builder.navigate(C)

        neighborhood = await builder.navigate(A, NavigationMode.BREADCRUMB, 0)
        assert builder.stack == [A]
        assert neighborhood.previous is None
        assert [crumb[1] for crumb in builder.breadcrumbs()] == [A]

    @pytest.mark.asyncio
    async def test_unresolvable_neighbor_becomes_placeholder(self, resolver):
        resolver.relate(A, "urn:li:dataset:gone", "DownstreamOf")
        builder = NeighborhoodBuilder(resolver)

        neighborhood = await builder.navigate(A, NavigationMode.CONNECT)

        assert "urn:li:dataset:gone" in neighborhood.dependencies
        placeholder = builder.cache.get("urn:li:dataset:gone")
        assert placeholder.unavailable
        assert placeholder.type == "dataset"
        assert placeholder.name == "gone"

    @pytest.mark.asyncio
    async def test_neighbor_resolving_to_canonical_id_is_cached_under_both(self, resolver):
        alias, real = "urn:li:corpuser:alias", "urn:li:corpuser:real"
        resolver.entities[alias] = {"urn": real}
        resolver.relate(A, alias, "OwnedBy")
        builder = NeighborhoodBuilder(resolver)

        neighborhood = await builder.navigate(A, NavigationMode.CONNECT)

        assert alias in neighborhood.dependencies
        assert builder.cache.get(alias).id == real
        assert builder.cache.get(real).id == real
        layout = builder.layout()
        assert layout.node_for(real) is not None
        assert layout.node_for(real).role == NodeRole.DEPENDENCY

    @pytest.mark.asyncio
    async def test_failed_center_leaves_state_untouched(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        before = await builder.navigate(A, NavigationMode.CONNECT)
        cached = builder.cache.snapshot()

        with pytest.raises(CatalogApiError):
            await builder.navigate("urn:li:tag:missing")

        assert builder.neighborhood is before
        assert builder.stack == [A]
        assert builder.cache.snapshot() == cached

    @pytest.mark.asyncio
    async def test_failed_relationships_abort(self, resolver):
        resolver.failing_relationships.add((B, Direction.OUTGOING))
        builder = NeighborhoodBuilder(resolver)
        await builder.navigate(A, NavigationMode.CONNECT)

        with pytest.raises(CatalogApiError) as exc_info:
            await builder.navigate(B)

        assert exc_info.value.direction == "OUTGOING"
        assert builder.center == A
        assert C not in builder.cache

    @pytest.mark.asyncio
    async def test_blank_urn_rejected(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        with pytest.raises(ValueError):
            await builder.navigate("   ")

    @pytest.mark.asyncio
    async def test_self_references_are_excluded(self, resolver):
        resolver.add("urn:li:tag:self", aspects=[{"label": "me", "ref": "urn:li:tag:self"}])
        builder = NeighborhoodBuilder(resolver)
        neighborhood = await builder.navigate("urn:li:tag:self", NavigationMode.CONNECT)
        assert neighborhood.dependencies == frozenset()
        assert neighborhood.edges == []

    @pytest.mark.asyncio
    async def test_ungrouped_reference_edge_label(self, resolver):
        resolver.add("urn:li:tag:x", links={"see": A})
        builder = NeighborhoodBuilder(resolver)
        neighborhood = await builder.navigate("urn:li:tag:x", NavigationMode.CONNECT)
        assert neighborhood.edges == [RelationshipEdge(source="urn:li:tag:x", target=A, label="json_reference")]

    @pytest.mark.asyncio
    async def test_layout_of_current_state(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        await builder.navigate(A, NavigationMode.CONNECT)
        await builder.navigate(B)
        layout = builder.layout(400, 400)
        roles = {node.entity.id: node.role for node in layout.nodes}
        assert roles == {B: NodeRole.CENTER, A: NodeRole.PREVIOUS, C: NodeRole.DEPENDENCY}

    @pytest.mark.asyncio
    async def test_reset(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        await builder.navigate(A, NavigationMode.CONNECT)
        builder.reset()
        assert builder.neighborhood is None
        assert builder.stack == []
        assert len(builder.cache) == 0


class TestOverlappingActions:
    @pytest.mark.asyncio
    async def test_older_action_finishing_last_is_discarded(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        await builder.navigate(A, NavigationMode.CONNECT)

        resolver.gates[C] = asyncio.Event()
        slow = asyncio.create_task(builder.navigate(C))
        await asyncio.sleep(0)
        fast = await builder.navigate(B)

        resolver.gates[C].set()
        stale = await slow

        assert stale is None
        assert builder.neighborhood is fast
        assert builder.center == B
        assert builder.stack == [A, B]

    @pytest.mark.asyncio
    async def test_in_order_completion_commits_both(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        await builder.navigate(A, NavigationMode.CONNECT)
        first = await builder.navigate(B)
        second = await builder.navigate(C)
        assert first is not None and second is not None
        assert builder.stack == [A, B, C]

    @pytest.mark.asyncio
    async def test_actions_started_before_reset_are_discarded(self, resolver):
        builder = NeighborhoodBuilder(resolver)
        resolver.gates[A] = asyncio.Event()
        pending = asyncio.create_task(builder.navigate(A, NavigationMode.CONNECT))
        await asyncio.sleep(0)
        builder.reset()
        resolver.gates[A].set()
        assert await pending is None
        assert builder.neighborhood is None


class TestEdges:
    def test_dedupe_keeps_first(self):
        first = RelationshipEdge(source="a", target="b", label="x")
        edges = dedupe_edges([first, RelationshipEdge(source="a", target="b", label="x"),
                              RelationshipEdge(source="a", target="b", label="y")])
        assert len(edges) == 2
        assert edges[0] is first

    def test_duplicate_relationships_collapse(self):
        rel = RelatedEntity(urn="p", label="Produces")
        edges = build_edges("c", [rel, rel], [], [], {}, None)
        assert edges == [RelationshipEdge(source="p", target="c", label="Produces")]

    def test_previous_linked_in_reverse_direction(self):
        edges = build_edges("c", [], [RelatedEntity(urn="p", label="Consumes")], [], {}, "p")
        assert [edge.label for edge in edges] == ["Consumes"]

    def test_multi_label_aspect_edge(self):
        edges = build_edges("c", [], [], ["o"], {"o": ["ownership", "editable"]}, None)
        assert edges[0].label == "aspect:ownership|editable"


class TestEntityCache:
    def test_merge_overwrites(self):
        cache = EntityCache()
        cache.merge({"x": placeholder_entity("urn:li:tag:x")})
        fresh = Entity(id="urn:li:tag:x", type="tag", name="x", raw={"full": True})
        cache.merge({"x": fresh})
        assert cache.get("x").raw == {"full": True}
        assert len(cache) == 1

    def test_snapshot_is_a_copy(self):
        cache = EntityCache()
        snapshot = cache.snapshot()
        snapshot["y"] = placeholder_entity("y")
        assert "y" not in cache
