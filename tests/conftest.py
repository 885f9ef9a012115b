"""
Shared fixtures: an in-memory catalog server behind httpx.MockTransport.
"""

from typing import Any, Dict, List, Optional, Set

import httpx
import pytest

from urnhop.client.catalog import CatalogClient

BASE_URL = "http://catalog.test"

DATASET = "urn:li:dataset:(urn:li:dataPlatform:hive,fct_users,PROD)"
JOB = "urn:li:dataJob:job1"
DOWNSTREAM = "urn:li:dataset:downstream1"
OWNER = "urn:li:corpuser:owner1"


class FakeCatalogServer:
    """
    Minimal catalog API.

    Every endpoint generation is served unless its path is listed in
    `disabled`, in which case it answers with `disabled_status`.
    """

    def __init__(self):
        self.entities: Dict[str, Dict[str, Any]] = {}
        self.incoming: Dict[str, List[Dict[str, Any]]] = {}
        self.outgoing: Dict[str, List[Dict[str, Any]]] = {}
        self.disabled: Set[str] = set()
        self.disabled_status = 404
        self.requests: List[httpx.Request] = []

    def add_entity(self, urn: str, **record: Any) -> None:
        self.entities[urn] = {"urn": urn, **record}

    def relate(self, source: str, target: str, label: str) -> None:
        """Register `source -label-> target` for both directions."""
        self.outgoing.setdefault(source, []).append({"entity": target, "relationshipType": label})
        self.incoming.setdefault(target, []).append({"entity": source, "relationshipType": label})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        if path in self.disabled:
            return httpx.Response(self.disabled_status, text=f"{path} not served")

        if path == "/openapi/entities/v1/latest":
            urn = params.get("urns")
            if urn not in self.entities:
                return httpx.Response(404, text=f"Entity {urn} not found")
            return httpx.Response(200, json={"responses": {urn: self.entities[urn]}})

        if path.startswith("/entitiesV2/"):
            urn = path[len("/entitiesV2/"):]
            if urn not in self.entities:
                return httpx.Response(404, text=f"Entity {urn} not found")
            return httpx.Response(200, json={"value": self.entities[urn]})

        if path in ("/openapi/relationships/v1/", "/openapi/relationships/v1", "/relationships"):
            if path == "/relationships" and not params.get("types"):
                return httpx.Response(400, text="Missing required parameter: types")
            urn = params.get("urn")
            table = self.incoming if params.get("direction") == "INCOMING" else self.outgoing
            return httpx.Response(200, json={"relationships": table.get(urn, [])})

        return httpx.Response(404, text="unknown endpoint")

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def client(self, token: Optional[str] = None) -> CatalogClient:
        return CatalogClient(BASE_URL, token=token, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def server() -> FakeCatalogServer:
    return FakeCatalogServer()


@pytest.fixture
def scenario_server(server: FakeCatalogServer) -> FakeCatalogServer:
    """
    A hive dataset fed by one job, feeding one downstream dataset, and
    owned by a user referenced from its ownership aspect.
    """
    server.add_entity(
        DATASET,
        aspects=[
            {"label": "ownership", "owners": [{"owner": OWNER, "type": "DATAOWNER"}]},
            {"label": "status", "removed": False},
        ],
    )
    server.add_entity(JOB)
    server.add_entity(DOWNSTREAM)
    server.add_entity(OWNER)
    server.relate(JOB, DATASET, "Produces")
    server.relate(DATASET, DOWNSTREAM, "DownstreamOf")
    return server
