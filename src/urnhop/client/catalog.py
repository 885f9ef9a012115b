"""
Catalog API Client.

Resolves entities and relationships against a catalog server whose API
has gone through several incompatible generations. Every operation walks
an ordered list of endpoint variants and stops at the first one that
answers with a usable payload.

The client keeps no cache; that is the NeighborhoodBuilder's job.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Optional, TypeVar
from urllib.parse import quote

import httpx

from ..core.exceptions import CatalogApiError, ResponseShapeError
from ..core.result import Ok
from ..core.types import Direction, Entity, RelatedEntity
from ..core.urn import parse_name, parse_type
from .parsers import parse_entity, parse_relationships

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Relationship types the legacy endpoint requires to be listed explicitly
LEGACY_RELATIONSHIP_TYPES = (
    "DownstreamOf",
    "UpstreamOf",
    "Consumes",
    "Produces",
    "DependsOn",
    "Contains",
    "OwnedBy",
    "ParentOf",
    "IsPartOf",
    "HasPart",
    "SchemaFieldOf",
    "InputFields",
    "OutputFields",
)

RELATIONSHIP_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0


def encode(value: str) -> str:
    """Percent-encode a value for use in a query string or path segment."""
    return quote(value, safe="")


def entity_endpoints(urn: str) -> List[str]:
    """Entity lookup variants, newest API generation first."""
    encoded = encode(urn)
    return [
        f"/openapi/entities/v1/latest?urns={encoded}&withSystemMetadata=false",
        f"/openapi/entities/v1/latest?urns={encoded}",
        f"/entitiesV2/{encoded}",
    ]


def relationship_endpoints(urn: str, direction: Direction | str) -> List[str]:
    """Relationship lookup variants, newest API generation first."""
    encoded = encode(urn)
    direction = Direction(direction).value
    paging = f"start=0&count={RELATIONSHIP_PAGE_SIZE}"
    types = encode(",".join(LEGACY_RELATIONSHIP_TYPES))
    return [
        f"/openapi/relationships/v1/?urn={encoded}&direction={direction}&{paging}",
        f"/openapi/relationships/v1?urn={encoded}&direction={direction}&{paging}",
        f"/relationships?urn={encoded}&direction={direction}&types={types}&{paging}",
    ]


def build_headers(token: Optional[str]) -> dict:
    """Bearer authorization header, omitted for blank tokens."""
    if token and token.strip():
        return {"Authorization": f"Bearer {token.strip()}"}
    return {}


class CatalogClient:
    """
    Async client for the catalog's entity and relationship endpoints.

    Usage:
        async with CatalogClient("http://localhost:8080", token="...") as client:
            entity = await client.resolve_entity(urn)
            parents = await client.resolve_relationships(urn, Direction.INCOMING)

    Attributes:
        base_url: Scheme, host, port and API prefix, without trailing slash.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            headers=build_headers(token),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    async def _fetch_json(self, path: str) -> Any:
        """
        GET one endpoint and decode its JSON body.

        Raises:
            CatalogApiError: Non-2xx status or transport failure.
            ResponseShapeError: 2xx response whose body is not JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as e:
            raise CatalogApiError(
                f"Request failed for {path}",
                endpoint=path,
                details=str(e) or type(e).__name__,
            ) from e

        if not response.is_success:
            raise CatalogApiError(
                f"HTTP {response.status_code} for {path}",
                status=response.status_code,
                endpoint=path,
                details=response.text or response.reason_phrase,
            )

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseShapeError(
                f"Invalid JSON from {path}",
                status=response.status_code,
                endpoint=path,
                details=str(e),
            ) from e

    async def _first_success(
        self,
        attempts: List[str],
        normalize: Callable[[str, Any], T],
        failure_message: str,
        direction: Optional[str] = None,
    ) -> T:
        """Walk the endpoint variants in order, returning the first normalized payload."""
        last_error: Optional[CatalogApiError] = None

        for path in attempts:
            try:
                body = await self._fetch_json(path)
                return normalize(path, body)
            except CatalogApiError as e:
                logger.debug(f"Endpoint {path} failed: {e.message} {e.details}".rstrip())
                last_error = e

        raise CatalogApiError(
            failure_message,
            status=last_error.status if last_error else None,
            endpoint=last_error.endpoint if last_error else None,
            attempted_endpoints=attempts,
            details=last_error.details if last_error else "",
            direction=direction,
        )

    # =========================================================================
    # Operations
    # =========================================================================

    async def resolve_entity(self, urn: str) -> Entity:
        """
        Resolve one entity.

        The entity id comes from the payload's own `urn` field when present,
        so a lookup may return a different (canonical) identifier.

        Raises:
            CatalogApiError: Every endpoint variant failed.
        """

        def normalize(path: str, body: Any) -> Entity:
            parsed = parse_entity(body, urn)
            if not isinstance(parsed, Ok):
                raise ResponseShapeError(
                    f"Unrecognized entity payload from {path}",
                    endpoint=path,
                    details="; ".join(parsed.error),
                )
            entity_id, record = parsed.value
            return Entity(
                id=entity_id,
                type=parse_type(entity_id),
                name=parse_name(entity_id),
                raw=record,
            )

        return await self._first_success(
            entity_endpoints(urn),
            normalize,
            "Failed to fetch entity from catalog.",
        )

    async def resolve_relationships(
        self,
        urn: str,
        direction: Direction | str,
    ) -> List[RelatedEntity]:
        """
        Resolve one direction of an entity's relationships.

        Raises:
            CatalogApiError: Every endpoint variant failed, tagged with `direction`.
        """
        direction = Direction(direction)
        return await self._first_success(
            relationship_endpoints(urn, direction),
            lambda _path, body: parse_relationships(body),
            f"Failed to fetch {direction.value.lower()} relationships from catalog.",
            direction=direction.value,
        )
