"""
Response-shape parsers for the catalog API.

Different API generations wrap the same logical payload differently. Each
parser here is a pure function that either accepts a decoded JSON body and
returns the normalized record, or returns Err explaining the mismatch.
Callers try them in order and keep the first match.
"""

from functools import partial
from typing import Any, Callable, Dict, List, Optional

from ..core.result import Err, Ok, Result, first_ok, map_ok
from ..core.types import RelatedEntity
from ..core.urn import is_urn

# Wrapper fields that may hold the relationship list, in priority order
RELATIONSHIP_LIST_KEYS = ("relationships", "entities", "value", "elements")

# Item fields that may hold the related identifier, in priority order
RELATED_URN_KEYS = ("entity", "urn", "entityUrn", "relatedUrn")

# Item fields that may hold the relationship type, in priority order
RELATIONSHIP_TYPE_KEYS = ("relationshipType", "type", "relationship")

DEFAULT_RELATIONSHIP_LABEL = "related_to"

EntityParser = Callable[[Any], Result[Dict[str, Any], str]]


# =========================================================================
# Entity payloads
# =========================================================================

def parse_identifier_map(body: Any) -> Result[Dict[str, Any], str]:
    """`{"responses": {"<urn>": {...}}}` as returned by the batch lookup."""
    if not isinstance(body, dict):
        return Err("body is not an object")
    responses = body.get("responses")
    if not isinstance(responses, dict):
        return Err("no 'responses' map")
    for record in responses.values():
        if isinstance(record, dict):
            return Ok(record)
        return Err("'responses' entry is not an object")
    return Err("'responses' map is empty")


def parse_value_wrapper(body: Any) -> Result[Dict[str, Any], str]:
    """`{"value": {...}}` as returned by some legacy endpoints."""
    if not isinstance(body, dict):
        return Err("body is not an object")
    value = body.get("value")
    if not isinstance(value, dict):
        return Err("no 'value' object")
    return Ok(value)


def parse_flat_record(body: Any) -> Result[Dict[str, Any], str]:
    """The entity record itself at the top level."""
    if not isinstance(body, dict):
        return Err("body is not an object")
    if "responses" in body:
        return Err("body is a batch wrapper")
    return Ok(body)


ENTITY_PARSERS: List[EntityParser] = [
    parse_identifier_map,
    parse_value_wrapper,
    parse_flat_record,
]


def parse_entity_record(body: Any) -> Result[Dict[str, Any], List[str]]:
    """Try every known entity shape in order."""
    return first_ok(partial(parser, body) for parser in ENTITY_PARSERS)


def entity_urn(record: Dict[str, Any], requested: str) -> str:
    """The payload's own identifier when present, else the requested one."""
    urn = record.get("urn")
    return urn if isinstance(urn, str) and urn else requested


def parse_entity(body: Any, requested: str) -> Result[tuple[str, Dict[str, Any]], List[str]]:
    """Normalize an entity body into `(urn, record)`."""
    return map_ok(parse_entity_record(body), lambda record: (entity_urn(record, requested), record))


# =========================================================================
# Relationship payloads
# =========================================================================

def relationship_items(body: Any) -> List[Dict[str, Any]]:
    """Locate the first populated list among the known wrapper fields."""
    if not isinstance(body, dict):
        return []
    for key in RELATIONSHIP_LIST_KEYS:
        items = body.get(key)
        if isinstance(items, list) and items:
            return [item for item in items if isinstance(item, dict)]
    return []


def related_urn(item: Dict[str, Any]) -> Optional[str]:
    for key in RELATED_URN_KEYS:
        value = item.get(key)
        if is_urn(value):
            return value
    return None


def relationship_label(item: Dict[str, Any]) -> str:
    for key in RELATIONSHIP_TYPE_KEYS:
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    return DEFAULT_RELATIONSHIP_LABEL


def parse_relationships(body: Any) -> List[RelatedEntity]:
    """
    Normalize a relationships body.

    Items without a recognizable related identifier are dropped.
    """
    results: List[RelatedEntity] = []
    for item in relationship_items(body):
        urn = related_urn(item)
        if urn is None:
            continue
        results.append(RelatedEntity(urn=urn, label=relationship_label(item)))
    return results
