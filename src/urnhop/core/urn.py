"""
URN Semantics.

Parses catalog identifiers of the form `urn:li:<type>:<payload>` and scans
arbitrary JSON payloads for embedded identifier references.

Identifiers are compared by exact string equality; nothing here normalizes
them.
"""

import re
from typing import Any, Dict, List, Set

URN_PREFIX = "urn:li:"
DEFAULT_ENTITY_TYPE = "entity"

_TYPE_PATTERN = re.compile(r"^urn:li:([^:]+):")

# Aspect record fields that may carry a display label, in priority order
ASPECT_LABEL_KEYS = ("label", "name", "aspectName")


def is_urn(value: Any) -> bool:
    """Check whether a value is a string following the identifier prefix convention."""
    return isinstance(value, str) and value.startswith(URN_PREFIX)


def parse_type(urn: str) -> str:
    """
    Extract the entity-kind segment of an identifier.

    Returns "entity" when the identifier does not follow the structured pattern.
    """
    match = _TYPE_PATTERN.match(urn)
    return match.group(1) if match else DEFAULT_ENTITY_TYPE


def parse_name(urn: str) -> str:
    """
    Derive a display name from an identifier.

    Anything after a `#` fragment marker is ignored. A parenthesized
    composite key yields its interior verbatim, e.g.
    `urn:li:dataset:(urn:li:dataPlatform:hive,users,PROD)` gives
    `urn:li:dataPlatform:hive,users,PROD`. Otherwise the last
    colon-delimited segment is used, falling back to the full identifier.

    Nested keys keep their outermost interior, e.g.
    `urn:li:schemaField:(urn:li:dataset:(a,b),col)` gives
    `urn:li:dataset:(a,b),col`, not the innermost `a,b`.
    """
    before_fragment = urn.split("#", 1)[0]
    open_idx = before_fragment.find("(")
    close_idx = before_fragment.rfind(")")
    if open_idx >= 0 and close_idx > open_idx:
        name = before_fragment[open_idx + 1:close_idx]
    else:
        name = before_fragment.split(":")[-1]
    return name or urn


def extract_urns(value: Any) -> Set[str]:
    """
    Collect every identifier-like string inside a JSON value.

    Strings, list items and object values are scanned at any depth.
    Object keys are not.
    """
    found: Set[str] = set()
    stack: List[Any] = [value]

    while stack:
        current = stack.pop()
        if isinstance(current, str):
            if current.startswith(URN_PREFIX):
                found.add(current)
        elif isinstance(current, dict):
            stack.extend(current.values())
        elif isinstance(current, (list, tuple)):
            stack.extend(current)

    return found


def _aspect_label(record: Dict[str, Any], key: str | None, position: int) -> str:
    for field in ASPECT_LABEL_KEYS:
        candidate = record.get(field)
        if isinstance(candidate, str) and candidate:
            return candidate
    if key:
        return key
    return f"aspect_{position}"


def group_by_aspect(raw: Any) -> Dict[str, Set[str]]:
    """
    Group the identifiers referenced by each aspect of an entity payload.

    The `aspects` field may be a list of labeled records (older payloads)
    or a map of named records (newer payloads). Aspects that reference no
    identifiers are left out. Aspects sharing a label are merged.
    """
    groups: Dict[str, Set[str]] = {}
    if not isinstance(raw, dict):
        return groups

    aspects = raw.get("aspects")
    if isinstance(aspects, list):
        entries = [(None, aspect) for aspect in aspects]
    elif isinstance(aspects, dict):
        entries = list(aspects.items())
    else:
        return groups

    for position, (key, aspect) in enumerate(entries, start=1):
        if not isinstance(aspect, dict):
            continue
        urns = extract_urns(aspect)
        if not urns:
            continue
        label = _aspect_label(aspect, key, position)
        groups.setdefault(label, set()).update(urns)

    return groups


def labels_by_urn(groups: Dict[str, Set[str]], exclude: str | None = None) -> Dict[str, List[str]]:
    """
    Invert aspect groups into an ordered label list per identifier.

    Labels keep the order in which their groups appear in the payload.
    """
    result: Dict[str, List[str]] = {}
    for label, urns in groups.items():
        for urn in sorted(urns):
            if urn == exclude:
                continue
            labels = result.setdefault(urn, [])
            if label not in labels:
                labels.append(label)
    return result
