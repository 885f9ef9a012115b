"""
Result Type Implementation.

A small Ok/Err pair used by the response-shape parsers: each parser
either accepts a payload and returns the normalized record, or reports
why the payload does not match, without raising.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful computation."""
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents a failed computation."""
    error: E


Result = Union[Ok[T], Err[E]]


def map_ok(result: Result[T, E], func: Callable[[T], U]) -> Result[U, E]:
    """Apply a function to the contained value if Ok, otherwise return Err."""
    if isinstance(result, Ok):
        return Ok(func(result.value))
    return result  # type: ignore


def first_ok(attempts: Iterable[Callable[[], Result[T, E]]]) -> Result[T, list]:
    """
    Run attempts in order and return the first Ok.

    When every attempt fails, the Err carries all collected errors.
    """
    errors = []
    for attempt in attempts:
        result = attempt()
        if isinstance(result, Ok):
            return result
        errors.append(result.error)
    return Err(errors)
