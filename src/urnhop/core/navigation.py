"""
Navigation Stack.

Pure state transition over the breadcrumb trail of visited identifiers.
The most recent identifier is always the last element.
"""

from typing import List, Optional, Sequence

from .types import NavigationMode


def _pop_back_or_append(stack: Sequence[str], target: str) -> List[str]:
    """Truncate to the last occurrence of target, or append it."""
    for idx in range(len(stack) - 1, -1, -1):
        if stack[idx] == target:
            return list(stack[:idx + 1])
    return [*stack, target]


def advance(
    stack: Sequence[str],
    target: str,
    mode: NavigationMode | str,
    breadcrumb_index: Optional[int] = None,
) -> List[str]:
    """
    Compute the navigation stack after moving to `target`.

    - connect: history is discarded.
    - node: re-clicking the current node is a no-op; revisiting an earlier
      node pops back to it; anything else is appended.
    - breadcrumb: a valid index pointing at `target` truncates there,
      otherwise behaves like node.

    The input is never mutated.
    """
    mode = NavigationMode(mode)

    if mode == NavigationMode.CONNECT or not stack:
        return [target]

    if mode == NavigationMode.BREADCRUMB:
        if (
            breadcrumb_index is not None
            and 0 <= breadcrumb_index < len(stack)
            and stack[breadcrumb_index] == target
        ):
            return list(stack[:breadcrumb_index + 1])
        return _pop_back_or_append(stack, target)

    if stack[-1] == target:
        return list(stack)

    return _pop_back_or_append(stack, target)


def previous_of(stack: Sequence[str], current: str) -> Optional[str]:
    """The identifier visited just before `current`, if any."""
    if len(stack) < 2:
        return None
    previous = stack[-2]
    return None if previous == current else previous
