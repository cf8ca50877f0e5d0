"""Depth-first search and path finding over the transform graph."""

from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

from .errors import DisconnectedSensorError
from .graph import TransformGraph
from ..utils.logging import get_logger

logger = get_logger(__name__)

State = TypeVar("State", bound=Hashable)


def dfs(
    start: State,
    is_solution: Callable[[State], bool],
    expand: Callable[[State], Iterable[State]],
) -> Optional[State]:
    """Depth-first search from ``start``.

    States are expanded in the order ``expand`` yields them and the most
    recently generated state is explored first.  Visited states are not
    expanded again.

    Returns
    -------
    State or None
        The first state for which ``is_solution`` holds, or None if the
        reachable state space is exhausted.
    """
    stack = [start]
    visited = set()
    while stack:
        state = stack.pop()
        if is_solution(state):
            return state
        if state in visited:
            continue
        visited.add(state)
        for nxt in expand(state):
            if nxt not in visited:
                stack.append(nxt)
    return None


def find_path(graph: TransformGraph, start: int, reference: int = 0) -> List[int]:
    """Find a chain of direct edges from ``start`` to ``reference``.

    Any chain is acceptable because composing transforms along a path is
    exact; the result is not necessarily the shortest path.

    Raises
    ------
    DisconnectedSensorError
        If ``reference`` cannot be reached from ``start``.
    """
    adjacency: Dict[int, List[int]] = {}
    for a, b in graph.edges():
        adjacency.setdefault(a, []).append(b)

    def expand(path):
        return [path + (nxt,) for nxt in adjacency.get(path[-1], []) if nxt not in path]

    found = dfs((start,), lambda path: path[-1] == reference, expand)
    if found is None:
        raise DisconnectedSensorError(start, reference)
    return list(found)


def find_all_paths(graph: TransformGraph, reference: int = 0) -> Dict[int, List[int]]:
    """Paths to ``reference`` for every other scanner in the graph."""
    if not 0 <= reference < graph.n_scanners:
        raise ValueError(f"reference scanner {reference} out of range")
    paths = {}
    for scanner in range(graph.n_scanners):
        if scanner == reference:
            continue
        paths[scanner] = find_path(graph, scanner, reference)
        logger.debug("path %d -> %d: %s", scanner, reference, paths[scanner])
    return paths
