"""Reachability over board cells with portal bridges."""

from collections import deque
from typing import Dict, Iterable, List, Set

from .models import Coord


def portal_bridges(groups: Dict[str, List[Coord]], nodes: Set[Coord]) -> Dict[Coord, Set[Coord]]:
    """
    Extra edges contributed by portals.

    Every node-bearing member of a portal group links to every other
    node-bearing member of the same group.
    """
    bridges: Dict[Coord, Set[Coord]] = {}
    for members in groups.values():
        linked = [cell for cell in members if cell in nodes]
        for cell in linked:
            bridges.setdefault(cell, set()).update(other for other in linked if other != cell)
    return bridges


def reachable_from(
    seeds: Iterable[Coord],
    nodes: Set[Coord],
    bridges: Dict[Coord, Set[Coord]],
) -> Set[Coord]:
    """Breadth-first search from the seed cells over 4-adjacency plus bridges."""
    start = [cell for cell in seeds if cell in nodes]
    seen: Set[Coord] = set(start)
    queue = deque(start)

    while queue:
        r, c = queue.popleft()
        neighbours = [(r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)]
        neighbours.extend(bridges.get((r, c), ()))
        for cell in neighbours:
            if cell in nodes and cell not in seen:
                seen.add(cell)
                queue.append(cell)

    return seen


def disconnected_nodes(
    seeds: Iterable[Coord],
    nodes: Set[Coord],
    bridges: Dict[Coord, Set[Coord]],
) -> List[Coord]:
    """
    Nodes not reachable from any seed, in row-major order.

    With no seed among the nodes every node counts as connected.
    """
    seed_nodes = [cell for cell in seeds if cell in nodes]
    if not seed_nodes:
        return []
    seen = reachable_from(seed_nodes, nodes, bridges)
    return sorted(nodes - seen)
