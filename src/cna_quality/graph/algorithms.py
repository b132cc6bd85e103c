"""Graph algorithms over component adjacency: BFS distances, reachability, mutual pairs.

Adjacency maps a component id to the ids of the components it invokes
(A -> B means A has a link to an endpoint of B).
"""

from collections import deque
from typing import Optional


def bfs_distances(adjacency: dict[str, list[str]], source: str) -> dict[str, int]:
    """Hop count from source to every node reachable from it (source included, at 0)."""
    distances: dict[str, int] = {source: 0}
    queue: deque[str] = deque([source])
    while queue:
        node = queue.popleft()
        for neighbor in adjacency.get(node, []):
            if neighbor not in distances:
                distances[neighbor] = distances[node] + 1
                queue.append(neighbor)
    return distances


def shortest_path_length(
    adjacency: dict[str, list[str]], source: str, target: str
) -> Optional[int]:
    """Directed shortest path length in hops, or None if target is unreachable."""
    return bfs_distances(adjacency, source).get(target)


def all_pairs_distances(
    adjacency: dict[str, list[str]], nodes: list[str]
) -> dict[str, dict[str, int]]:
    """BFS from every node. Unreachable pairs are absent from the inner dict."""
    return {node: bfs_distances(adjacency, node) for node in nodes}


def reverse_adjacency(adjacency: dict[str, list[str]]) -> dict[str, list[str]]:
    reverse: dict[str, list[str]] = {node: [] for node in adjacency}
    for node, targets in adjacency.items():
        for target in targets:
            reverse.setdefault(target, [])
            if node not in reverse[target]:
                reverse[target].append(node)
    return reverse


def transitive_dependents(adjacency: dict[str, list[str]]) -> dict[str, set[str]]:
    """For each node, every node that reaches it (directly or transitively).

    BFS on the reverse graph: if A invokes B and B invokes C, both A and B
    depend on C. A node never counts as its own dependent.
    """
    reverse_adj = reverse_adjacency(adjacency)
    dependents: dict[str, set[str]] = {}

    for start_node in reverse_adj:
        visited: set[str] = set()
        queue: deque[str] = deque(reverse_adj.get(start_node, []))
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            queue.extend(n for n in reverse_adj.get(node, []) if n not in visited)
        visited.discard(start_node)
        dependents[start_node] = visited

    return dependents


def mutual_pairs(adjacency: dict[str, list[str]]) -> list[tuple[str, str]]:
    """Unordered node pairs with edges in both directions, each reported once."""
    pairs: list[tuple[str, str]] = []
    for node, targets in adjacency.items():
        for target in targets:
            if node < target and node in adjacency.get(target, []):
                pairs.append((node, target))
    return pairs
