"""Graph algorithms on the component call graph."""

from .algorithms import (
    all_pairs_distances,
    bfs_distances,
    mutual_pairs,
    reverse_adjacency,
    shortest_path_length,
    transitive_dependents,
)

__all__ = [
    "all_pairs_distances",
    "bfs_distances",
    "mutual_pairs",
    "reverse_adjacency",
    "shortest_path_length",
    "transitive_dependents",
]
