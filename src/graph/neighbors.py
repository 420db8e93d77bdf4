"""Neighbor Index - Undirected adjacency derived from the edge list."""

from collections.abc import Iterable

from .types import GraphData, GraphEdge


def neighbor_ids(graph: GraphData, node_id: str) -> list[str]:
    """Get ids connected to ``node_id`` by any edge, in either direction.

    Returns:
        Deduplicated neighbor ids in first-seen edge order, never including
        ``node_id`` itself. Unknown ids yield an empty list.
    """
    ids: dict[str, None] = {}
    for edge in graph.edges:
        if edge.source == node_id:
            ids[edge.target] = None
        if edge.target == node_id:
            ids[edge.source] = None
    ids.pop(node_id, None)
    return list(ids)


def neighbor_at_index(
    graph: GraphData,
    node_id: str,
    current_index: int,
) -> tuple[str, int] | None:
    """Pick the neighbor at a cycling index.

    Returns:
        Tuple of (neighbor_id, next_index), or None if the node has no neighbors
    """
    neighbors = neighbor_ids(graph, node_id)
    if not neighbors:
        return None
    idx = current_index % len(neighbors)
    return neighbors[idx], idx + 1


def build_adjacency(
    edges: Iterable[GraphEdge],
    allowed_ids: set[str] | None = None,
) -> dict[str, set[str]]:
    """Build a symmetric adjacency map, skipping self-loops.

    Edges with an endpoint outside ``allowed_ids`` are ignored when a set is
    given.
    """
    adjacency: dict[str, set[str]] = {}
    for edge in edges:
        if allowed_ids is not None and (
            edge.source not in allowed_ids or edge.target not in allowed_ids
        ):
            continue
        if edge.source == edge.target:
            continue
        adjacency.setdefault(edge.source, set()).add(edge.target)
        adjacency.setdefault(edge.target, set()).add(edge.source)
    return adjacency
