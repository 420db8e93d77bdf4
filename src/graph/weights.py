"""Node Weights - Degree-based weighting with optional group filtering."""

from collections.abc import Iterable

from .types import GraphData, NodeGroup, WeightedNode


def compute_node_weights(
    graph: GraphData,
    group_filter: Iterable[NodeGroup | str] = (),
) -> list[WeightedNode]:
    """Compute node degrees and return nodes sorted by weight.

    Args:
        graph: The graph to weigh
        group_filter: Groups to keep. Empty keeps every node. Filtering only
            removes nodes from the output; edges to filtered-out nodes still
            count toward the degree of retained nodes.

    Returns:
        Weighted nodes, heaviest first, ties in original graph order
    """
    allowed = {NodeGroup.parse(g) for g in group_filter}

    degrees: dict[str, int] = {}
    for node in graph.nodes:
        if allowed and node.group not in allowed:
            continue
        degrees[node.id] = 0

    for edge in graph.edges:
        if edge.source in degrees:
            degrees[edge.source] += 1
        if edge.target in degrees:
            degrees[edge.target] += 1

    # Duplicate node ids keep their first position
    seen: set[str] = set()
    weighted = []
    for node in graph.nodes:
        if node.id in degrees and node.id not in seen:
            seen.add(node.id)
            weighted.append(WeightedNode(node=node, weight=degrees[node.id]))

    # sorted() is stable, so equal weights keep input order
    return sorted(weighted, key=lambda n: n.weight, reverse=True)


def max_weight(weighted: list[WeightedNode]) -> int:
    """Heaviest weight in a sorted list, 0 when empty."""
    return weighted[0].weight if weighted else 0


def interpolate_size(weight: int, max_w: int, min_size: float, max_size: float) -> float:
    """Linearly map a weight onto ``[min_size, max_size]``."""
    if max_w <= 0:
        return min_size
    return min_size + (weight / max_w) * (max_size - min_size)
