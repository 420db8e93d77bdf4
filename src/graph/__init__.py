"""Graph module - activity graph types, weights and neighbor lookup."""

from .neighbors import build_adjacency, neighbor_at_index, neighbor_ids
from .types import (
    GROUP_ORDER,
    GraphData,
    GraphEdge,
    GraphNode,
    NodeGroup,
    WeightedNode,
    parse_group_filter,
)
from .weights import compute_node_weights, interpolate_size, max_weight

__all__ = [
    "GROUP_ORDER",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "NodeGroup",
    "WeightedNode",
    "build_adjacency",
    "compute_node_weights",
    "interpolate_size",
    "max_weight",
    "neighbor_at_index",
    "neighbor_ids",
    "parse_group_filter",
]
