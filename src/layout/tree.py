"""Radial Tree Layout - BFS levels from a root node on concentric rings."""

import math
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.graph.neighbors import build_adjacency
from src.graph.types import GraphEdge, WeightedNode
from src.graph.weights import interpolate_size, max_weight
from src.session.view_settings import TreeSettings

from .base import TOP_ANGLE, LayoutItem, LayoutResult, polar

TREE_CANVAS = 550.0
MAX_RING_GAP = 100.0
CENTER_MARGIN = 40.0


@dataclass
class TreeLayout(LayoutResult):
    """Tree output. ``levels`` maps node id to its hop distance from the root."""

    root_id: str | None = None
    levels: dict[str, int] = field(default_factory=dict)
    ring_gap: float = 0.0

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(rootId=self.root_id, levels=self.levels, ringGap=self.ring_gap)
        return data


def bfs_levels(root_id: str, adjacency: dict[str, set[str]]) -> dict[str, int]:
    """Hop count from ``root_id`` for every reachable node."""
    levels = {root_id: 0}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        for neighbor in adjacency.get(current, ()):
            if neighbor not in levels:
                levels[neighbor] = levels[current] + 1
                queue.append(neighbor)
    return levels


def tree_layout(
    weighted: list[WeightedNode],
    edges: Iterable[GraphEdge],
    selected_node_id: str | None = None,
    settings: TreeSettings | None = None,
    *,
    canvas_size: float = TREE_CANVAS,
) -> TreeLayout:
    """Place nodes on rings by BFS distance from the root.

    The root is the selected node when it survived filtering, otherwise the
    heaviest node. Nodes unreachable from the root share one ring outside the
    deepest reachable level.
    """
    if not weighted:
        return TreeLayout()

    s = settings or TreeSettings()
    ids = {n.id for n in weighted}
    root_id = selected_node_id if selected_node_id in ids else weighted[0].id

    levels = bfs_levels(root_id, build_adjacency(edges, allowed_ids=ids))
    deepest = max(levels.values())
    for node in weighted:
        levels.setdefault(node.id, deepest + 1)

    center = canvas_size / 2
    total_levels = max(1, max(levels.values()))
    ring_gap = min(MAX_RING_GAP, (center - CENTER_MARGIN) / (total_levels + 1))

    by_level: dict[int, list[WeightedNode]] = {}
    for node in weighted:
        by_level.setdefault(levels[node.id], []).append(node)

    top = max_weight(weighted)
    items = []
    for level, nodes in by_level.items():
        step = 2 * math.pi / len(nodes)
        for i, node in enumerate(nodes):
            radius = interpolate_size(node.weight, top, s.min_radius, s.max_radius)
            if level == 0:
                x, y = center, center
            else:
                x, y = polar(center, center, ring_gap * level, TOP_ANGLE + i * step)
            items.append(LayoutItem(node_id=node.id, x=x, y=y, size=radius, ring=level))

    return TreeLayout(items=items, root_id=root_id, levels=levels, ring_gap=ring_gap)
