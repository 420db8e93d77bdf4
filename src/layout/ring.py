"""Radial Ring Layout - Word-cloud rings around a focal node.

The focal node sits at the center. Every other node is greedily packed into
concentric rings, neighbors of the focal node first, each ring taking nodes
until their estimated label arcs fill its circumference. This is a single
pass, not an optimal bin packing.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.graph.neighbors import build_adjacency
from src.graph.types import GraphEdge, WeightedNode
from src.graph.weights import interpolate_size, max_weight
from src.session.view_settings import AnimatedSettings, CloudSettings, D3CloudSettings

from .base import DEFAULT_CANVAS, TOP_ANGLE, LayoutItem, LayoutResult, group_rank, polar

MIN_RING_RADIUS = 70.0
RING_GAP = 65.0
MIN_ARC_GAP = 12.0
CHAR_WIDTH_RATIO = 0.55


@dataclass
class RingLayout(LayoutResult):
    """Ring layout output."""

    focal_id: str | None = None
    ring_count: int = 0
    ring_radii: list[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(focalId=self.focal_id, ringCount=self.ring_count, ringRadii=self.ring_radii)
        return data


def estimate_text_width(label: str, font_size: float) -> float:
    """Rough rendered width of a label."""
    return len(label) * font_size * CHAR_WIDTH_RATIO


def ring_radius(ring_index: int, base: float = MIN_RING_RADIUS, gap: float = RING_GAP) -> float:
    return base + (ring_index - 1) * gap


def order_around_focal(
    weighted: list[WeightedNode],
    edges: Iterable[GraphEdge],
    selected_node_id: str | None,
) -> tuple[WeightedNode, list[WeightedNode]]:
    """Pick the focal node and order the rest: neighbors first, then others."""
    by_id = {n.id: n for n in weighted}
    focal = by_id.get(selected_node_id) if selected_node_id else None
    if focal is None:
        focal = weighted[0]

    adjacent = build_adjacency(edges).get(focal.id, set())
    rest = [n for n in weighted if n.id != focal.id]
    neighbors = sorted((n for n in rest if n.id in adjacent), key=lambda n: n.weight, reverse=True)
    others = sorted((n for n in rest if n.id not in adjacent), key=lambda n: n.weight, reverse=True)
    return focal, neighbors + others


def ring_layout(
    weighted: list[WeightedNode],
    edges: Iterable[GraphEdge],
    selected_node_id: str | None = None,
    settings: CloudSettings | D3CloudSettings | AnimatedSettings | None = None,
    *,
    rotation: float = 0.0,
    canvas_size: float = DEFAULT_CANVAS,
    base_radius: float = MIN_RING_RADIUS,
    ring_gap: float = RING_GAP,
) -> RingLayout:
    """Lay out nodes as labels on concentric rings.

    Args:
        weighted: Weighted nodes, heaviest first
        edges: Graph edges used to find the focal node's neighbors
        selected_node_id: Preferred focal node; ignored if filtered out
        settings: Font range (cloud-style settings)
        rotation: Start-angle offset in radians, applied to every ring
        canvas_size: Square canvas edge length
        base_radius: Radius of ring 1
        ring_gap: Radial distance between consecutive rings

    Returns:
        RingLayout with the focal node at ring 0
    """
    if not weighted:
        return RingLayout()

    s = settings or CloudSettings()
    center = canvas_size / 2
    top = max_weight(weighted)

    def font_for(node: WeightedNode) -> float:
        return interpolate_size(node.weight, top, s.min_font, s.max_font)

    focal, remaining = order_around_focal(weighted, edges, selected_node_id)
    items = [LayoutItem(node_id=focal.id, x=center, y=center, size=font_for(focal), ring=0)]
    radii: list[float] = []

    ring_index = 1
    cursor = 0
    while cursor < len(remaining):
        radius = ring_radius(ring_index, base_radius, ring_gap)
        circumference = 2 * math.pi * radius

        used = 0.0
        ring_nodes: list[tuple[WeightedNode, float, float]] = []
        for node in remaining[cursor:]:
            font = font_for(node)
            arc = estimate_text_width(node.label, font) + MIN_ARC_GAP
            # A ring always takes at least one node, even an oversized one
            if used + arc > circumference and ring_nodes:
                break
            ring_nodes.append((node, font, arc))
            used += arc

        # Cluster colors within the ring
        ring_nodes.sort(key=lambda entry: group_rank(entry[0].group))

        spare = max(0.0, circumference - used)
        padding = spare / len(ring_nodes)

        angle = TOP_ANGLE + rotation
        for node, font, arc in ring_nodes:
            half = (arc + padding) / 2
            mid = angle + half / radius
            x, y = polar(center, center, radius, mid)
            items.append(LayoutItem(node_id=node.id, x=x, y=y, size=font, ring=ring_index))
            angle = mid + half / radius

        radii.append(radius)
        cursor += len(ring_nodes)
        ring_index += 1

    return RingLayout(items=items, focal_id=focal.id, ring_count=ring_index - 1, ring_radii=radii)
