"""Proportional Arc Layout - Two-ring pie of node and group weights.

Outer ring: one arc per node. Inner ring: one arc per group. Arc sweeps are
proportional to ``max(weight, 1)`` and separated by a small fixed gap, so
sweeps plus gaps always make one full turn.
"""

import math
from dataclasses import dataclass, field

from src.graph.types import GROUP_ORDER, NodeGroup, WeightedNode

from .base import TOP_ANGLE, LayoutItem, LayoutResult, polar

ARC_CANVAS = 500.0
ARC_GAP = 0.01
OUTER_RADIUS = 220.0
OUTER_INNER_RADIUS = 160.0
INNER_RADIUS = 150.0
INNER_INNER_RADIUS = 90.0


@dataclass(frozen=True)
class ArcSegment:
    node_id: str
    group: NodeGroup
    weight: int
    start_angle: float
    end_angle: float

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return self.start_angle + self.sweep / 2

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "group": self.group.value,
            "weight": self.weight,
            "startAngle": self.start_angle,
            "endAngle": self.end_angle,
        }


@dataclass(frozen=True)
class GroupArc:
    group: NodeGroup
    total_weight: int
    start_angle: float
    end_angle: float

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    def to_dict(self) -> dict:
        return {
            "group": self.group.value,
            "totalWeight": self.total_weight,
            "startAngle": self.start_angle,
            "endAngle": self.end_angle,
        }


@dataclass
class ArcLayout(LayoutResult):
    segments: list[ArcSegment] = field(default_factory=list)
    group_arcs: list[GroupArc] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            segments=[s.to_dict() for s in self.segments],
            groupArcs=[g.to_dict() for g in self.group_arcs],
        )
        return data


def arc_layout(weighted: list[WeightedNode], *, canvas_size: float = ARC_CANVAS) -> ArcLayout:
    """Compute outer node arcs and inner group arcs.

    Items sit at the middle of each outer arc; ``size`` is the arc sweep in
    radians.
    """
    total = sum(max(n.weight, 1) for n in weighted)
    if total == 0:
        return ArcLayout()

    center = canvas_size / 2
    label_radius = (OUTER_RADIUS + OUTER_INNER_RADIUS) / 2

    segments = []
    items = []
    available = 2 * math.pi - ARC_GAP * len(weighted)
    angle = TOP_ANGLE
    for node in weighted:
        sweep = max(node.weight, 1) / total * available
        segment = ArcSegment(node.id, node.group, node.weight, angle, angle + sweep)
        segments.append(segment)
        x, y = polar(center, center, label_radius, segment.mid_angle)
        items.append(LayoutItem(node_id=node.id, x=x, y=y, size=sweep, ring=1))
        angle += sweep + ARC_GAP

    group_totals: dict[NodeGroup, int] = {}
    for node in weighted:
        group_totals[node.group] = group_totals.get(node.group, 0) + max(node.weight, 1)

    group_arcs = []
    available = 2 * math.pi - ARC_GAP * len(group_totals)
    angle = TOP_ANGLE
    for group in sorted(group_totals, key=GROUP_ORDER.__getitem__):
        sweep = group_totals[group] / total * available
        group_arcs.append(GroupArc(group, group_totals[group], angle, angle + sweep))
        angle += sweep + ARC_GAP

    return ArcLayout(items=items, segments=segments, group_arcs=group_arcs)
