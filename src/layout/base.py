"""Layout primitives shared by every layout algorithm."""

import math
from dataclasses import dataclass, field

from src.graph.types import GROUP_ORDER, NodeGroup

# 12 o'clock in SVG coordinates (y grows downward)
TOP_ANGLE = -math.pi / 2

DEFAULT_CANVAS = 600.0


@dataclass(frozen=True)
class LayoutItem:
    """A positioned node.

    ``size`` is a font size for text layouts and a radius for circle layouts.
    ``ring`` is the ring, level or hierarchy depth where the layout has one.
    """

    node_id: str
    x: float
    y: float
    size: float
    ring: int | None = None

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "ring": self.ring,
        }


@dataclass
class LayoutResult:
    """Output of a layout run. Subclasses add layout-specific geometry."""

    items: list[LayoutItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for(self, node_id: str) -> LayoutItem | None:
        for item in self.items:
            if item.node_id == node_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {"items": [item.to_dict() for item in self.items]}


def group_rank(group: NodeGroup) -> int:
    return GROUP_ORDER.get(group, GROUP_ORDER[NodeGroup.UNKNOWN])


def polar(cx: float, cy: float, radius: float, angle: float) -> tuple[float, float]:
    """Convert polar coordinates around (cx, cy) to cartesian."""
    return cx + radius * math.cos(angle), cy + radius * math.sin(angle)
