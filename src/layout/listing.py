"""Ranked List Layout - One row per node with a relative weight bar."""

from src.graph.types import WeightedNode
from src.graph.weights import max_weight

from .base import LayoutItem, LayoutResult

MIN_BAR_FRACTION = 0.04


def list_layout(weighted: list[WeightedNode]) -> LayoutResult:
    """Rows in weight order. ``y`` is the row index, ``size`` the bar fraction."""
    top = max_weight(weighted)
    items = []
    for row, node in enumerate(weighted):
        fraction = node.weight / top if top > 0 else 0.0
        items.append(
            LayoutItem(node_id=node.id, x=0.0, y=float(row), size=max(fraction, MIN_BAR_FRACTION))
        )
    return LayoutResult(items=items)
