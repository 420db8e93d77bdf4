"""Layout Engine - Dispatch a view mode to its layout algorithm.

Every view mode maps to exactly one layout function. The mapping is checked
at import time, so adding a ViewMode without a layout fails loudly.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from src.graph.types import GraphData, NodeGroup, WeightedNode
from src.graph.weights import compute_node_weights
from src.session.view_settings import ViewMode, ViewSettingsMap

from .arc import arc_layout
from .base import LayoutResult
from .force import SETTLE_TICKS, force_layout
from .listing import list_layout
from .matrix import matrix_layout
from .pack import pack_layout
from .ring import ring_layout
from .tree import tree_layout

logger = structlog.get_logger()


@dataclass
class LayoutContext:
    """Everything a layout needs besides the graph."""

    selected_node_id: str | None = None
    group_filter: tuple[NodeGroup | str, ...] = ()
    view_settings: ViewSettingsMap = field(default_factory=ViewSettingsMap)
    rotation: float = 0.0
    force_seed: int | None = None
    force_ticks: int = SETTLE_TICKS


LayoutFn = Callable[[list[WeightedNode], GraphData, LayoutContext, ViewMode], LayoutResult]


def _list(weighted, graph, ctx, mode):
    return list_layout(weighted)


def _ring(weighted, graph, ctx, mode):
    return ring_layout(
        weighted,
        graph.edges,
        ctx.selected_node_id,
        ctx.view_settings.get(mode),
        rotation=ctx.rotation,
    )


def _force(weighted, graph, ctx, mode):
    return force_layout(
        weighted,
        graph.edges,
        ctx.view_settings.get(mode),
        seed=ctx.force_seed,
        ticks=ctx.force_ticks,
    )


def _tree(weighted, graph, ctx, mode):
    return tree_layout(weighted, graph.edges, ctx.selected_node_id, ctx.view_settings.get(mode))


def _pack(weighted, graph, ctx, mode):
    return pack_layout(weighted, ctx.view_settings.get(mode))


def _matrix(weighted, graph, ctx, mode):
    return matrix_layout(weighted, graph.edges, ctx.view_settings.get(mode))


def _arc(weighted, graph, ctx, mode):
    return arc_layout(weighted)


LAYOUTS: dict[ViewMode, LayoutFn] = {
    ViewMode.LIST: _list,
    # Spiral word placement for d3cloud/animated is a rendering concern; the
    # ring layout gives them stable anchor positions with their own fonts.
    ViewMode.CLOUD: _ring,
    ViewMode.D3CLOUD: _ring,
    ViewMode.ANIMATED: _ring,
    ViewMode.TREE: _tree,
    ViewMode.FORCE: _force,
    ViewMode.BUBBLE: _pack,
    ViewMode.HEATMAP: _matrix,
    ViewMode.PIE: _arc,
}

_missing = set(ViewMode) - set(LAYOUTS)
if _missing:
    raise RuntimeError(f"View modes without a layout: {sorted(m.value for m in _missing)}")


def compute_layout(
    view_mode: ViewMode | str,
    graph: GraphData,
    context: LayoutContext | None = None,
) -> LayoutResult:
    """Weigh the graph and run the layout for ``view_mode``.

    Raises:
        ValueError: If ``view_mode`` is not a known view
    """
    mode = ViewMode(view_mode)
    ctx = context or LayoutContext()
    weighted = compute_node_weights(graph, ctx.group_filter)
    result = LAYOUTS[mode](weighted, graph, ctx, mode)
    logger.debug("layout_computed", view_mode=mode.value, nodes=len(weighted), items=len(result.items))
    return result
