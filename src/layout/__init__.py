"""Layout module - positions and sizes for every view mode."""

from .animation import FrameLoop, RotationAnimator, SimulationAnimator
from .arc import ArcLayout, ArcSegment, GroupArc, arc_layout
from .base import LayoutItem, LayoutResult
from .engine import LAYOUTS, LayoutContext, compute_layout
from .force import ForceSimulation, force_layout
from .listing import list_layout
from .matrix import MatrixLayout, matrix_layout
from .pack import PackCircle, PackLayout, enclose, pack_layout, pack_siblings
from .ring import RingLayout, ring_layout
from .tree import TreeLayout, bfs_levels, tree_layout

__all__ = [
    "LAYOUTS",
    "ArcLayout",
    "ArcSegment",
    "ForceSimulation",
    "FrameLoop",
    "GroupArc",
    "LayoutContext",
    "LayoutItem",
    "LayoutResult",
    "MatrixLayout",
    "PackCircle",
    "PackLayout",
    "RingLayout",
    "RotationAnimator",
    "SimulationAnimator",
    "TreeLayout",
    "arc_layout",
    "bfs_levels",
    "compute_layout",
    "enclose",
    "force_layout",
    "list_layout",
    "matrix_layout",
    "pack_layout",
    "pack_siblings",
    "ring_layout",
    "tree_layout",
]
