"""Adjacency Matrix Layout - Group-sorted square grid of connections."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.graph.neighbors import build_adjacency
from src.graph.types import GraphEdge, WeightedNode
from src.session.view_settings import HeatmapSettings

from .base import DEFAULT_CANVAS, LayoutItem, LayoutResult, group_rank


@dataclass
class MatrixLayout(LayoutResult):
    """Matrix output.

    ``nodes`` gives row/column order; ``cells[i][j]`` is True when an edge
    joins ``nodes[i]`` and ``nodes[j]``. ``separators`` are the canvas
    offsets where the group changes between consecutive rows.
    """

    nodes: list[WeightedNode] = field(default_factory=list)
    cells: list[list[bool]] = field(default_factory=list)
    cell_size: float = 0.0
    label_margin: float = 0.0
    separators: list[float] = field(default_factory=list)

    def filled(self) -> list[tuple[int, int]]:
        """(row, col) pairs of filled cells."""
        return [(i, j) for i, row in enumerate(self.cells) for j, on in enumerate(row) if on]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            order=[n.id for n in self.nodes],
            cells=self.cells,
            cellSize=self.cell_size,
            labelMargin=self.label_margin,
            separators=self.separators,
        )
        return data


def matrix_layout(
    weighted: list[WeightedNode],
    edges: Iterable[GraphEdge],
    settings: HeatmapSettings | None = None,
    *,
    canvas_size: float = DEFAULT_CANVAS,
) -> MatrixLayout:
    """Build the adjacency grid for the heaviest ``max_nodes`` nodes.

    Rows are sorted by group order, then weight descending. Each item sits
    on the diagonal cell of its row with ``size`` equal to the cell size.
    """
    if not weighted:
        return MatrixLayout()

    s = settings or HeatmapSettings()
    top = weighted[: int(s.max_nodes)]
    ordered = sorted(top, key=lambda n: (group_rank(n.group), -n.weight))

    adjacency = build_adjacency(edges, allowed_ids={n.id for n in ordered})
    cells = [
        [col.id in adjacency.get(row.id, ()) for col in ordered]
        for row in ordered
    ]

    margin = s.label_margin
    cell_size = (canvas_size - margin) / len(ordered)

    separators = [
        margin + i * cell_size
        for i in range(1, len(ordered))
        if ordered[i].group != ordered[i - 1].group
    ]

    items = []
    for i, node in enumerate(ordered):
        offset = margin + (i + 0.5) * cell_size
        items.append(LayoutItem(node_id=node.id, x=offset, y=offset, size=cell_size, ring=i))

    return MatrixLayout(
        items=items,
        nodes=ordered,
        cells=cells,
        cell_size=cell_size,
        label_margin=margin,
        separators=separators,
    )
