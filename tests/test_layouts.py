"""Tests for the matrix, arc, tree and list layouts and the dispatcher."""

import math

import pytest

from src.graph import GraphData, NodeGroup, compute_node_weights
from src.layout import (
    LAYOUTS,
    ArcLayout,
    LayoutContext,
    MatrixLayout,
    PackLayout,
    RingLayout,
    TreeLayout,
    arc_layout,
    compute_layout,
    list_layout,
    matrix_layout,
    tree_layout,
)
from src.layout.arc import ARC_GAP
from src.session.view_settings import HeatmapSettings, TreeSettings, ViewMode, ViewSettingsMap


class TestMatrixLayout:
    """Tests for the adjacency matrix."""

    def test_empty(self):
        assert matrix_layout([], []).is_empty

    def test_cells_match_edges(self, mock_graph, mock_weighted):
        result = matrix_layout(mock_weighted, mock_graph.edges)
        pairs = {frozenset((e.source, e.target)) for e in mock_graph.edges}

        for i, row in enumerate(result.nodes):
            for j, col in enumerate(result.nodes):
                expected = i != j and frozenset((row.id, col.id)) in pairs
                assert result.cells[i][j] == expected

    def test_symmetric(self, mock_graph, mock_weighted):
        result = matrix_layout(mock_weighted, mock_graph.edges)

        n = len(result.nodes)
        assert all(result.cells[i][j] == result.cells[j][i] for i in range(n) for j in range(n))
        assert len(result.filled()) == 2 * len(mock_graph.edges)

    def test_sorted_by_group_then_weight(self, mock_graph, mock_weighted):
        result = matrix_layout(mock_weighted, mock_graph.edges)
        groups = [n.group for n in result.nodes]

        assert groups == [NodeGroup.ACTOR] * 4 + [NodeGroup.ACTIVITY] * 8 + [NodeGroup.TAG] * 6
        activity_weights = [n.weight for n in result.nodes[4:12]]
        assert activity_weights == sorted(activity_weights, reverse=True)

    def test_separators(self, mock_graph, mock_weighted):
        result = matrix_layout(mock_weighted, mock_graph.edges, HeatmapSettings(label_margin=60))

        assert result.cell_size == pytest.approx((600 - 60) / 18)
        assert result.separators == pytest.approx(
            [60 + 4 * result.cell_size, 60 + 12 * result.cell_size]
        )

    def test_max_nodes_keeps_heaviest(self, mock_graph, mock_weighted):
        result = matrix_layout(mock_weighted, mock_graph.edges, HeatmapSettings(max_nodes=4))

        assert {n.id for n in result.nodes} == {w.id for w in mock_weighted[:4]}
        assert result.separators == []

    def test_items_on_diagonal(self, mock_graph, mock_weighted):
        result = matrix_layout(mock_weighted, mock_graph.edges)

        for item in result.items:
            assert item.x == item.y
            assert item.size == result.cell_size


class TestArcLayout:
    """Tests for the proportional arc (pie) layout."""

    def test_empty(self):
        result = arc_layout([])

        assert isinstance(result, ArcLayout)
        assert result.segments == []
        assert result.group_arcs == []

    def test_full_turn(self, mock_weighted):
        result = arc_layout(mock_weighted)

        total = sum(s.sweep for s in result.segments) + ARC_GAP * len(result.segments)
        assert total == pytest.approx(2 * math.pi)

        group_total = sum(g.sweep for g in result.group_arcs) + ARC_GAP * len(result.group_arcs)
        assert group_total == pytest.approx(2 * math.pi)

    def test_sweep_proportional_to_weight(self, mock_weighted):
        result = arc_layout(mock_weighted)
        by_id = {s.node_id: s for s in result.segments}

        assert by_id["activity:101"].sweep == pytest.approx(4 * by_id["tag:federation"].sweep)
        assert by_id["actor:1"].sweep == pytest.approx(2 * by_id["tag:federation"].sweep)

    def test_zero_weight_counts_as_one(self, graph_factory):
        graph = graph_factory([("a", "actor"), ("b", "tag"), ("c", "tag")], [("b", "c")])

        result = arc_layout(compute_node_weights(graph))

        by_id = {s.node_id: s for s in result.segments}
        assert by_id["a"].weight == 0
        assert by_id["a"].sweep == pytest.approx(by_id["b"].sweep)

    def test_starts_at_top_and_is_contiguous(self, mock_weighted):
        result = arc_layout(mock_weighted)

        assert result.segments[0].start_angle == pytest.approx(-math.pi / 2)
        for prev, cur in zip(result.segments, result.segments[1:]):
            assert cur.start_angle == pytest.approx(prev.end_angle + ARC_GAP)

    def test_group_arcs_in_group_order(self, mock_weighted):
        result = arc_layout(mock_weighted)

        assert [g.group for g in result.group_arcs] == [
            NodeGroup.ACTOR,
            NodeGroup.ACTIVITY,
            NodeGroup.TAG,
        ]
        assert [g.total_weight for g in result.group_arcs] == [8, 28, 12]


class TestTreeLayout:
    """Tests for the radial BFS tree."""

    def test_empty(self):
        assert tree_layout([], []).is_empty

    def test_path_graph_levels(self, path_graph):
        weighted = compute_node_weights(path_graph)

        result = tree_layout(weighted, path_graph.edges, "a")

        assert result.root_id == "a"
        assert [result.levels[n] for n in "abcd"] == [0, 1, 2, 3]

    def test_unreachable_one_past_deepest(self, path_graph):
        result = tree_layout(compute_node_weights(path_graph), path_graph.edges, "a")

        assert result.levels["e"] == 4

    def test_root_defaults_to_heaviest(self, path_graph):
        weighted = compute_node_weights(path_graph)

        result = tree_layout(weighted, path_graph.edges)

        assert result.root_id == weighted[0].id == "b"
        assert result.item_for("b").ring == 0

    def test_ring_geometry(self, path_graph):
        result = tree_layout(compute_node_weights(path_graph), path_graph.edges, "a")
        center = 550 / 2

        assert result.ring_gap == pytest.approx(min(100, (center - 40) / (4 + 1)))
        root = result.item_for("a")
        assert (root.x, root.y) == (center, center)
        d = result.item_for("d")
        assert math.hypot(d.x - center, d.y - center) == pytest.approx(3 * result.ring_gap)

    def test_first_on_ring_at_top(self, path_graph):
        result = tree_layout(compute_node_weights(path_graph), path_graph.edges, "a")
        center = 550 / 2

        b = result.item_for("b")
        assert b.x == pytest.approx(center)
        assert b.y == pytest.approx(center - result.ring_gap)

    def test_node_radius_range(self, path_graph):
        settings = TreeSettings(min_radius=2, max_radius=12)

        result = tree_layout(compute_node_weights(path_graph), path_graph.edges, "a", settings)

        assert result.item_for("b").size == pytest.approx(12)
        assert result.item_for("a").size == pytest.approx(7)
        assert result.item_for("e").size == pytest.approx(2)


class TestListLayout:
    """Tests for the ranked list."""

    def test_rows(self, mock_weighted):
        result = list_layout(mock_weighted)

        assert [i.node_id for i in result.items] == [w.id for w in mock_weighted]
        assert [i.y for i in result.items] == list(range(len(mock_weighted)))
        assert result.items[0].size == 1.0
        assert result.items[-1].size == pytest.approx(0.25)

    def test_minimum_bar(self, path_graph):
        result = list_layout(compute_node_weights(path_graph))

        assert result.item_for("e").size == pytest.approx(0.04)


class TestComputeLayout:
    """Tests for view-mode dispatch."""

    def test_every_view_has_a_layout(self):
        assert set(LAYOUTS) == set(ViewMode)

    @pytest.mark.parametrize(
        "mode,result_type",
        [
            (ViewMode.CLOUD, RingLayout),
            (ViewMode.D3CLOUD, RingLayout),
            (ViewMode.ANIMATED, RingLayout),
            (ViewMode.TREE, TreeLayout),
            (ViewMode.BUBBLE, PackLayout),
            (ViewMode.HEATMAP, MatrixLayout),
            (ViewMode.PIE, ArcLayout),
        ],
    )
    def test_dispatch(self, mock_graph, mode, result_type):
        result = compute_layout(mode, mock_graph, LayoutContext(force_seed=0))

        assert isinstance(result, result_type)
        assert len(result.items) == 18

    def test_force_and_list(self, mock_graph):
        force = compute_layout("force", mock_graph, LayoutContext(force_seed=1, force_ticks=10))
        rows = compute_layout("list", mock_graph)

        assert len(force.items) == len(rows.items) == 18

    def test_empty_graph_gives_empty_results(self):
        for mode in ViewMode:
            assert compute_layout(mode, GraphData()).is_empty

    def test_context_filter_and_selection(self, mock_graph):
        context = LayoutContext(selected_node_id="tag:ux", group_filter=("tag",))

        result = compute_layout(ViewMode.CLOUD, mock_graph, context)

        assert result.focal_id == "tag:ux"
        assert len(result.items) == 6

    def test_uses_view_settings(self, mock_graph):
        settings = ViewSettingsMap().merge({"d3cloud": {"maxFont": 90}})

        result = compute_layout(
            ViewMode.D3CLOUD, mock_graph, LayoutContext(view_settings=settings)
        )

        assert result.items[0].size == pytest.approx(90)

    def test_unknown_mode(self, mock_graph):
        with pytest.raises(ValueError):
            compute_layout("spiral", mock_graph)
