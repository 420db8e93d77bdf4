"""Shared test fixtures for the graph views."""

import pytest

from src.graph import GraphData, compute_node_weights
from src.ingestion import MOCK_GRAPH


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_graph(nodes: list[tuple[str, str]], edges: list[tuple[str, str]]) -> GraphData:
    """Build a graph from (id, group) pairs and (source, target) pairs."""
    return GraphData.from_dict(
        {
            "nodes": [{"id": i, "label": i, "group": g} for i, g in nodes],
            "edges": [{"source": s, "target": t} for s, t in edges],
        }
    )


@pytest.fixture
def mock_graph():
    """The bundled community mock graph."""
    return MOCK_GRAPH


@pytest.fixture
def mock_weighted(mock_graph):
    return compute_node_weights(mock_graph)


@pytest.fixture
def path_graph():
    """a - b - c - d, plus an isolated node e."""
    return make_graph(
        [("a", "actor"), ("b", "activity"), ("c", "activity"), ("d", "tag"), ("e", "tag")],
        [("a", "b"), ("b", "c"), ("c", "d")],
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def graph_factory():
    return make_graph
