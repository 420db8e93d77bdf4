"""Ingestion module - upstream graph loading (Bonfires delve API or mock)."""

from .bonfire_loader import (
    BonfiresClient,
    GraphRepository,
    UpstreamGraphError,
    enrich,
    entity_group,
    load_graph,
    normalize_delve,
)
from .mock_graph import MOCK_GRAPH, MOCK_GRAPH_DATA

__all__ = [
    "MOCK_GRAPH",
    "MOCK_GRAPH_DATA",
    "BonfiresClient",
    "GraphRepository",
    "UpstreamGraphError",
    "enrich",
    "entity_group",
    "load_graph",
    "normalize_delve",
]
