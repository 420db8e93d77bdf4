"""Bonfires Loader - Fetch the activity graph from the Bonfires "delve" API.

The delve response carries entities, episodes and edges. Entities become
actor/tag/activity nodes by their labels, episodes become activity nodes,
and edges are kept only when both endpoints exist. Every node gets a
``weight`` equal to its degree unless the payload already supplied one.
"""

from dataclasses import replace
from typing import Any

import httpx
import structlog

from src import config
from src.graph.types import GraphData, GraphEdge, GraphNode, NodeGroup

from .mock_graph import MOCK_GRAPH

logger = structlog.get_logger()


class UpstreamGraphError(Exception):
    """The upstream graph could not be fetched or was malformed."""


def entity_group(labels: list[str] | None) -> NodeGroup:
    """Map delve entity labels to a node group."""
    lowered = {label.lower() for label in labels or []}
    if "user" in lowered:
        return NodeGroup.ACTOR
    if "taxonomylabel" in lowered:
        return NodeGroup.TAG
    return NodeGroup.ACTIVITY


def normalize_delve(raw: dict[str, Any]) -> GraphData:
    """Convert a delve payload into a GraphData."""
    nodes: list[GraphNode] = []
    for entity in raw.get("entities") or []:
        nodes.append(
            GraphNode(
                id=entity["uuid"],
                label=entity.get("name") or "Unnamed",
                group=entity_group(entity.get("labels")),
                metadata=entity,
            )
        )
    for episode in raw.get("episodes") or []:
        nodes.append(
            GraphNode(
                id=episode["uuid"],
                label=episode.get("name") or "Unnamed",
                group=NodeGroup.ACTIVITY,
                metadata=episode,
            )
        )

    ids = {n.id for n in nodes}
    edges = [
        GraphEdge(
            source=edge["source_node_uuid"],
            target=edge["target_node_uuid"],
            type=edge.get("name") or None,
        )
        for edge in raw.get("edges") or []
        if edge.get("source_node_uuid") in ids and edge.get("target_node_uuid") in ids
    ]
    return GraphData(nodes=tuple(nodes), edges=tuple(edges))


def enrich(graph: GraphData) -> GraphData:
    """Fill in missing node weights with the node's degree."""
    degree = {n.id: 0 for n in graph.nodes}
    for edge in graph.edges:
        if edge.source in degree:
            degree[edge.source] += 1
        if edge.target in degree:
            degree[edge.target] += 1

    nodes = tuple(
        n if n.weight is not None else replace(n, weight=degree[n.id]) for n in graph.nodes
    )
    return GraphData(nodes=nodes, edges=graph.edges)


class BonfiresClient:
    """Async client for the delve endpoint."""

    def __init__(
        self,
        api_url: str,
        bonfire_id: str,
        agent_id: str,
        num_results: int = 30,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.bonfire_id = bonfire_id
        self.agent_id = agent_id
        self.num_results = num_results
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BonfiresClient":
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def delve(self) -> GraphData:
        """Fetch and normalize the graph.

        Raises:
            UpstreamGraphError: On transport failure, a non-2xx status, or a
                payload with neither ``entities`` nor ``episodes``
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with.")

        body = {
            "query": "*",
            "bonfire_id": self.bonfire_id,
            "agent_id": self.agent_id,
            "num_results": self.num_results,
        }
        try:
            response = await self._client.post("/delve", json=body)
        except httpx.RequestError as e:
            raise UpstreamGraphError(f"Bonfires request failed: {e}") from e

        if not response.is_success:
            raise UpstreamGraphError(f"Bonfires fetch failed: {response.status_code}")

        try:
            raw = response.json()
        except ValueError as e:
            raise UpstreamGraphError("Invalid Bonfires payload: not JSON") from e

        if not isinstance(raw, dict) or (
            not isinstance(raw.get("entities"), list) and not isinstance(raw.get("episodes"), list)
        ):
            raise UpstreamGraphError("Invalid Bonfires payload: missing entities[] or episodes[]")

        try:
            graph = normalize_delve(raw)
        except KeyError as e:
            raise UpstreamGraphError(f"Invalid Bonfires payload: missing {e}") from e

        logger.info("bonfires_graph_loaded", nodes=len(graph.nodes), edges=len(graph.edges))
        return enrich(graph)


async def load_graph(transport: httpx.AsyncBaseTransport | None = None) -> GraphData:
    """Load the live graph when Bonfires is configured, otherwise the mock.

    Raises:
        UpstreamGraphError: If the live fetch fails
    """
    if not config.bonfires_configured():
        return enrich(MOCK_GRAPH)

    async with BonfiresClient(
        api_url=config.BONFIRES_API_URL,
        bonfire_id=config.BONFIRES_BONFIRE_ID,
        agent_id=config.BONFIRES_AGENT_ID,
        num_results=config.BONFIRES_NUM_RESULTS,
        timeout=config.BONFIRES_TIMEOUT,
        transport=transport,
    ) as client:
        return await client.delve()


class GraphRepository:
    """Caches the last good graph for the API and CLI.

    ``load()`` swallows upstream failures and returns None; use ``fetch()``
    to see the error.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport
        self.graph: GraphData | None = None

    async def fetch(self, refresh: bool = False) -> GraphData:
        if self.graph is None or refresh:
            self.graph = await load_graph(self._transport)
        return self.graph

    async def load(self, refresh: bool = False) -> GraphData | None:
        try:
            return await self.fetch(refresh)
        except UpstreamGraphError as e:
            logger.warning("graph_unavailable", error=str(e))
            return None
