"""Graph Types - Nodes, edges and graph payloads for the activity graph."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeGroup(Enum):
    """Category of a graph node."""

    ACTOR = "actor"
    ACTIVITY = "activity"
    TAG = "tag"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: "str | NodeGroup | None") -> "NodeGroup":
        """Map a raw group string to a NodeGroup, falling back to UNKNOWN."""
        if isinstance(value, NodeGroup):
            return value
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.UNKNOWN


def parse_group_filter(raw: str | None) -> tuple[NodeGroup, ...]:
    """Parse a comma-separated group list such as ``"actor,tag"``.

    Raises:
        ValueError: If any name is not a known group
    """
    names = [name.strip().lower() for name in (raw or "").split(",") if name.strip()]
    known = {g.value for g in NodeGroup}
    unknown = [name for name in names if name not in known]
    if unknown:
        raise ValueError(f"Unknown group(s): {', '.join(unknown)}")
    return tuple(NodeGroup(name) for name in names)


# Display order used for ring clustering, matrix sorting and arc groups
GROUP_ORDER: dict[NodeGroup, int] = {
    NodeGroup.ACTOR: 0,
    NodeGroup.ACTIVITY: 1,
    NodeGroup.TAG: 2,
    NodeGroup.UNKNOWN: 3,
}


@dataclass(frozen=True)
class GraphNode:
    """A node as delivered by the upstream loader."""

    id: str
    label: str
    group: NodeGroup = NodeGroup.UNKNOWN
    weight: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "group": self.group.value,
        }
        if self.weight is not None:
            data["weight"] = self.weight
        if self.metadata:
            data["metadata"] = self.metadata
        return data


@dataclass(frozen=True)
class GraphEdge:
    """An edge between two node ids. Direction is kept but ignored for degree."""

    source: str
    target: str
    type: str | None = None
    weight: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source, "target": self.target}
        if self.type is not None:
            data["type"] = self.type
        if self.weight is not None:
            data["weight"] = self.weight
        return data


@dataclass(frozen=True)
class GraphData:
    """A complete graph payload."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GraphData":
        """Build a graph from its JSON shape.

        Raises:
            KeyError: If a node lacks ``id`` or an edge lacks an endpoint.
        """
        nodes = tuple(
            GraphNode(
                id=str(n["id"]),
                label=str(n.get("label") or "Unnamed"),
                group=NodeGroup.parse(n.get("group")),
                weight=n.get("weight"),
                metadata=dict(n.get("metadata") or {}),
            )
            for n in data.get("nodes", [])
        )
        edges = tuple(
            GraphEdge(
                source=str(e["source"]),
                target=str(e["target"]),
                type=e.get("type"),
                weight=e.get("weight"),
            )
            for e in data.get("edges", [])
        )
        return cls(nodes=nodes, edges=edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}


@dataclass(frozen=True)
class WeightedNode:
    """A node paired with its degree after filtering."""

    node: GraphNode
    weight: int

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def group(self) -> NodeGroup:
        return self.node.group
