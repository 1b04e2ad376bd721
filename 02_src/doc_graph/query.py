"""Read-side helpers over a serialized graph artifact."""

import json
from pathlib import Path
from typing import Any, Dict, List, Literal

from .graph_model import UNRESOLVED_PREFIX, is_unresolved

Direction = Literal["out", "in", "both"]


class GraphQuery:
    """Lookups and traversals over the JSON graph produced by a build.

    `unresolved:` edge targets are sentinels: they are reported as-is and
    never dereferenced as node ids.
    """

    def __init__(self, payload: Dict[str, Any]) -> None:
        self.payload = payload
        self.nodes: List[Dict[str, Any]] = list(payload.get("nodes", []))
        self.edges: List[Dict[str, Any]] = list(payload.get("edges", []))
        self._by_id: Dict[str, Dict[str, Any]] = {node["id"]: node for node in self.nodes}
        self._by_slug: Dict[str, Dict[str, Any]] = {}
        for node in self.nodes:
            self._by_slug.setdefault(node.get("slug", ""), node)

    @classmethod
    def from_file(cls, path: str | Path) -> "GraphQuery":
        return cls(json.loads(Path(path).read_text(encoding="utf-8")))

    @property
    def stats(self) -> Dict[str, Any]:
        return dict(self.payload.get("stats", {}))

    def get_node(self, key: str) -> Dict[str, Any] | None:
        """Find a node by exact id, then by slug, then by unique id prefix."""
        if not key or is_unresolved(key):
            return None
        node = self._by_id.get(key) or self._by_slug.get(key)
        if node is not None:
            return node
        matches = [candidate for candidate in self.nodes if candidate["id"].startswith(key)]
        return matches[0] if len(matches) == 1 else None

    def filter_nodes(self, node_type: str | None = None, tag: str | None = None) -> List[Dict[str, Any]]:
        return [
            node
            for node in self.nodes
            if (node_type is None or node.get("type") == node_type)
            and (tag is None or tag in node.get("tags", []))
        ]

    def edges_for(
        self,
        node_id: str,
        edge_type: str | None = None,
        direction: Direction = "out",
    ) -> List[Dict[str, Any]]:
        if direction not in ("out", "in", "both"):
            raise ValueError(f"Unknown direction: {direction}")
        selected: List[Dict[str, Any]] = []
        for edge in self.edges:
            if edge_type is not None and edge.get("type") != edge_type:
                continue
            outgoing = edge.get("source") == node_id
            incoming = edge.get("target") == node_id
            if (direction in ("out", "both") and outgoing) or (direction in ("in", "both") and incoming):
                selected.append(edge)
        return selected

    def neighbors(
        self,
        node_id: str,
        edge_type: str | None = None,
        direction: Direction = "out",
    ) -> List[Dict[str, Any]]:
        """Nodes on the far side of matching edges; sentinel targets are skipped."""
        found: List[Dict[str, Any]] = []
        for edge in self.edges_for(node_id, edge_type=edge_type, direction=direction):
            other = edge["target"] if edge.get("source") == node_id else edge["source"]
            if is_unresolved(other):
                continue
            node = self._by_id.get(other)
            if node is not None:
                found.append(node)
        return found

    def unresolved_edges(self) -> List[Dict[str, Any]]:
        return [edge for edge in self.edges if is_unresolved(edge.get("target", ""))]

    def unresolved_refs(self) -> List[str]:
        return [edge["target"][len(UNRESOLVED_PREFIX):] for edge in self.unresolved_edges()]

    def orphans(self) -> List[Dict[str, Any]]:
        connected = set()
        for edge in self.edges:
            connected.add(edge.get("source"))
            connected.add(edge.get("target"))
        return [node for node in self.nodes if node["id"] not in connected]

    def title_of(self, node_id: str) -> str:
        node = self._by_id.get(node_id)
        return node.get("title", node_id) if node else node_id
