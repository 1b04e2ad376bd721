"""Deterministic owner of the graph state accumulated during a build."""

from datetime import datetime, timezone
from typing import Dict, Iterable, List

from .graph_model import EDGE_TYPES, NODE_TYPES, DocGraph, Edge, GraphNode, GraphStats, is_unresolved

GRAPH_VERSION = "1.0.0"


class GraphOrchestrator:
    """Collects nodes, edges and warnings and assembles the final graph."""

    def __init__(self, source_dir: str = "", base_url: str | None = None) -> None:
        self.source_dir = source_dir
        self.base_url = base_url
        self.nodes: List[GraphNode] = []
        self.edges: List[Edge] = []
        self.parse_warnings: List[str] = []
        self.edge_warnings: List[str] = []
        self._node_registry: Dict[str, GraphNode] = {}

    def add_nodes(self, nodes: Iterable[GraphNode]) -> None:
        for node in nodes:
            if node.type not in NODE_TYPES:
                raise ValueError(f"Unknown node type {node.type!r} for {node.source_path}")
            existing = self.get_node(node.id)
            if existing is not None:
                raise ValueError(
                    f"Duplicate node id {node.id}: {node.source_path} collides with {existing.source_path}"
                )
            self._node_registry[node.id] = node
            self.nodes.append(node)

    def add_edges(self, edges: Iterable[Edge]) -> None:
        for edge in edges:
            if edge.type not in EDGE_TYPES:
                raise ValueError(f"Unknown edge type: {edge.type}")
            if self.get_node(edge.source) is None:
                raise ValueError(f"Unknown source node: {edge.source}")
            if not is_unresolved(edge.target) and self.get_node(edge.target) is None:
                raise ValueError(f"Unknown target node: {edge.target}")
            self.edges.append(edge)

    def add_parse_warning(self, warning: str) -> None:
        self.parse_warnings.append(warning)

    def add_edge_warnings(self, warnings: Iterable[str]) -> None:
        self.edge_warnings.extend(warnings)

    def get_node(self, node_id: str) -> GraphNode | None:
        return self._node_registry.get(node_id)

    @property
    def warnings(self) -> List[str]:
        return [*self.parse_warnings, *self.edge_warnings]

    def build_graph(self, generated_at: str | None = None) -> DocGraph:
        return DocGraph(
            version=GRAPH_VERSION,
            generated_at=generated_at or datetime.now(timezone.utc).isoformat(),
            source_dir=self.source_dir,
            base_url=self.base_url,
            stats=compute_stats(self.nodes, self.edges),
            nodes=list(self.nodes),
            edges=list(self.edges),
        )


def compute_stats(nodes: Iterable[GraphNode], edges: Iterable[Edge]) -> GraphStats:
    node_list = list(nodes)
    edge_list = list(edges)

    nodes_by_type: Dict[str, int] = {}
    for node in node_list:
        nodes_by_type[node.type] = nodes_by_type.get(node.type, 0) + 1

    edges_by_type: Dict[str, int] = {}
    for edge in edge_list:
        edges_by_type[edge.type] = edges_by_type.get(edge.type, 0) + 1

    return GraphStats(
        total_nodes=len(node_list),
        total_edges=len(edge_list),
        nodes_by_type=nodes_by_type,
        edges_by_type=edges_by_type,
        unresolved_refs=sum(1 for edge in edge_list if is_unresolved(edge.target)),
    )
