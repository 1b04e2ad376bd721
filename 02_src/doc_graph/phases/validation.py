"""Validation and QA phase: assembles the graph and checks its stats."""

from typing import Any, Dict, List

from ..graph_model import DocGraph, is_unresolved
from ..graph_orchestrator import GraphOrchestrator
from ..pipeline import PipelinePhase


class ValidationAndQAPhase(PipelinePhase):
    phase_name = "validation"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: GraphOrchestrator = context["orchestrator"]
        graph = orchestrator.build_graph()
        qa_report = {
            "node_count": len(graph.nodes),
            "edge_count": len(graph.edges),
            "unresolved_count": graph.stats.unresolved_refs,
            "warning_count": len(orchestrator.warnings),
            "problems": self._check_stats(graph),
        }
        return {"graph": graph, "validation_report": qa_report}

    @staticmethod
    def _check_stats(graph: DocGraph) -> List[str]:
        problems: List[str] = []
        stats = graph.stats
        if stats.total_nodes != len(graph.nodes):
            problems.append(f"total_nodes={stats.total_nodes} but graph has {len(graph.nodes)} nodes")
        if stats.total_edges != len(graph.edges):
            problems.append(f"total_edges={stats.total_edges} but graph has {len(graph.edges)} edges")
        for node_type, count in stats.nodes_by_type.items():
            actual = sum(1 for node in graph.nodes if node.type == node_type)
            if actual != count:
                problems.append(f"nodes_by_type[{node_type}]={count} but counted {actual}")
        for edge_type, count in stats.edges_by_type.items():
            actual = sum(1 for edge in graph.edges if edge.type == edge_type)
            if actual != count:
                problems.append(f"edges_by_type[{edge_type}]={count} but counted {actual}")
        unresolved = sum(1 for edge in graph.edges if is_unresolved(edge.target))
        if unresolved != stats.unresolved_refs:
            problems.append(f"unresolved_refs={stats.unresolved_refs} but counted {unresolved}")
        return problems
