"""Reference resolver phase: materializes every cross-reference as an edge."""

from typing import Any, Dict

from ..edge_resolver import resolve_edges
from ..graph_model import is_unresolved
from ..graph_orchestrator import GraphOrchestrator
from ..pipeline import PipelinePhase


class ReferenceResolverPhase(PipelinePhase):
    phase_name = "reference_resolver"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: GraphOrchestrator = context["orchestrator"]
        resolution = resolve_edges(orchestrator.nodes)
        orchestrator.add_edges(resolution.edges)
        orchestrator.add_edge_warnings(resolution.warnings)

        unresolved_count = sum(1 for edge in resolution.edges if is_unresolved(edge.target))
        resolver_output = {
            "summary": {
                "edge_count": len(resolution.edges),
                "resolved_count": len(resolution.edges) - unresolved_count,
                "unresolved_count": unresolved_count,
                "warning_count": len(resolution.warnings),
            },
            "warnings": list(resolution.warnings),
        }
        return {"resolver_output": resolver_output}
