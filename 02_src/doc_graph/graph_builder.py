"""Graph assembly: discovery -> extraction -> resolution -> validation."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .config import BuildSettings, normalize_base_url
from .graph_model import DocGraph
from .graph_orchestrator import GraphOrchestrator
from .phases import (
    DocumentDiscoveryPhase,
    NodeExtractionPhase,
    ReferenceResolverPhase,
    ValidationAndQAPhase,
)
from .pipeline import PipelinePhase, PipelineRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    graph: DocGraph
    warnings: List[str]
    report: Dict[str, Any]


def build_default_phases() -> List[PipelinePhase]:
    return [
        DocumentDiscoveryPhase(),
        NodeExtractionPhase(),
        ReferenceResolverPhase(),
        ValidationAndQAPhase(),
    ]


def build_graph(
    docs_path: str | Path,
    base_url: str | None = None,
    settings: BuildSettings | None = None,
) -> BuildResult:
    """Compile every markdown document under `docs_path` into a graph.

    Per-file failures and unresolved references come back as warnings; only
    a configuration problem (missing or invalid docs path) raises.
    """
    settings = settings or BuildSettings(docs_path=str(docs_path))
    source_dir = str(Path(docs_path).resolve()) if str(docs_path) else ""
    orchestrator = GraphOrchestrator(
        source_dir=source_dir,
        base_url=normalize_base_url(base_url if base_url is not None else settings.base_url),
    )
    initial_context: Dict[str, Any] = {
        "docs_path": str(docs_path),
        "excluded_dirs": settings.excluded_dirs,
        "excluded_files": settings.excluded_files,
        "orchestrator": orchestrator,
    }
    runner = PipelineRunner(phases=build_default_phases())
    final_context = runner.run(initial_context)

    report = {
        "extraction_report": final_context.get("extraction_output", {}),
        "resolver_report": final_context.get("resolver_output", {}).get("summary", {}),
        "validation_report": final_context.get("validation_report", {}),
        "phase_timings": final_context.get("phase_timings", {}),
    }
    graph: DocGraph = final_context["graph"]
    logger.info(
        "Built graph with %d nodes and %d edges (%d unresolved)",
        graph.stats.total_nodes,
        graph.stats.total_edges,
        graph.stats.unresolved_refs,
    )
    return BuildResult(graph=graph, warnings=orchestrator.warnings, report=report)


def write_graph(graph: DocGraph, output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(graph.to_json(), ensure_ascii=False, indent=2), encoding="utf-8")
    return path
