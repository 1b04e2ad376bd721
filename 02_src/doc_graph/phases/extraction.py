"""Node extraction phase: read, classify and expand every document into nodes."""

import logging
from typing import Any, Dict, List

from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from ..discovery import DocFile, derive_slug
from ..errors import DocGraphError, DocumentReadError
from ..frontmatter import ParsedDoc, parse_and_classify
from ..graph_model import GraphNode
from ..graph_orchestrator import GraphOrchestrator
from ..headings import extract_headings
from ..node_factory import create_nodes
from ..pipeline import PipelinePhase

logger = logging.getLogger(__name__)


class ExtractionState(TypedDict):
    doc_files: List[DocFile]
    base_url: str | None
    documents: List[Dict[str, Any]]
    parsed_documents: List[Dict[str, Any]]
    nodes: List[GraphNode]
    warnings: List[str]
    failure_types: List[str]


class NodeExtractionPhase(PipelinePhase):
    """Per-file work. A file that fails is reported and left out of the node set."""

    phase_name = "extraction"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        orchestrator: GraphOrchestrator = context["orchestrator"]
        doc_files: List[DocFile] = context.get("doc_files", [])

        workflow = self._build_workflow()
        result_state = workflow.invoke(
            {
                "doc_files": doc_files,
                "base_url": orchestrator.base_url,
                "documents": [],
                "parsed_documents": [],
                "nodes": [],
                "warnings": [],
                "failure_types": [],
            }
        )

        nodes: List[GraphNode] = result_state.get("nodes", [])
        warnings: List[str] = result_state.get("warnings", [])
        orchestrator.add_nodes(nodes)
        for warning in warnings:
            orchestrator.add_parse_warning(warning)

        return {
            "extraction_output": {
                "file_count": len(doc_files),
                "parsed_count": len(result_state.get("parsed_documents", [])),
                "node_count": len(nodes),
                "failed_count": len(warnings),
                "failures_by_type": self._count_failures(result_state.get("failure_types", [])),
            }
        }

    def _build_workflow(self):
        graph = StateGraph(ExtractionState)
        graph.add_node("read_documents", self._read_documents)
        graph.add_node("classify_documents", self._classify_documents)
        graph.add_node("build_nodes", self._build_nodes)
        graph.add_edge(START, "read_documents")
        graph.add_edge("read_documents", "classify_documents")
        graph.add_edge("classify_documents", "build_nodes")
        graph.add_edge("build_nodes", END)
        return graph.compile()

    def _read_documents(self, state: ExtractionState) -> Dict[str, Any]:
        documents: List[Dict[str, Any]] = []
        warnings = list(state.get("warnings", []))
        failure_types = list(state.get("failure_types", []))
        for doc_file in state.get("doc_files", []):
            try:
                content = self._read_text(doc_file)
            except DocGraphError as error:
                warnings.append(self._failure(doc_file, error))
                failure_types.append(error.error_type)
                continue
            documents.append({"file": doc_file, "content": content})
        return {"documents": documents, "warnings": warnings, "failure_types": failure_types}

    def _classify_documents(self, state: ExtractionState) -> Dict[str, Any]:
        parsed_documents: List[Dict[str, Any]] = []
        warnings = list(state.get("warnings", []))
        failure_types = list(state.get("failure_types", []))
        for document in state.get("documents", []):
            doc_file: DocFile = document["file"]
            try:
                parsed = parse_and_classify(document["content"], source=doc_file.relative_path)
            except DocGraphError as error:
                warnings.append(self._failure(doc_file, error))
                failure_types.append(error.error_type)
                continue
            parsed_documents.append({"file": doc_file, "parsed": parsed})
        return {"parsed_documents": parsed_documents, "warnings": warnings, "failure_types": failure_types}

    def _build_nodes(self, state: ExtractionState) -> Dict[str, Any]:
        nodes: List[GraphNode] = []
        base_url = state.get("base_url")
        for document in state.get("parsed_documents", []):
            doc_file: DocFile = document["file"]
            parsed: ParsedDoc = document["parsed"]
            slug = derive_slug(doc_file.relative_path)
            _, anchors = extract_headings(parsed.body)
            nodes.extend(create_nodes(doc_file, parsed, slug, anchors, base_url=base_url))
        return {"nodes": nodes}

    @staticmethod
    def _read_text(doc_file: DocFile) -> str:
        try:
            return doc_file.absolute_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as error:
            raise DocumentReadError(f"not valid UTF-8 ({error.reason})", file=doc_file.relative_path) from error

    @staticmethod
    def _count_failures(failure_types: List[str]) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for error_type in failure_types:
            counts[error_type] = counts.get(error_type, 0) + 1
        return counts

    @staticmethod
    def _failure(doc_file: DocFile, error: DocGraphError) -> str:
        warning = f"Failed to parse {doc_file.relative_path}: {error.message}"
        logger.warning(warning)
        return warning
