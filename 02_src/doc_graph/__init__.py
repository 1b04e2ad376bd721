"""Compile a markdown documentation tree into a typed knowledge/workflow graph."""

from .edge_resolver import EdgeResolution, resolve_edges
from .graph_builder import BuildResult, build_graph, write_graph
from .graph_model import (
    ApiNode,
    ConceptNode,
    DocGraph,
    DocNode,
    Edge,
    GraphNode,
    StepNode,
    WorkflowNode,
)
from .graph_orchestrator import GraphOrchestrator
from .pipeline import PipelinePhase, PipelineRunner
from .query import GraphQuery

__all__ = [
    "ApiNode",
    "BuildResult",
    "ConceptNode",
    "DocGraph",
    "DocNode",
    "Edge",
    "EdgeResolution",
    "GraphNode",
    "GraphOrchestrator",
    "GraphQuery",
    "PipelinePhase",
    "PipelineRunner",
    "StepNode",
    "WorkflowNode",
    "build_graph",
    "resolve_edges",
    "write_graph",
]
