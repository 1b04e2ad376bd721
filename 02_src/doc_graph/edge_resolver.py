"""Cross-reference resolution: turns textual references into typed edges.

Resolution runs over the complete node set. Lookup indexes are built once,
up front, and are local to a single `resolve_edges` call. A reference that
matches nothing is never dropped: it becomes an edge whose target is
`unresolved:<original text>` plus a warning, so broken documentation shows
up in the graph itself.

Emission order is fixed: reference edges node by node, then the
`NEXT_STEP_OF` chains, then the structural `PARENT_OF`/`CHILD_OF` pairs.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from .discovery import is_index_document, source_directory
from .graph_model import (
    ACTS_ON,
    CHILD_OF,
    CONTAINS,
    NEXT_STEP_OF,
    PARENT_OF,
    RELATED_TO,
    USES_API,
    ApiNode,
    ConceptNode,
    Edge,
    GraphNode,
    StepNode,
    WorkflowNode,
    unresolved_target,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeResolution:
    edges: List[Edge]
    warnings: List[str]


@dataclass(frozen=True)
class ResolutionIndex:
    """Lookup tables over one node set. Name keys are lower-cased."""

    by_canonical_name: Mapping[str, str]
    by_operation_id: Mapping[str, str]
    by_workflow_id: Mapping[str, str]
    index_files: Mapping[str, str]
    collisions: List[str] = field(default_factory=list)

    @classmethod
    def build(cls, nodes: Sequence[GraphNode]) -> "ResolutionIndex":
        by_canonical_name: Dict[str, str] = {}
        canonical_sources: Dict[str, str] = {}
        by_operation_id: Dict[str, str] = {}
        by_workflow_id: Dict[str, str] = {}
        index_files: Dict[str, str] = {}
        collisions: List[str] = []

        for node in nodes:
            directory = source_directory(node.source_path)

            # When index.md and index.mdx share a directory the later one wins.
            if _is_index_node(node):
                index_files[directory] = node.id

            if isinstance(node, ConceptNode):
                for name in [node.canonical_name, *node.aliases]:
                    key = name.lower()
                    previous = by_canonical_name.get(key)
                    if previous is not None and previous != node.id:
                        collisions.append(
                            f'Duplicate concept key "{name}" in {node.source_path} '
                            f"overrides {canonical_sources[key]}"
                        )
                    # Later concepts win on a shared key.
                    by_canonical_name[key] = node.id
                    canonical_sources[key] = node.source_path
            elif isinstance(node, ApiNode):
                by_operation_id[node.operation_id.lower()] = node.id
            elif isinstance(node, WorkflowNode):
                by_workflow_id[node.workflow_id.lower()] = node.id

        return cls(
            by_canonical_name=by_canonical_name,
            by_operation_id=by_operation_id,
            by_workflow_id=by_workflow_id,
            index_files=index_files,
            collisions=collisions,
        )

    def resolve_ref(self, name: str) -> str | None:
        """Look a name up as entity, then operation id, then workflow id."""
        key = name.lower()
        for index in (self.by_canonical_name, self.by_operation_id, self.by_workflow_id):
            target = index.get(key)
            if target is not None:
                return target
        return None

    def resolve_concept(self, name: str) -> str | None:
        return self.by_canonical_name.get(name.lower())

    def resolve_operation(self, operation_id: str) -> str | None:
        return self.by_operation_id.get(operation_id.lower())

    def resolve_workflow(self, workflow_id: str) -> str | None:
        return self.by_workflow_id.get(workflow_id.lower())


class _EdgeCollector:
    def __init__(self) -> None:
        self.edges: List[Edge] = []
        self.warnings: List[str] = []

    def add(self, source: str, target: str, edge_type: str, label: str | None = None) -> None:
        self.edges.append(Edge(source=source, target=target, type=edge_type, label=label))

    def add_reference(
        self,
        source: str,
        target: str | None,
        edge_type: str,
        ref_text: str,
        warning: str,
    ) -> None:
        if target is None:
            target = unresolved_target(ref_text)
            self.warnings.append(warning)
            logger.debug(warning)
        self.add(source, target, edge_type, label=ref_text)


def resolve_edges(nodes: Sequence[GraphNode]) -> EdgeResolution:
    index = ResolutionIndex.build(nodes)
    collector = _EdgeCollector()
    collector.warnings.extend(index.collisions)

    for node in nodes:
        _resolve_references(node, index, collector)
    _link_step_chains(nodes, collector)
    _link_structure(nodes, index, collector)

    return EdgeResolution(edges=collector.edges, warnings=collector.warnings)


def _resolve_references(node: GraphNode, index: ResolutionIndex, collector: _EdgeCollector) -> None:
    if isinstance(node, ConceptNode):
        for entity in node.related_entities:
            collector.add_reference(
                node.id,
                index.resolve_ref(entity),
                RELATED_TO,
                entity,
                f'Unresolved related_entity "{entity}" in {node.source_path}',
            )
    elif isinstance(node, ApiNode):
        if node.resource:
            collector.add_reference(
                node.id,
                index.resolve_concept(node.resource),
                ACTS_ON,
                node.resource,
                f'Unresolved resource "{node.resource}" in {node.source_path}',
            )
    elif isinstance(node, WorkflowNode):
        if node.primary_entity:
            collector.add_reference(
                node.id,
                index.resolve_concept(node.primary_entity),
                ACTS_ON,
                node.primary_entity,
                f'Unresolved primary_entity "{node.primary_entity}" in {node.source_path}',
            )
    elif isinstance(node, StepNode):
        if node.uses_api:
            collector.add_reference(
                node.id,
                index.resolve_operation(node.uses_api),
                USES_API,
                node.uses_api,
                f'Unresolved API reference "{node.uses_api}" in step {node.step_number} '
                f"of {node.source_path}",
            )
        workflow_id = index.resolve_workflow(node.workflow_id)
        if workflow_id is not None:
            collector.add(workflow_id, node.id, CONTAINS)


def _link_step_chains(nodes: Sequence[GraphNode], collector: _EdgeCollector) -> None:
    steps_by_workflow: Dict[str, List[StepNode]] = {}
    for node in nodes:
        if isinstance(node, StepNode):
            steps_by_workflow.setdefault(node.workflow_id, []).append(node)

    for steps in steps_by_workflow.values():
        # sorted() is stable: equal step numbers keep encounter order.
        ordered = sorted(steps, key=lambda step: step.step_number)
        for current, following in zip(ordered, ordered[1:]):
            collector.add(current.id, following.id, NEXT_STEP_OF)


def _is_index_node(node: GraphNode) -> bool:
    # Step nodes share their workflow's source path but never stand for it.
    return not isinstance(node, StepNode) and is_index_document(node.source_path)


def _link_structure(nodes: Sequence[GraphNode], index: ResolutionIndex, collector: _EdgeCollector) -> None:
    for node in nodes:
        directory = source_directory(node.source_path)
        if _is_index_node(node):
            parent_id = index.index_files.get(source_directory(directory))
        else:
            parent_id = index.index_files.get(directory)
        if parent_id is None or parent_id == node.id:
            continue
        collector.add(parent_id, node.id, PARENT_OF)
        collector.add(node.id, parent_id, CHILD_OF)
