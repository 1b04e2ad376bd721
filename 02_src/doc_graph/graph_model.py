"""Typed node/edge primitives for the documentation graph."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Union

UNRESOLVED_PREFIX = "unresolved:"

NODE_TYPES = ("doc", "concept", "api", "workflow", "step")

# Structural
PARENT_OF = "PARENT_OF"
CHILD_OF = "CHILD_OF"
NEXT_SECTION = "NEXT_SECTION"
# Semantic
RELATED_TO = "RELATED_TO"
DEPENDS_ON = "DEPENDS_ON"
CONTAINS = "CONTAINS"
DEPRECATED_BY = "DEPRECATED_BY"
# Capability
ACTS_ON = "ACTS_ON"
REQUIRES = "REQUIRES"
EMITS = "EMITS"
USES_API = "USES_API"
# Procedural
NEXT_STEP_OF = "NEXT_STEP_OF"
ON_FAILURE_TRIGGER = "ON_FAILURE_TRIGGER"
ESCALATES_TO = "ESCALATES_TO"

EDGE_FAMILIES: Dict[str, tuple] = {
    "structural": (PARENT_OF, CHILD_OF, NEXT_SECTION),
    "semantic": (RELATED_TO, DEPENDS_ON, CONTAINS, DEPRECATED_BY),
    "capability": (ACTS_ON, REQUIRES, EMITS, USES_API),
    "procedural": (NEXT_STEP_OF, ON_FAILURE_TRIGGER, ESCALATES_TO),
}
EDGE_TYPES = tuple(edge_type for family in EDGE_FAMILIES.values() for edge_type in family)


def unresolved_target(ref_text: str) -> str:
    return f"{UNRESOLVED_PREFIX}{ref_text}"


def is_unresolved(target: str) -> bool:
    return target.startswith(UNRESOLVED_PREFIX)


@dataclass(frozen=True)
class WorkflowStep:
    step_number: int
    action: str
    uses_api: str | None = None


@dataclass(frozen=True, kw_only=True)
class BaseNode:
    """Attributes shared by every node variant.

    `id` is derived from the source path and node type, so unchanged input
    always reproduces the same identifier.
    """

    id: str
    title: str
    summary: str
    source_path: str
    slug: str
    url: str | None = None
    anchors: List[str] = field(default_factory=list)
    version: str | None = None
    locale: str | None = None
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class DocNode(BaseNode):
    type: Literal["doc"] = "doc"
    section: str | None = None


@dataclass(frozen=True, kw_only=True)
class ConceptNode(BaseNode):
    type: Literal["concept"] = "concept"
    entity_type: str = "resource"
    canonical_name: str
    aliases: List[str] = field(default_factory=list)
    related_entities: List[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class ApiNode(BaseNode):
    type: Literal["api"] = "api"
    api_type: str = "http"
    operation_id: str
    method: str | None = None
    path: str | None = None
    resource: str | None = None
    capabilities: List[str] = field(default_factory=list)
    side_effects: List[str] = field(default_factory=list)
    preconditions: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)
    rate_limit: str | None = None


@dataclass(frozen=True, kw_only=True)
class WorkflowNode(BaseNode):
    type: Literal["workflow"] = "workflow"
    workflow_id: str
    goal: str
    primary_entity: str | None = None
    risk_level: str | None = None
    requires_human_approval: bool = False
    steps: List[WorkflowStep] = field(default_factory=list)
    preconditions: List[str] = field(default_factory=list)
    failure_modes: List[str] = field(default_factory=list)
    recovery: List[str] = field(default_factory=list)
    guardrails: List[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class StepNode(BaseNode):
    type: Literal["step"] = "step"
    step_number: int
    action: str
    uses_api: str | None = None
    workflow_id: str


GraphNode = Union[DocNode, ConceptNode, ApiNode, WorkflowNode, StepNode]


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    type: str
    label: str | None = None


@dataclass(frozen=True)
class GraphStats:
    total_nodes: int
    total_edges: int
    nodes_by_type: Dict[str, int]
    edges_by_type: Dict[str, int]
    unresolved_refs: int


@dataclass(frozen=True)
class DocGraph:
    version: str
    generated_at: str
    source_dir: str
    stats: GraphStats
    nodes: List[GraphNode]
    edges: List[Edge]
    base_url: str | None = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "version": self.version,
            "generated_at": self.generated_at,
            "source_dir": self.source_dir,
        }
        if self.base_url:
            payload["base_url"] = self.base_url
        payload["stats"] = asdict(self.stats)
        payload["nodes"] = [node_to_json(node) for node in self.nodes]
        payload["edges"] = [edge_to_json(edge) for edge in self.edges]
        return payload


def node_to_json(node: GraphNode) -> Dict[str, Any]:
    raw = asdict(node)
    ordered: Dict[str, Any] = {"id": raw.pop("id"), "type": raw.pop("type")}
    ordered.update(raw)
    if isinstance(node, WorkflowNode):
        ordered["steps"] = [_drop_none(step) for step in ordered["steps"]]
    return _drop_none(ordered)


def edge_to_json(edge: Edge) -> Dict[str, Any]:
    return _drop_none(asdict(edge))


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}
