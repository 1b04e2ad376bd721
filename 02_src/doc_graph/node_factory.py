"""Typed node construction from classified documents."""

from hashlib import sha1
from typing import List

from .discovery import DocFile
from .frontmatter import (
    ApiFrontmatter,
    ConceptFrontmatter,
    ParsedDoc,
    StandardFrontmatter,
    WorkflowFrontmatter,
)
from .graph_model import ApiNode, ConceptNode, DocNode, GraphNode, StepNode, WorkflowNode
from .sections import parse_workflow_sections

ID_LENGTH = 12
SUMMARY_LIMIT = 200


def make_node_id(source_path: str, node_type: str) -> str:
    return sha1(f"{source_path}:{node_type}".encode("utf-8")).hexdigest()[:ID_LENGTH]


def make_step_id(source_path: str, step_number: int) -> str:
    return make_node_id(f"{source_path}:step:{step_number}", "step")


def extract_summary(body: str, description: str | None = None) -> str:
    """Prefer the description; otherwise use the first paragraph of the body.

    Headings and horizontal rules are skipped; the paragraph is joined with
    single spaces and cut to 200 characters with a trailing "...".
    """
    if description:
        return description

    paragraph: List[str] = []
    for line in body.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            if paragraph:
                break
            continue
        if stripped.startswith("---"):
            continue
        paragraph.append(stripped)

    summary = " ".join(paragraph)
    if len(summary) > SUMMARY_LIMIT:
        return summary[: SUMMARY_LIMIT - 3] + "..."
    return summary


def default_title(slug: str) -> str:
    return slug.rstrip("/").split("/")[-1] or "Untitled"


def create_nodes(
    file: DocFile,
    parsed: ParsedDoc,
    slug: str,
    anchors: List[str],
    base_url: str | None = None,
) -> List[GraphNode]:
    """Create the typed node(s) for one document.

    Workflow documents expand into the workflow node followed by one step
    node per parsed step; every other document yields exactly one node.
    """
    fm = parsed.frontmatter
    source_path = file.relative_path
    base = {
        "title": fm.title or default_title(slug),
        "summary": extract_summary(parsed.body, fm.description),
        "source_path": source_path,
        "slug": slug,
        "url": _url_for(base_url, slug),
        "anchors": list(anchors),
        "version": fm.version,
        "locale": fm.locale,
        "tags": list(fm.tags),
    }

    if isinstance(fm, ConceptFrontmatter):
        return [
            ConceptNode(
                id=make_node_id(source_path, "concept"),
                entity_type=fm.entity_type,
                canonical_name=fm.canonical_name,
                aliases=list(fm.aliases),
                related_entities=list(fm.related_entities),
                **base,
            )
        ]

    if isinstance(fm, ApiFrontmatter):
        return [
            ApiNode(
                id=make_node_id(source_path, "api"),
                api_type=fm.api_type,
                operation_id=fm.operation_id,
                method=fm.method,
                path=fm.path,
                resource=fm.resource,
                capabilities=list(fm.capabilities),
                side_effects=list(fm.side_effects),
                preconditions=list(fm.preconditions),
                permissions=list(fm.permissions),
                rate_limit=fm.rate_limit,
                **base,
            )
        ]

    if isinstance(fm, WorkflowFrontmatter):
        return _create_workflow_nodes(fm, parsed.body, base, base_url)

    if isinstance(fm, StandardFrontmatter):
        return [DocNode(id=make_node_id(source_path, "doc"), section=fm.section, **base)]

    raise TypeError(f"Unsupported frontmatter type: {type(fm).__name__}")


def _create_workflow_nodes(
    fm: WorkflowFrontmatter,
    body: str,
    base: dict,
    base_url: str | None,
) -> List[GraphNode]:
    source_path = base["source_path"]
    slug = base["slug"]
    sections = parse_workflow_sections(body)

    workflow = WorkflowNode(
        id=make_node_id(source_path, "workflow"),
        workflow_id=fm.workflow_id,
        goal=fm.goal,
        primary_entity=fm.primary_entity,
        risk_level=fm.risk_level,
        requires_human_approval=fm.requires_human_approval,
        steps=list(sections.steps),
        preconditions=list(sections.preconditions),
        failure_modes=list(sections.failure_modes),
        recovery=list(sections.recovery),
        guardrails=list(sections.guardrails),
        **base,
    )

    nodes: List[GraphNode] = [workflow]
    for step in sections.steps:
        step_slug = f"{slug}#step-{step.step_number}"
        nodes.append(
            StepNode(
                id=make_step_id(source_path, step.step_number),
                title=f"Step {step.step_number}: {step.action}",
                summary=step.action,
                source_path=source_path,
                slug=step_slug,
                url=_url_for(base_url, step_slug),
                anchors=[],
                version=fm.version,
                locale=fm.locale,
                tags=[],
                step_number=step.step_number,
                action=step.action,
                uses_api=step.uses_api,
                workflow_id=fm.workflow_id,
            )
        )
    return nodes


def _url_for(base_url: str | None, slug: str) -> str | None:
    return base_url + slug if base_url else None
