"""Shared fixtures for doc_graph tests."""

import pytest
from pathlib import Path

from doc_graph.graph_model import ApiNode, ConceptNode, StepNode, WorkflowNode


def write_doc(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


WORKFLOW_DOC = (
    "---\n"
    "type: workflow\n"
    "title: Onboard a new workspace\n"
    "workflow_id: onboard_new_workspace\n"
    "goal: Get a customer from signup to an active workspace\n"
    "primary_entity: Workspace\n"
    "risk_level: medium\n"
    "requires_human_approval: true\n"
    "tags: [onboarding]\n"
    "version: 2\n"
    "---\n"
    "\n"
    "# Onboard a new workspace\n"
    "\n"
    "Walks an operator through workspace onboarding.\n"
    "\n"
    "## Preconditions\n"
    "\n"
    "- The customer has signed the contract\n"
    "- Billing is configured\n"
    "\n"
    "## Steps\n"
    "\n"
    "1. Create the workspace via `create_workspace`.\n"
    "2. Invite the owner with `invite_user`.\n"
    "3. Wait for the owner to accept the invitation.\n"
    "4. Confirm via `list_workspaces` that it is active.\n"
    "\n"
    "## Failure Modes\n"
    "\n"
    "- Workspace name already taken\n"
    "\n"
    "## Recovery\n"
    "\n"
    "* Retry with a suffixed name\n"
    "\n"
    "## Guardrails\n"
    "\n"
    "- Never delete an existing workspace\n"
)


@pytest.fixture
def sample_docs(tmp_path):
    """Create a small docs tree covering every document type."""
    docs = tmp_path / "docs"

    write_doc(docs, "index.md", "---\ntitle: Home\n---\n\n# Welcome\n\nStart here.\n")
    write_doc(docs, "README.md", "# Repository readme\n")
    write_doc(docs, "_assets/notes.md", "# should be skipped\n")
    write_doc(docs, "concepts/index.md", "---\ntitle: Concepts\nsection: reference\n---\n\nAll concepts.\n")
    write_doc(
        docs,
        "concepts/workspace.md",
        "---\n"
        "type: concept\n"
        "title: Workspace\n"
        "canonical_name: Workspace\n"
        "aliases: [Org Workspace]\n"
        "related_entities: [User]\n"
        "---\n\n"
        "A workspace groups users and resources.\n",
    )
    write_doc(
        docs,
        "concepts/user.md",
        "---\n"
        "type: concept\n"
        "title: User\n"
        "canonical_name: User\n"
        "related_entities: [org workspace, Billing Account]\n"
        "---\n\n"
        "A person with access to a workspace.\n",
    )
    write_doc(docs, "api/index.md", "---\ntitle: API\n---\n\nHTTP API reference.\n")
    write_doc(
        docs,
        "api/create-workspace.md",
        "---\n"
        "type: api\n"
        "title: Create workspace\n"
        "operation_id: create_workspace\n"
        "method: POST\n"
        "path: /v1/workspaces\n"
        "resource: Workspace\n"
        "capabilities: [create]\n"
        "---\n\n"
        "Creates a workspace.\n",
    )
    write_doc(
        docs,
        "api/list-workspaces.md",
        "---\n"
        "type: api\n"
        "title: List workspaces\n"
        "operation_id: list_workspaces\n"
        "method: GET\n"
        "path: /v1/workspaces\n"
        "resource: workspace\n"
        "---\n\n"
        "Lists workspaces.\n",
    )
    write_doc(
        docs,
        "api/delete-workspace.md",
        "---\n"
        "title: Delete workspace\n"
        'api: "DELETE /v1/workspaces/{id}"\n'
        "resource: Org Workspace\n"
        "---\n\n"
        "Deletes a workspace.\n",
    )
    write_doc(docs, "workflows/onboard.md", WORKFLOW_DOC)
    write_doc(docs, "guides/broken.md", "---\ntype: concept\ntitle: Missing name\n---\n\nBroken.\n")
    return docs


def make_concept(node_id, name, aliases=(), related=(), source_path=None):
    return ConceptNode(
        id=node_id,
        title=name,
        summary=f"A {name.lower()}",
        source_path=source_path or f"concepts/{name.lower().replace(' ', '-')}.md",
        slug=f"/concepts/{name.lower().replace(' ', '-')}",
        canonical_name=name,
        aliases=list(aliases),
        related_entities=list(related),
    )


def make_api(node_id, operation_id, resource=None, source_path=None):
    return ApiNode(
        id=node_id,
        title=operation_id,
        summary="An operation",
        source_path=source_path or f"api/{operation_id}.md",
        slug=f"/api/{operation_id}",
        operation_id=operation_id,
        method="POST",
        path="/v1/workspaces",
        resource=resource,
    )


def make_workflow(node_id, workflow_id, primary_entity=None, source_path="workflows/test.md"):
    return WorkflowNode(
        id=node_id,
        title=workflow_id,
        summary="A workflow",
        source_path=source_path,
        slug="/workflows/test",
        workflow_id=workflow_id,
        goal="Do the thing",
        primary_entity=primary_entity,
    )


def make_step(node_id, number, workflow_id="test_wf", uses_api=None, source_path="workflows/test.md"):
    return StepNode(
        id=node_id,
        title=f"Step {number}",
        summary=f"Do thing {number}",
        source_path=source_path,
        slug=f"/workflows/test#step-{number}",
        step_number=number,
        action=f"Do thing {number}",
        uses_api=uses_api,
        workflow_id=workflow_id,
    )
