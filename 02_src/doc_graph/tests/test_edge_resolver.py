"""Tests for cross-reference resolution."""

from conftest import make_api, make_concept, make_step, make_workflow

from doc_graph.edge_resolver import ResolutionIndex, resolve_edges
from doc_graph.graph_model import DocNode


def _edges(edges, edge_type):
    return [edge for edge in edges if edge.type == edge_type]


def _doc(node_id, source_path):
    return DocNode(id=node_id, title=node_id, summary="", source_path=source_path, slug="/" + source_path)


class TestRelatedTo:
    """Concept related_entities become RELATED_TO edges."""

    def test_mutual_references_resolve_both_ways(self):
        workspace = make_concept("concept-ws", "Workspace", aliases=["Org Workspace"], related=["User"])
        user = make_concept("concept-user", "User", related=["Workspace"])
        result = resolve_edges([workspace, user])
        related = _edges(result.edges, "RELATED_TO")
        assert len(related) >= 2
        pairs = {(edge.source, edge.target) for edge in related}
        assert ("concept-ws", "concept-user") in pairs
        assert ("concept-user", "concept-ws") in pairs
        assert result.warnings == []

    def test_alias_and_canonical_resolve_to_same_node(self):
        """Either key finds the concept, case-insensitively."""
        workspace = make_concept("concept-ws", "Workspace", aliases=["Org Workspace"])
        index = ResolutionIndex.build([workspace])
        assert index.resolve_ref("workspace") == "concept-ws"
        assert index.resolve_ref("ORG WORKSPACE") == "concept-ws"
        assert index.resolve_ref("Org Workspace") == index.resolve_ref("Workspace")

    def test_related_entity_can_name_an_operation_or_workflow(self):
        concept = make_concept("c1", "Workspace", related=["create_workspace", "onboard"])
        api = make_api("api-1", "create_workspace")
        workflow = make_workflow("wf-1", "onboard")
        related = _edges(resolve_edges([concept, api, workflow]).edges, "RELATED_TO")
        assert [edge.target for edge in related] == ["api-1", "wf-1"]

    def test_entity_index_has_priority(self):
        """A name that is both a concept and an operation id resolves to the concept."""
        concept = make_concept("c-dup", "deploy", related=[])
        api = make_api("api-dup", "deploy")
        index = ResolutionIndex.build([api, concept])
        assert index.resolve_ref("deploy") == "c-dup"

    def test_unresolved_related_entity(self):
        concept = make_concept("c1", "User", related=["Billing Account"])
        result = resolve_edges([concept])
        assert [edge.target for edge in result.edges] == ["unresolved:Billing Account"]
        assert result.edges[0].label == "Billing Account"
        assert result.warnings == ['Unresolved related_entity "Billing Account" in concepts/user.md']


class TestActsOn:
    def test_api_resource_resolves_to_concept(self):
        workspace = make_concept("concept-ws", "Workspace")
        api = make_api("api-create", "create_workspace", resource="Workspace")
        acts_on = _edges(resolve_edges([workspace, api]).edges, "ACTS_ON")
        assert len(acts_on) == 1
        assert acts_on[0].source == "api-create"
        assert acts_on[0].target == "concept-ws"

    def test_unresolved_resource_alone(self):
        """An API whose resource matches nothing gives one sentinel edge and one warning."""
        api = make_api("api-lonely", "create_workspace", resource="NonExistent")
        result = resolve_edges([api])
        assert len(result.edges) == 1
        edge = result.edges[0]
        assert edge.type == "ACTS_ON"
        assert edge.target == "unresolved:NonExistent"
        assert len(result.warnings) == 1
        assert "NonExistent" in result.warnings[0]

    def test_resource_does_not_match_operation_ids(self):
        """ACTS_ON only looks at concepts."""
        api = make_api("api-1", "create_workspace", resource="list_workspaces")
        other = make_api("api-2", "list_workspaces")
        acts_on = _edges(resolve_edges([api, other]).edges, "ACTS_ON")
        assert acts_on[0].target == "unresolved:list_workspaces"

    def test_workflow_primary_entity(self):
        workspace = make_concept("concept-ws", "Workspace", aliases=["Org Workspace"])
        workflow = make_workflow("wf-1", "onboard", primary_entity="org workspace")
        acts_on = _edges(resolve_edges([workspace, workflow]).edges, "ACTS_ON")
        assert [(edge.source, edge.target) for edge in acts_on] == [("wf-1", "concept-ws")]

    def test_unresolved_primary_entity(self):
        workflow = make_workflow("wf-1", "onboard", primary_entity="Ghost")
        result = resolve_edges([workflow])
        assert result.edges[0].target == "unresolved:Ghost"
        assert result.warnings == ['Unresolved primary_entity "Ghost" in workflows/test.md']


class TestSteps:
    """USES_API, CONTAINS and NEXT_STEP_OF edges for workflow steps."""

    def test_uses_api_resolves(self):
        api = make_api("api-create", "create_workspace")
        step = make_step("step-api", 1, uses_api="create_workspace")
        uses = _edges(resolve_edges([api, step]).edges, "USES_API")
        assert [(edge.source, edge.target) for edge in uses] == [("step-api", "api-create")]

    def test_unresolved_api_reference(self):
        step = make_step("step-1", 3, uses_api="invite_user")
        result = resolve_edges([step])
        assert result.edges[0].target == "unresolved:invite_user"
        assert result.warnings == ['Unresolved API reference "invite_user" in step 3 of workflows/test.md']

    def test_contains_is_independent_of_api_resolution(self):
        """A step with an unresolved API is still contained by its workflow."""
        workflow = make_workflow("wf-1", "test_wf")
        step = make_step("step-1", 1, uses_api="missing_api")
        contains = _edges(resolve_edges([workflow, step]).edges, "CONTAINS")
        assert [(edge.source, edge.target) for edge in contains] == [("wf-1", "step-1")]

    def test_no_contains_without_workflow(self):
        step = make_step("step-1", 1)
        assert _edges(resolve_edges([step]).edges, "CONTAINS") == []

    def test_next_step_chain_is_ordered(self):
        """N steps give N-1 NEXT_STEP_OF edges in step-number order."""
        steps = [make_step(f"step-{n}", n) for n in (3, 1, 4, 2)]
        chain = _edges(resolve_edges(steps).edges, "NEXT_STEP_OF")
        assert [(edge.source, edge.target) for edge in chain] == [
            ("step-1", "step-2"),
            ("step-2", "step-3"),
            ("step-3", "step-4"),
        ]

    def test_equal_step_numbers_keep_encounter_order(self):
        steps = [make_step("b", 1), make_step("a", 1), make_step("c", 2)]
        chain = _edges(resolve_edges(steps).edges, "NEXT_STEP_OF")
        assert [(edge.source, edge.target) for edge in chain] == [("b", "a"), ("a", "c")]

    def test_chains_are_per_workflow(self):
        steps = [
            make_step("x1", 1, workflow_id="x"),
            make_step("y1", 1, workflow_id="y"),
            make_step("x2", 2, workflow_id="x"),
        ]
        chain = _edges(resolve_edges(steps).edges, "NEXT_STEP_OF")
        assert [(edge.source, edge.target) for edge in chain] == [("x1", "x2")]

    def test_single_step_has_no_chain(self):
        assert _edges(resolve_edges([make_step("s", 1)]).edges, "NEXT_STEP_OF") == []


class TestStructure:
    """PARENT_OF/CHILD_OF pairs inferred from index files."""

    def test_file_links_to_its_directory_index(self):
        nodes = [_doc("guides-index", "guides/index.md"), _doc("setup", "guides/setup.md")]
        edges = resolve_edges(nodes).edges
        assert [(edge.source, edge.target, edge.type) for edge in edges] == [
            ("guides-index", "setup", "PARENT_OF"),
            ("setup", "guides-index", "CHILD_OF"),
        ]

    def test_index_links_to_parent_directory_index(self):
        nodes = [_doc("root", "index.md"), _doc("guides-index", "guides/index.md")]
        edges = resolve_edges(nodes).edges
        assert {(edge.source, edge.target, edge.type) for edge in edges} == {
            ("root", "guides-index", "PARENT_OF"),
            ("guides-index", "root", "CHILD_OF"),
        }

    def test_root_index_has_no_parent(self):
        assert resolve_edges([_doc("root", "index.md")]).edges == []

    def test_no_index_no_structure(self):
        nodes = [_doc("a", "guides/a.md"), _doc("b", "guides/b.md")]
        assert resolve_edges(nodes).edges == []

    def test_edges_always_come_in_pairs(self):
        nodes = [
            _doc("root", "index.md"),
            _doc("top", "top.md"),
            _doc("g-index", "guides/index.mdx"),
            _doc("g-a", "guides/a.md"),
            _doc("deep", "guides/deep/page.md"),
        ]
        edges = resolve_edges(nodes).edges
        parents = {(edge.source, edge.target) for edge in edges if edge.type == "PARENT_OF"}
        children = {(edge.target, edge.source) for edge in edges if edge.type == "CHILD_OF"}
        assert parents == children
        assert parents == {("root", "top"), ("root", "g-index"), ("g-index", "g-a")}

    def test_step_nodes_link_to_their_directory_index(self):
        """A step is an ordinary member of its document's directory."""
        workflow = make_workflow("wf", "wf_id", source_path="flows/run.md")
        step = make_step("s1", 1, workflow_id="wf_id", source_path="flows/run.md")
        index = _doc("flows-index", "flows/index.md")
        structural = {
            (edge.source, edge.target, edge.type)
            for edge in resolve_edges([index, workflow, step]).edges
            if edge.type in ("PARENT_OF", "CHILD_OF")
        }
        assert structural == {
            ("flows-index", "wf", "PARENT_OF"),
            ("wf", "flows-index", "CHILD_OF"),
            ("flows-index", "s1", "PARENT_OF"),
            ("s1", "flows-index", "CHILD_OF"),
        }

    def test_workflow_index_document_is_the_index_node(self):
        """For an index workflow the workflow node, not a step, stands for the directory."""
        workflow = make_workflow("wf", "wf_id", source_path="flows/index.md")
        step = make_step("s1", 1, workflow_id="wf_id", source_path="flows/index.md")
        page = _doc("page", "flows/other.md")
        index = ResolutionIndex.build([workflow, step, page])
        assert index.index_files["flows"] == "wf"

    def test_steps_of_an_index_workflow_are_its_children(self):
        workflow = make_workflow("wf", "wf_id", source_path="flows/index.md")
        step = make_step("s1", 1, workflow_id="wf_id", source_path="flows/index.md")
        parents = [(edge.source, edge.target) for edge in resolve_edges([workflow, step]).edges if edge.type == "PARENT_OF"]
        assert parents == [("wf", "s1")]

    def test_last_index_file_wins(self):
        """With index.md and index.mdx in one directory, the later node is the index."""
        nodes = [
            _doc("md-index", "guides/index.md"),
            _doc("mdx-index", "guides/index.mdx"),
            _doc("page", "guides/page.md"),
        ]
        assert ResolutionIndex.build(nodes).index_files["guides"] == "mdx-index"
        parents = [(edge.source, edge.target) for edge in resolve_edges(nodes).edges if edge.type == "PARENT_OF"]
        assert parents == [("mdx-index", "page")]

    def test_pairs_follow_node_order(self):
        """Structural pairs are emitted in node order, not grouped by directory."""
        nodes = [_doc("root", "index.md"), _doc("api-idx", "api/index.md"), _doc("z", "z.md")]
        edges = resolve_edges(nodes).edges
        assert [(edge.source, edge.target, edge.type) for edge in edges] == [
            ("root", "api-idx", "PARENT_OF"),
            ("api-idx", "root", "CHILD_OF"),
            ("root", "z", "PARENT_OF"),
            ("z", "root", "CHILD_OF"),
        ]


class TestEmissionOrder:
    def test_reference_then_chain_then_structure(self):
        nodes = [
            _doc("idx", "workflows/index.md"),
            make_workflow("wf", "test_wf", primary_entity="Ghost"),
            make_step("s1", 1),
            make_step("s2", 2),
        ]
        types = [edge.type for edge in resolve_edges(nodes).edges]
        assert types == [
            "ACTS_ON",
            "CONTAINS",
            "CONTAINS",
            "NEXT_STEP_OF",
            "PARENT_OF",
            "CHILD_OF",
            "PARENT_OF",
            "CHILD_OF",
            "PARENT_OF",
            "CHILD_OF",
        ]


class TestConceptKeyCollisions:
    """Two concepts claiming the same key: the later one wins, with a warning."""

    def test_later_concept_wins_and_warns(self):
        first = make_concept("c-first", "Account", source_path="concepts/account.md")
        second = make_concept("c-second", "Billing", aliases=["account"], source_path="concepts/billing.md")
        index = ResolutionIndex.build([first, second])
        assert index.resolve_ref("Account") == "c-second"
        assert index.collisions == [
            'Duplicate concept key "account" in concepts/billing.md overrides concepts/account.md'
        ]

    def test_collision_warning_is_returned(self):
        first = make_concept("c-first", "Account", source_path="concepts/account.md")
        second = make_concept("c-second", "Account", source_path="concepts/account-v2.md")
        result = resolve_edges([first, second])
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith('Duplicate concept key "Account"')

    def test_alias_equal_to_own_name_is_not_a_collision(self):
        concept = make_concept("c1", "User", aliases=["user", "USER"])
        assert ResolutionIndex.build([concept]).collisions == []


class TestPurity:
    def test_input_nodes_are_not_modified(self):
        nodes = [make_concept("c1", "User", related=["Ghost"])]
        before = list(nodes)
        resolve_edges(nodes)
        assert nodes == before

    def test_repeatable(self):
        nodes = [make_concept("c1", "User", related=["Ghost"]), make_step("s1", 1), make_step("s2", 2)]
        assert resolve_edges(nodes) == resolve_edges(nodes)
