"""Unit tests for the deterministic template renderers.

Tests cover:
- Byte-identical output for identical input
- Totality on the empty graph
- The storage + backend reference scenario
- Confirmation markers for unknown tech labels
- Component spec section order
"""

from __future__ import annotations

from sketchforge.artifacts import ArtifactNaming
from sketchforge.graph.models import ComponentType, Edge, Graph
from sketchforge.inference.context import build_context
from sketchforge.templates import (
    detect_project_type,
    has_markers,
    needs_confirmation,
    needs_input,
    render_agent_protocol,
    render_component_spec,
    render_project_rules,
)
from sketchforge.templates import sections

RULES_SECTIONS = [
    "## System Overview",
    "## Component Registry",
    "## Architecture Constraints",
    "## Code Standards",
    "## Build Order",
    "## Integration Rules",
]


def _section(text: str, heading: str) -> str:
    """Return the body of one '---'-separated section starting with heading."""
    for chunk in text.split("\n\n---\n\n"):
        if chunk.startswith(heading):
            return chunk
    raise AssertionError(f"{heading} not found")


class TestMarkers:
    """Test the explicit placeholder markers."""

    def test_needs_input(self) -> None:
        assert needs_input("schema") == "[NEEDS INPUT: schema]"

    def test_needs_confirmation_names_label(self) -> None:
        marker = needs_confirmation("Stripe")
        assert marker.startswith("[NEEDS CONFIRMATION:")
        assert '"Stripe"' in marker

    def test_has_markers(self) -> None:
        assert has_markers(f"text {needs_input('x')}")
        assert not has_markers("plain text")


class TestDetectProjectType:
    """Test project type classification."""

    def test_full_stack(self) -> None:
        assert detect_project_type({ComponentType.frontend, ComponentType.backend}) == (
            "Full-stack web application"
        )

    def test_backend_with_storage(self) -> None:
        assert detect_project_type({ComponentType.backend, ComponentType.storage}) == (
            "Backend API service"
        )

    def test_frontend_only(self) -> None:
        assert detect_project_type({ComponentType.frontend}) == "Frontend web application"

    def test_empty(self) -> None:
        assert detect_project_type(set()) == "Application"


class TestProjectRules:
    """Test the project rules renderer."""

    def test_deterministic(self, full_graph: Graph) -> None:
        first = render_project_rules(full_graph.nodes, full_graph.edges, "Full Stack")
        second = render_project_rules(full_graph.nodes, full_graph.edges, "Full Stack")
        assert first == second

    def test_header_and_sections(self, full_graph: Graph) -> None:
        text = render_project_rules(full_graph.nodes, full_graph.edges, "Full Stack")
        assert text.startswith("# Full Stack - System Rules\n")
        positions = [text.index(heading) for heading in RULES_SECTIONS]
        assert positions == sorted(positions)
        assert text.endswith("\n")

    def test_empty_graph_is_total(self, empty_graph: Graph) -> None:
        text = render_project_rules([], [], "Empty")
        for heading in RULES_SECTIONS:
            assert heading in text
        assert sections.NO_COMPONENTS in text
        assert sections.NO_PHASE_COMPONENTS in text
        assert "## Integration Rules\n\nNo integrations defined." in text
        assert "### Phase 4: Polish" in text

    def test_scenario(self, scenario_graph: Graph) -> None:
        text = render_project_rules(scenario_graph.nodes, scenario_graph.edges, "Shop")

        build = _section(text, "## Build Order")
        foundation = build.split("### Phase 1: Foundation")[1].split("### Phase 2")[0]
        core = build.split("### Phase 2: Core Features")[1].split("### Phase 3")[0]
        assert "[db] Postgres DB" in foundation
        assert "[api] API" in core
        assert "[api]" not in foundation

        integrations = _section(text, "## Integration Rules")
        assert "| API | Postgres DB | ORM/query access | queries |" in integrations

    def test_registry_rows(self, scenario_graph: Graph) -> None:
        text = render_project_rules(scenario_graph.nodes, scenario_graph.edges, "Shop")
        assert "| db | Postgres DB | storage | `specs/postgres-db.md` | active |" in text
        assert "| api | API | backend | `specs/api.md` | active |" in text

    def test_naming_flows_into_registry(self, scenario_graph: Graph) -> None:
        naming = ArtifactNaming(specs_dir="docs/specs")
        text = render_project_rules(
            scenario_graph.nodes, scenario_graph.edges, "Shop", naming=naming
        )
        assert "`docs/specs/api.md`" in text

    def test_security_rules_follow_present_types(self, scenario_graph: Graph) -> None:
        text = render_project_rules(scenario_graph.nodes, scenario_graph.edges, "Shop")
        constraints = _section(text, "## Architecture Constraints")
        assert "Encrypt sensitive columns at rest" in constraints
        assert "Validate ALL inputs with schema validation library" in constraints
        assert "Sanitize all user inputs to prevent XSS attacks" not in constraints
        assert "Make direct database connections from frontend" in constraints

    def test_no_stack_means_no_assumed_runtime(self, node_factory) -> None:
        nodes = [node_factory("db", ComponentType.storage, "DB")]
        text = render_project_rules(nodes, [], "Bare")
        standards = _section(text, "## Code Standards")
        assert "[NEEDS INPUT:" in standards
        assert "TypeScript" not in standards

    def test_project_name_rendered_verbatim(self, scenario_graph: Graph) -> None:
        text = render_project_rules(scenario_graph.nodes, scenario_graph.edges, "Shop | v2")
        assert text.startswith("# Shop | v2 - System Rules")

    def test_pipes_escaped_in_tables(self, node_factory) -> None:
        nodes = [
            node_factory("web", ComponentType.frontend, "Web | Admin"),
            node_factory("api", ComponentType.backend, "API"),
        ]
        edges = [Edge(id="e1", source="web", target="api", label="REST|GraphQL")]
        text = render_project_rules(nodes, edges, "Pipes")

        assert "| web | Web \\| Admin | frontend |" in text
        assert "| Web \\| Admin | API | HTTP/REST API | REST\\|GraphQL |" in text

    def test_table_cell(self) -> None:
        assert sections.table_cell("a|b\nc") == "a\\|b c"


class TestAgentProtocol:
    """Test the agent protocol renderer."""

    def test_first_line(self, full_graph: Graph) -> None:
        text = render_agent_protocol(full_graph.nodes, "Full Stack")
        assert text.startswith("# Agent Protocol\n")

    def test_deterministic(self, full_graph: Graph) -> None:
        assert render_agent_protocol(full_graph.nodes, "X") == render_agent_protocol(
            full_graph.nodes, "X"
        )

    def test_status_template_and_sections(self, scenario_graph: Graph) -> None:
        text = render_agent_protocol(scenario_graph.nodes, "Shop")
        for heading in (
            "## Core Principle",
            "## Status Tracking (MANDATORY)",
            "## Workflow Guidance",
            "## Scope Discipline",
            "## Library Policy",
            "## Minimalism Mandate",
            "## Code Standards",
        ):
            assert heading in text
        assert "STATUS.md" in text

    def test_standards_table_uses_labels(self, scenario_graph: Graph) -> None:
        text = render_agent_protocol(scenario_graph.nodes, "Shop")
        assert "| Stack | Standards |" in text
        assert "| Express |" in text
        assert "| PostgreSQL |" in text

    def test_unknown_label_gets_general_standard(self, full_graph: Graph) -> None:
        text = render_agent_protocol(full_graph.nodes, "Full Stack")
        assert "| Celery | General best practices |" in text

    def test_empty_graph(self) -> None:
        text = render_agent_protocol([], "Empty")
        assert text.startswith("# Agent Protocol")
        assert "## Code Standards" in text


class TestComponentSpec:
    """Test the component spec renderer."""

    def test_scenario_backend_spec(self, scenario_graph: Graph, api_node) -> None:
        text = render_component_spec(api_node, scenario_graph.edges, scenario_graph.nodes)
        assert text.startswith("# API\n")
        assert '<spec component="API" type="backend" id="api">' in text
        assert "`express` ^5.2.1" in text
        assert "Order management API" in text
        assert "**Component role:** API endpoints, server logic, and business rules" in text
        assert "- [db] Postgres DB (outbound) via ORM/query access: queries" in text
        assert text.rstrip().endswith("</spec>")

    def test_inbound_integration(self, scenario_graph: Graph, postgres_node) -> None:
        text = render_component_spec(postgres_node, scenario_graph.edges, scenario_graph.nodes)
        assert "- [api] API (inbound) via ORM/query access: queries" in text

    def test_section_order(self, scenario_graph: Graph, api_node) -> None:
        text = render_component_spec(api_node, scenario_graph.edges, scenario_graph.nodes)
        headings = [
            "## Description",
            "## Tech Stack",
            "## Responsibilities",
            "## Anti-Responsibilities",
            "## Integrates With",
            "## Dependencies",
            "## API Notes",
            "## Security",
            "## References",
            "## Validation",
        ]
        positions = [text.index(h) for h in headings]
        assert positions == sorted(positions)

    def test_validation_ends_with_status_check(self, full_graph: Graph) -> None:
        context = build_context(full_graph.nodes, full_graph.edges)
        for node in full_graph.nodes:
            text = render_component_spec(
                node, full_graph.edges, full_graph.nodes, context=context
            )
            validation = text.split("## Validation")[1].split("</spec>")[0].strip()
            assert validation.splitlines()[-1] == "- [ ] STATUS.md updated"

    def test_unknown_labels_get_confirmation_markers(self, full_graph: Graph) -> None:
        nodes = {node.id: node for node in full_graph.nodes}
        pay = render_component_spec(nodes["pay"], full_graph.edges, full_graph.nodes)
        jobs = render_component_spec(nodes["jobs"], full_graph.edges, full_graph.nodes)
        assert f"- Stripe: {needs_confirmation('Stripe')}" in pay
        assert f"- Celery: {needs_confirmation('Celery')}" in jobs
        # No invented coordinates for unresolved stacks
        assert "## References" not in pay

    def test_companion_package_flagged(self, full_graph: Graph) -> None:
        api = next(n for n in full_graph.nodes if n.id == "api")
        text = render_component_spec(api, full_graph.edges, full_graph.nodes)
        assert "`uvicorn` >=0.38.0 (pypi) (required companion)" in text
        assert "| fastapi | >=0.125.0 |" in text

    def test_isolated_node(self, node_factory) -> None:
        node = node_factory("solo", ComponentType.frontend, "Solo")
        text = render_component_spec(node, [], [node])
        assert "No integrations defined for this component." in text
        assert needs_input("component description") in text
        assert (
            "[NEEDS INPUT: technologies for this Frontend component, "
            "typically React, Vue, or similar modern framework]"
        ) in text
        assert "**Component role:** UI components, pages, and client-side logic" in text
        assert "- Accessibility: WCAG 2.1 AA compliance" in text
        assert "- Routing: [NEEDS INPUT: routing]" in text

    def test_rules_reference_follows_naming(self, scenario_graph: Graph, api_node) -> None:
        naming = ArtifactNaming(rules_filename="RULES.md")
        text = render_component_spec(
            api_node, scenario_graph.edges, scenario_graph.nodes, naming=naming
        )
        assert "> Extends `RULES.md`. Load that file first." in text
