"""Unit tests for the shared generation context."""

from __future__ import annotations

from sketchforge.graph.models import ComponentType, Graph
from sketchforge.inference.build_order import BuildPhase
from sketchforge.inference.context import build_context
from sketchforge.registry.resolver import Language


class TestBuildContext:
    """Test context derivation from a graph."""

    def test_empty_graph(self, empty_graph: Graph) -> None:
        context = build_context(empty_graph.nodes, empty_graph.edges)
        assert context.nodes == ()
        assert context.integration_rows == ()
        assert len(context.build_phases) == len(BuildPhase)
        assert context.tech_labels == ()
        assert context.project_language is None
        assert context.present_types == set()

    def test_context_is_deterministic(self, full_graph: Graph) -> None:
        first = build_context(full_graph.nodes, full_graph.edges)
        second = build_context(full_graph.nodes, full_graph.edges)
        assert first == second

    def test_per_node_packages(self, full_graph: Graph) -> None:
        context = build_context(full_graph.nodes, full_graph.edges)

        api = context.packages_by_node["api"]
        assert api.language is Language.python
        assert [p.name for p in api.resolved] == ["fastapi", "uvicorn"]

        # The storage node carries no language signal of its own
        db = context.packages_by_node["db"]
        assert db.language is None
        assert [p.name for p in db.resolved] == ["pg"]

        assert context.packages_by_node["pay"].unresolved == ("Stripe",)
        assert context.packages_by_node["jobs"].unresolved == ("Celery",)

    def test_project_wide_resolution(self, full_graph: Graph) -> None:
        context = build_context(full_graph.nodes, full_graph.edges)
        assert context.tech_labels == (
            "React (Vite)",
            "FastAPI",
            "PostgreSQL",
            "Clerk",
            "Stripe",
            "Celery",
        )
        assert context.project_language is Language.python
        names = [p.name for p in context.project_packages]
        assert "psycopg2-binary" in names
        assert "pg" not in names

    def test_tech_labels_deduplicated(self, node_factory) -> None:
        nodes = [
            node_factory("a", ComponentType.backend, "A", ["Express", "PostgreSQL"]),
            node_factory("b", ComponentType.background, "B", ["PostgreSQL", "BullMQ"]),
        ]
        context = build_context(nodes, [])
        assert context.tech_labels == ("Express", "PostgreSQL", "BullMQ")

    def test_rows_for_node(self, full_graph: Graph) -> None:
        context = build_context(full_graph.nodes, full_graph.edges)
        assert [r.edge_id for r in context.rows_for("api")] == ["e1", "e2", "e3", "e4"]
        assert [r.edge_id for r in context.rows_for("db")] == ["e2", "e5"]
        assert context.rows_for("missing") == []

    def test_present_types(self, scenario_graph: Graph) -> None:
        context = build_context(scenario_graph.nodes, scenario_graph.edges)
        assert context.present_types == {ComponentType.storage, ComponentType.backend}
