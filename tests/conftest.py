"""Shared pytest fixtures for sketchforge tests.

Graph fixtures are built directly from the pydantic models so unit tests do
not depend on the JSON loader.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sketchforge.graph.models import ComponentType, Edge, Graph, Node


def make_node(
    node_id: str,
    component_type: ComponentType,
    label: str,
    tech_stack: list[str] | None = None,
    description: str | None = None,
) -> Node:
    """Build a Node with sensible defaults."""
    return Node(
        id=node_id,
        type=component_type,
        label=label,
        description=description,
        tech_stack=tech_stack or [],
    )


@pytest.fixture
def postgres_node() -> Node:
    return make_node("db", ComponentType.storage, "Postgres DB", ["PostgreSQL"])


@pytest.fixture
def api_node() -> Node:
    return make_node("api", ComponentType.backend, "API", ["Express"], "Order management API")


@pytest.fixture
def scenario_graph(postgres_node: Node, api_node: Node) -> Graph:
    """Storage + backend joined by one labelled edge."""
    return Graph(
        project_name="Shop",
        nodes=[postgres_node, api_node],
        edges=[Edge(id="e1", source="api", target="db", label="queries")],
    )


@pytest.fixture
def full_graph() -> Graph:
    """One node of every component type, wired the usual way."""
    nodes = [
        make_node("web", ComponentType.frontend, "Web App", ["React (Vite)"]),
        make_node("api", ComponentType.backend, "API", ["FastAPI"]),
        make_node("db", ComponentType.storage, "Database", ["PostgreSQL"]),
        make_node("auth", ComponentType.auth, "Auth", ["Clerk"]),
        make_node("pay", ComponentType.external, "Payments", ["Stripe"]),
        make_node("jobs", ComponentType.background, "Workers", ["Celery"]),
    ]
    edges = [
        Edge(id="e1", source="web", target="api"),
        Edge(id="e2", source="api", target="db"),
        Edge(id="e3", source="api", target="auth"),
        Edge(id="e4", source="api", target="pay", label="charges"),
        Edge(id="e5", source="jobs", target="db"),
    ]
    return Graph(project_name="Full Stack", nodes=nodes, edges=edges)


@pytest.fixture
def empty_graph() -> Graph:
    return Graph(project_name="Empty")


@pytest.fixture
def scenario_document() -> dict:
    """The storage + backend scenario in the flat document shape."""
    return {
        "projectName": "Shop",
        "nodes": [
            {"id": "db", "type": "storage", "label": "Postgres DB", "techStack": ["PostgreSQL"]},
            {"id": "api", "type": "backend", "label": "API", "techStack": ["Express"]},
        ],
        "edges": [{"id": "e1", "source": "api", "target": "db", "label": "queries"}],
    }


@pytest.fixture
def scenario_file(tmp_path: Path, scenario_document: dict) -> Path:
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(scenario_document), encoding="utf-8")
    return path


@pytest.fixture
def node_factory():
    """Expose make_node to tests that build their own graphs."""
    return make_node
