"""Integration-pattern inference.

``infer_pattern`` is total over every ordered pair of component types: pairs
in the table get their documented label, anything else falls back to a
generic label. Edge labels never influence the pattern; they are carried as
free-form notes only.
"""

from __future__ import annotations

from dataclasses import dataclass

from sketchforge.graph.models import ComponentType, Edge, Node

GENERIC_PATTERN = "Component integration"

PATTERNS: dict[tuple[ComponentType, ComponentType], str] = {
    (ComponentType.frontend, ComponentType.backend): "HTTP/REST API",
    (ComponentType.backend, ComponentType.storage): "ORM/query access",
    (ComponentType.backend, ComponentType.auth): "Token validation",
    (ComponentType.auth, ComponentType.storage): "Credential lookup",
    (ComponentType.background, ComponentType.storage): "Direct data access",
    (ComponentType.backend, ComponentType.external): "API client/SDK",
    (ComponentType.backend, ComponentType.background): "Job queue",
}

DEFAULT_NOTE = "See component specs"


def infer_pattern(source_type: ComponentType, target_type: ComponentType) -> str:
    """Infer the communication pattern for a directed pair of types.

    Never fails and never returns an empty string.
    """
    return PATTERNS.get((source_type, target_type), GENERIC_PATTERN)


@dataclass(frozen=True)
class IntegrationRow:
    """One inferred integration, derived from one edge.

    Attributes:
        edge_id: Id of the originating edge
        source: Source node
        target: Target node
        pattern: Inferred communication pattern
        note: Edge label, if the user supplied one
    """

    edge_id: str
    source: Node
    target: Node
    pattern: str
    note: str | None

    @property
    def notes(self) -> str:
        return self.note or DEFAULT_NOTE


def integration_rows(nodes: list[Node], edges: list[Edge]) -> list[IntegrationRow]:
    """Build one integration row per edge, in edge order.

    Both endpoints of every edge are expected to resolve; that is enforced
    when the graph is loaded.
    """
    by_id = {node.id: node for node in nodes}
    rows: list[IntegrationRow] = []
    for edge in edges:
        source = by_id[edge.source]
        target = by_id[edge.target]
        rows.append(
            IntegrationRow(
                edge_id=edge.id,
                source=source,
                target=target,
                pattern=infer_pattern(source.type, target.type),
                note=edge.label or None,
            )
        )
    return rows
