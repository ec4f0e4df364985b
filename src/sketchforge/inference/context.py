"""Shared generation context.

The context holds every fact derived from the graph that both generation
paths render: build phases, integration rows and resolved packages. It is a
pure function of (nodes, edges) and is computed once per export.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from sketchforge.graph.models import ComponentType, Edge, Node
from sketchforge.inference.build_order import PhaseGroup, group_build_phases
from sketchforge.inference.integration import IntegrationRow, integration_rows
from sketchforge.registry.packages import PackageCoordinate
from sketchforge.registry.resolver import Language, detect_language, packages_for_labels

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NodePackages:
    """Registry resolution for one node's tech stack.

    Attributes:
        language: Language detected from the node's own labels
        resolved: Verified coordinates, de-duplicated by name
        unresolved: Labels with no registry entry
    """

    language: Language | None
    resolved: tuple[PackageCoordinate, ...]
    unresolved: tuple[str, ...]


@dataclass(frozen=True)
class GenerationContext:
    """Facts derived from the graph, shared by every artifact generator.

    Attributes:
        nodes: Nodes in user order
        edges: Edges in user order
        build_phases: One group per build phase, in phase order
        integration_rows: One row per edge, in edge order
        packages_by_node: Registry resolution keyed by node id
        tech_labels: Every tech label across all nodes, de-duplicated, first occurrence order
        project_packages: Coordinates for tech_labels resolved with the project language
    """

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    build_phases: tuple[PhaseGroup, ...]
    integration_rows: tuple[IntegrationRow, ...]
    packages_by_node: dict[str, NodePackages] = field(default_factory=dict)
    tech_labels: tuple[str, ...] = ()
    project_language: Language | None = None
    project_packages: tuple[PackageCoordinate, ...] = ()

    @property
    def present_types(self) -> set[ComponentType]:
        return {node.type for node in self.nodes}

    def rows_for(self, node_id: str) -> list[IntegrationRow]:
        """Integration rows touching a node, in edge order."""
        return [
            row
            for row in self.integration_rows
            if row.source.id == node_id or row.target.id == node_id
        ]


def build_context(nodes: list[Node], edges: list[Edge]) -> GenerationContext:
    """Compute the generation context for a graph.

    Args:
        nodes: Validated nodes
        edges: Edges whose endpoints all resolve within nodes

    Returns:
        GenerationContext; identical input yields an equal context
    """
    packages_by_node: dict[str, NodePackages] = {}
    for node in nodes:
        language = detect_language(node.tech_stack)
        resolved, unresolved = packages_for_labels(node.tech_stack, language)
        packages_by_node[node.id] = NodePackages(
            language=language,
            resolved=tuple(resolved),
            unresolved=tuple(unresolved),
        )

    tech_labels: list[str] = []
    for node in nodes:
        for label in node.tech_stack:
            if label not in tech_labels:
                tech_labels.append(label)

    project_language = detect_language(tech_labels)
    project_packages, _ = packages_for_labels(tech_labels, project_language)

    context = GenerationContext(
        nodes=tuple(nodes),
        edges=tuple(edges),
        build_phases=tuple(group_build_phases(nodes)),
        integration_rows=tuple(integration_rows(nodes, edges)),
        packages_by_node=packages_by_node,
        tech_labels=tuple(tech_labels),
        project_language=project_language,
        project_packages=tuple(project_packages),
    )

    logger.debug(
        "generation_context_built",
        nodes=len(nodes),
        edges=len(edges),
        tech_labels=len(tech_labels),
        project_language=project_language.value if project_language else None,
    )
    return context
