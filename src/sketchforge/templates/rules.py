"""Project rules document (deterministic)."""

from __future__ import annotations

from sketchforge.artifacts import DEFAULT_NAMING, ArtifactNaming
from sketchforge.graph.models import Edge, Node
from sketchforge.inference.context import GenerationContext, build_context
from sketchforge.templates import sections

SECTION_SEPARATOR = "\n\n---\n\n"


def render_project_rules(
    nodes: list[Node],
    edges: list[Edge],
    project_name: str,
    context: GenerationContext | None = None,
    naming: ArtifactNaming = DEFAULT_NAMING,
) -> str:
    """Render the project-wide rules file.

    The document has six fixed sections followed by a pointer to the agent
    protocol. It is total: an empty graph yields every section with explicit
    notices in place of tables.

    Args:
        nodes: Nodes in user order
        edges: Edges in user order
        project_name: Project name, rendered verbatim
        context: Precomputed context; built from nodes and edges when omitted
        naming: Naming scheme used for spec paths in the registry table

    Returns:
        Markdown text starting with ``# <project_name> - System Rules``
    """
    if context is None:
        context = build_context(nodes, edges)

    header = "\n".join(
        [
            f"# {project_name} - System Rules",
            "",
            "> **Load this file FIRST** before any component specs.",
            f"> Component specs in `{naming.specs_dir}/*.md` extend these rules.",
        ]
    )
    status = "\n".join(
        [
            "## Status Tracking",
            "",
            "Track implementation progress in `STATUS.md`.",
            "",
            f"See `{naming.protocol_filename}` for:",
            "- Required status tracking format",
            "- Workflow guidance (Index → Plan → Implement → Verify)",
            "- Scope discipline rules",
            "- Library policy",
        ]
    )

    body = SECTION_SEPARATOR.join(
        [
            sections.system_overview(context, project_name),
            sections.component_registry(context, naming),
            sections.architecture_constraints(context),
            sections.code_standards(context),
            sections.build_order(context),
            sections.integration_rules(context),
            status,
        ]
    )
    return f"{header}\n\n{body}\n"
