"""Prompt assembly for model-augmented generation.

Prompts embed the facts already computed for the deterministic path (build
order, integration table, verified packages) so a model rewrites prose
around them instead of inventing its own. Building a prompt performs no I/O
beyond loading templates.
"""

from __future__ import annotations

import structlog

from sketchforge.artifacts import DEFAULT_NAMING, ArtifactNaming
from sketchforge.graph.models import Node
from sketchforge.graph.taxonomy import TAXONOMY
from sketchforge.inference.build_order import PHASE_TITLES, POLISH_PHASE_TITLE, phase_for_type
from sketchforge.inference.context import GenerationContext
from sketchforge.prompts.loader import TemplateLoader
from sketchforge.registry.packages import PackageCoordinate
from sketchforge.registry.resolver import registry_url
from sketchforge.templates import sections
from sketchforge.templates.markers import needs_confirmation
from sketchforge.templates.standards import GENERAL_STANDARD, LABEL_STANDARDS, detect_stacks

logger = structlog.get_logger(__name__)

RULES_TEMPLATE = "project_rules.j2"
PROTOCOL_TEMPLATE = "agent_protocol.j2"
COMPONENT_TEMPLATE = "component_spec.j2"


def _package_line(pkg: PackageCoordinate) -> str:
    return f"{pkg.name}@{pkg.version_constraint} ({pkg.registry_kind.value}): {pkg.purpose}"


def required_first_line(artifact_kind: str, subject: str = "") -> str:
    """First line a model response must start with for an artifact kind.

    Args:
        artifact_kind: ``rules``, ``protocol`` or ``component``
        subject: Project name for rules, component label for components
    """
    if artifact_kind == "rules":
        return f"# {subject} - System Rules"
    if artifact_kind == "protocol":
        return "# Agent Protocol"
    if artifact_kind == "component":
        return f"# {subject}"
    raise ValueError(f"Unknown artifact kind: {artifact_kind}")


class PromptBuilder:
    """Builds one prompt per artifact from a generation context.

    Attributes:
        loader: Template loader used to render prompts
        naming: Naming scheme referenced inside prompts
    """

    def __init__(
        self,
        loader: TemplateLoader | None = None,
        naming: ArtifactNaming = DEFAULT_NAMING,
    ) -> None:
        self.loader = loader or TemplateLoader()
        self.naming = naming

    def _render(self, template_name: str, **variables: object) -> str:
        prompt = self.loader.load_template(template_name).render(**variables)
        logger.debug("prompt_built", template=template_name, length=len(prompt))
        return prompt

    def build_rules_prompt(self, context: GenerationContext, project_name: str) -> str:
        """Prompt for the project rules file."""
        return self._render(
            RULES_TEMPLATE,
            first_line=required_first_line("rules", project_name),
            rules_filename=self.naming.rules_filename,
            project_name=project_name,
            project_type=sections.detect_project_type(context.present_types),
            stack_summary=", ".join(context.tech_labels) or "Not specified",
            components=list(context.nodes),
            verified_packages=[_package_line(pkg) for pkg in context.project_packages],
            confirmation_marker=needs_confirmation("<label>"),
            component_registry=sections.component_registry(context, self.naming),
            stacks=detect_stacks(context),
            build_order=sections.build_order(context),
            integration_rules=sections.integration_rules(context),
        )

    def build_protocol_prompt(self, context: GenerationContext, project_name: str) -> str:
        """Prompt for the agent protocol file."""
        labels = sorted({label.strip() for label in context.tech_labels if label.strip()})
        return self._render(
            PROTOCOL_TEMPLATE,
            first_line=required_first_line("protocol"),
            protocol_filename=self.naming.protocol_filename,
            rules_filename=self.naming.rules_filename,
            project_name=project_name,
            stacks=detect_stacks(context),
            tech_labels=list(context.tech_labels),
            phase_titles=[*PHASE_TITLES.values(), POLISH_PHASE_TITLE],
            standards=[(label, LABEL_STANDARDS.get(label, GENERAL_STANDARD)) for label in labels],
        )

    def build_component_prompt(self, node: Node, context: GenerationContext) -> str:
        """Prompt for one component spec.

        Connections are rendered from the precomputed integration rows so
        the model sees the same pattern the deterministic output uses.
        """
        info = TAXONOMY[node.type]
        packages = context.packages_by_node[node.id]

        connections = []
        for row in context.rows_for(node.id):
            if row.source.id == node.id:
                connections.append(
                    f"{row.target.label} [{row.target.id}] (outbound) via {row.pattern}: {row.notes}"
                )
            else:
                connections.append(
                    f"{row.source.label} [{row.source.id}] (inbound) via {row.pattern}: {row.notes}"
                )

        references: list[str] = []
        for pkg in packages.resolved:
            for url in (pkg.docs_url, registry_url(pkg)):
                if url not in references:
                    references.append(url)

        return self._render(
            COMPONENT_TEMPLATE,
            first_line=required_first_line("component", node.label),
            spec_path=self.naming.spec_path(node),
            node=node,
            type_label=info.label,
            type_description=info.description,
            phase_title=phase_for_type(node.type).title,
            verified_packages=[_package_line(pkg) for pkg in packages.resolved],
            verified_references=references,
            unresolved_labels=list(packages.unresolved),
            confirmation_markers={
                label: needs_confirmation(label) for label in packages.unresolved
            },
            connections=connections,
            spec_section=info.spec_section,
            type_fields=[type_field.name for type_field in info.fields],
        )
