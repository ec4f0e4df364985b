"""Sections of the project rules document.

Each function renders one section as markdown, starting with its ``##``
heading. Sections never disappear: an empty graph gets explicit notices.
"""

from __future__ import annotations

from sketchforge.artifacts import ArtifactNaming
from sketchforge.graph.models import ComponentType
from sketchforge.graph.taxonomy import TAXONOMY, types_by_rank
from sketchforge.inference.build_order import POLISH_PHASE_TITLE, POLISH_TASKS
from sketchforge.inference.context import GenerationContext
from sketchforge.templates.markers import needs_input
from sketchforge.templates.standards import (
    MODULARITY_RULES,
    NAMING_CONVENTIONS,
    STACK_PATTERNS,
    detect_stacks,
)

NO_COMPONENTS = "No components defined yet."
NO_PHASE_COMPONENTS = "No components in this phase."
NO_INTEGRATIONS = "No integrations defined."


def table_cell(text: str) -> str:
    """Make user text safe inside a markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")

ALWAYS_BASELINE: tuple[str, ...] = (
    "Validate all inputs at system boundaries (API endpoints, form submissions)",
    "Use environment variables for all configuration (never hardcode secrets)",
    "Log structured data for all errors (timestamp, level, message, context)",
)

NEVER_BASELINE: tuple[str, ...] = (
    "Store secrets in code or version control",
    "Trust client-side validation alone (always re-validate server-side)",
    "Expose internal error details to clients (log internally, return safe messages)",
    "Add enterprise patterns without explicit user request (message queues, microservices, CQRS)",
    "Install dependencies without checking if stdlib or existing deps solve the problem",
)

NEVER_BY_TYPE: dict[ComponentType, str] = {
    ComponentType.storage: "Make direct database connections from frontend",
}

PREFER_BASELINE: tuple[str, ...] = (
    "Simplicity over abstraction — delay complexity until scaling demands it",
    "Composition over inheritance — easier to test and modify",
    "Early returns over nested conditionals — clearer control flow",
    "Explicit dependencies over global imports — aids testing",
    "Three similar lines over one premature helper — wait for patterns to emerge",
)

SECURITY_BULLETS_PER_TYPE = 2


def detect_project_type(present: set[ComponentType]) -> str:
    """Classify the project from the component types it contains."""
    has_frontend = ComponentType.frontend in present
    has_backend = ComponentType.backend in present
    if has_frontend and has_backend:
        return "Full-stack web application"
    if has_frontend:
        return "Frontend web application"
    if has_backend and ComponentType.storage in present:
        return "Backend API service"
    if has_backend:
        return "Backend service"
    if ComponentType.background in present:
        return "Background processing service"
    return "Application"


def _bullets(items) -> list[str]:
    return [f"- {item}" for item in items]


def system_overview(context: GenerationContext, project_name: str) -> str:
    present = context.present_types
    stack = ", ".join(context.tech_labels) if context.tech_labels else needs_input(
        "technology stack"
    )

    lines = [
        "## System Overview",
        "",
        f"**Project:** {project_name}",
        f"**Type:** {detect_project_type(present)}",
        f"**Stack:** {stack}",
        f"**Components:** {len(context.nodes)}",
        "",
        "### Purpose",
        "",
        needs_input("2-3 sentence description of what this system does and for whom"),
        "",
        "### Boundaries",
        "",
        "**This system IS:**",
    ]

    is_items = [
        TAXONOMY[t].boundary_present
        for t in types_by_rank()
        if t in present and TAXONOMY[t].boundary_present
    ]
    lines.extend(_bullets(is_items) if is_items else [f"- {needs_input('system scope')}"])

    lines.extend(["", "**This system IS NOT:**"])
    is_not_items = [
        TAXONOMY[t].boundary_absent
        for t in types_by_rank()
        if t not in present and TAXONOMY[t].boundary_absent
    ]
    lines.extend(_bullets(is_not_items))
    lines.append(f"- {needs_input('project-specific exclusions')}")
    return "\n".join(lines)


def component_registry(context: GenerationContext, naming: ArtifactNaming) -> str:
    if not context.nodes:
        return f"## Component Registry\n\n{NO_COMPONENTS}"

    lines = [
        "## Component Registry",
        "",
        "| ID | Component | Type | Spec File | Status |",
        "|----|-----------|------|-----------|--------|",
    ]
    for node in context.nodes:
        lines.append(
            f"| {table_cell(node.id)} | {table_cell(node.label)} | {node.type.value} "
            f"| `{naming.spec_path(node)}` | active |"
        )

    first = context.nodes[0]
    lines.extend(
        [
            "",
            "### Loading Instructions",
            "",
            "Load component specs **only when working on that component**. "
            "Do not preload all specs.",
            "",
            f"Cross-reference format: `[component-id]` "
            f"(e.g., [{first.id}] references {first.label})",
        ]
    )
    return "\n".join(lines)


def architecture_constraints(context: GenerationContext) -> str:
    present = context.present_types

    always = list(ALWAYS_BASELINE)
    for component_type in types_by_rank():
        if component_type not in present:
            continue
        for rule in TAXONOMY[component_type].security[:SECURITY_BULLETS_PER_TYPE]:
            if rule not in always:
                always.append(rule)

    never = list(NEVER_BASELINE)
    never.extend(rule for t, rule in NEVER_BY_TYPE.items() if t in present)

    lines = ["## Architecture Constraints", "", "### ALWAYS (Required)", ""]
    lines.extend(_bullets(always))
    lines.extend(["", "### NEVER (Forbidden)", ""])
    lines.extend(_bullets(never))
    lines.extend(["", "### PREFER (Encouraged)", ""])
    lines.extend(_bullets(PREFER_BASELINE))
    return "\n".join(lines)


def _file_organization(present: set[ComponentType]) -> list[str]:
    has_frontend = ComponentType.frontend in present
    has_backend = ComponentType.backend in present
    if has_frontend and has_backend:
        tree = (
            "/src",
            "  /app          - Application shell, routing, providers",
            "  /components   - Reusable UI components (no business logic)",
            "  /features     - Feature modules (co-located components + hooks + utils)",
            "  /services     - API clients, external service integrations",
            "  /types        - Shared types",
            "  /utils        - Pure utility functions",
            "  /server       - Backend code (if monorepo)",
        )
    elif has_frontend:
        tree = (
            "/src",
            "  /app          - Application shell, routing",
            "  /components   - Reusable UI components",
            "  /features     - Feature modules",
            "  /stores       - State management",
            "  /types        - Shared types",
            "  /utils        - Utility functions",
        )
    elif has_backend:
        tree = (
            "/src",
            "  /controllers  - Route handlers (thin, delegate to services)",
            "  /services     - Business logic",
            "  /repositories - Data access layer",
            "  /models       - Data models/entities",
            "  /middleware   - Request/response middleware",
            "  /utils        - Utility functions",
        )
    else:
        return [needs_input("directory layout for this project")]
    return ["```", *tree, "```"]


def code_standards(context: GenerationContext) -> str:
    present = context.present_types
    stacks = detect_stacks(context)

    lines = ["## Code Standards", "", "### Naming Conventions (ENFORCED)", ""]
    if stacks:
        for stack in stacks:
            lines.append(f"**{stack}:**")
            lines.extend(_bullets(NAMING_CONVENTIONS[stack]))
            lines.append("")
    else:
        lines.extend(
            [needs_input("naming conventions; no implementation language detected"), ""]
        )

    lines.extend(
        [
            "### Modularity Rules (HARD LIMITS)",
            "",
            "| Metric | Limit | Action When Exceeded |",
            "|--------|-------|---------------------|",
        ]
    )
    lines.extend(f"| {metric} | {limit} | {action} |" for metric, limit, action in MODULARITY_RULES)

    lines.extend(["", "### File Organization", ""])
    lines.extend(_file_organization(present))

    lines.extend(["", "### Required Patterns", ""])
    if ComponentType.frontend in present:
        lines.append("**Frontend:**")
        lines.extend(
            _bullets(
                (
                    "Components: Functional only, no class components",
                    "State: Lift state up or use stores, no prop drilling >2 levels",
                    "Effects: Cleanup subscriptions, cancel pending requests",
                    "Error handling: Error boundaries at route level minimum",
                )
            )
        )
        lines.append("")
    if ComponentType.backend in present:
        lines.append("**Backend:**")
        lines.extend(
            _bullets(
                (
                    "Controllers: Routing only, no business logic",
                    "Services: All business logic, injectable dependencies",
                    "Validation: At API boundary using a schema validation library",
                    "Errors: Structured error responses with codes and messages",
                )
            )
        )
        lines.append("")
    for stack in stacks:
        lines.append(f"**{stack} Specific:**")
        lines.extend(_bullets(STACK_PATTERNS[stack]))
        lines.append("")

    lines.extend(
        [
            "### Dependencies Policy",
            "",
            "**Before adding ANY dependency:**",
            "1. Check if functionality exists in stdlib or current deps",
            "2. Verify package is actively maintained (commits in last 6 months)",
            "3. Verify the exact version on its official registry",
            "4. Review security advisories",
            "",
            "**NEVER:**",
            "- Install from a repository's main branch",
            "- Use packages with known vulnerabilities",
            "- Add deps for trivial functionality (<20 lines of code)",
        ]
    )
    return "\n".join(lines)


def build_order(context: GenerationContext) -> str:
    lines = ["## Build Order"]
    for group in context.build_phases:
        lines.extend(["", f"### {group.title}", ""])
        if not group.nodes:
            lines.append(NO_PHASE_COMPONENTS)
            continue
        for node in group.nodes:
            rationale = TAXONOMY[node.type].build_rationale
            lines.append(f"- [ ] [{node.id}] {node.label} — {rationale}")

    lines.extend(["", f"### {POLISH_PHASE_TITLE}", ""])
    lines.extend(f"- [ ] {task}" for task in POLISH_TASKS)
    return "\n".join(lines)


def integration_rules(context: GenerationContext) -> str:
    if not context.integration_rows:
        return f"## Integration Rules\n\n{NO_INTEGRATIONS}"

    lines = [
        "## Integration Rules",
        "",
        "### Communication Patterns",
        "",
        "| From | To | Pattern | Notes |",
        "|------|----|---------|-------|",
    ]
    for row in context.integration_rows:
        lines.append(
            f"| {table_cell(row.source.label)} | {table_cell(row.target.label)} "
            f"| {row.pattern} | {table_cell(row.notes)} |"
        )

    lines.extend(
        [
            "",
            "### Shared Contracts",
            "",
            "Define shared types and API contracts in a central location "
            "(e.g., `/src/types/`).",
            "",
            "### Forbidden Integrations",
            "",
            "- Frontend MUST NOT directly access storage",
            "- External services MUST be proxied through backend",
        ]
    )
    return "\n".join(lines)
