"""Agent protocol document (deterministic).

Most of the protocol is fixed workflow guidance. Only the code standards
table depends on the graph.
"""

from __future__ import annotations

from sketchforge.artifacts import DEFAULT_NAMING, ArtifactNaming
from sketchforge.graph.models import Node
from sketchforge.inference.context import GenerationContext, build_context
from sketchforge.templates.sections import table_cell
from sketchforge.templates.standards import GENERAL_STANDARD, LABEL_STANDARDS

_STATUS_TEMPLATE = """\
```
# Project Status

## Current Phase
[Phase 1: Foundation | Phase 2: Core Features | Phase 3: Integration | Phase 4: Polish]

## Active Component
[component_id] [component_name]

## Current Milestone
[What you're working on]

## Progress
- [x] Completed items
- [ ] Remaining items

## Blockers
[Any blockers or decisions needed]

## Last Updated
[timestamp]
```"""

_WORKFLOW = """\
## Workflow Guidance

Recommended phases for non-trivial tasks:

1. **Index** — Map files and dependencies in scope. Indexing only, no suggestions or fixes.
2. **Plan** — Produce implementation plan. Take versions from the spec, never from memory. Flag decisions needing input.
3. **Implement** — Follow the plan. Work in logical increments.
4. **Verify** — Check exit criteria. Update STATUS.md."""

_SCOPE = """\
## Scope Discipline

### ALWAYS
- Implement what the spec defines
- Flag gaps or ambiguities before filling them
- Resolve every `[NEEDS INPUT: ...]` and `[NEEDS CONFIRMATION: ...]` marker before relying on it
- Use baseline deps from spec as version anchors
- Verify exit criteria before marking component complete
- **Update `STATUS.md` after every feature/milestone**

### NEVER
- Add features not in the spec
- Refactor adjacent components unprompted
- Upgrade deps beyond stable versions in spec
- Create abstractions for hypothetical future requirements
- Proceed to next component before current passes verification

### PREFER
- Established libraries over custom implementations
- Explicit over implicit
- Composition over inheritance
- Failing fast over silent degradation
- Asking over assuming when spec is ambiguous"""

_LIBRARY_POLICY = """\
## Library Policy

**Search before building.** Check in order:
1. Current codebase utilities
2. Project dependencies
3. Well-maintained packages (PyPI, npm, etc.)

Use established libraries for: parsing, validation, date/time, HTTP clients, file formats.

Custom code only when no suitable library exists or you've flagged it and user approved."""

_MINIMALISM = """\
## Minimalism Mandate (NON-NEGOTIABLE)

**Start simple. Scale when necessary. Not before.**

### ALWAYS
- Begin with the simplest architecture that could work
- Prefer stdlib over library, library over framework
- Use lightweight solutions (SQLite before PostgreSQL clusters, monolith before microservices)
- Write three similar lines before extracting a helper
- Question every dependency: "Do I actually need this?"

### NEVER add without explicit user request
- Message queues (Redis queues, RabbitMQ, SQS)
- Microservices or service mesh
- CQRS or event sourcing
- Kubernetes or container orchestration
- GraphQL when REST suffices
- ORMs when raw queries are simpler

**If the user didn't ask for it, don't add it.**"""

_MODULARITY = """\
### Modularity Rules (ENFORCED)

- Functions: **max 50 lines** (split larger functions into helpers)
- Files: **max 300 lines** (hard limit 500; extract modules when exceeded)
- Classes: single responsibility, one reason to change
- Nesting: **max 3 levels** (extract early returns or helper functions)

### General Principles

- **Explicit over implicit**: no magic, no hidden behavior
- **Composition over inheritance**: prefer interfaces and composition
- **Fail fast**: validate inputs early, throw meaningful errors
- **Pure functions**: minimize side effects, maximize testability
- **No premature abstraction**: three similar lines beats one clever helper"""


def _code_standards(labels: list[str]) -> str:
    lines = ["## Code Standards", ""]
    if labels:
        lines.extend(
            [
                "Apply per stack entry:",
                "",
                "| Stack | Standards |",
                "|-------|-----------|",
            ]
        )
        lines.extend(
            f"| {table_cell(label)} | {LABEL_STANDARDS.get(label, GENERAL_STANDARD)} |"
            for label in labels
        )
        lines.append("")
    lines.append(_MODULARITY)
    return "\n".join(lines)


def render_agent_protocol(
    nodes: list[Node],
    project_name: str,
    context: GenerationContext | None = None,
    naming: ArtifactNaming = DEFAULT_NAMING,
) -> str:
    """Render the agent workflow protocol.

    Args:
        nodes: Nodes in user order
        project_name: Project name; the protocol is project-agnostic apart
            from the pointer to the rules file
        context: Precomputed context; built from nodes when omitted
        naming: Naming scheme used for file references

    Returns:
        Markdown text starting with ``# Agent Protocol``
    """
    if context is None:
        context = build_context(nodes, [])

    labels = sorted({label.strip() for label in context.tech_labels if label.strip()})

    core = "\n".join(
        [
            "## Core Principle",
            "",
            f"The system you are building ({project_name}) already has rules. "
            "Execute within those rules; do not invent new architecture.",
            "",
            "Before ANY implementation:",
            f"1. Read `{naming.rules_filename}` to understand system boundaries",
            "2. Load ONLY the component spec you are currently implementing",
            "3. Do not load other specs unless resolving an integration contract",
        ]
    )
    status = "\n".join(
        [
            "## Status Tracking (MANDATORY)",
            "",
            "`STATUS.md` tracks current phase, milestone, and progress.",
            "",
            "**Update after every feature or milestone.** No exceptions.",
            "",
            _STATUS_TEMPLATE,
            "",
            "**Rules:**",
            "- Create `STATUS.md` on first task if it doesn't exist",
            "- Update after completing any feature or milestone",
            "- Update when switching components",
            "- Update when blocked",
            "- Read on session start to restore context",
        ]
    )

    sections = [
        core,
        status,
        _WORKFLOW,
        _SCOPE,
        _LIBRARY_POLICY,
        _MINIMALISM,
        _code_standards(labels),
    ]
    body = "\n\n---\n\n".join(sections)
    return f"# Agent Protocol\n\n{body}\n"
