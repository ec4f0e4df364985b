"""Stack detection and code-standards tables.

Stacks are detected from registry facts only (detected language and the
registry kinds of resolved packages). When nothing is detected no runtime is
assumed and the generators emit a marker instead of stack-specific rules.
"""

from __future__ import annotations

from sketchforge.inference.context import GenerationContext
from sketchforge.registry.packages import RegistryKind
from sketchforge.registry.resolver import Language

STACK_BY_LANGUAGE: dict[Language, str] = {
    Language.python: "Python",
    Language.typescript: "TypeScript",
    Language.javascript: "TypeScript",
    Language.java: "Java",
    Language.csharp: "C#",
    Language.go: "Go",
    Language.rust: "Rust",
}

STACK_BY_REGISTRY: dict[RegistryKind, str] = {
    RegistryKind.pypi: "Python",
    RegistryKind.npm: "TypeScript",
    RegistryKind.maven: "Java",
    RegistryKind.nuget: "C#",
    RegistryKind.go: "Go",
    RegistryKind.cargo: "Rust",
}

STACK_ORDER: tuple[str, ...] = ("TypeScript", "Python", "Go", "Java", "C#", "Rust")

NAMING_CONVENTIONS: dict[str, tuple[str, ...]] = {
    "TypeScript": (
        "Files: `kebab-case.ts` for utilities, `PascalCase.tsx` for components",
        "Functions: `camelCase` with verb prefix (`getUserById`, `validateEmail`)",
        "Constants: `SCREAMING_SNAKE_CASE` for true constants",
        "Types/Interfaces: `PascalCase` (`UserProfile`, `CreateOrderInput`)",
        "No abbreviations except: `id`, `url`, `api`, `db`",
    ),
    "Python": (
        "Files: `snake_case.py`",
        "Functions/Variables: `snake_case`",
        "Classes: `PascalCase`",
        "Constants: `SCREAMING_SNAKE_CASE`",
        "Private: single underscore prefix `_internal_method`",
    ),
    "Go": (
        "Files: `snake_case.go`",
        "Exported: `PascalCase` (public)",
        "Unexported: `camelCase` (private)",
        "Acronyms: all caps (`HTTPClient`, `URLParser`)",
    ),
    "Java": (
        "Classes: `PascalCase`, one public class per file",
        "Methods/Fields: `camelCase`",
        "Constants: `SCREAMING_SNAKE_CASE`",
        "Packages: all lowercase, reverse domain",
    ),
    "C#": (
        "Types/Methods/Properties: `PascalCase`",
        "Locals/Parameters: `camelCase`",
        "Private fields: `_camelCase`",
        "Interfaces: `I` prefix (`IUserRepository`)",
    ),
    "Rust": (
        "Files/Modules/Functions: `snake_case`",
        "Types/Traits: `PascalCase`",
        "Constants/Statics: `SCREAMING_SNAKE_CASE`",
    ),
}

STACK_PATTERNS: dict[str, tuple[str, ...]] = {
    "TypeScript": (
        "Strict mode: Enabled, no exceptions",
        "No `any`: Use `unknown` and narrow, or define proper types",
        "No enums: Use `as const` objects instead",
        "Explicit returns: All functions must declare return type",
    ),
    "Python": (
        "Type hints: Required on all function signatures",
        "Docstrings: Required on public functions (Google style)",
        "Imports: stdlib → third-party → local (isort)",
        "Linting: ruff or flake8+black, zero warnings policy",
    ),
    "Go": (
        "Errors: Handle every returned error explicitly",
        "Formatting: gofmt on every file",
    ),
    "Java": (
        "Null handling: Optional for absent values, no null returns from public APIs",
        "Formatting: Google Java Style",
    ),
    "C#": (
        "Nullable reference types: Enabled",
        "Async: `Async` suffix on asynchronous methods",
    ),
    "Rust": (
        "Errors: `Result` everywhere, no `unwrap` outside tests",
        "Linting: clippy warnings as errors",
    ),
}

# Per-label standards used by the agent protocol's Code Standards table
LABEL_STANDARDS: dict[str, str] = {
    "Python": "PEP 8 strict: snake_case functions/vars, PascalCase classes, 4-space indent, max 88 chars/line, type hints required",
    "FastAPI": "PEP 8 strict: snake_case functions/vars, PascalCase classes, 4-space indent, max 88 chars/line, type hints required",
    "Django": "PEP 8 strict: snake_case functions/vars, PascalCase classes, 4-space indent, max 88 chars/line, type hints required",
    "TypeScript": "ESLint strict: no `any`, no enums (use const objects), explicit return types, 2-space indent, max 100 chars/line",
    "Node.js": "ESLint strict: no `any`, no enums (use const objects), explicit return types, 2-space indent, max 100 chars/line",
    "Express": "ESLint strict: no `any`, no enums (use const objects), explicit return types, 2-space indent, max 100 chars/line",
    "Hono": "ESLint strict: no `any`, no enums (use const objects), explicit return types, 2-space indent, max 100 chars/line",
    "React": "ESLint strict: no `any`, functional components only, explicit prop types, 2-space indent, max 100 chars/line",
    "React (Vite)": "ESLint strict: no `any`, functional components only, explicit prop types, 2-space indent, max 100 chars/line",
    "Next.js": "ESLint strict: no `any`, functional components only, explicit prop types, 2-space indent, max 100 chars/line",
    "Vue": "ESLint strict: no `any`, Composition API preferred, explicit prop types, 2-space indent, max 100 chars/line",
    "Vue 3": "ESLint strict: no `any`, Composition API preferred, explicit prop types, 2-space indent, max 100 chars/line",
    "SvelteKit": "ESLint strict: no `any`, explicit types, 2-space indent, max 100 chars/line",
    "Go": "gofmt mandatory, golint, effective go patterns, explicit error handling, no naked returns",
    "Golang": "gofmt mandatory, golint, effective go patterns, explicit error handling, no naked returns",
    "Gin": "gofmt mandatory, golint, effective go patterns, explicit error handling, no naked returns",
    "Rust": "rustfmt mandatory, clippy warnings as errors, no unsafe without justification",
    "Actix Web": "rustfmt mandatory, clippy warnings as errors, no unsafe without justification",
    "Java": "Google Java Style: 2-space indent, 100 char line limit, explicit access modifiers",
    "Spring": "Google Java Style: 2-space indent, 100 char line limit, explicit access modifiers",
    "Spring Boot": "Google Java Style: 2-space indent, 100 char line limit, explicit access modifiers",
    "PostgreSQL": "snake_case tables/columns, explicit constraints, indexed foreign keys",
    "MySQL": "snake_case tables/columns, explicit constraints, indexed foreign keys",
    "MongoDB": "camelCase fields, schema validation, indexed queries",
    "Redis": "namespaced keys (prefix:type:id), TTL on all cache entries",
    "Clerk": "Server-side validation, never trust client claims",
    "Auth0": "Server-side validation, never trust client claims",
    "Stripe": "Webhook signature verification, idempotency keys for mutations",
}

GENERAL_STANDARD = "General best practices"

MODULARITY_RULES: tuple[tuple[str, str, str], ...] = (
    ("Function length", "**50 lines max**", "Extract helper functions"),
    ("File length", "**300 lines** (hard: 500)", "Split into modules"),
    ("Nesting depth", "**3 levels max**", "Use early returns, extract functions"),
    ("Parameters", "**4 max**", "Use options object"),
    ("Cyclomatic complexity", "**10 max**", "Simplify logic, extract branches"),
)


def detect_stacks(context: GenerationContext) -> list[str]:
    """Detect implementation stacks present in the graph.

    Returns:
        Stack names in STACK_ORDER; empty when nothing can be detected
    """
    found: set[str] = set()
    for packages in context.packages_by_node.values():
        if packages.language is not None:
            found.add(STACK_BY_LANGUAGE[packages.language])
        for pkg in packages.resolved:
            found.add(STACK_BY_REGISTRY[pkg.registry_kind])
    return [stack for stack in STACK_ORDER if stack in found]
