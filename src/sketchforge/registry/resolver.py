"""Package resolution against the curated registry.

Resolution never invents anything: a label that is not in the registry
resolves to an empty list and callers are expected to render an explicit
"needs confirmation" marker instead.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable

import structlog

from sketchforge.registry.packages import KNOWN_PACKAGES, PackageCoordinate, RegistryKind

logger = structlog.get_logger(__name__)


class Language(str, enum.Enum):
    """Implementation languages the registry can distinguish."""

    python = "python"
    typescript = "typescript"
    javascript = "javascript"
    java = "java"
    csharp = "csharp"
    go = "go"
    rust = "rust"


# Exact label matches, checked in this order
LANGUAGE_LABELS: tuple[tuple[str, Language], ...] = (
    ("Python", Language.python),
    ("TypeScript", Language.typescript),
    ("JavaScript", Language.javascript),
    ("Java", Language.java),
    ("C# / .NET", Language.csharp),
    ("Go", Language.go),
    ("Rust", Language.rust),
)

# Frameworks that imply exactly one language
FRAMEWORK_LANGUAGES: dict[str, Language] = {
    "FastAPI": Language.python,
    "Django": Language.python,
    "Flask": Language.python,
    "Starlette": Language.python,
}

# Labels whose package depends on the implementation language
LANGUAGE_AMBIGUOUS_LABELS: frozenset[str] = frozenset(
    {
        "PostgreSQL",
        "MySQL",
        "MongoDB",
        "SQLite",
        "Supabase",
        "OpenAI",
        "Anthropic",
        "Google AI (Gemini)",
        "Ollama (Local)",
        "REST APIs",
        "Pinecone",
        "Qdrant",
    }
)

# Suffix of the qualified registry key for each language
LANGUAGE_QUALIFIERS: dict[Language, str] = {
    Language.python: "python",
    Language.typescript: "npm",
    Language.javascript: "npm",
}


def detect_language(tech_labels: Iterable[str]) -> Language | None:
    """Detect the implementation language implied by a list of tech labels.

    An explicit language label wins over framework inference. None means
    "do not assume a runtime".
    """
    labels = list(tech_labels)
    if not labels:
        return None

    present = set(labels)
    for label, language in LANGUAGE_LABELS:
        if label in present:
            return language

    for label in labels:
        if label in FRAMEWORK_LANGUAGES:
            return FRAMEWORK_LANGUAGES[label]

    return None


def resolve_packages(
    tech_label: str, language: Language | None = None
) -> list[PackageCoordinate]:
    """Resolve a tech label to its curated package coordinates.

    Args:
        tech_label: Display label exactly as chosen by the user
        language: Detected implementation language, if any

    Returns:
        Coordinates in curated order; empty if the label is unknown
    """
    qualifier = LANGUAGE_QUALIFIERS.get(language) if language is not None else None
    if qualifier is not None and tech_label in LANGUAGE_AMBIGUOUS_LABELS:
        qualified = KNOWN_PACKAGES.get(f"{tech_label}-{qualifier}")
        if qualified is not None:
            return list(qualified)

    direct = KNOWN_PACKAGES.get(tech_label)
    if direct is not None:
        return list(direct)

    logger.debug("package_label_unresolved", tech_label=tech_label)
    return []


def packages_for_labels(
    tech_labels: Iterable[str], language: Language | None = None
) -> tuple[list[PackageCoordinate], list[str]]:
    """Resolve every label of a stack.

    The language is detected from the labels themselves unless given.
    Coordinates are de-duplicated by package name, first occurrence wins.

    Returns:
        Tuple of (resolved coordinates, labels with no registry entry)
    """
    labels = list(tech_labels)
    if language is None:
        language = detect_language(labels)

    resolved: list[PackageCoordinate] = []
    unresolved: list[str] = []
    seen: set[str] = set()
    for label in labels:
        packages = resolve_packages(label, language)
        if not packages:
            unresolved.append(label)
            continue
        for pkg in packages:
            if pkg.name in seen:
                continue
            seen.add(pkg.name)
            resolved.append(pkg)
    return resolved, unresolved


def registry_url(pkg: PackageCoordinate) -> str:
    """Return the public registry page used to verify a coordinate's version."""
    if pkg.registry_kind is RegistryKind.npm:
        return f"https://www.npmjs.com/package/{pkg.name}"
    if pkg.registry_kind is RegistryKind.pypi:
        return f"https://pypi.org/project/{pkg.name}/"
    if pkg.registry_kind is RegistryKind.nuget:
        return f"https://www.nuget.org/packages/{pkg.name}"
    if pkg.registry_kind is RegistryKind.maven:
        return f"https://search.maven.org/artifact/{pkg.name.replace(':', '/')}"
    if pkg.registry_kind is RegistryKind.go:
        return f"https://pkg.go.dev/{pkg.name}"
    if pkg.registry_kind is RegistryKind.cargo:
        return f"https://crates.io/crates/{pkg.name}"
    return pkg.docs_url
