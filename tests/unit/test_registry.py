"""Unit tests for the package registry and resolver."""

from __future__ import annotations

import pytest

from sketchforge.registry.packages import KNOWN_PACKAGES, RegistryKind
from sketchforge.registry.resolver import (
    Language,
    detect_language,
    packages_for_labels,
    registry_url,
    resolve_packages,
)


class TestKnownPackages:
    """Sanity checks on the curated table."""

    def test_versions_are_never_empty(self) -> None:
        for label, coordinates in KNOWN_PACKAGES.items():
            assert coordinates, label
            for pkg in coordinates:
                assert pkg.name and pkg.version_constraint, label

    def test_first_coordinate_is_primary(self) -> None:
        for label, coordinates in KNOWN_PACKAGES.items():
            assert not coordinates[0].is_runtime_companion, label


class TestDetectLanguage:
    """Test language detection from tech labels."""

    def test_empty_stack(self) -> None:
        assert detect_language([]) is None

    def test_no_language_signal(self) -> None:
        assert detect_language(["PostgreSQL", "Stripe"]) is None

    def test_explicit_language_label(self) -> None:
        assert detect_language(["PostgreSQL", "Python"]) is Language.python

    def test_framework_implies_language(self) -> None:
        assert detect_language(["FastAPI", "PostgreSQL"]) is Language.python

    def test_explicit_label_beats_framework(self) -> None:
        assert detect_language(["FastAPI", "TypeScript"]) is Language.typescript

    def test_label_order_for_explicit_languages(self) -> None:
        """The fixed label table order decides between two languages."""
        assert detect_language(["TypeScript", "Python"]) is Language.python


class TestResolvePackages:
    """Test resolution of single labels."""

    def test_express(self) -> None:
        packages = resolve_packages("Express")
        assert len(packages) == 1
        assert packages[0].name == "express"
        assert packages[0].version_constraint == "^5.2.1"
        assert packages[0].registry_kind is RegistryKind.npm

    def test_fastapi_brings_its_server(self) -> None:
        packages = resolve_packages("FastAPI")
        assert [p.name for p in packages] == ["fastapi", "uvicorn"]
        assert packages[1].is_runtime_companion

    def test_unknown_label_is_empty(self) -> None:
        assert resolve_packages("Stripe") == []
        assert resolve_packages("") == []

    def test_labels_are_exact(self) -> None:
        assert resolve_packages("express") == []

    def test_ambiguous_label_without_language(self) -> None:
        assert resolve_packages("PostgreSQL")[0].name == "pg"

    def test_ambiguous_label_with_python(self) -> None:
        packages = resolve_packages("PostgreSQL", Language.python)
        assert packages[0].name == "psycopg2-binary"
        assert packages[0].registry_kind is RegistryKind.pypi

    def test_ambiguous_label_with_typescript(self) -> None:
        assert resolve_packages("Pinecone", Language.typescript)[0].name == "@pinecone-database/pinecone"

    def test_language_without_qualifier_uses_direct_entry(self) -> None:
        assert resolve_packages("PostgreSQL", Language.go)[0].name == "pg"

    def test_unambiguous_label_ignores_language(self) -> None:
        assert resolve_packages("Express", Language.python)[0].name == "express"

    def test_returns_a_copy(self) -> None:
        packages = resolve_packages("Express")
        packages.clear()
        assert resolve_packages("Express")


class TestPackagesForLabels:
    """Test whole-stack resolution."""

    def test_splits_resolved_and_unresolved(self) -> None:
        resolved, unresolved = packages_for_labels(["FastAPI", "Stripe", "PostgreSQL"])
        assert [p.name for p in resolved] == ["fastapi", "uvicorn", "psycopg2-binary"]
        assert unresolved == ["Stripe"]

    def test_deduplicates_by_name(self) -> None:
        resolved, _ = packages_for_labels(["Next.js", "React (Vite)"])
        names = [p.name for p in resolved]
        assert names == ["next", "react", "vite"]

    def test_explicit_language_overrides_detection(self) -> None:
        resolved, _ = packages_for_labels(["PostgreSQL"], Language.python)
        assert resolved[0].name == "psycopg2-binary"


class TestRegistryUrl:
    """Test registry verification URLs."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Express", "https://www.npmjs.com/package/express"),
            ("Django", "https://pypi.org/project/django/"),
            ("Gin", "https://pkg.go.dev/github.com/gin-gonic/gin"),
            ("Actix Web", "https://crates.io/crates/actix-web"),
            ("ASP.NET Core", "https://www.nuget.org/packages/Microsoft.AspNetCore.App.Ref"),
            (
                "Spring Boot",
                "https://search.maven.org/artifact/"
                "org.springframework.boot/spring-boot-starter-webmvc",
            ),
        ],
    )
    def test_registry_url(self, label: str, expected: str) -> None:
        assert registry_url(resolve_packages(label)[0]) == expected
