"""Package resolution registry.

A static, curated table mapping technology labels to verified package
coordinates, plus language detection used to pick language-qualified entries.
"""

from __future__ import annotations

__all__ = [
    "KNOWN_PACKAGES",
    "Language",
    "PackageCoordinate",
    "RegistryKind",
    "detect_language",
    "packages_for_labels",
    "registry_url",
    "resolve_packages",
]

from sketchforge.registry.packages import KNOWN_PACKAGES, PackageCoordinate, RegistryKind
from sketchforge.registry.resolver import (
    Language,
    detect_language,
    packages_for_labels,
    registry_url,
    resolve_packages,
)
