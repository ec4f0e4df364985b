"""Build-order and integration inference.

Pure functions from component types to build phases and communication
patterns, and the GenerationContext that bundles them with registry facts.
"""

from __future__ import annotations

__all__ = [
    "BuildPhase",
    "GENERIC_PATTERN",
    "GenerationContext",
    "IntegrationRow",
    "NodePackages",
    "PATTERNS",
    "PhaseGroup",
    "build_context",
    "group_build_phases",
    "infer_pattern",
    "integration_rows",
    "phase_for_rank",
    "phase_for_type",
]

from sketchforge.inference.build_order import (
    BuildPhase,
    PhaseGroup,
    group_build_phases,
    phase_for_rank,
    phase_for_type,
)
from sketchforge.inference.context import GenerationContext, NodePackages, build_context
from sketchforge.inference.integration import (
    GENERIC_PATTERN,
    PATTERNS,
    IntegrationRow,
    infer_pattern,
    integration_rows,
)
