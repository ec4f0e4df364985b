"""Build-order inference.

Components are grouped into phases by component-type rank only. Edges model
runtime communication, not build dependency, so they play no part here.
Within a phase the user's node order is preserved.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from sketchforge.graph.models import ComponentType, Node
from sketchforge.graph.taxonomy import TAXONOMY


class BuildPhase(enum.Enum):
    """Build phases in execution order."""

    foundation = "foundation"
    core = "core"
    integration = "integration"

    @property
    def title(self) -> str:
        return PHASE_TITLES[self]


PHASE_TITLES: dict[BuildPhase, str] = {
    BuildPhase.foundation: "Phase 1: Foundation",
    BuildPhase.core: "Phase 2: Core Features",
    BuildPhase.integration: "Phase 3: Integration",
}

# Highest rank admitted to each phase
_PHASE_CEILINGS: tuple[tuple[int, BuildPhase], ...] = (
    (2, BuildPhase.foundation),
    (4, BuildPhase.core),
    (6, BuildPhase.integration),
)

POLISH_PHASE_TITLE = "Phase 4: Polish"
POLISH_TASKS: tuple[str, ...] = (
    "Error handling standardization",
    "Performance optimization",
    "Monitoring and logging",
)


def phase_for_rank(rank: int) -> BuildPhase:
    """Map a component-type rank to its build phase.

    Raises:
        ValueError: If rank is outside 1..6
    """
    if rank < 1:
        raise ValueError(f"Rank must be positive, got {rank}")
    for ceiling, phase in _PHASE_CEILINGS:
        if rank <= ceiling:
            return phase
    raise ValueError(f"Rank {rank} exceeds the highest build phase")


def phase_for_type(component_type: ComponentType) -> BuildPhase:
    """Return the build phase of a component type."""
    return phase_for_rank(TAXONOMY[component_type].rank)


@dataclass(frozen=True)
class PhaseGroup:
    """Nodes belonging to one build phase, in input order."""

    phase: BuildPhase
    nodes: tuple[Node, ...]

    @property
    def title(self) -> str:
        return self.phase.title


def group_build_phases(nodes: list[Node]) -> list[PhaseGroup]:
    """Group nodes into ordered build phases.

    Every phase is returned, including empty ones, so callers can render an
    explicit notice for phases with no components.

    Args:
        nodes: Nodes in user order

    Returns:
        One PhaseGroup per BuildPhase, in phase order
    """
    buckets: dict[BuildPhase, list[Node]] = {phase: [] for phase in BuildPhase}
    for node in nodes:
        buckets[phase_for_type(node.type)].append(node)
    return [PhaseGroup(phase=phase, nodes=tuple(buckets[phase])) for phase in BuildPhase]
