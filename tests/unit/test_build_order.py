"""Unit tests for build-order inference."""

from __future__ import annotations

import pytest

from sketchforge.graph.models import ComponentType, Graph
from sketchforge.inference.build_order import (
    PHASE_TITLES,
    BuildPhase,
    group_build_phases,
    phase_for_rank,
    phase_for_type,
)


class TestPhaseMapping:
    """Test rank to phase mapping."""

    @pytest.mark.parametrize(
        "rank,phase",
        [
            (1, BuildPhase.foundation),
            (2, BuildPhase.foundation),
            (3, BuildPhase.core),
            (4, BuildPhase.core),
            (5, BuildPhase.integration),
            (6, BuildPhase.integration),
        ],
    )
    def test_phase_for_rank(self, rank: int, phase: BuildPhase) -> None:
        assert phase_for_rank(rank) is phase

    @pytest.mark.parametrize("rank", [0, -1, 7])
    def test_out_of_range_rank_rejected(self, rank: int) -> None:
        with pytest.raises(ValueError):
            phase_for_rank(rank)

    @pytest.mark.parametrize(
        "component_type,phase",
        [
            (ComponentType.storage, BuildPhase.foundation),
            (ComponentType.auth, BuildPhase.foundation),
            (ComponentType.backend, BuildPhase.core),
            (ComponentType.frontend, BuildPhase.core),
            (ComponentType.external, BuildPhase.integration),
            (ComponentType.background, BuildPhase.integration),
        ],
    )
    def test_phase_for_type(self, component_type: ComponentType, phase: BuildPhase) -> None:
        assert phase_for_type(component_type) is phase

    def test_titles(self) -> None:
        assert [PHASE_TITLES[p] for p in BuildPhase] == [
            "Phase 1: Foundation",
            "Phase 2: Core Features",
            "Phase 3: Integration",
        ]


class TestGroupBuildPhases:
    """Test grouping nodes into phases."""

    def test_empty_graph_has_every_phase(self) -> None:
        groups = group_build_phases([])
        assert [g.phase for g in groups] == list(BuildPhase)
        assert all(g.nodes == () for g in groups)

    def test_scenario_grouping(self, scenario_graph: Graph) -> None:
        groups = group_build_phases(scenario_graph.nodes)
        by_phase = {g.phase: [n.id for n in g.nodes] for g in groups}
        assert by_phase[BuildPhase.foundation] == ["db"]
        assert by_phase[BuildPhase.core] == ["api"]
        assert by_phase[BuildPhase.integration] == []

    def test_user_order_preserved_within_phase(self, node_factory) -> None:
        nodes = [
            node_factory("cache", ComponentType.storage, "Cache"),
            node_factory("login", ComponentType.auth, "Login"),
            node_factory("db", ComponentType.storage, "DB"),
        ]
        foundation = group_build_phases(nodes)[0]
        assert [n.id for n in foundation.nodes] == ["cache", "login", "db"]

    def test_full_graph(self, full_graph: Graph) -> None:
        groups = group_build_phases(full_graph.nodes)
        assert [[n.id for n in g.nodes] for g in groups] == [
            ["db", "auth"],
            ["web", "api"],
            ["pay", "jobs"],
        ]
        assert groups[0].title == "Phase 1: Foundation"
