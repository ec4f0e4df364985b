"""Graph model and component taxonomy.

Provides the typed node/edge model, the fixed six-member component taxonomy
with its per-type seed text, and loading of graph documents from JSON.
"""

from __future__ import annotations

__all__ = [
    "AntiResponsibility",
    "ComponentType",
    "Edge",
    "Graph",
    "GraphValidationError",
    "Node",
    "TAXONOMY",
    "TypeField",
    "TypeInfo",
    "load_graph",
    "parse_graph",
    "type_info",
    "types_by_rank",
]

from sketchforge.graph.loader import GraphValidationError, load_graph, parse_graph
from sketchforge.graph.models import ComponentType, Edge, Graph, Node
from sketchforge.graph.taxonomy import (
    TAXONOMY,
    AntiResponsibility,
    TypeField,
    TypeInfo,
    type_info,
    types_by_rank,
)
