"""Graph document loading and validation.

Accepts the canvas export format (``{"version", "nodes": [{"id", "type",
"data": {"label", "type", "meta": {...}}}], "edges": [...]}``) as well as a
flat format where node fields sit at the top level. This module is the
validation boundary: everything past it assumes a well-formed graph.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from sketchforge.graph.models import ComponentType, Edge, Graph, Node

logger = structlog.get_logger(__name__)


class GraphValidationError(ValueError):
    """Raised when a graph document is malformed.

    Attributes:
        problems: Every problem found, in document order
    """

    def __init__(self, problems: list[str]):
        self.problems = problems
        if len(problems) == 1:
            msg = problems[0]
        else:
            msg = "Graph validation errors:\n" + "\n".join(f"  - {p}" for p in problems)
        super().__init__(msg)


def _node_fields(raw: dict[str, Any]) -> dict[str, Any]:
    """Flatten a canvas node or pass a flat node through."""
    data = raw.get("data")
    if isinstance(data, dict):
        meta = data.get("meta") or {}
        return {
            "id": raw.get("id"),
            "type": data.get("type", raw.get("type")),
            "label": data.get("label", ""),
            "description": meta.get("description") or None,
            "tech_stack": meta.get("techStack") or [],
        }
    return {
        "id": raw.get("id"),
        "type": raw.get("type"),
        "label": raw.get("label", ""),
        "description": raw.get("description") or None,
        "tech_stack": raw.get("tech_stack", raw.get("techStack")) or [],
    }


def _edge_fields(raw: dict[str, Any], index: int) -> dict[str, Any]:
    data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
    return {
        "id": raw.get("id") or f"edge-{index + 1}",
        "source": raw.get("source", raw.get("sourceNodeId")),
        "target": raw.get("target", raw.get("targetNodeId")),
        "label": raw.get("label") or data.get("label") or None,
    }


def parse_graph(content: str, project_name: str | None = None) -> Graph:
    """Parse and validate a JSON graph document.

    Args:
        content: Raw JSON text
        project_name: Overrides any ``projectName`` stored in the document

    Returns:
        Validated Graph

    Raises:
        GraphValidationError: If the JSON is invalid or the graph is malformed
    """
    logger.info("parsing_graph", content_length=len(content))

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise GraphValidationError([f"Invalid JSON: {e.msg} (line {e.lineno})"]) from e

    if not isinstance(data, dict):
        raise GraphValidationError(["Graph document root must be an object"])

    problems: list[str] = []
    nodes: list[Node] = []
    edges: list[Edge] = []
    valid_types = ", ".join(t.value for t in ComponentType)

    raw_nodes = data.get("nodes", [])
    raw_edges = data.get("edges", [])
    if not isinstance(raw_nodes, list):
        problems.append("nodes: must be a list")
        raw_nodes = []
    if not isinstance(raw_edges, list):
        problems.append("edges: must be a list")
        raw_edges = []

    seen_ids: set[str] = set()
    for i, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict):
            problems.append(f"nodes.{i}: must be an object")
            continue
        fields = _node_fields(raw)
        if fields["type"] not in {t.value for t in ComponentType}:
            problems.append(
                f"nodes.{i}.type: unknown component type {fields['type']!r} "
                f"(expected one of {valid_types})"
            )
            continue
        try:
            node = Node(**fields)
        except ValidationError as e:
            for err in e.errors():
                loc = ".".join(str(part) for part in err["loc"])
                problems.append(f"nodes.{i}.{loc}: {err['msg']}")
            continue
        if node.id in seen_ids:
            problems.append(f"nodes.{i}.id: duplicate node id {node.id!r}")
            continue
        seen_ids.add(node.id)
        nodes.append(node)

    for i, raw in enumerate(raw_edges):
        if not isinstance(raw, dict):
            problems.append(f"edges.{i}: must be an object")
            continue
        try:
            edge = Edge(**_edge_fields(raw, i))
        except ValidationError as e:
            for err in e.errors():
                loc = ".".join(str(part) for part in err["loc"])
                problems.append(f"edges.{i}.{loc}: {err['msg']}")
            continue
        for end in ("source", "target"):
            ref = getattr(edge, end)
            if ref not in seen_ids:
                problems.append(f"edges.{i}.{end}: unknown node id {ref!r}")
        edges.append(edge)

    if problems:
        logger.warning("graph_invalid", problems_count=len(problems))
        raise GraphValidationError(problems)

    name = project_name if project_name is not None else str(data.get("projectName", ""))
    logger.info("graph_parsed", nodes=len(nodes), edges=len(edges))
    return Graph(project_name=name, nodes=nodes, edges=edges)


def load_graph(file_path: Path, project_name: str | None = None) -> Graph:
    """Load a graph document from disk.

    Raises:
        FileNotFoundError: If the file does not exist
        GraphValidationError: If the document is malformed
    """
    logger.info("loading_graph", file_path=str(file_path))

    if not file_path.exists():
        logger.error("file_not_found", file_path=str(file_path))
        raise FileNotFoundError(f"Graph file not found: {file_path}")

    return parse_graph(file_path.read_text(encoding="utf-8"), project_name=project_name)
