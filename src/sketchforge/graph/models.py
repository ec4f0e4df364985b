"""Graph data model for architecture sketches.

Nodes are typed components, edges are directed runtime communication links.
Both are immutable value objects; the graph handed to the compiler is assumed
to be validated already (see ``sketchforge.graph.loader``).
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class ComponentType(str, enum.Enum):
    """Closed set of architectural roles a node can take.

    States:
        frontend: UI components, pages, and client-side logic.
        backend: API endpoints, server logic, and business rules.
        storage: Databases, file storage, and caching layers.
        auth: Authentication, authorization, and user management.
        external: Third-party APIs and external service integrations.
        background: Background jobs, cron tasks, and queue workers.
    """

    frontend = "frontend"
    backend = "backend"
    storage = "storage"
    auth = "auth"
    external = "external"
    background = "background"


class Node(BaseModel):
    """A component in the architecture graph.

    Attributes:
        id: Opaque identifier, unique within one graph
        type: Component type
        label: Display name chosen by the user
        description: Optional free-text description
        tech_stack: Ordered technology display labels; not guaranteed to
            exist in the package registry
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    type: ComponentType
    label: str
    description: str | None = None
    tech_stack: list[str] = Field(default_factory=list)


class Edge(BaseModel):
    """A directed communication link between two nodes.

    Attributes:
        id: Edge identifier
        source: Id of the node that initiates communication
        target: Id of the node being called
        label: Optional free-text note shown next to the inferred pattern
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    source: str
    target: str
    label: str | None = None


class Graph(BaseModel):
    """A complete architecture sketch.

    Attributes:
        project_name: Project name used in artifact titles
        nodes: Components in user order
        edges: Communication links in user order
    """

    project_name: str = ""
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    def node_map(self) -> dict[str, Node]:
        """Index nodes by id."""
        return {node.id: node for node in self.nodes}
