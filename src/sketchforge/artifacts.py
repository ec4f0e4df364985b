"""Artifacts and artifact naming.

An artifact is one generated file. Its name is a deterministic relative path
usable directly by a packaging collaborator. Collisions between names are
detected here; resolving them (for example by appending a node id) is the
caller's job, expressed through ``ArtifactNaming.spec_name_overrides``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from sketchforge.config import ExportConfig
from sketchforge.graph.models import Node

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, fallback: str = "untitled") -> str:
    """Convert text to a lowercase, hyphen-separated slug.

    Non-alphanumeric runs collapse to one hyphen and leading/trailing hyphens
    are trimmed. Returns ``fallback`` when nothing is left.

    Example:
        >>> slugify("My Component!")
        'my-component'
        >>> slugify("")
        'untitled'
    """
    slug = _NON_ALNUM.sub("-", text.lower()).strip("-")
    return slug or fallback


class ArtifactKind(str, enum.Enum):
    """Kinds of generated artifacts."""

    rules = "rules"
    protocol = "protocol"
    component = "component"


class ArtifactNaming(BaseModel):
    """Naming scheme for a bundle.

    Attributes:
        rules_filename: Relative path of the project rules file
        protocol_filename: Relative path of the agent protocol file
        specs_dir: Directory holding component specs
        spec_name_overrides: Caller-chosen slugs keyed by node id, used to
            resolve name collisions
    """

    model_config = ConfigDict(frozen=True)

    rules_filename: str = "PROJECT_RULES.md"
    protocol_filename: str = "AGENT_PROTOCOL.md"
    specs_dir: str = "specs"
    spec_name_overrides: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_config(cls, config: ExportConfig) -> ArtifactNaming:
        return cls(
            rules_filename=config.rules_filename,
            protocol_filename=config.protocol_filename,
            specs_dir=config.specs_dir,
        )

    def spec_path(self, node: Node) -> str:
        """Relative path of a node's component spec."""
        slug = self.spec_name_overrides.get(node.id) or slugify(node.label)
        return f"{self.specs_dir}/{slug}.md"


DEFAULT_NAMING = ArtifactNaming()


class Artifact(BaseModel):
    """One generated file.

    Attributes:
        name: Relative path within the bundle
        content: File body
        kind: Which document this is
        node_id: Id of the described node, for component specs
    """

    model_config = ConfigDict(frozen=True)

    name: str
    content: str
    kind: ArtifactKind
    node_id: str | None = None


class ArtifactNameCollisionError(ValueError):
    """Raised when two artifacts in one bundle would share a name.

    Attributes:
        collisions: Colliding name mapped to the artifact owners involved
            (node ids, or the artifact kind for non-component files)
    """

    def __init__(self, collisions: dict[str, list[str]]):
        self.collisions = collisions
        details = "; ".join(
            f"{name} <- {', '.join(owners)}" for name, owners in collisions.items()
        )
        super().__init__(f"Artifact name collision: {details}")


def find_name_collisions(
    nodes: Iterable[Node], naming: ArtifactNaming = DEFAULT_NAMING
) -> dict[str, list[str]]:
    """Find artifact names claimed by more than one artifact.

    Args:
        nodes: Nodes that will each get a component spec
        naming: Naming scheme in use

    Returns:
        Colliding names mapped to their owners; empty when names are unique
    """
    owners: dict[str, list[str]] = {
        naming.rules_filename: [ArtifactKind.rules.value],
    }
    owners.setdefault(naming.protocol_filename, []).append(ArtifactKind.protocol.value)
    for node in nodes:
        owners.setdefault(naming.spec_path(node), []).append(node.id)
    return {name: ids for name, ids in owners.items() if len(ids) > 1}


def check_name_collisions(
    nodes: Iterable[Node], naming: ArtifactNaming = DEFAULT_NAMING
) -> None:
    """Raise ArtifactNameCollisionError if any artifact names collide."""
    collisions = find_name_collisions(nodes, naming)
    if collisions:
        raise ArtifactNameCollisionError(collisions)


class ArtifactSet(BaseModel):
    """A complete, final bundle of artifacts.

    Attributes:
        project_name: Project the bundle was generated for
        artifacts: Rules file, protocol file, then one spec per node in node order
        collisions: Artifact names claimed more than once, mapped to their
            owners; empty when every name is unique
    """

    model_config = ConfigDict(frozen=True)

    project_name: str
    artifacts: tuple[Artifact, ...]
    collisions: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def names(self) -> list[str]:
        return [artifact.name for artifact in self.artifacts]

    @property
    def has_collisions(self) -> bool:
        return bool(self.collisions)

    def get(self, name: str) -> Artifact:
        """Look up an artifact by name; the first one wins on a collision.

        Raises:
            KeyError: If no artifact has that name
        """
        for artifact in self.artifacts:
            if artifact.name == name:
                return artifact
        raise KeyError(name)

    def as_dict(self) -> dict[str, str]:
        """Map artifact names to contents, in bundle order."""
        return {artifact.name: artifact.content for artifact in self.artifacts}
