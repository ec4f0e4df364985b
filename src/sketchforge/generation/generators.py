"""Artifact generators.

An export is planned as one job per artifact: the rules file, the protocol
file, then one component spec per node in node order. Both generation paths
consume the same jobs and the same precomputed ``GenerationContext``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

import structlog

from sketchforge.artifacts import DEFAULT_NAMING, ArtifactKind, ArtifactNaming
from sketchforge.generation.cancellation import CancellationToken
from sketchforge.generation.client import Credentials
from sketchforge.generation.errors import GenerationFailure, redact
from sketchforge.graph.models import Node
from sketchforge.inference.context import GenerationContext
from sketchforge.prompts.builder import PromptBuilder
from sketchforge.templates.component_spec import render_component_spec
from sketchforge.templates.protocol import render_agent_protocol
from sketchforge.templates.rules import render_project_rules

logger = structlog.get_logger(__name__)

GenerateFn = Callable[[str, str, Credentials], Awaitable[str]]


@dataclass(frozen=True)
class ArtifactJob:
    """One artifact to generate.

    Attributes:
        name: Artifact name (relative path)
        kind: Which document to produce
        node: Described node, for component specs
    """

    name: str
    kind: ArtifactKind
    node: Node | None = None


def plan_jobs(context: GenerationContext, naming: ArtifactNaming) -> list[ArtifactJob]:
    """Plan the jobs of an export: rules, protocol, then one per node."""
    jobs = [
        ArtifactJob(name=naming.rules_filename, kind=ArtifactKind.rules),
        ArtifactJob(name=naming.protocol_filename, kind=ArtifactKind.protocol),
    ]
    jobs.extend(
        ArtifactJob(name=naming.spec_path(node), kind=ArtifactKind.component, node=node)
        for node in context.nodes
    )
    return jobs


class ArtifactGenerator(Protocol):
    """Produces the body of one artifact."""

    async def generate(self, job: ArtifactJob, token: CancellationToken) -> str:
        ...


def render_job(
    job: ArtifactJob,
    context: GenerationContext,
    project_name: str,
    naming: ArtifactNaming,
) -> str:
    """Render one job deterministically."""
    nodes = list(context.nodes)
    edges = list(context.edges)
    if job.kind is ArtifactKind.rules:
        return render_project_rules(nodes, edges, project_name, context=context, naming=naming)
    if job.kind is ArtifactKind.protocol:
        return render_agent_protocol(nodes, project_name, context=context, naming=naming)
    if job.node is None:
        raise ValueError(f"Component job {job.name} has no node")
    return render_component_spec(job.node, edges, nodes, context=context, naming=naming)


class TemplateArtifactGenerator:
    """Deterministic generator backed by the template renderers."""

    def __init__(
        self, context: GenerationContext, project_name: str, naming: ArtifactNaming
    ) -> None:
        self.context = context
        self.project_name = project_name
        self.naming = naming

    async def generate(self, job: ArtifactJob, token: CancellationToken) -> str:
        return render_job(job, self.context, self.project_name, self.naming)


class ModelArtifactGenerator:
    """Model-backed generator: one prompt, one round trip per artifact.

    Any rejection of the underlying call becomes a ``GenerationFailure``
    naming the artifact, with the API key redacted from the message.

    Attributes:
        context: Precomputed generation context
        project_name: Project name embedded in prompts
        model_id: Provider model identifier
        credentials: Provider credentials passed to every call
        generate_text: Single-call text generation capability
        prompts: Prompt builder
    """

    def __init__(
        self,
        context: GenerationContext,
        project_name: str,
        model_id: str,
        credentials: Credentials,
        generate_text: GenerateFn,
        naming: ArtifactNaming = DEFAULT_NAMING,
        prompts: PromptBuilder | None = None,
    ) -> None:
        self.context = context
        self.project_name = project_name
        self.model_id = model_id
        self.credentials = credentials
        self.generate_text = generate_text
        self.prompts = prompts or PromptBuilder(naming=naming)

    def build_prompt(self, job: ArtifactJob) -> str:
        if job.kind is ArtifactKind.rules:
            return self.prompts.build_rules_prompt(self.context, self.project_name)
        if job.kind is ArtifactKind.protocol:
            return self.prompts.build_protocol_prompt(self.context, self.project_name)
        if job.node is None:
            raise ValueError(f"Component job {job.name} has no node")
        return self.prompts.build_component_prompt(job.node, self.context)

    async def generate(self, job: ArtifactJob, token: CancellationToken) -> str:
        if token.cancelled:
            raise asyncio.CancelledError()

        prompt = self.build_prompt(job)
        try:
            text = await self.generate_text(prompt, self.model_id, self.credentials)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            cause = redact(str(e) or type(e).__name__, self.credentials.secret())
            logger.warning("artifact_generation_rejected", artifact=job.name, error=cause)
            raise GenerationFailure(job.name, cause) from e

        text = (text or "").strip()
        if not text:
            raise GenerationFailure(job.name, "No content returned")
        return text
