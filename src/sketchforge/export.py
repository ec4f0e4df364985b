"""Export entry points.

``export_deterministic`` renders a bundle synchronously from templates.
``export_with_model`` generates the same bundle shape through a text model,
concurrently, with cancellation and fail-fast semantics.

Example usage:
    >>> bundle = export_deterministic(graph.nodes, graph.edges, "Shop")
    >>> bundle.names[:2]
    ['PROJECT_RULES.md', 'AGENT_PROTOCOL.md']
"""

from __future__ import annotations

import uuid

import structlog

from sketchforge.artifacts import (
    DEFAULT_NAMING,
    Artifact,
    ArtifactNaming,
    ArtifactSet,
    check_name_collisions,
    find_name_collisions,
)
from sketchforge.config import ModelConfig
from sketchforge.generation.cancellation import CancellationToken
from sketchforge.generation.client import Credentials, ModelClient
from sketchforge.generation.errors import ConfigurationError, ExportCancelled
from sketchforge.generation.generators import (
    GenerateFn,
    ModelArtifactGenerator,
    plan_jobs,
    render_job,
)
from sketchforge.generation.orchestrator import (
    ArtifactObserver,
    ExportResult,
    ExportState,
    GenerationOrchestrator,
    ProgressCallback,
)
from sketchforge.graph.models import Edge, Node
from sketchforge.inference.context import build_context
from sketchforge.logging import export_log_context

logger = structlog.get_logger(__name__)


def validate_model_request(model_id: str | None, credentials: Credentials | None) -> None:
    """Reject a model export that cannot possibly succeed.

    Raises:
        ConfigurationError: If the model id or API key is missing or blank
    """
    if not model_id or not model_id.strip():
        raise ConfigurationError("Model id is required for model-augmented export")
    if credentials is None:
        raise ConfigurationError("Credentials are required for model-augmented export")
    if not credentials.secret().strip():
        raise ConfigurationError(f"API key for provider {credentials.provider} is empty")


def export_deterministic(
    nodes: list[Node],
    edges: list[Edge],
    project_name: str,
    naming: ArtifactNaming = DEFAULT_NAMING,
) -> ArtifactSet:
    """Render a complete bundle from templates.

    Identical input always yields byte-identical output. Every graph that
    passed loading is accepted, including the empty graph. Component specs
    whose names collide are still rendered; the clash is reported in
    ``ArtifactSet.collisions`` for the caller to resolve.

    Args:
        nodes: Validated nodes in user order
        edges: Edges whose endpoints resolve within nodes
        project_name: Project name, rendered verbatim
        naming: Naming scheme for artifact paths

    Returns:
        ArtifactSet with the rules file, the protocol file and one spec per node
    """
    collisions = find_name_collisions(nodes, naming)
    export_id = uuid.uuid4().hex[:12]
    with export_log_context(export_id, "deterministic"):
        context = build_context(nodes, edges)
        artifacts = tuple(
            Artifact(
                name=job.name,
                content=render_job(job, context, project_name, naming),
                kind=job.kind,
                node_id=job.node.id if job.node else None,
            )
            for job in plan_jobs(context, naming)
        )
        if collisions:
            logger.warning("artifact_name_collisions", names=sorted(collisions))
        logger.info("deterministic_export_completed", artifacts=len(artifacts))
        return ArtifactSet(project_name=project_name, artifacts=artifacts, collisions=collisions)


async def run_model_export(
    nodes: list[Node],
    edges: list[Edge],
    project_name: str,
    model_id: str,
    credentials: Credentials | None,
    generate_text: GenerateFn,
    cancellation_token: CancellationToken | None = None,
    naming: ArtifactNaming = DEFAULT_NAMING,
    on_artifact: ArtifactObserver | None = None,
    on_progress: ProgressCallback | None = None,
) -> ExportResult:
    """Run a model-augmented export and return its terminal result.

    This never raises for failures or cancellation; inspect
    ``ExportResult.state`` instead.

    Raises:
        ArtifactNameCollisionError: If two artifacts would share a name
    """
    check_name_collisions(nodes, naming)
    context = build_context(nodes, edges)
    jobs = plan_jobs(context, naming)
    export_id = uuid.uuid4().hex[:12]

    generator = ModelArtifactGenerator(
        context=context,
        project_name=project_name,
        model_id=model_id,
        credentials=credentials,
        generate_text=generate_text,
        naming=naming,
    )
    orchestrator = GenerationOrchestrator(
        generator, observer=on_artifact, on_progress=on_progress
    )

    with export_log_context(export_id, "model"):
        return await orchestrator.run(
            jobs,
            project_name,
            cancellation_token=cancellation_token,
            preflight=lambda: validate_model_request(model_id, credentials),
            export_id=export_id,
        )


async def export_with_model(
    nodes: list[Node],
    edges: list[Edge],
    project_name: str,
    model_id: str,
    credentials: Credentials | None,
    cancellation_token: CancellationToken | None = None,
    *,
    naming: ArtifactNaming = DEFAULT_NAMING,
    config: ModelConfig | None = None,
    generate_text: GenerateFn | None = None,
    on_artifact: ArtifactObserver | None = None,
    on_progress: ProgressCallback | None = None,
) -> ArtifactSet:
    """Generate a complete bundle through a text model.

    Dispatches one call per artifact concurrently. The first rejected call
    fails the whole export; no partial bundle is ever returned.

    Args:
        nodes: Validated nodes in user order
        edges: Edges whose endpoints resolve within nodes
        project_name: Project name
        model_id: Provider model identifier
        credentials: Provider and API key
        cancellation_token: Signalling it aborts in-flight calls
        naming: Naming scheme for artifact paths
        config: Client settings (timeout, output budget, base URL); used
            only when generate_text is not given
        generate_text: Single-call generation capability; defaults to an
            httpx-backed ModelClient
        on_artifact: Called with each artifact as it completes
        on_progress: Called with progress snapshots

    Returns:
        The complete ArtifactSet

    Raises:
        ConfigurationError: Model id or credentials missing; no call was made
        GenerationFailure: A call was rejected; names the failed artifact
        ExportCancelled: The token was signalled before all calls resolved
        ArtifactNameCollisionError: If two artifacts would share a name
    """
    if generate_text is not None:
        result = await run_model_export(
            nodes, edges, project_name, model_id, credentials, generate_text,
            cancellation_token=cancellation_token, naming=naming,
            on_artifact=on_artifact, on_progress=on_progress,
        )
    else:
        # Nothing to connect with; fail before opening a client
        validate_model_request(model_id, credentials)
        async with ModelClient(config or ModelConfig()) as client:
            result = await run_model_export(
                nodes, edges, project_name, model_id, credentials, client.generate,
                cancellation_token=cancellation_token, naming=naming,
                on_artifact=on_artifact, on_progress=on_progress,
            )

    if result.state is ExportState.completed and result.artifacts is not None:
        return result.artifacts
    if result.state is ExportState.aborted:
        raise ExportCancelled(f"Export {result.export_id} was cancelled")
    if result.error is not None:
        raise result.error
    raise RuntimeError(f"Export {result.export_id} ended in unexpected state {result.state.value}")
