"""Artifact generation: generators, model client and orchestration."""

from sketchforge.generation.cancellation import CancellationToken
from sketchforge.generation.client import (
    Credentials,
    EmptyResponseError,
    ModelAPIError,
    ModelClient,
    ModelClientError,
    ModelConnectionError,
    ModelTimeoutError,
)
from sketchforge.generation.errors import (
    ConfigurationError,
    ExportCancelled,
    ExportFailure,
    GenerationFailure,
    SketchforgeError,
    redact,
)
from sketchforge.generation.generators import (
    ArtifactGenerator,
    ArtifactJob,
    ModelArtifactGenerator,
    TemplateArtifactGenerator,
    plan_jobs,
    render_job,
)
from sketchforge.generation.orchestrator import (
    VALID_TRANSITIONS,
    ExportProgress,
    ExportResult,
    ExportState,
    ExportStateMachine,
    GenerationOrchestrator,
    InvalidTransitionError,
)

__all__ = [
    "VALID_TRANSITIONS",
    "ArtifactGenerator",
    "ArtifactJob",
    "CancellationToken",
    "ConfigurationError",
    "Credentials",
    "EmptyResponseError",
    "ExportCancelled",
    "ExportFailure",
    "ExportProgress",
    "ExportResult",
    "ExportState",
    "ExportStateMachine",
    "GenerationFailure",
    "GenerationOrchestrator",
    "InvalidTransitionError",
    "ModelAPIError",
    "ModelArtifactGenerator",
    "ModelClient",
    "ModelClientError",
    "ModelConnectionError",
    "ModelTimeoutError",
    "SketchforgeError",
    "TemplateArtifactGenerator",
    "plan_jobs",
    "redact",
    "render_job",
]
