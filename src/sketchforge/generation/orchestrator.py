"""Generation orchestrator for model-augmented exports.

This module implements the export lifecycle state machine and the fan-out /
fan-in of artifact generation. Every artifact is an independent task; all
tasks are dispatched at once and share a single cancellation token.

Lifecycle:
    idle -> generating -> completed | failed | aborted
    idle -> failed (configuration rejected before any call)

A failed export never exposes a partial bundle. An aborted export is not a
failure and carries no error.
"""

from __future__ import annotations

import asyncio
import enum
import uuid
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from sketchforge.artifacts import Artifact, ArtifactSet
from sketchforge.generation.cancellation import CancellationToken
from sketchforge.generation.errors import (
    ConfigurationError,
    ExportFailure,
    GenerationFailure,
)
from sketchforge.generation.generators import ArtifactGenerator, ArtifactJob

logger = structlog.get_logger(__name__)


class ExportState(str, enum.Enum):
    """Lifecycle states of one export."""

    idle = "idle"
    generating = "generating"
    completed = "completed"
    failed = "failed"
    aborted = "aborted"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted.

    Attributes:
        current: The current export state.
        target: The attempted target state.
        export_id: The export that failed to transition.
    """

    def __init__(self, current: ExportState, target: ExportState, export_id: str | None = None):
        self.current = current
        self.target = target
        self.export_id = export_id
        msg = f"Invalid transition from {current.value} to {target.value}"
        if export_id:
            msg += f" for export {export_id}"
        super().__init__(msg)


# Authoritative state machine definition
VALID_TRANSITIONS: dict[ExportState, set[ExportState]] = {
    ExportState.idle: {ExportState.generating, ExportState.failed},
    ExportState.generating: {ExportState.completed, ExportState.failed, ExportState.aborted},
    ExportState.completed: set(),
    ExportState.failed: set(),
    ExportState.aborted: set(),
}


def validate_transition(current: ExportState, target: ExportState) -> bool:
    """Return True if the transition is allowed by VALID_TRANSITIONS."""
    return target in VALID_TRANSITIONS.get(current, set())


class ExportStateMachine:
    """Tracks and validates the state of a single export."""

    def __init__(self, export_id: str) -> None:
        self.export_id = export_id
        self.state = ExportState.idle
        self.logger = logger.bind(component="ExportStateMachine", export_id=export_id)

    def transition(self, target: ExportState) -> None:
        """Move to target state.

        Raises:
            InvalidTransitionError: If the transition is not valid.
        """
        if not validate_transition(self.state, target):
            raise InvalidTransitionError(self.state, target, self.export_id)
        self.logger.info(
            "export_transition",
            from_state=self.state.value,
            to_state=target.value,
        )
        self.state = target

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self.state]


@dataclass(frozen=True)
class ExportProgress:
    """Snapshot of a running export.

    Attributes:
        state: Current lifecycle state
        completed: Artifacts generated so far
        total: Artifacts planned
        current_artifact: Artifact that just completed, if any
    """

    state: ExportState
    completed: int
    total: int
    current_artifact: str | None = None


@dataclass(frozen=True)
class ExportResult:
    """Final outcome of an export.

    Attributes:
        export_id: Identifier used in logs
        state: Terminal state reached
        artifacts: The complete bundle; only set when state is completed
        error: The single surfaced failure; only set when state is failed
    """

    export_id: str
    state: ExportState
    artifacts: ArtifactSet | None = None
    error: ExportFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is ExportState.completed


ArtifactObserver = Callable[[Artifact], None]
ProgressCallback = Callable[[ExportProgress], None]
Preflight = Callable[[], None]


async def _cancel_all(tasks: list[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def _link_tokens(source: CancellationToken, target: CancellationToken) -> None:
    await source.wait()
    target.cancel(source.reason or "cancelled by caller")


class GenerationOrchestrator:
    """Runs one export's jobs concurrently with fail-fast aggregation.

    Attributes:
        generator: Produces the body of each artifact
        observer: Called with each artifact as it completes
        on_progress: Called with a progress snapshot on every state change
            and every completed artifact
    """

    def __init__(
        self,
        generator: ArtifactGenerator,
        observer: ArtifactObserver | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.generator = generator
        self.observer = observer
        self.on_progress = on_progress
        self.state_machine: ExportStateMachine | None = None

    @property
    def state(self) -> ExportState:
        """State of the most recent run; idle before the first run."""
        if self.state_machine is None:
            return ExportState.idle
        return self.state_machine.state

    def _progress(self, completed: int, total: int, current: str | None = None) -> None:
        if self.on_progress is None or self.state_machine is None:
            return
        self.on_progress(
            ExportProgress(
                state=self.state_machine.state,
                completed=completed,
                total=total,
                current_artifact=current,
            )
        )

    def _notify(self, artifact: Artifact) -> None:
        if self.observer is None:
            return
        try:
            self.observer(artifact)
        except Exception:
            logger.exception("artifact_observer_failed", artifact=artifact.name)

    async def _abort(
        self, machine: ExportStateMachine, pending: set[asyncio.Task], completed: int, total: int
    ) -> ExportResult:
        await _cancel_all(list(pending))
        machine.transition(ExportState.aborted)
        logger.info(
            "export_aborted",
            export_id=machine.export_id,
            completed=completed,
            total=total,
        )
        self._progress(completed, total)
        return ExportResult(export_id=machine.export_id, state=ExportState.aborted)

    async def run(
        self,
        jobs: list[ArtifactJob],
        project_name: str,
        cancellation_token: CancellationToken | None = None,
        preflight: Preflight | None = None,
        export_id: str | None = None,
    ) -> ExportResult:
        """Run every job and aggregate the results.

        Args:
            jobs: Planned jobs; artifact order in the result follows job order
            project_name: Project the bundle is generated for
            cancellation_token: Caller-owned token; signalling it aborts the export
            preflight: Validation run while idle; a ``ConfigurationError`` it
                raises fails the export before any call is issued
            export_id: Identifier for logs; generated when omitted

        Returns:
            ExportResult in a terminal state
        """
        export_id = export_id or uuid.uuid4().hex[:12]
        machine = ExportStateMachine(export_id)
        self.state_machine = machine
        total = len(jobs)

        if preflight is not None:
            try:
                preflight()
            except ConfigurationError as e:
                machine.transition(ExportState.failed)
                logger.error("export_configuration_rejected", export_id=export_id, error=str(e))
                self._progress(0, total)
                return ExportResult(export_id=export_id, state=ExportState.failed, error=e)

        machine.transition(ExportState.generating)
        self._progress(0, total)

        if cancellation_token is not None and cancellation_token.cancelled:
            return await self._abort(machine, set(), 0, total)

        token = CancellationToken()
        helpers: list[asyncio.Task] = []
        if cancellation_token is not None:
            helpers.append(asyncio.create_task(_link_tokens(cancellation_token, token)))
        abort_waiter = asyncio.create_task(token.wait())
        helpers.append(abort_waiter)

        tasks: dict[asyncio.Task, ArtifactJob] = {
            asyncio.create_task(self.generator.generate(job, token)): job for job in jobs
        }
        order = {job.name: index for index, job in enumerate(jobs)}
        produced: dict[str, Artifact] = {}
        pending = set(tasks)

        logger.info("export_dispatched", export_id=export_id, tasks=total)

        def abort_requested() -> bool:
            return token.cancelled or (
                cancellation_token is not None and cancellation_token.cancelled
            )

        try:
            while pending:
                done, _ = await asyncio.wait(
                    pending | {abort_waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                pending -= done

                if abort_waiter in done or abort_requested():
                    return await self._abort(machine, pending, len(produced), total)

                finished = sorted(
                    (task for task in done if task in tasks),
                    key=lambda task: order[tasks[task].name],
                )
                failure = self._first_failure(finished, tasks)
                if failure is not None:
                    token.cancel(f"{failure.artifact_name} failed")
                    await _cancel_all(list(pending))
                    machine.transition(ExportState.failed)
                    logger.error(
                        "export_failed",
                        export_id=export_id,
                        artifact=failure.artifact_name,
                        error=str(failure),
                    )
                    self._progress(len(produced), total)
                    return ExportResult(export_id=export_id, state=ExportState.failed, error=failure)

                for task in finished:
                    # The observer may cancel between two completions
                    if abort_requested():
                        return await self._abort(machine, pending, len(produced), total)
                    job = tasks[task]
                    artifact = Artifact(
                        name=job.name,
                        content=task.result(),
                        kind=job.kind,
                        node_id=job.node.id if job.node else None,
                    )
                    produced[job.name] = artifact
                    logger.info(
                        "artifact_generated",
                        export_id=export_id,
                        artifact=job.name,
                        length=len(artifact.content),
                    )
                    self._notify(artifact)
                    self._progress(len(produced), total, job.name)

            if abort_requested():
                return await self._abort(machine, pending, len(produced), total)
        except asyncio.CancelledError:
            await _cancel_all([task for task in tasks if not task.done()])
            raise
        finally:
            await _cancel_all(helpers)

        artifacts = ArtifactSet(
            project_name=project_name,
            artifacts=tuple(produced[job.name] for job in jobs),
        )
        machine.transition(ExportState.completed)
        logger.info("export_completed", export_id=export_id, artifacts=total)
        self._progress(total, total)
        return ExportResult(export_id=export_id, state=ExportState.completed, artifacts=artifacts)

    @staticmethod
    def _first_failure(
        finished: list[asyncio.Task], tasks: dict[asyncio.Task, ArtifactJob]
    ) -> GenerationFailure | None:
        for task in finished:
            if task.cancelled():
                return GenerationFailure(tasks[task].name, "Generation task was cancelled")
            error = task.exception()
            if error is None:
                continue
            if isinstance(error, GenerationFailure):
                return error
            return GenerationFailure(tasks[task].name, str(error) or type(error).__name__)
        return None
