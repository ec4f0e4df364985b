"""Error taxonomy for bundle exports.

``ExportFailure`` subclasses collapse an export to Failed. ``ExportCancelled``
is deliberately not an ``ExportFailure``: a caller-initiated abort must not
be reported as an error.
"""

from __future__ import annotations

REDACTED = "***"


def redact(text: str, secret: str | None) -> str:
    """Replace every occurrence of secret in text with ``***``."""
    if not secret:
        return text
    return text.replace(secret, REDACTED)


class SketchforgeError(Exception):
    """Base exception for sketchforge."""

    pass


class ExportFailure(SketchforgeError):
    """An export that ended in the Failed state."""

    pass


class ConfigurationError(ExportFailure):
    """Model id or credentials missing or invalid.

    Raised before any generation call is issued.
    """

    pass


class GenerationFailure(ExportFailure):
    """One artifact generation call was rejected.

    Attributes:
        artifact_name: Name of the artifact whose generation failed
        cause: Underlying transport or provider error text, already redacted
    """

    def __init__(self, artifact_name: str, cause: str):
        self.artifact_name = artifact_name
        self.cause = cause
        super().__init__(f"Failed to generate {artifact_name}: {cause}")


class ExportCancelled(SketchforgeError):
    """The export was aborted by its caller."""

    pass
