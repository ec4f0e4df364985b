"""Cooperative cancellation shared by every task of one export."""

from __future__ import annotations

import asyncio

import structlog

logger = structlog.get_logger(__name__)


class CancellationToken:
    """A one-shot cancellation signal.

    The token may be signalled once; further calls to ``cancel`` are no-ops.
    In-flight generation calls observe it through ``wait``.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel("user closed the export")
        True
        >>> token.cancelled
        True
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled by caller") -> bool:
        """Signal cancellation.

        Returns:
            True if this call signalled the token, False if it was already signalled
        """
        if self._event.is_set():
            return False
        self._reason = reason
        self._event.set()
        logger.info("export_cancellation_requested", reason=reason)
        return True

    async def wait(self) -> None:
        """Block until the token is signalled."""
        await self._event.wait()
