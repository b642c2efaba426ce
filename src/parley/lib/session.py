"""Shared session state between the turn producer and the event consumer.

Both objects are plain mutable state. The driver runs on a single event
loop, so reads and writes never interleave within a step.

Examples:
    >>> cell = SessionCell()
    >>> cell.value
    ''
    >>> cell.observe("sess-1")
    >>> cell.value
    'sess-1'
"""

import asyncio
import logging

logger = logging.getLogger(__name__)


class SessionCell:
    """Holds the session identifier issued by the remote service.

    Starts absent. Written by the event consumer whenever an event
    carries an id, read by the turn producer for every request.
    """

    def __init__(self) -> None:
        self.session_id: str | None = None

    @property
    def value(self) -> str:
        """Current id, or the empty string before the service issued one."""
        return self.session_id or ""

    def observe(self, session_id: str | None) -> None:
        if not session_id or session_id == self.session_id:
            return
        if self.session_id is None:
            logger.info("Session %s started", session_id)
        else:
            logger.warning(
                "Session id changed from %s to %s", self.session_id, session_id
            )
        self.session_id = session_id


class TurnGate:
    """Keeps turn N+1 from being built before turn N has finished.

    The remote service pulls requests from a background task and would
    otherwise read ahead. The producer calls :meth:`begin` when it hands
    out a request and awaits :meth:`wait_idle` before consuming the next
    line; the consumer calls :meth:`finish` on each terminal event.
    """

    def __init__(self) -> None:
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def busy(self) -> bool:
        return not self._idle.is_set()

    def begin(self) -> None:
        self._idle.clear()

    def finish(self) -> None:
        self._idle.set()

    async def wait_idle(self) -> None:
        await self._idle.wait()
