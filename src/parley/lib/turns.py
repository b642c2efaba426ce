"""Turn producer: converts input lines into turn requests.

The remote service pulls from :class:`TurnProducer` whenever it is ready
for the next user turn. Blank lines are skipped, an exit token ends the
sequence, and every request carries the session id known at the moment
it is built.

Examples:
    Build requests from a fixed list of lines::

        >>> async def lines():
        ...     for line in ["hello", "  ", "exit", "ignored"]:
        ...         yield line
        >>> producer = TurnProducer(lines(), SessionCell())
        >>> [r.content async for r in producer]
        ['hello']
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from parley.lib.session import SessionCell, TurnGate

logger = logging.getLogger(__name__)

EXIT_TOKENS: frozenset[str] = frozenset({"exit", "/quit"})
"""Trimmed lines that end the conversation (case-sensitive, exact match)."""


class TurnRequest(BaseModel):
    """One user turn, as handed to the remote service."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user"] = "user"
    content: str
    parent_tool_use_id: None = Field(
        default=None, description="Top-level turns never nest under a tool call"
    )
    session_id: str = Field(default="", description="Empty until the service issues one")

    def to_sdk(self) -> dict[str, Any]:
        """Wire shape expected by the Agent SDK's streaming prompt input."""
        return {
            "type": "user",
            "message": {"role": self.role, "content": self.content},
            "parent_tool_use_id": self.parent_tool_use_id,
            "session_id": self.session_id,
        }


def normalize_line(line: str) -> str | None:
    """Return the turn text for a line, or ``None`` when it yields no turn."""
    trimmed = line.strip()
    return trimmed or None


class TurnProducer:
    """Lazily yields :class:`TurnRequest` values from a line sequence.

    Args:
        lines: Source of raw input lines.
        session: Cell read for the session id of every request.
        gate: Optional turn gate. When given, the producer waits for the
            previous turn's terminal event before consuming another line.
        seed: Optional scripted first turn, sent before any line is read.

    ``produced`` counts the requests handed out so far.
    """

    def __init__(
        self,
        lines: AsyncIterable[str],
        session: SessionCell,
        *,
        gate: TurnGate | None = None,
        seed: str | None = None,
    ) -> None:
        self.lines = lines
        self.session = session
        self.gate = gate
        self.seed = seed
        self.produced = 0
        self.exited = False

    def _build(self, content: str) -> TurnRequest:
        request = TurnRequest(content=content, session_id=self.session.value)
        self.produced += 1
        if self.gate is not None:
            self.gate.begin()
        logger.debug(
            "Turn %d ready (session=%r): %s",
            self.produced,
            request.session_id,
            content,
        )
        return request

    async def _wait_for_turn_end(self) -> None:
        if self.gate is not None:
            await self.gate.wait_idle()

    async def __aiter__(self) -> AsyncIterator[TurnRequest]:
        if self.seed is not None and self.seed.strip():
            yield self._build(self.seed.strip())

        await self._wait_for_turn_end()
        async for line in self.lines:
            content = normalize_line(line)
            if content is None:
                continue
            if content in EXIT_TOKENS:
                logger.info("Exit requested after %d turn(s)", self.produced)
                self.exited = True
                return
            yield self._build(content)
            await self._wait_for_turn_end()
