"""Conversation channel: the duplex binding to the remote agent service.

The service is started once per run with a lazy sequence of turn
requests. It pulls the next request whenever it is ready for a new user
turn and streams response events back. All construction goes through
:func:`open_channel`, which guarantees the channel is closed on every
exit path.

Examples:
    >>> producer = TurnProducer(LineSource(), session)
    >>> async with open_channel(producer, options=options) as channel:
    ...     async for message in channel:
    ...         print(message)
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, Protocol

from claude_agent_sdk import ClaudeAgentOptions, Message, query

from parley.lib.turns import TurnRequest

logger = logging.getLogger(__name__)


class EventStream(Protocol):
    """What a connected service hands back: async events plus ``aclose``."""

    def __aiter__(self) -> AsyncIterator[Message]: ...

    async def aclose(self) -> None: ...


Connect = Callable[..., EventStream]
"""Starts the service: ``connect(prompt=..., options=...)``. Defaults to SDK ``query``."""


async def as_sdk_messages(
    requests: AsyncIterable[TurnRequest],
) -> AsyncIterator[dict[str, Any]]:
    """Adapt turn requests to the SDK's streaming prompt dicts, lazily."""
    async for request in requests:
        yield request.to_sdk()


class ConversationChannel:
    """Handle on a running conversation. Iterate for events, then close.

    :meth:`close` is idempotent: closing a finished or already closed
    channel does nothing.
    """

    def __init__(self, stream: EventStream) -> None:
        self.stream = stream
        self.closed = False

    def __aiter__(self) -> AsyncIterator[Message]:
        return aiter(self.stream)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self.stream.aclose()
        logger.debug("Conversation channel closed")


@asynccontextmanager
async def open_channel(
    requests: AsyncIterable[TurnRequest],
    *,
    options: ClaudeAgentOptions,
    connect: Connect = query,
) -> AsyncIterator[ConversationChannel]:
    """Start the service with *requests* as its prompt and yield the channel.

    The channel is closed when the block exits, whether it finished
    normally or raised.
    """
    stream = connect(prompt=as_sdk_messages(requests), options=options)
    channel = ConversationChannel(stream)
    logger.debug("Conversation channel opened (model=%s)", options.model)
    try:
        yield channel
    finally:
        await channel.close()
