"""Event consumer: drives rendering and the transcript from channel events.

One pass over the conversation channel does four things per event:

1. Records any session id it carries in the :class:`SessionCell`.
2. Rebuilds streamed messages from their deltas, printing each text
   fragment as it arrives.
3. Appends every completed unit (rebuilt message or complete SDK
   message) to the :class:`Transcript`, in arrival order.
4. Releases the :class:`TurnGate` when a turn's terminal result arrives.

Examples:
    >>> consumer = EventConsumer(session=SessionCell(), transcript=Transcript())
    >>> await consumer.consume(channel)
    >>> consumer.turns
    1
"""

import logging
from collections.abc import AsyncIterable

from claude_agent_sdk import AssistantMessage, ResultMessage, SystemMessage, UserMessage
from claude_agent_sdk.types import StreamEvent

from parley.lib.errors import StreamProtocolError
from parley.lib.events import (
    DeltaStep,
    classify,
    delta_step,
    is_top_level,
    session_id_of,
)
from parley.lib.render import Renderer
from parley.lib.session import SessionCell, TurnGate
from parley.lib.transcript import CompleteMessage, StreamedMessage, Transcript

logger = logging.getLogger(__name__)
stream_log = logging.getLogger("parley.agent.stream")


class EventConsumer:
    """Consumes conversation events until the channel ends.

    The delta state machine is Idle (``buffer is None``) or Accumulating
    (``buffer`` holds the fragments seen so far). The channel streams at
    most one message at a time, so a single buffer is enough.
    """

    def __init__(
        self,
        *,
        session: SessionCell,
        transcript: Transcript,
        renderer: Renderer | None = None,
        gate: TurnGate | None = None,
    ) -> None:
        self.session = session
        self.transcript = transcript
        self.renderer = renderer or Renderer()
        self.gate = gate
        self.buffer: list[str] | None = None
        self.turns = 0
        self.results: list[ResultMessage] = []

    @property
    def accumulating(self) -> bool:
        return self.buffer is not None

    @property
    def cost_usd(self) -> float | None:
        """Session cost as last reported (the service reports a running total)."""
        for result in reversed(self.results):
            if result.total_cost_usd is not None:
                return result.total_cost_usd
        return None

    async def consume(self, channel: AsyncIterable[object]) -> None:
        """Iterate *channel* to completion, handling every event."""
        async for message in channel:
            self.handle(message)

    def handle(self, message: object) -> None:
        kind = classify(message)
        self.session.observe(session_id_of(message))
        stream_log.debug("EVENT %s: %s", kind, type(message).__name__)

        match message:
            case StreamEvent():
                self._on_delta(message)
            case AssistantMessage() | UserMessage() | ResultMessage():
                self._on_complete(message)
            case SystemMessage():
                logger.debug("System [%s]: %s", message.subtype, message.data)

    def _on_delta(self, message: StreamEvent) -> None:
        step, text = delta_step(message.event)
        stream_log.debug("DELTA %s: %r", step, text)

        match step:
            case DeltaStep.START:
                if self.buffer is not None:
                    raise StreamProtocolError("message_start while a message is in progress")
                self.buffer = []
            case DeltaStep.FRAGMENT:
                if self.buffer is None:
                    raise StreamProtocolError("text delta outside of a message")
                self.buffer.append(text)
                self.renderer.fragment(text)
            case DeltaStep.STOP:
                if self.buffer is None:
                    raise StreamProtocolError("message_stop without message_start")
                self.transcript.append(
                    StreamedMessage(
                        text="".join(self.buffer),
                        session_id=message.session_id or self.session.session_id,
                    )
                )
                self.buffer = None
            case DeltaStep.OTHER:
                pass

    def _on_complete(self, message: AssistantMessage | UserMessage | ResultMessage) -> None:
        stream_log.debug("%s: %s", type(message).__name__.upper(), message)
        self.transcript.append(CompleteMessage.from_message(message))

        match message:
            case AssistantMessage() if is_top_level(message):
                # A finished reply ends its streamed line. Replies from nested
                # tool calls are not line-terminated.
                self.renderer.newline()
            case ResultMessage():
                self.turns += 1
                self.results.append(message)
                if message.is_error:
                    logger.warning(
                        "Turn %d ended with error [%s]: %s",
                        self.turns,
                        message.subtype,
                        message.result,
                    )
                if self.gate is not None:
                    self.gate.finish()
