"""Library utilities for the conversation driver.

Reusable, **parametric** pieces configured through arguments. Wiring
and settings live in parley.agent.

Modules:
- channel: Conversation channel binding to the Agent SDK (open_channel)
- consumer: Event consumer (delta reconstruction, rendering, transcript)
- errors: Exception hierarchy
- events: Event classification and streaming payload decoding
- lines: Line source over a text stream
- render: Rendered output stream and closing line
- session: Session id cell and turn gate
- transcript: Append-only transcript with JSON persistence
- turns: Turn producer and turn request model
"""

from parley.lib.channel import ConversationChannel, as_sdk_messages, open_channel
from parley.lib.consumer import EventConsumer
from parley.lib.errors import (
    ConfigError,
    ParleyError,
    StreamProtocolError,
    UnexpectedEventError,
)
from parley.lib.events import DeltaStep, EventKind, classify, delta_step, session_id_of
from parley.lib.lines import LineSource
from parley.lib.render import CLOSING_LINE, Renderer
from parley.lib.session import SessionCell, TurnGate
from parley.lib.transcript import (
    CompleteMessage,
    StreamedMessage,
    Transcript,
    TranscriptEntry,
    default_transcript_path,
)
from parley.lib.turns import EXIT_TOKENS, TurnProducer, TurnRequest, normalize_line

__all__ = [
    # Channel
    "ConversationChannel",
    "as_sdk_messages",
    "open_channel",
    # Consumer
    "EventConsumer",
    # Errors
    "ConfigError",
    "ParleyError",
    "StreamProtocolError",
    "UnexpectedEventError",
    # Events
    "DeltaStep",
    "EventKind",
    "classify",
    "delta_step",
    "session_id_of",
    # Lines
    "LineSource",
    # Render
    "CLOSING_LINE",
    "Renderer",
    # Session
    "SessionCell",
    "TurnGate",
    # Transcript
    "CompleteMessage",
    "StreamedMessage",
    "Transcript",
    "TranscriptEntry",
    "default_transcript_path",
    # Turns
    "EXIT_TOKENS",
    "TurnProducer",
    "TurnRequest",
    "normalize_line",
]
