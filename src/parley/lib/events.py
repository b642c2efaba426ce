"""Classification of events coming back from the conversation channel.

The Agent SDK emits a closed set of message classes. :func:`classify`
maps each onto one of three kinds and :func:`delta_step` decodes the raw
streaming payload carried by :class:`StreamEvent`. Anything else is
treated as a malformed event.
"""

from enum import StrEnum
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ResultMessage,
    SystemMessage,
    UserMessage,
)
from claude_agent_sdk.types import StreamEvent

from parley.lib.errors import UnexpectedEventError


class EventKind(StrEnum):
    LIFECYCLE = "lifecycle"
    DELTA = "delta"
    COMPLETE = "complete"


class DeltaStep(StrEnum):
    """Position of a streaming event within one message."""

    START = "start"
    FRAGMENT = "fragment"
    STOP = "stop"
    OTHER = "other"


def classify(message: object) -> EventKind:
    """Return the kind of an SDK message, raising on unknown objects."""
    match message:
        case SystemMessage():
            return EventKind.LIFECYCLE
        case StreamEvent():
            return EventKind.DELTA
        case AssistantMessage() | UserMessage() | ResultMessage():
            return EventKind.COMPLETE
        case _:
            raise UnexpectedEventError(
                f"Unexpected event from conversation channel: {type(message).__name__}"
            )


def session_id_of(message: object) -> str | None:
    """Session id carried by an event, if any."""
    match message:
        case SystemMessage(data=dict() as data):
            value = data.get("session_id")
            return value if isinstance(value, str) and value else None
        case StreamEvent() | ResultMessage():
            return message.session_id or None
        case _:
            value = getattr(message, "session_id", None)
            return value if isinstance(value, str) and value else None


def delta_step(event: dict[str, Any]) -> tuple[DeltaStep, str]:
    """Decode a raw streaming payload into a step and its text fragment.

    Only ``text_delta`` content deltas count as fragments; thinking and
    tool-input deltas are reported as ``OTHER``.
    """
    match event:
        case {"type": "message_start"}:
            return DeltaStep.START, ""
        case {"type": "message_stop"}:
            return DeltaStep.STOP, ""
        case {"type": "content_block_delta", "delta": {"type": "text_delta", "text": str() as text}}:
            return DeltaStep.FRAGMENT, text
        case _:
            return DeltaStep.OTHER, ""


def is_top_level(message: object) -> bool:
    """True unless the event belongs to a nested tool invocation."""
    return getattr(message, "parent_tool_use_id", None) is None
