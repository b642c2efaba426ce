"""Transcript: ordered, append-only record of completed conversation units.

Entries are either a message reconstructed from streaming deltas or a
complete SDK message stored verbatim. The whole list is written once,
as pretty-printed JSON, when the driver shuts down.

Examples:
    >>> transcript = Transcript()
    >>> transcript.append(StreamedMessage(text="Hi there", session_id="s1"))
    >>> len(transcript)
    1
    >>> transcript.save(Path("/tmp/transcript.json"))
    PosixPath('/tmp/transcript.json')
"""

import dataclasses
import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, Literal

from claude_agent_sdk import (
    AssistantMessage,
    ContentBlock,
    Message,
    ResultMessage,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

logger = logging.getLogger(__name__)


class StreamedMessage(BaseModel):
    """A message assembled from its content-fragment deltas."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["streamed"] = "streamed"
    text: str
    session_id: str | None = None
    recorded_at: str = Field(default_factory=lambda: datetime.now().isoformat())


def block_type(block: ContentBlock) -> str:
    """Wire name of a content block (``text``, ``tool_use``, ...)."""
    match block:
        case TextBlock():
            return "text"
        case ThinkingBlock():
            return "thinking"
        case ToolUseBlock():
            return "tool_use"
        case ToolResultBlock():
            return "tool_result"
        case _:
            return type(block).__name__


def message_to_dict(message: Message) -> dict[str, Any]:
    """Field-for-field copy of *message*, with each content block tagged by ``type``."""
    data = dataclasses.asdict(message)
    content = getattr(message, "content", None)
    if isinstance(content, list):
        data["content"] = [
            {"type": block_type(block), **dataclasses.asdict(block)}
            if dataclasses.is_dataclass(block)
            else block
            for block in content
        ]
    return data


class CompleteMessage(BaseModel):
    """A fully formed SDK message, stored field for field."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    type: Literal["assistant", "user", "result"]
    message: dict[str, Any]
    recorded_at: str = Field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def from_message(cls, message: Message) -> "CompleteMessage":
        match message:
            case AssistantMessage():
                message_type = "assistant"
            case UserMessage():
                message_type = "user"
            case ResultMessage():
                message_type = "result"
            case _:
                raise TypeError(f"Not a complete message: {type(message).__name__}")
        return cls(type=message_type, message=message_to_dict(message))


TranscriptEntry = Annotated[
    StreamedMessage | CompleteMessage, Field(discriminator="kind")
]
"""Either kind of transcript entry, discriminated by ``kind``."""

_ENTRIES_ADAPTER: TypeAdapter[list[TranscriptEntry]] = TypeAdapter(list[TranscriptEntry])


def default_transcript_path(base: Path) -> Path:
    """Timestamped transcript file under *base*."""
    return base / f"{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"


class Transcript:
    """Append-only log of :data:`TranscriptEntry` values in arrival order."""

    def __init__(self) -> None:
        self._entries: list[StreamedMessage | CompleteMessage] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[StreamedMessage | CompleteMessage, ...]:
        return tuple(self._entries)

    def append(self, entry: StreamedMessage | CompleteMessage) -> None:
        self._entries.append(entry)

    def dump_json(self) -> bytes:
        return _ENTRIES_ADAPTER.dump_json(self._entries, indent=2)

    def save(self, path: Path) -> Path:
        """Write every entry to *path* as an indented JSON list."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.dump_json())
        logger.info("Saved transcript (%d entries) to %s", len(self._entries), path)
        return path
