"""Shared test fixtures.

``ScriptedService`` stands in for the Agent SDK's ``query``: it pulls one
request from the prompt iterable, emits that turn's scripted events, and
only then pulls the next request.
"""

import io
from collections.abc import AsyncIterable, AsyncIterator, Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from claude_agent_sdk import (
    AssistantMessage,
    ResultMessage,
    SystemMessage,
    TextBlock,
    UserMessage,
)
from claude_agent_sdk.types import StreamEvent

from parley.agent.config import Settings
from parley.lib import Renderer, SessionCell, Transcript

SESSION_ID = "sess-1"


# -- Message builders ----------------------------------------------------------


def system_init(session_id: str = SESSION_ID) -> SystemMessage:
    return SystemMessage(subtype="init", data={"type": "system", "session_id": session_id})


def stream(event: dict[str, Any], session_id: str = SESSION_ID) -> StreamEvent:
    return StreamEvent(uuid="evt", session_id=session_id, event=event)


def start(session_id: str = SESSION_ID) -> StreamEvent:
    return stream({"type": "message_start", "message": {}}, session_id)


def text(fragment: str, session_id: str = SESSION_ID) -> StreamEvent:
    return stream(
        {
            "type": "content_block_delta",
            "index": 0,
            "delta": {"type": "text_delta", "text": fragment},
        },
        session_id,
    )


def stop(session_id: str = SESSION_ID) -> StreamEvent:
    return stream({"type": "message_stop"}, session_id)


def assistant(reply: str, parent_tool_use_id: str | None = None) -> AssistantMessage:
    return AssistantMessage(
        content=[TextBlock(text=reply)],
        model="claude-haiku-4-5-20251001",
        parent_tool_use_id=parent_tool_use_id,
    )


def user_replay(content: str = "tool output") -> UserMessage:
    return UserMessage(content=content)


def result(
    session_id: str = SESSION_ID,
    *,
    is_error: bool = False,
    cost: float | None = 0.01,
    num_turns: int = 1,
) -> ResultMessage:
    return ResultMessage(
        subtype="error_max_turns" if is_error else "success",
        duration_ms=1200,
        duration_api_ms=1000,
        is_error=is_error,
        num_turns=num_turns,
        session_id=session_id,
        total_cost_usd=cost,
        usage={"input_tokens": 10, "output_tokens": 5},
        result=None if is_error else "done",
    )


def reply_turn(*fragments: str, session_id: str = SESSION_ID) -> list[object]:
    """Events of one ordinary streamed turn ending in a result."""
    return [
        start(session_id),
        *(text(f, session_id) for f in fragments),
        stop(session_id),
        assistant("".join(fragments)),
        result(session_id),
    ]


# -- Fake service --------------------------------------------------------------


Turn = Sequence[object] | Callable[[dict[str, Any]], Sequence[object]]


class ScriptedStream:
    """Event stream returned by ``ScriptedService``; counts ``aclose`` calls."""

    def __init__(self, events: AsyncIterator[object]) -> None:
        self._events = events
        self.aclose_calls = 0

    def __aiter__(self) -> "ScriptedStream":
        return self

    async def __anext__(self) -> object:
        return await self._events.__anext__()

    async def aclose(self) -> None:
        self.aclose_calls += 1
        await self._events.aclose()  # type: ignore[attr-defined]


class ScriptedService:
    """Replacement for ``claude_agent_sdk.query`` driven by a turn script.

    ``opening`` events are emitted before the first request is pulled.
    Each entry of ``turns`` is either a list of events or a callable that
    builds them from the pulled request. ``fail_after`` raises once that
    many events have been emitted.
    """

    def __init__(
        self,
        turns: Sequence[Turn] = (),
        *,
        opening: Sequence[object] = (),
        fail_after: int | None = None,
    ) -> None:
        self.turns = list(turns)
        self.opening = list(opening)
        self.fail_after = fail_after
        self.pulled: list[dict[str, Any]] = []
        self.options: Any = None
        self.streams: list[ScriptedStream] = []
        self.emitted = 0

    def __call__(self, *, prompt: AsyncIterable[dict[str, Any]], options: Any) -> ScriptedStream:
        self.options = options
        scripted = ScriptedStream(self._run(prompt))
        self.streams.append(scripted)
        return scripted

    def _emit(self, event: object) -> object:
        if self.fail_after is not None and self.emitted >= self.fail_after:
            raise RuntimeError("service connection lost")
        self.emitted += 1
        return event

    async def _run(self, prompt: AsyncIterable[dict[str, Any]]) -> AsyncIterator[object]:
        for event in self.opening:
            yield self._emit(event)
        async for request in prompt:
            self.pulled.append(request)
            index = len(self.pulled) - 1
            turn = self.turns[index] if index < len(self.turns) else [result()]
            events = turn(request) if callable(turn) else turn
            for event in events:
                yield self._emit(event)


async def lines_of(*items: str) -> AsyncIterator[str]:
    for item in items:
        yield item


# -- Fixtures ------------------------------------------------------------------


@pytest.fixture
def session() -> SessionCell:
    return SessionCell()


@pytest.fixture
def transcript() -> Transcript:
    return Transcript()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def renderer(output: io.StringIO) -> Renderer:
    return Renderer(output)


@pytest.fixture
def transcript_path(tmp_path: Path) -> Path:
    return tmp_path / "transcripts" / "run.json"


@pytest.fixture
def config(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment and .env files."""
    return Settings.model_construct(
        anthropic_api_key="sk-test-abcde",
        model="claude-haiku-4-5-20251001",
        max_turns=20,
        include_partial_messages=True,
        permission_mode=None,
        allowed_tools=["Read", "Grep"],
        mcp_config_path=None,
        setting_sources=None,
        system_prompt_path=None,
        system_prompt_preset=None,
        seed_prompt=None,
        transcripts_path=str(tmp_path / "transcripts"),
    )
