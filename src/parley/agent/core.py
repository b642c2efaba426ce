"""Conversation orchestration.

Key patterns:
1. Build ClaudeAgentOptions from settings in one place (_build_options)
2. Input lines -> TurnProducer -> service; service events -> EventConsumer
3. A TurnGate keeps the service from pulling turn N+1 before turn N ends
4. Cleanup runs on every exit path: channel close, closing line, transcript
"""

import logging
from collections.abc import AsyncIterable
from pathlib import Path
from typing import TextIO, cast

from claude_agent_sdk import ClaudeAgentOptions, query

from parley.agent.config import Settings, settings
from parley.agent.models import RunSummary, TokenUsage
from parley.agent.prompts import get_system_prompt
from parley.agent.servers import load_servers
from parley.agent.tool_policy import ToolPolicy
from parley.lib import (
    CLOSING_LINE,
    EventConsumer,
    LineSource,
    Renderer,
    SessionCell,
    Transcript,
    TurnGate,
    TurnProducer,
    default_transcript_path,
    open_channel,
)
from parley.lib.channel import Connect

logger = logging.getLogger(__name__)


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def _build_options(config: Settings) -> ClaudeAgentOptions:
    """Build ClaudeAgentOptions from settings.

    Separated from run_conversation() so the option-building logic can be
    tested independently.
    """
    servers = load_servers(_optional_path(config.mcp_config_path))
    policy = ToolPolicy.from_settings(config, server_names=list(servers))

    return ClaudeAgentOptions(
        model=config.model,
        max_turns=config.max_turns,
        include_partial_messages=config.include_partial_messages,
        allowed_tools=policy.get_allowed_tools(),
        system_prompt=get_system_prompt(
            path=_optional_path(config.system_prompt_path),
            preset=config.system_prompt_preset,
        ),
        mcp_servers=servers,
        permission_mode=config.permission_mode,
        setting_sources=config.setting_sources,
        extra_args={"no-session-persistence": None},
    )


async def run_conversation(
    *,
    config: Settings | None = None,
    lines: AsyncIterable[str] | None = None,
    output: TextIO | None = None,
    transcript_path: Path | None = None,
    connect: Connect = query,
) -> RunSummary:
    """Run one interactive session until input ends or an exit token is read.

    Args:
        config: Settings to use. Defaults to the module singleton.
        lines: Input lines. Defaults to stdin.
        output: Rendered output stream. Defaults to stdout.
        transcript_path: Where to write the transcript at shutdown.
            Defaults to a timestamped file under ``transcripts_path``.
        connect: Starts the remote service (SDK ``query`` by default).

    Returns:
        RunSummary describing the run.

    Errors from the service propagate after cleanup has run.
    """
    config = config or settings
    if transcript_path is None:
        transcript_path = default_transcript_path(Path(config.transcripts_path))

    options = _build_options(config)

    session = SessionCell()
    gate = TurnGate()
    transcript = Transcript()
    renderer = Renderer(output)
    producer = TurnProducer(
        lines if lines is not None else LineSource(),
        session,
        gate=gate,
        seed=config.seed_prompt,
    )
    consumer = EventConsumer(
        session=session, transcript=transcript, renderer=renderer, gate=gate
    )

    logger.debug("Starting conversation with model %s", config.model)
    try:
        async with open_channel(producer, options=options, connect=connect) as channel:
            await consumer.consume(channel)
    finally:
        try:
            renderer.close(CLOSING_LINE)
        finally:
            transcript.save(transcript_path)

    last = consumer.results[-1] if consumer.results else None
    return RunSummary(
        session_id=session.session_id,
        turns_sent=producer.produced,
        turns_completed=consumer.turns,
        errors=sum(1 for r in consumer.results if r.is_error),
        exited=producer.exited,
        cost_usd=consumer.cost_usd,
        token_usage=cast(TokenUsage, last.usage) if last and last.usage else None,
        transcript_entries=len(transcript),
        transcript_path=transcript_path,
    )
