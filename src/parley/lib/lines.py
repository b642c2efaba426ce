"""Line source: user input exposed as an async sequence of lines.

On a terminal, lines come from a prompt_toolkit ``PromptSession`` so that
editing, history and Ctrl+D behave the way an interactive REPL should.
Piped input, or any stream handed in explicitly, is read with plain
``readline()`` calls off the event loop. Either way nothing is read until
the consumer asks for the next line.

Examples:
    >>> import io
    >>> async def collect():
    ...     return [line async for line in LineSource(io.StringIO("a\\nb\\n"))]
    >>> asyncio.run(collect())
    ['a', 'b']
"""

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from typing import TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

logger = logging.getLogger(__name__)

PROMPT_STYLE = Style.from_dict({"prompt": "fg:ansiblue bold"})


def build_prompt_session() -> PromptSession[str]:
    """Single-line prompt session for interactive terminals."""
    return PromptSession(
        message=FormattedText([("class:prompt", "> ")]),
        style=PROMPT_STYLE,
    )


class LineSource:
    """Lazy, single-pass sequence of lines.

    Iteration ends without error at end-of-input: ``EOFError`` (Ctrl+D)
    from the prompt, or an empty read on a stream.
    Trailing newline characters are stripped; all other whitespace is
    left for the turn producer to handle. Create a new instance to read
    again; there is no replay.

    Args:
        stream: Text stream to read. Defaults to stdin.
        prompt_session: Prompt to read from instead of ``stream``. Built
            automatically when stdin is a terminal and no stream is given.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        prompt_session: PromptSession[str] | None = None,
    ) -> None:
        if prompt_session is None and stream is None and sys.stdin.isatty():
            prompt_session = build_prompt_session()
        self.stream = stream if stream is not None else sys.stdin
        self.prompt_session = prompt_session

    @property
    def interactive(self) -> bool:
        return self.prompt_session is not None

    async def readline(self) -> str | None:
        """Read one line, or ``None`` at end-of-input."""
        if self.prompt_session is not None:
            try:
                return await self.prompt_session.prompt_async()
            except EOFError:
                return None

        line = await asyncio.to_thread(self.stream.readline)
        return line or None

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            line = await self.readline()
            if line is None:
                logger.debug("Input stream closed")
                return
            yield line.rstrip("\r\n")
