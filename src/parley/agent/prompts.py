"""System prompt augmentation.

The prompt text lives in an external file. It is used either as the
whole system prompt or appended to a named preset:

- file only: the file's text replaces the system prompt
- preset + file: ``{"type": "preset", "preset": ..., "append": <file text>}``
- preset only: the preset unchanged
- neither: ``None`` (SDK default)
"""

import logging
from pathlib import Path

from claude_agent_sdk.types import SystemPromptPreset

from parley.lib.errors import ConfigError

logger = logging.getLogger(__name__)


def read_prompt_file(path: Path) -> str:
    """Read a prompt file, raising ConfigError if it is unreadable."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read system prompt file {path}: {e}") from e
    return text.strip()


def get_system_prompt(
    *,
    path: Path | None = None,
    preset: str | None = None,
) -> str | SystemPromptPreset | None:
    """Build the system prompt option from a file and/or a named preset."""
    text = read_prompt_file(path) if path is not None else None

    if preset is None:
        if text is not None:
            logger.debug("Using system prompt from %s", path)
        return text

    prompt: SystemPromptPreset = {"type": "preset", "preset": preset}
    if text:
        prompt["append"] = text
    logger.debug("Using system prompt preset %s (append=%s)", preset, bool(text))
    return prompt
