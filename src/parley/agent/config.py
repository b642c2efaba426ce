"""Configuration management using pydantic-settings.

Key patterns:
1. Multiple env files (.env, .env.local) - local overrides shared
2. Optional API key with a startup warning (the SDK can fall back to CLI login)
3. validation_alias for explicit env var names
4. Singleton instance for easy import
5. Export to os.environ for the SDK's CLI subprocess

Every field can be overridden per run from the command line.

Usage:
    from parley.agent.config import settings
    print(settings.model)
"""

import logging
import os
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SettingSource = Literal["user", "project", "local"]
PermissionMode = Literal["default", "acceptEdits", "plan", "bypassPermissions"]


class Settings(BaseSettings):
    """Driver settings loaded from environment variables.

    The API key uses its standard name (ANTHROPIC_API_KEY) so the SDK
    picks it up. Driver settings use the PARLEY_ prefix.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def warn_missing_optional_keys(self) -> Self:
        """Warn at startup if the API key is missing."""
        if not self.anthropic_api_key:
            logger.warning(
                "ANTHROPIC_API_KEY is not set; relying on the CLI's own login"
            )
        return self

    # ==========================================================================
    # API KEYS
    # ==========================================================================

    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
        description="Anthropic API key",
    )

    # ==========================================================================
    # MODEL SETTINGS
    # ==========================================================================

    model: str = Field(
        default="claude-haiku-4-5-20251001",
        validation_alias="PARLEY_MODEL",
        description="Backend model variant",
    )

    max_turns: int = Field(
        default=20,
        ge=1,
        validation_alias="PARLEY_MAX_TURNS",
        description="Back-and-forth exchanges before the service stops",
    )

    include_partial_messages: bool = Field(
        default=True,
        validation_alias="PARLEY_INCLUDE_PARTIAL_MESSAGES",
        description="Stream delta events (required for live rendering)",
    )

    permission_mode: PermissionMode | None = Field(
        default=None,
        validation_alias="PARLEY_PERMISSION_MODE",
        description="Tool permission mode (None = SDK default)",
    )

    # ==========================================================================
    # TOOLS AND AUXILIARY SERVICES
    # ==========================================================================

    allowed_tools: list[str] = Field(
        default_factory=lambda: ["Read", "Grep"],
        validation_alias="PARLEY_ALLOWED_TOOLS",
        description="Tool names or pattern tokens the service may invoke",
    )

    mcp_config_path: str | None = Field(
        default=None,
        validation_alias="PARLEY_MCP_CONFIG_PATH",
        description="JSON file of auxiliary MCP server bindings",
    )

    setting_sources: list[SettingSource] | None = Field(
        default=None,
        validation_alias="PARLEY_SETTING_SOURCES",
        description="External configuration scopes to honor (None = SDK default)",
    )

    # ==========================================================================
    # PROMPTS
    # ==========================================================================

    system_prompt_path: str | None = Field(
        default=None,
        validation_alias="PARLEY_SYSTEM_PROMPT_PATH",
        description="Text file appended to (or replacing) the system prompt",
    )

    system_prompt_preset: str | None = Field(
        default=None,
        validation_alias="PARLEY_SYSTEM_PROMPT_PRESET",
        description="Named system prompt preset, e.g. claude_code",
    )

    seed_prompt: str | None = Field(
        default=None,
        validation_alias="PARLEY_SEED_PROMPT",
        description="Scripted first turn sent before reading input",
    )

    # ==========================================================================
    # PATHS
    # ==========================================================================

    transcripts_path: str = Field(
        default="./transcripts",
        validation_alias="PARLEY_TRANSCRIPTS_PATH",
        description="Directory for transcript files",
    )


# Singleton instance
settings = Settings.model_validate({})

# Export API keys to os.environ for the SDK's CLI subprocess
_ENV_EXPORTS = [
    ("ANTHROPIC_API_KEY", settings.anthropic_api_key),
]

for env_name, value in _ENV_EXPORTS:
    if value and env_name not in os.environ:
        os.environ[env_name] = value
