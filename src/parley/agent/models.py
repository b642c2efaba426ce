"""Result models for a conversation run."""

from pathlib import Path
from typing_extensions import TypedDict

from pydantic import BaseModel, Field


class TokenUsage(TypedDict, total=False):
    """Token usage from Claude API responses."""

    input_tokens: int
    output_tokens: int
    cache_read_input_tokens: int
    cache_creation_input_tokens: int


class RunSummary(BaseModel):
    """What one run of the driver produced.

    Returned by ``run_conversation`` and logged by the CLI; the
    transcript file itself holds the full record.
    """

    session_id: str | None = Field(description="Id issued by the service, if any")
    turns_sent: int = Field(default=0, description="Turn requests handed to the service")
    turns_completed: int = Field(default=0, description="Terminal results observed")
    errors: int = Field(default=0, description="Results flagged as errors")
    exited: bool = Field(default=False, description="Ended by an exit token")
    cost_usd: float | None = None
    token_usage: TokenUsage | None = None
    transcript_entries: int = 0
    transcript_path: Path | None = None
