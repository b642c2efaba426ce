"""Tool allow-list policy.

Key patterns:
1. Entries are exact tool names or pattern tokens (``mcp__docs__search*``,
   ``Bash(git:*)``); order is preserved, duplicates dropped
2. Tools of every auxiliary MCP server are allowed as a group
3. from_settings() factory for easy initialization

Usage:
    from parley.agent.config import settings
    from parley.agent.tool_policy import ToolPolicy

    policy = ToolPolicy.from_settings(settings, server_names=["docs"])
    allowed_tools = policy.get_allowed_tools()
"""

from __future__ import annotations

import fnmatch
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from parley.agent.config import Settings


def server_tool_pattern(server_name: str) -> str:
    """Allow-list token covering every tool of an MCP server."""
    return f"mcp__{server_name}"


def _matches(tool_name: str, entry: str) -> bool:
    if tool_name == entry or fnmatch.fnmatchcase(tool_name, entry):
        return True
    # A bare server token (mcp__<server>) covers all of that server's tools.
    return entry.startswith("mcp__") and entry.count("__") == 1 and tool_name.startswith(
        f"{entry}__"
    )


class ToolPolicy(BaseModel):
    """Ordered set of tools the remote service may invoke during a turn."""

    allowed: list[str] = Field(default_factory=list)
    server_names: list[str] = Field(default_factory=list)

    @field_validator("allowed")
    @classmethod
    def dedupe_allowed(cls, value: list[str]) -> list[str]:
        """Strip entries, drop blanks and duplicates, keep first-seen order."""
        seen: dict[str, None] = {}
        for entry in value:
            entry = entry.strip()
            if entry:
                seen.setdefault(entry, None)
        return list(seen)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        server_names: Sequence[str] = (),
    ) -> ToolPolicy:
        """Create a ToolPolicy from application settings."""
        return cls(allowed=settings.allowed_tools, server_names=list(server_names))

    def get_allowed_tools(self) -> list[str]:
        """Configured entries, then one group token per auxiliary server."""
        tools = list(self.allowed)
        for name in self.server_names:
            token = server_tool_pattern(name)
            if token not in tools:
                tools.append(token)
        return tools

    def is_tool_allowed(self, tool_name: str) -> bool:
        """Check a concrete tool name against exact entries and patterns."""
        return any(_matches(tool_name, entry) for entry in self.get_allowed_tools())
