"""Auxiliary capability bindings (external MCP servers).

Bindings are read from a JSON file in either the Claude settings shape
``{"mcpServers": {name: config}}`` or as a bare ``{name: config}``
mapping. Each config is a stdio server (``command``, optional ``args``
and ``env``) or a remote one (``type`` of ``sse`` or ``http`` with a
``url``).

Example file::

    {
      "mcpServers": {
        "docs": {"type": "http", "url": "https://docs.example.com/mcp"}
      }
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, cast

from claude_agent_sdk.types import McpServerConfig

from parley.lib.errors import ConfigError

logger = logging.getLogger(__name__)

_REQUIRED_KEY = {"stdio": "command", "sse": "url", "http": "url"}


def validate_server(name: str, config: object) -> McpServerConfig:
    """Check one server binding and return it unchanged."""
    if not isinstance(config, dict):
        raise ConfigError(f"MCP server {name!r}: expected an object")
    server_type = config.get("type", "stdio")
    required = _REQUIRED_KEY.get(server_type)
    if required is None:
        raise ConfigError(f"MCP server {name!r}: unsupported type {server_type!r}")
    if not isinstance(config.get(required), str) or not config[required]:
        raise ConfigError(f"MCP server {name!r}: missing {required!r}")
    return cast(McpServerConfig, config)


def parse_servers(data: Any) -> dict[str, McpServerConfig]:
    """Validate a decoded bindings document."""
    if isinstance(data, dict) and "mcpServers" in data:
        data = data["mcpServers"]
    if not isinstance(data, dict):
        raise ConfigError("MCP config must be an object of server bindings")
    return {name: validate_server(name, config) for name, config in data.items()}


def load_servers(path: Path | None) -> dict[str, McpServerConfig]:
    """Load bindings from *path*; no path means no auxiliary servers."""
    if path is None:
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read MCP config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in MCP config {path}: {e}") from e

    servers = parse_servers(data)
    logger.info("Loaded %d auxiliary server(s): %s", len(servers), ", ".join(servers))
    return servers
