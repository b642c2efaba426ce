"""Settings and wiring for a conversation run.

- config.py: Configuration via pydantic-settings
- core.py: run_conversation() and option building
- models.py: Run summary model
- prompts.py: System prompt augmentation
- servers.py: Auxiliary MCP server bindings
- tool_policy.py: Tool allow-list
"""
