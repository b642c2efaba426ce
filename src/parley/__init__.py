"""Interactive multi-turn driver for a remote agent service.

Reads user turns line by line, streams the agent's replies as they are
generated, and records a transcript of the whole session.

Structure:
- parley/lib/: Reusable driver pieces
  - lines.py: Line source over a text stream
  - turns.py: Turn producer and turn request model
  - session.py: Session id cell and turn gate
  - channel.py: Conversation channel over the Agent SDK
  - events.py: Event classification
  - consumer.py: Event consumer (rendering, reconstruction, transcript)
  - transcript.py: Transcript persistence
  - render.py: Rendered output stream

- parley/agent/: Settings and wiring
  - config.py: Configuration via pydantic-settings
  - core.py: run_conversation() and option building
  - prompts.py: System prompt augmentation
  - servers.py: Auxiliary MCP server bindings
  - tool_policy.py: Tool allow-list

- parley/environment/cli/: Command line entry point
"""
