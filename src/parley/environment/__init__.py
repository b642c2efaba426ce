"""Environment harness for running conversations.

Owns user-facing I/O and process lifecycle: option parsing, the startup
banner, logging setup and exit.

Structure:
- cli/__main__.py: ``parley`` command
"""
