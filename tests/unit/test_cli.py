"""Tests for the command line entry point."""

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from parley.agent.config import Settings
from parley.agent.models import RunSummary
from parley.environment.cli import __main__ as cli
from parley.version import __version__

runner = CliRunner()


class TestHelpers:
    """Tests for CLI helpers."""

    def test_apply_overrides_skips_none(self, config: Settings) -> None:
        """None overrides keep the base value and the base is left untouched."""
        updated = cli.apply_overrides(config, model="other", max_turns=None)

        assert updated.model == "other"
        assert updated.max_turns == config.max_turns
        assert updated.anthropic_api_key == config.anthropic_api_key
        assert config.model == "claude-haiku-4-5-20251001"

    def test_apply_overrides_validates_choices(self, config: Settings) -> None:
        """An override outside a Literal choice is rejected by Settings."""
        with pytest.raises(ValidationError, match="permission_mode|PARLEY_PERMISSION_MODE"):
            cli.apply_overrides(config, permission_mode="yolo")

    def test_apply_overrides_validates_bounds(self, config: Settings) -> None:
        """Field constraints apply to overrides too."""
        with pytest.raises(ValidationError):
            cli.apply_overrides(config, max_turns=0)

    def test_apply_overrides_accepts_valid_choices(self, config: Settings) -> None:
        """Valid choices pass through validation unchanged."""
        updated = cli.apply_overrides(
            config, permission_mode="plan", setting_sources=["user", "local"]
        )

        assert updated.permission_mode == "plan"
        assert updated.setting_sources == ["user", "local"]

    def test_banner_shows_key_suffix(self, config: Settings) -> None:
        """The banner names the last five characters of the key."""
        assert cli.banner(config) == 'Thread started using API key ending in "abcde".'

    def test_banner_without_key(self, config: Settings) -> None:
        """Without a key the banner says so."""
        config = config.model_copy(update={"anthropic_api_key": None})

        assert "without ANTHROPIC_API_KEY" in cli.banner(config)


class TestCommands:
    """Tests for CLI commands."""

    def test_version(self) -> None:
        """`version` prints the package version."""
        outcome = runner.invoke(cli.app, ["version"])

        assert outcome.exit_code == 0
        assert __version__ in outcome.output

    def test_chat_applies_options(
        self, monkeypatch: pytest.MonkeyPatch, config: Settings, tmp_path
    ) -> None:
        """Every chat option reaches the settings handed to the run."""
        captured: dict = {}

        async def fake_run(*, config: Settings, transcript_path):
            captured["config"] = config
            captured["transcript_path"] = transcript_path
            return RunSummary(session_id="s1")

        monkeypatch.setattr(cli, "settings", config)
        monkeypatch.setattr(cli, "run_conversation", fake_run)
        transcript = tmp_path / "t.json"

        outcome = runner.invoke(
            cli.app,
            [
                "chat",
                "--model", "claude-sonnet-4-5",
                "--max-turns", "5",
                "-t", "Read",
                "-t", "mcp__docs",
                "--permission-mode", "acceptEdits",
                "--setting-source", "project",
                "--seed", "Hi!",
                "--no-partial",
                "--transcript", str(transcript),
            ],
        )

        assert outcome.exit_code == 0, outcome.output
        chosen: Settings = captured["config"]
        assert chosen.model == "claude-sonnet-4-5"
        assert chosen.max_turns == 5
        assert chosen.allowed_tools == ["Read", "mcp__docs"]
        assert chosen.permission_mode == "acceptEdits"
        assert chosen.setting_sources == ["project"]
        assert chosen.seed_prompt == "Hi!"
        assert chosen.include_partial_messages is False
        assert captured["transcript_path"] == transcript

    def test_chat_rejects_unknown_permission_mode(
        self, monkeypatch: pytest.MonkeyPatch, config: Settings
    ) -> None:
        """An unknown permission mode is a usage error and nothing runs."""
        called = False

        async def fake_run(**kwargs):
            nonlocal called
            called = True
            return RunSummary(session_id=None)

        monkeypatch.setattr(cli, "settings", config)
        monkeypatch.setattr(cli, "run_conversation", fake_run)

        outcome = runner.invoke(cli.app, ["chat", "--permission-mode", "yolo"])

        assert outcome.exit_code == 2
        assert not called

    def test_chat_rejects_unknown_setting_source(
        self, monkeypatch: pytest.MonkeyPatch, config: Settings
    ) -> None:
        """An unknown setting source is a usage error."""
        monkeypatch.setattr(cli, "settings", config)

        outcome = runner.invoke(cli.app, ["chat", "--setting-source", "global"])

        assert outcome.exit_code == 2
