"""Tests for the click CLI."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from thoth import __version__
from thoth.cli.app import cli
from thoth.consensus.assembler import assemble
from thoth.consensus.models import ConfidenceLabel, ConsensusVerdict, ModelAnswer
from thoth.core.errors import ConfigError
from thoth.history import HistoryStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config(make_config, tmp_path):
    return make_config(history={"path": str(tmp_path / "history.json")})


@pytest.fixture
def result():
    verdict = ConsensusVerdict(
        golden_truth_answer="Paris is the capital of France.",
        confidence_score=0.97,
        confidence_label=ConfidenceLabel.STRONG_AGREEMENT,
        summary="Both models agree.",
    )
    answers = [
        ModelAnswer("gemini-3.0-flash-lite", "Paris."),
        ModelAnswer("claude-haiku-4.5", "The capital is Paris."),
    ]
    return assemble(
        "abc123def456",
        "What is the capital of France?",
        answers,
        verdict,
        now=datetime(2026, 5, 1, 12, 30, tzinfo=UTC),
    )


# ─── Group ────────────────────────────────────────────────────


class TestGroup:
    def test_version(self, runner):
        out = runner.invoke(cli, ["--version"])
        assert out.exit_code == 0
        assert __version__ in out.output

    def test_no_subcommand_shows_help(self, runner):
        out = runner.invoke(cli, [])
        assert out.exit_code == 0
        assert "Multi-model golden truth" in out.output


# ─── ask ──────────────────────────────────────────────────────


class TestAsk:
    def test_json_output(self, runner, config, result):
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=AsyncMock(return_value=result)),
        ):
            out = runner.invoke(cli, ["ask", "--json", "What is the capital of France?"])
        assert out.exit_code == 0, out.output
        data = json.loads(out.output)
        assert data["goldenTruthAnswer"] == "Paris is the capital of France."
        assert data["confidenceLabel"] == "Strong agreement"
        assert len(data["modelAnswers"]) == 2

    def test_rich_output(self, runner, config, result):
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=AsyncMock(return_value=result)),
        ):
            out = runner.invoke(cli, ["ask", "What is the capital of France?"])
        assert out.exit_code == 0, out.output
        assert "Golden Truth" in out.output
        assert "Strong agreement" in out.output
        assert "claude-haiku-4.5" in out.output

    def test_records_history(self, runner, config, result):
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=AsyncMock(return_value=result)),
        ):
            runner.invoke(cli, ["ask", "--json", "Q"])
        entries = HistoryStore.from_config(config.history).load()
        assert [e.id for e in entries] == ["abc123def456"]

    def test_no_history_flag(self, runner, config, result):
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=AsyncMock(return_value=result)),
        ):
            runner.invoke(cli, ["ask", "--json", "--no-history", "Q"])
        assert HistoryStore.from_config(config.history).load() == []

    def test_model_and_judge_overrides(self, runner, config, result):
        mock_ask = AsyncMock(return_value=result)
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=mock_ask),
        ):
            runner.invoke(
                cli,
                ["ask", "--json", "--model", "meta/llama-4-scout", "--model", "gemini-2.5-pro",
                 "--judge", "claude-haiku-4.5", "Q"],
            )
        passed = mock_ask.call_args.args[1]
        assert passed.consensus.models == ["meta/llama-4-scout", "gemini-2.5-pro"]
        assert passed.consensus.judge_model == "claude-haiku-4.5"

    @pytest.mark.parametrize(
        "args",
        [["--model", " "], ["--model", "", "--model", "  "], ["--judge", "  "]],
    )
    def test_blank_model_options_rejected(self, runner, config, args):
        mock_ask = AsyncMock()
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=mock_ask),
        ):
            out = runner.invoke(cli, ["ask", "--json", *args, "Q"])
        assert out.exit_code == 1
        assert "Error: Invalid model options" in out.output
        mock_ask.assert_not_called()

    def test_overrides_leave_loaded_config_untouched(self, runner, config, result):
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch("thoth.cli.app._ask_async", new=AsyncMock(return_value=result)),
        ):
            runner.invoke(cli, ["ask", "--json", "--model", "gemini-2.5-pro", "Q"])
        assert config.consensus.models == [
            "googleai/gemini-3.0-flash-lite",
            "anthropic/claude-haiku-4.5",
        ]

    def test_config_error_exits(self, runner, config):
        with (
            patch("thoth.cli.app.load_config", return_value=config),
            patch(
                "thoth.cli.app._ask_async",
                new=AsyncMock(side_effect=ConfigError("GOOGLE_CLOUD_PROJECT is required.")),
            ),
        ):
            out = runner.invoke(cli, ["ask", "--json", "Q"])
        assert out.exit_code == 1
        assert "Error: GOOGLE_CLOUD_PROJECT is required." in out.output

    def test_bad_config_exits(self, runner):
        with patch("thoth.cli.app.load_config", side_effect=ConfigError("Invalid TOML")):
            out = runner.invoke(cli, ["ask", "Q"])
        assert out.exit_code == 1
        assert "Invalid TOML" in out.output


# ─── history / models ─────────────────────────────────────────


class TestHistoryCommand:
    def test_empty(self, runner, config):
        with patch("thoth.cli.app.load_config", return_value=config):
            out = runner.invoke(cli, ["history"])
        assert out.exit_code == 0
        assert "No history yet." in out.output

    def test_lists_entries(self, runner, config, result):
        HistoryStore.from_config(config.history).record(result)
        with patch("thoth.cli.app.load_config", return_value=config):
            out = runner.invoke(cli, ["history"])
        assert out.exit_code == 0
        assert "abc123de" in out.output
        assert "[Strong agreement]" in out.output
        assert "2026-05-01 12:30" in out.output
        assert "What is the capital of France?" in out.output


class TestModelsCommand:
    def test_lists_routes(self, runner, config):
        with patch("thoth.cli.app.load_config", return_value=config):
            out = runner.invoke(cli, ["models"])
        assert out.exit_code == 0
        assert "claude-haiku-4.5 (anthropic/claude-haiku-4.5)  -> anthropic" in out.output
        assert "judge: gemini-2.5-flash-lite  -> google" in out.output
