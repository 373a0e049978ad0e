"""
Unit Tests for CLI

Tests the LeetAid CLI commands and transcript rendering.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from leetaid.cli import TranscriptRenderer, cli, render_message
from leetaid.conversations.models import Message
from leetaid.endpoint.models import EndpointError
from leetaid.session.state import ConversationView


def _recording_console() -> Console:
    return Console(record=True, width=80, force_terminal=False, color_system=None)


class TestCLIBasics:
    """Test basic CLI functionality."""

    @pytest.fixture
    def runner(self):
        """Create CLI test runner."""
        return CliRunner()

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "LeetAid" in result.output
        assert "small hints for big breakthroughs" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_chat_command_exists(self, runner):
        result = runner.invoke(cli, ["chat", "--help"])
        assert result.exit_code == 0
        assert "paste code, get hints" in result.output.lower()
        assert "--end-marker" in result.output


class TestChatCommand:
    """Test the interactive chat command."""

    @pytest.fixture(autouse=True)
    def quiet_logging(self):
        """Leave the test logging setup alone."""
        with patch("leetaid.cli.configure_cli_logging"):
            yield

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def endpoint(self, monkeypatch):
        monkeypatch.setenv("ENDPOINT_URL", "http://localhost:3000/hint")

    def test_missing_endpoint_fails(self, runner):
        result = runner.invoke(cli, ["chat"], input="/exit\n")

        assert result.exit_code != 0
        assert "Missing inference endpoint" in result.output

    def test_invalid_endpoint_fails(self, runner, monkeypatch):
        monkeypatch.setenv("ENDPOINT_URL", "ftp://nowhere")

        result = runner.invoke(cli, ["chat"], input="/exit\n")

        assert result.exit_code != 0
        assert "Invalid configuration" in result.output

    def test_submit_and_persist(self, runner, endpoint, tmp_path, fake_client):
        client = fake_client("Consider a base case.")

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat"], input="def f(): pass\n\n/exit\n")

        assert result.exit_code == 0, result.output
        assert "Consider a base case." in result.output
        assert "Goodbye!" in result.output
        assert client.calls == [("def f(): pass", [])]
        assert client.closed

        stored = json.loads((tmp_path / "storage.json").read_text(encoding="utf-8"))
        assert stored["conversationHistory"] == [
            {"role": "user", "content": "def f(): pass"},
            {"role": "assistant", "content": "Consider a base case."},
        ]

    def test_multiline_draft_with_end_marker(self, runner, endpoint, fake_client):
        client = fake_client("Looks fine.")
        draft = "def f():\n\n    return 1\n/send\n/exit\n"

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat", "--end-marker", "/send"], input=draft)

        assert result.exit_code == 0, result.output
        assert client.calls == [("def f():\n\n    return 1", [])]

    def test_failure_shows_generic_error(self, runner, endpoint, fake_client):
        client = fake_client(EndpointError("down"))

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat"], input="code\n\n/exit\n")

        assert result.exit_code == 0, result.output
        assert "An error occurred. Please try again." in result.output

    def test_unexpected_failure_shows_generic_error(self, runner, endpoint, fake_client):
        client = fake_client(OverflowError("port must be 0-65535"))

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat"], input="code\n\n/exit\n")

        assert result.exit_code == 0, result.output
        assert "An error occurred. Please try again." in result.output
        assert client.closed

    def test_clear_command(self, runner, endpoint, tmp_path, fake_client):
        client = fake_client("hint")

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat"], input="code\n\n/clear\n/exit\n")

        assert result.exit_code == 0, result.output
        assert "Conversation cleared." in result.output
        assert not (tmp_path / "storage.json").exists()

    def test_history_is_restored_on_start(self, runner, endpoint, tmp_path, fake_client):
        (tmp_path / "storage.json").write_text(
            json.dumps(
                {"conversationHistory": [{"role": "assistant", "content": "Earlier hint"}]}
            ),
            encoding="utf-8",
        )

        with patch("leetaid.cli.HttpInferenceClient", return_value=fake_client()):
            result = runner.invoke(cli, ["chat"], input="/exit\n")

        assert result.exit_code == 0, result.output
        assert "Earlier hint" in result.output

    def test_blank_lines_alone_do_not_submit(self, runner, endpoint, fake_client):
        client = fake_client()

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat"], input="\n\n/exit\n")

        assert result.exit_code == 0, result.output
        assert client.calls == []

    def test_end_of_input_exits_cleanly(self, runner, endpoint, fake_client):
        client = fake_client()

        with patch("leetaid.cli.HttpInferenceClient", return_value=client):
            result = runner.invoke(cli, ["chat"], input="")

        assert result.exit_code == 0, result.output
        assert client.closed


class TestTranscriptRenderer:
    """Test the rendering listener."""

    def test_renders_only_new_messages(self):
        output = _recording_console()
        renderer = TranscriptRenderer(output)
        first = Message(role="user", content="first question")
        second = Message(role="assistant", content="first answer")

        renderer(ConversationView(messages=(first,)))
        renderer(ConversationView(messages=(first,), draft="typing"))
        renderer(ConversationView(messages=(first, second)))

        text = output.export_text()
        assert text.count("first question") == 1
        assert text.count("first answer") == 1

    def test_error_shown_once_per_failure(self):
        output = _recording_console()
        renderer = TranscriptRenderer(output)

        renderer(ConversationView(last_error="boom"))
        renderer(ConversationView(last_error="boom", draft="x"))
        renderer(ConversationView(is_pending=True))
        renderer(ConversationView(last_error="boom"))

        assert output.export_text().count("boom") == 2

    def test_restarts_after_clear(self):
        output = _recording_console()
        renderer = TranscriptRenderer(output)
        message = Message(role="user", content="again")

        renderer(ConversationView(messages=(message, message)))
        renderer(ConversationView())
        renderer(ConversationView(messages=(message,)))

        assert output.export_text().count("again") == 3

    def test_code_regions_are_rendered(self):
        output = _recording_console()
        output.print(
            render_message(
                Message(role="assistant", content="Try:\n```python\nreturn n\n```\nok")
            )
        )

        text = output.export_text()
        assert "LeetAid" in text
        assert "return n" in text
        assert "```" not in text

    def test_unknown_info_word_is_kept_as_code(self):
        output = _recording_console()
        output.print(render_message(Message(role="user", content="```pass\nx = 1\n```")))

        text = output.export_text()
        assert "pass" in text
        assert "x = 1" in text
