"""Tests for CLI."""

from pathlib import Path

import pytest

from fakes import (
    ANSWER,
    DATES,
    INSTRUCTIONS,
    RELEVANCE,
    SELECT_CHANNELS,
    FakeLLM,
    FakeMemoryService,
    FakeReader,
    make_channel,
    make_message,
)
from slackq.assistant import build_assistant
from slackq.cli import CLI
from slackq.config import Settings, StoreConfig
from slackq.threads import USAGE


def make_settings(tmp_path: Path) -> Settings:
    return Settings(store=StoreConfig(db_path=tmp_path / "threads.db", log_dir=tmp_path / "cli-logs"))


@pytest.fixture
def cli(tmp_path: Path) -> CLI:
    settings = make_settings(tmp_path)
    llm = FakeLLM(
        {
            INSTRUCTIONS: "Find launch notes",
            SELECT_CHANNELS: '[{"id": "C1", "name": "general"}]',
            DATES: '{"startDate": "06/01/2024", "endDate": "06/15/2024"}',
            RELEVANCE: "[0]",
            ANSWER: "The launch is on Monday.",
        }
    )
    reader = FakeReader(
        channels=[make_channel("C1", "general")],
        histories={"C1": [make_message("Launch on Monday", "1718000000.000100")]},
    )
    assistant = build_assistant(settings, llm=llm, reader=reader, memory_service=FakeMemoryService())
    return CLI(settings=settings, assistant=assistant, user_id="U1")


def test_new_session_id(cli: CLI) -> None:
    """Test session ID generation."""
    assert cli.session_id.startswith("cli-")
    assert len(cli.session_id) == 12  # "cli-" + 8 hex chars


def test_user_defaults_to_configured_user(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    assistant = build_assistant(
        settings, llm=FakeLLM(), reader=FakeReader(), memory_service=FakeMemoryService()
    )

    assert CLI(settings=settings, assistant=assistant).user_id == "dog"


@pytest.mark.asyncio
async def test_handle_command_exit(cli: CLI) -> None:
    """Test exit commands return False."""
    assert await cli._handle_command("/exit") is False
    assert await cli._handle_command("quit") is False


@pytest.mark.asyncio
async def test_handle_command_help(cli: CLI) -> None:
    """Test help command returns True."""
    assert await cli._handle_command("/help") is True


@pytest.mark.asyncio
async def test_handle_command_unknown(cli: CLI) -> None:
    assert await cli._handle_command("/what") is True


def test_format_response(cli: CLI) -> None:
    output = cli._format_response("Hello!")
    assert "Hello!" in output
    assert "─" * 40 in output


@pytest.mark.asyncio
async def test_process_message_answers_query(cli: CLI) -> None:
    output = await cli._process_message("when is the launch?")
    assert "The launch is on Monday." in output


@pytest.mark.asyncio
async def test_process_message_runs_thread_commands(cli: CLI) -> None:
    output = await cli._process_message("~help")
    assert USAGE in output


@pytest.mark.asyncio
async def test_process_message_reports_errors(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    assistant = build_assistant(
        settings, llm=FakeLLM(), reader=FakeReader(channels=[]), memory_service=FakeMemoryService()
    )
    cli = CLI(settings=settings, assistant=assistant, user_id="U1")

    output = await cli._process_message("anything")

    assert output == "Error: Could not find any channels."


@pytest.mark.asyncio
async def test_run_loop(cli: CLI, monkeypatch, capsys) -> None:
    inputs = iter(["", "~thread -l", "/exit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    await cli.run()

    out = capsys.readouterr().out
    assert "No threads found." in out
    assert "Goodbye" in out


@pytest.mark.asyncio
async def test_run_exits_on_eof(cli: CLI, monkeypatch, capsys) -> None:
    def raise_eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)

    await cli.run()

    assert "Goodbye" in capsys.readouterr().out
