"""Tests for settings, paths, logging setup and CLI startup checks."""

import logging

import pytest

from board_agent.agents import cli
from board_agent.config import Settings
from board_agent.errors import MissingCredentialError
from board_agent.utils.filesystem import WorkspacePathError, safe_path
from board_agent.utils.log import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PASITHEA_API_KEY", raising=False)
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_key is None
        assert settings.project_name == "Pasithea"
        assert settings.agent_model == "gpt-4o-mini"
        assert settings.replica_file == ".pasithea/replica.json"

    def test_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("PASITHEA_PROJECT_NAME", "Apollo")
        monkeypatch.setenv("PASITHEA_API_KEY", "secret")

        settings = Settings(_env_file=None)

        assert settings.project_name == "Apollo"
        assert settings.api_key == "secret"

    def test_github_token_fallback(self, monkeypatch):
        monkeypatch.delenv("PASITHEA_API_KEY", raising=False)
        monkeypatch.setenv("GITHUB_TOKEN", "gh-token")

        assert Settings(_env_file=None).api_key == "gh-token"


class TestPaths:
    def test_safe_path_inside_workspace(self, tmp_path):
        assert safe_path(".pasithea/replica.json", tmp_path) == tmp_path.resolve() / ".pasithea" / "replica.json"

    def test_safe_path_rejects_escape(self, tmp_path):
        with pytest.raises(WorkspacePathError):
            safe_path("../outside.json", tmp_path)


class TestStartup:
    def test_missing_api_key_is_fatal(self, monkeypatch):
        monkeypatch.setattr(cli.settings, "api_key", None)

        with pytest.raises(MissingCredentialError):
            cli.require_api_key()

    def test_run_cli_exits_without_api_key(self, monkeypatch, capsys):
        monkeypatch.setattr(cli.settings, "api_key", None)

        with pytest.raises(SystemExit) as excinfo:
            cli.run_cli()

        assert excinfo.value.code == 1
        assert "API key not found" in capsys.readouterr().out

    def test_initial_inputs(self, session):
        inputs = cli.initial_inputs(session)

        assert inputs["messages"][0].content.startswith("You are Iris")
        assert inputs["board"] == {"issues": [], "projectName": "Pasithea"}


class TestLogging:
    def test_setup_logging_configures_package_logger(self, tmp_path):
        log_file = tmp_path / "logs" / "board.log"

        logger = setup_logging("info", log_file)
        logging.getLogger("board_agent.tools.board").info("Created issue: ISS-1 - Demo")
        for handler in logger.handlers:
            handler.flush()

        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) == 2
        assert "Created issue: ISS-1 - Demo" in log_file.read_text("utf-8")
