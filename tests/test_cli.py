"""Tests for the rootly-tui command line."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from rootly_tui import __version__
from rootly_tui.config import Config, load_config, save_config
from rootly_tui.exceptions import ApiAuthenticationError
from rootly_tui.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_file_logging():
    with patch("rootly_tui.main.setup_tui_logging") as setup:
        yield setup


class TestCommands:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "setup" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_debug_flag(self, no_file_logging):
        runner.invoke(app, ["--debug", "version"])
        no_file_logging.assert_called_once_with(debug=True)

    def test_config_masks_key(self, config_env):
        save_config(Config(api_key="rootly_abcdef123456"))
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "root...3456" in result.stdout
        assert "rootly_abcdef123456" not in result.stdout


class TestSetup:
    def test_skip_validation(self, config_env):
        result = runner.invoke(
            app,
            ["setup", "--api-key", "rootly_key", "--timezone", "Europe/Berlin", "--layout", "vertical", "--skip-validation"],
        )
        assert result.exit_code == 0, result.stdout

        config = load_config()
        assert config.api_key == "rootly_key"
        assert config.timezone == "Europe/Berlin"
        assert config.layout == "vertical"

    def test_validates_key(self, config_env):
        with patch("rootly_tui.main._validate", new_callable=AsyncMock, return_value="Ada Lovelace"):
            result = runner.invoke(app, ["setup", "--api-key", "rootly_key"])
        assert result.exit_code == 0
        assert "Ada Lovelace" in result.stdout
        assert load_config().api_key == "rootly_key"

    def test_rejected_key_not_saved(self, config_env):
        with patch(
            "rootly_tui.main._validate",
            new_callable=AsyncMock,
            side_effect=ApiAuthenticationError("Invalid API key"),
        ):
            result = runner.invoke(app, ["setup", "--api-key", "bad"])
        assert result.exit_code == 1
        assert "Invalid API key" in result.stdout
        assert not config_env.exists()

    def test_invalid_timezone(self, config_env):
        result = runner.invoke(app, ["setup", "--api-key", "rootly_x", "--timezone", "Not/AZone", "--skip-validation"])
        assert result.exit_code == 1
        assert "unknown timezone" in result.stdout
        assert not config_env.exists()

    def test_invalid_layout(self, config_env):
        result = runner.invoke(app, ["setup", "--api-key", "k", "--layout", "diagonal", "--skip-validation"])
        assert result.exit_code == 1
        assert not config_env.exists()


class TestBrowse:
    def test_requires_api_key(self, config_env):
        result = runner.invoke(app, ["browse"])
        assert result.exit_code == 1
        assert "No API key configured" in result.stdout

    def test_default_command_launches_app(self, config_env, monkeypatch):
        monkeypatch.setenv("ROOTLY_API_KEY", "rootly_env_key")
        with patch("rootly_tui.ui.app.RootlyApp") as app_cls:
            result = runner.invoke(app, [])
        assert result.exit_code == 0
        config = app_cls.call_args.args[0]
        assert config.api_key == "rootly_env_key"
        app_cls.return_value.run.assert_called_once()

    def test_unreadable_config(self, config_env):
        config_env.write_text("api_key: [broken")
        result = runner.invoke(app, ["browse"])
        assert result.exit_code == 1
        assert "Error" in result.stdout
