import logging

import pytest

from perspective_mcp.config import DEFAULT_SCRIPTS_PATH, ConfigError, load_config

CONFIG_KEYS = [
    "OMNIFOCUS_MCP_SCRIPTS_PATH",
    "OMNIFOCUS_MCP_OSASCRIPT",
    "OMNIFOCUS_MCP_SCRIPT_TIMEOUT",
    "OMNIFOCUS_MCP_SERVICE_TOKEN",
    "OMNIFOCUS_MCP_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults():
    config = load_config()

    assert config.scripts_path == DEFAULT_SCRIPTS_PATH
    assert (config.scripts_path / "getCustomPerspectiveTasks.js").is_file()
    assert config.osascript_path == "osascript"
    assert config.script_timeout == 60
    assert config.service_token is None
    assert config.log_level == logging.INFO


def test_load_config_reads_env(monkeypatch, tmp_path):
    scripts = tmp_path / "scripts"
    scripts.mkdir()
    monkeypatch.setenv("OMNIFOCUS_MCP_SCRIPTS_PATH", str(scripts))
    monkeypatch.setenv("OMNIFOCUS_MCP_OSASCRIPT", "/usr/local/bin/osascript")
    monkeypatch.setenv("OMNIFOCUS_MCP_SCRIPT_TIMEOUT", "5")
    monkeypatch.setenv("OMNIFOCUS_MCP_SERVICE_TOKEN", "test-token")
    monkeypatch.setenv("OMNIFOCUS_MCP_LOG_LEVEL", "debug")

    config = load_config()

    assert config.scripts_path == scripts.resolve()
    assert config.osascript_path == "/usr/local/bin/osascript"
    assert config.script_timeout == 5
    assert config.service_token == "test-token"
    assert config.log_level == logging.DEBUG


def test_load_config_reads_dotenv(tmp_path):
    (tmp_path / ".env").write_text(
        'export OMNIFOCUS_MCP_SERVICE_TOKEN="from-dotenv"\n'
        "# comment\n"
        "OMNIFOCUS_MCP_SCRIPT_TIMEOUT=15\n",
        encoding="utf-8",
    )

    config = load_config()

    assert config.service_token == "from-dotenv"
    assert config.script_timeout == 15


def test_load_config_prefers_env_over_dotenv(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(
        "OMNIFOCUS_MCP_SERVICE_TOKEN=dotenv\n", encoding="utf-8"
    )
    monkeypatch.setenv("OMNIFOCUS_MCP_SERVICE_TOKEN", "env")

    config = load_config()

    assert config.service_token == "env"


def test_load_config_rejects_missing_scripts_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("OMNIFOCUS_MCP_SCRIPTS_PATH", str(tmp_path / "missing"))

    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert "OMNIFOCUS_MCP_SCRIPTS_PATH" in str(excinfo.value)


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_load_config_rejects_invalid_timeout(monkeypatch, raw):
    monkeypatch.setenv("OMNIFOCUS_MCP_SCRIPT_TIMEOUT", raw)

    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert "OMNIFOCUS_MCP_SCRIPT_TIMEOUT" in str(excinfo.value)


def test_load_config_rejects_invalid_log_level(monkeypatch):
    monkeypatch.setenv("OMNIFOCUS_MCP_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert "OMNIFOCUS_MCP_LOG_LEVEL" in str(excinfo.value)
