"""Unit tests for LLM config loading, saving and provider selection."""

import stat
from pathlib import Path

import pytest

from youagent.errors import ConfigError
from youagent.utils.llm import LLMManager, load_config, save_config
from youagent.utils.llm.config import LLMConfig, OllamaConfig

_ENV_VARS = (
    "YOUAGENT_LLM_PROVIDER",
    "YOUAGENT_GEMINI_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "YOUAGENT_OPENAI_API_KEY",
    "OPENAI_API_KEY",
    "YOUAGENT_OLLAMA_BASE_URL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    assert config.provider == "gemini"
    assert config.gemini.api_key == ""
    assert config.ollama.base_url == "http://localhost:11434"


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    path = save_config("openai", {"api_key": "sk-test"}, tmp_path / "config.toml")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    config = load_config(path)
    assert config.provider == "openai"
    assert config.openai.api_key == "sk-test"
    assert config.gemini.api_key == ""


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = save_config("gemini", {"api_key": "from-file"}, tmp_path / "config.toml")
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    monkeypatch.setenv("YOUAGENT_LLM_PROVIDER", "Ollama ")
    config = load_config(path)
    assert config.gemini.api_key == "from-env"
    assert config.provider == "ollama"


def test_unknown_provider_falls_back_to_gemini(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YOUAGENT_LLM_PROVIDER", "claude-of-the-future")
    assert load_config(tmp_path / "none.toml").provider == "gemini"


def test_manager_without_credentials() -> None:
    manager = LLMManager(LLMConfig(provider="gemini"))
    assert manager.get_provider() is None
    with pytest.raises(ConfigError):
        manager.require_provider()


def test_manager_builds_ollama_without_credentials() -> None:
    manager = LLMManager(
        LLMConfig(provider="ollama", ollama=OllamaConfig(base_url="http://ollama:11434/"))
    )
    provider = manager.require_provider()
    assert provider.name == "ollama"
    assert manager.get_provider() is provider
