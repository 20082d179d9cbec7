"""Tests for configuration loading."""

import pytest
import yaml

from aigit_core.config import (
    DEFAULT_CONFIG,
    default_config_path,
    flatten,
    get_value,
    is_placeholder,
    load_config,
    provider_config,
    read_config_file,
    save_config,
    set_value,
)
from aigit_core.errors import ConfigurationError

_ENV_VARS = (
    "AIGIT_AI_PROVIDER",
    "AIGIT_AI_MODEL",
    "AIGIT_OPENAI_API_KEY",
    "OPENAI_API_KEY",
    "AIGIT_GEMINI_API_KEY",
    "GEMINI_API_KEY",
    "AIGIT_ANTHROPIC_API_KEY",
    "ANTHROPIC_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yaml"))
    assert config["ai"]["provider"] == "openai"
    assert config["ai"]["model"] == "gpt-4o-mini"
    assert config["ai"]["temperature"] == 0.7
    assert config["ai"]["max_tokens"] == 2000
    assert config["git"]["commit_template"] == "conventional"
    assert config["review"]["exclude_patterns"] == ["*.lock", "vendor/"]


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    load_config(config_path=str(path))
    assert path.exists()
    document = yaml.safe_load(path.read_text())
    assert document["ai"]["provider"] == "openai"
    assert document["review"]["focus_areas"] == DEFAULT_CONFIG["review"]["focus_areas"]


def test_default_path_follows_xdg_config_home(tmp_path):
    assert default_config_path() == tmp_path / "xdg" / "aigit" / "config.yaml"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  provider: gemini\n  model: gemini-1.5-pro\ngit:\n  auto_stage: true\n")
    config = load_config(config_path=str(cfg))
    assert config["ai"]["provider"] == "gemini"
    assert config["ai"]["model"] == "gemini-1.5-pro"
    assert config["git"]["auto_stage"] is True
    # Sibling keys missing from the file keep their defaults.
    assert config["ai"]["max_tokens"] == 2000
    assert config["git"]["default_branch"] == "main"


def test_invalid_yaml_is_a_configuration_error(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai: [unclosed\n")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_config(config_path=str(cfg))


def test_empty_section_keeps_defaults(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  provider: openai\ngit:\n  # auto_stage: true\n")
    config = load_config(config_path=str(cfg))
    assert config["git"]["default_branch"] == "main"
    assert config["git"]["auto_stage"] is False


def test_top_level_list_is_a_configuration_error(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("- ai\n- git\n")
    with pytest.raises(ConfigurationError, match="expected a mapping"):
        load_config(config_path=str(cfg))


def test_scalar_section_is_a_configuration_error(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("git: yes\n")
    with pytest.raises(ConfigurationError, match="section 'git' must be a mapping"):
        load_config(config_path=str(cfg))


def test_provider_and_model_env_vars(tmp_path, monkeypatch):
    monkeypatch.setenv("AIGIT_AI_PROVIDER", "anthropic")
    monkeypatch.setenv("AIGIT_AI_MODEL", "claude-x")
    config = load_config(config_path=str(tmp_path / "config.yaml"))
    assert config["ai"]["provider"] == "anthropic"
    assert config["ai"]["model"] == "claude-x"


def test_prefixed_api_key_env_var_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "plain-key")
    monkeypatch.setenv("AIGIT_OPENAI_API_KEY", "prefixed-key")
    config = load_config(config_path=str(tmp_path / "config.yaml"))
    assert config["ai"]["api_key"] == "prefixed-key"


def test_api_key_env_var_matches_provider(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  provider: gemini\n")
    monkeypatch.setenv("OPENAI_API_KEY", "wrong-provider")
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    config = load_config(config_path=str(cfg))
    assert config["ai"]["api_key"] == "g-key"


def test_env_var_beats_file_api_key(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  api_key: file-key\n")
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert load_config(config_path=str(cfg))["ai"]["api_key"] == "env-key"


@pytest.mark.parametrize("value", ["", "${OPENAI_API_KEY}", "your-openai-api-key-here", "your-gemini-api-key-here"])
def test_placeholder_api_keys_are_treated_as_unset(tmp_path, value):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(yaml.safe_dump({"ai": {"api_key": value}}))
    assert is_placeholder(value)
    assert load_config(config_path=str(cfg))["ai"]["api_key"] == ""


def test_real_key_is_not_a_placeholder():
    assert not is_placeholder("sk-proj-abc123")


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  model: gpt-4o\n")
    config = load_config(config_path=str(cfg), cli_overrides={"ai.model": "gpt-4o-mini"})
    assert config["ai"]["model"] == "gpt-4o-mini"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  model: gpt-4o\n")
    config = load_config(config_path=str(cfg), cli_overrides={"ai.model": None})
    assert config["ai"]["model"] == "gpt-4o"


def test_lists_are_not_shared_reference(tmp_path):
    """Mutating one config's lists must not affect another or the defaults."""
    config_a = load_config(config_path=str(tmp_path / "config.yaml"))
    config_b = load_config(config_path=str(tmp_path / "config.yaml"))
    config_a["review"]["exclude_patterns"].append("migrations/")
    assert config_b["review"]["exclude_patterns"] == ["*.lock", "vendor/"]
    assert DEFAULT_CONFIG["review"]["exclude_patterns"] == ["*.lock", "vendor/"]


def test_provider_config_is_typed(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("ai:\n  provider: Gemini\n  api_key: real-key\n  temperature: '0.2'\n  max_tokens: '100'\n")
    settings = provider_config(load_config(config_path=str(cfg)))
    assert settings.provider == "gemini"
    assert settings.api_key == "real-key"
    assert settings.temperature == 0.2
    assert settings.max_tokens == 100


class TestGetSetValue:
    def test_get_nested_value(self):
        assert get_value(DEFAULT_CONFIG, "git.default_branch") == "main"

    def test_get_missing_key(self):
        with pytest.raises(ConfigurationError, match="not found"):
            get_value(DEFAULT_CONFIG, "ai.nope")

    def test_set_fills_an_empty_section(self):
        config = {"git": None}
        set_value(config, "git.auto_stage", "true")
        assert config == {"git": {"auto_stage": True}}

    def test_set_parses_non_string_values(self):
        config = {}
        assert set_value(config, "ai.temperature", "0.2") == 0.2
        assert set_value(config, "git.auto_stage", "true") is True
        assert set_value(config, "review.focus_areas", "[security]") == ["security"]
        assert config["git"]["auto_stage"] is True

    def test_set_keeps_string_values_verbatim(self):
        config = {}
        assert set_value(config, "ai.api_key", "12345") == "12345"
        assert set_value(config, "git.default_branch", "true") == "true"

    def test_set_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration key"):
            set_value({}, "ai.temprature", "1")

    def test_set_and_save_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        document = read_config_file(str(path))
        set_value(document, "ai.provider", "gemini")
        save_config(document, str(path))
        assert load_config(config_path=str(path))["ai"]["provider"] == "gemini"


def test_flatten_uses_dotted_keys():
    items = dict(flatten({"ai": {"provider": "openai", "nested": {"x": 1}}, "top": True}))
    assert items == {"ai.provider": "openai", "ai.nested.x": 1, "top": True}
