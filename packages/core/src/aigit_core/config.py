import copy
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from aigit_core.errors import ConfigurationError
from aigit_core.models import ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "ai": {
        "provider": "openai",  # openai | gemini | anthropic
        "api_key": "",
        "model": "gpt-4o-mini",
        "temperature": 0.7,
        "max_tokens": 2000,
    },
    "git": {
        "auto_stage": False,
        "default_branch": "main",
        "commit_template": "conventional",  # conventional | simple
    },
    "ui": {
        "theme": "dark",
        "emoji": True,
        "color": True,
        "spinner": "dots",
    },
    "review": {
        "include_patterns": [],  # empty = every file
        "exclude_patterns": ["*.lock", "vendor/"],
        "focus_areas": ["security", "performance", "best_practices"],
    },
}

# Checked in order; the first non-empty variable wins.
API_KEY_ENV_VARS: dict[str, tuple[str, ...]] = {
    "openai": ("AIGIT_OPENAI_API_KEY", "OPENAI_API_KEY"),
    "gemini": ("AIGIT_GEMINI_API_KEY", "GEMINI_API_KEY"),
    "anthropic": ("AIGIT_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
}

_DEFAULT_DOCUMENT = """\
# aigit configuration

# AI provider settings
ai:
  provider: openai # openai, gemini or anthropic
  api_key: "" # or set AIGIT_OPENAI_API_KEY / AIGIT_GEMINI_API_KEY / AIGIT_ANTHROPIC_API_KEY
  model: gpt-4o-mini # OpenAI: gpt-4o-mini, gpt-4o | Gemini: gemini-1.5-flash, gemini-1.5-pro
  temperature: 0.7
  max_tokens: 2000

# Git settings
git:
  auto_stage: false
  default_branch: main
  commit_template: conventional # or simple

# UI settings
ui:
  theme: dark
  emoji: true
  color: true
  spinner: dots

# Review settings
review:
  include_patterns: [] # e.g. ['*.py', 'src/']; empty reviews every file
  exclude_patterns:
    - '*.lock'
    - 'vendor/'
  focus_areas:
    - security
    - performance
    - best_practices
"""


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "aigit" / "config.yaml"


def is_placeholder(value: Optional[str]) -> bool:
    """True for values that only look like an API key (unset env interpolation, sample text)."""
    if not value:
        return True
    value = value.strip()
    return value.startswith("${") or (value.startswith("your-") and value.endswith("-here"))


def _deep_merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(base.get(key), dict):
            # A section with every key commented out loads as None.
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigurationError(f"Configuration section '{key}' must be a mapping")
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def create_default_config(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_DEFAULT_DOCUMENT)
    logger.info("Created default configuration at %s", path)


def read_config_file(config_path: Optional[str] = None) -> dict:
    """Return the raw YAML document, creating the default one if the file is missing."""
    path = Path(config_path) if config_path else default_config_path()
    if not path.exists():
        create_default_config(path)
    try:
        with open(path) as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(document, dict):
        raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping at the top level")
    return document


def load_config(config_path: Optional[str] = None, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. The YAML file (created with defaults if missing)
      3. Environment variables
      4. CLI argument overrides (dotted keys, None values ignored)
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    _deep_merge(config, read_config_file(config_path))

    ai = config["ai"]
    ai["provider"] = os.environ.get("AIGIT_AI_PROVIDER") or ai["provider"]
    ai["model"] = os.environ.get("AIGIT_AI_MODEL") or ai["model"]
    for env_var in API_KEY_ENV_VARS.get(ai["provider"], ()):
        if os.environ.get(env_var):
            ai["api_key"] = os.environ[env_var]
            break
    if is_placeholder(ai.get("api_key")):
        ai["api_key"] = ""

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                _assign(config, key, value)

    return config


def save_config(config: dict, config_path: Optional[str] = None) -> Path:
    path = Path(config_path) if config_path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config, default_flow_style=False, sort_keys=False))
    return path


def provider_config(config: dict) -> ProviderConfig:
    ai = config["ai"]
    return ProviderConfig(
        provider=str(ai.get("provider", "")).lower(),
        api_key=ai.get("api_key") or "",
        model=ai.get("model") or "",
        temperature=float(ai.get("temperature", 0.7)),
        max_tokens=int(ai.get("max_tokens", 2000)),
    )


def get_value(config: dict, key: str) -> Any:
    node: Any = config
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            raise ConfigurationError(f"Configuration key '{key}' not found")
        node = node[part]
    return node


def _assign(config: dict, key: str, value: Any) -> None:
    *parents, leaf = key.split(".")
    node = config
    for part in parents:
        if node.get(part) is None:
            node[part] = {}
        node = node[part]
        if not isinstance(node, dict):
            raise ConfigurationError(f"Configuration key '{key}' is not a section")
    node[leaf] = value


def set_value(config: dict, key: str, raw: str) -> Any:
    """Set a dotted key from its command-line string form and return the typed value.

    Only keys known to DEFAULT_CONFIG are accepted, so typos are reported
    instead of silently written to disk.
    """
    try:
        default = get_value(DEFAULT_CONFIG, key)
    except ConfigurationError:
        raise ConfigurationError(f"Unknown configuration key '{key}'") from None
    if isinstance(default, str):
        value: Any = raw
    else:
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        if value is None:
            value = ""
    _assign(config, key, value)
    return value


def flatten(config: dict, prefix: str = "") -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for key, value in config.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            items.extend(flatten(value, full_key))
        else:
            items.append((full_key, value))
    return items
