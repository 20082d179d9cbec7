"""Glue between click commands and aigit_core providers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import click

from aigit_core.config import API_KEY_ENV_VARS, provider_config
from aigit_core.errors import AigitError, ConfigurationError
from aigit_core.providers.base import BaseProvider
from aigit_core.providers.factory import get_provider

logger = logging.getLogger(__name__)

_KEY_URLS = {
    "openai": "https://platform.openai.com/api-keys",
    "gemini": "https://makersuite.google.com/app/apikey",
    "anthropic": "https://console.anthropic.com/settings/keys",
}


def api_key_hint(provider: str) -> str:
    """Remediation text shown when the configured provider has no usable key."""
    lines = [f"{provider.capitalize()} API key not configured. Set it in one of these ways:"]
    step = 1
    for env_var in API_KEY_ENV_VARS.get(provider, ()):
        lines.append(f"  {step}. export {env_var}=your-key")
        step += 1
    if provider in API_KEY_ENV_VARS:
        lines.append(f"  {step}. add {API_KEY_ENV_VARS[provider][0]}=your-key to a .env file")
        step += 1
    lines.append(f"  {step}. aigit config set ai.api_key your-key")
    if provider in _KEY_URLS:
        lines.append(f"\nGet your API key from: {_KEY_URLS[provider]}")
    return "\n".join(lines)


@contextmanager
def open_provider(config: dict) -> Iterator[BaseProvider]:
    """Yield the configured provider and close it on exit, whatever happens."""
    settings = provider_config(config)
    if not settings.api_key and settings.provider in API_KEY_ENV_VARS:
        raise click.UsageError(api_key_hint(settings.provider))
    try:
        provider = get_provider(settings)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    logger.debug("Using %s provider with model %s", settings.provider, provider.model)
    try:
        yield provider
    finally:
        provider.close()


@contextmanager
def command_errors(action: str) -> Iterator[None]:
    """Turn aigit_core failures into one-line click errors prefixed with ``action``."""
    try:
        yield
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e
    except AigitError as e:
        raise click.ClickException(f"{action}: {e}") from e
