from __future__ import annotations

from aigit_core.errors import ConfigurationError
from aigit_core.models import ProviderConfig
from aigit_core.providers.anthropic import AnthropicProvider
from aigit_core.providers.base import BaseProvider
from aigit_core.providers.gemini import GeminiProvider
from aigit_core.providers.openai import OpenAIProvider

PROVIDERS: dict[str, type[BaseProvider]] = {
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
    "anthropic": AnthropicProvider,
}


def get_provider(config: ProviderConfig) -> BaseProvider:
    """Instantiate the backend named by ``config.provider``."""
    provider_cls = PROVIDERS.get(config.provider)
    if provider_cls is None:
        raise ConfigurationError(
            f"Unsupported AI provider: {config.provider!r}. Supported providers: {', '.join(PROVIDERS)}"
        )
    return provider_cls(config)
