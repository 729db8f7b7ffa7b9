"""
Provider adapters exposing ``generate(system_prompt, user_prompt) -> str``.

Provider SDKs are optional: install the ``providers`` extra for the ones you use.
"""

import os
from typing import Any, Dict, Optional

# Optional provider SDK imports. These are only required if their provider is used.
try:
    from anthropic import Anthropic
except Exception:
    Anthropic = None
try:
    from openai import OpenAI
except Exception:
    OpenAI = None

from cosmo_ui.config import get_ai_config
from cosmo_ui.exceptions import (
    AIGenerationError,
    AIInvalidResponseError,
    AIOverloadedError,
    AIRateLimitError,
    AITimeoutError,
    ConfigurationError,
)
from cosmo_ui.setup_logging import get_logger

logger = get_logger(__name__)

# Clients and their configuration
CLIENTS: Dict[str, Dict[str, Any]] = {
    "openai": {
        "client_class": OpenAI,
        "api_key_env": "OPENAI_API_KEY",
    },
    "anthropic": {
        "client_class": Anthropic,
        "api_key_env": "ANTHROPIC_API_KEY",
    },
    "deepseek": {
        "client_class": OpenAI,
        "api_key_env": "DEEPSEEK_API_KEY",
        "base_url": "https://api.deepseek.com",
    },
}

# Model aliases -> (client type, provider model name)
MODELS = {
    "gpt-4o-mini": ("openai", "gpt-4o-mini"),
    "gpt-4.1-mini": ("openai", "gpt-4.1-mini-2025-04-14"),
    "gpt-4.1": ("openai", "gpt-4.1-2025-04-14"),
    "claude-3-5-haiku": ("anthropic", "claude-3-5-haiku-20241022"),
    "claude-sonnet-4": ("anthropic", "claude-sonnet-4-20250514"),
    "claude-sonnet-4-5": ("anthropic", "claude-sonnet-4-5-20250929"),
    "deepseek-chat": ("deepseek", "deepseek-chat"),
}


def _status_code(e: Exception) -> Optional[int]:
    if hasattr(e, "response") and hasattr(e.response, "status_code"):
        return e.response.status_code
    if hasattr(e, "status_code"):
        return e.status_code
    error_str = str(e)
    if "Error code:" in error_str:
        try:
            # Extract error code from string like "Error code: 529"
            return int(error_str.split("Error code:")[1].split()[0])
        except (IndexError, ValueError):
            return None
    return None


def map_provider_error(e: Exception, model: str) -> AIGenerationError:
    """Translate an SDK exception into the engine's exception taxonomy."""
    error_code = _status_code(e)
    context = {'model': model}
    error_str = str(e)

    if error_code == 529 or "overloaded" in error_str.lower():
        logger.warning(f"AI service overloaded ({error_code}): {error_str}")
        return AIOverloadedError("AI service is temporarily overloaded", cause=e, context=context)
    if error_code == 429:
        logger.warning(f"Rate limit exceeded (429): {error_str}")
        return AIRateLimitError("Rate limit exceeded", cause=e, context=context)
    if error_code in (502, 504) or "timeout" in type(e).__name__.lower():
        logger.warning(f"AI service timeout ({error_code}): {error_str}")
        return AITimeoutError(f"AI service timeout (HTTP {error_code})", cause=e, context=context)
    return AIGenerationError("AI provider call failed", cause=e, context=context)


class ProviderGenerator:
    """Base adapter: one configured SDK client plus sampling parameters."""

    client_type = ""

    def __init__(
        self,
        model: str,
        client: Any = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        ai_config = get_ai_config()
        self.model = model
        self.temperature = ai_config.temperature if temperature is None else temperature
        self.max_tokens = ai_config.max_tokens if max_tokens is None else max_tokens
        self.client = client if client is not None else self._build_client(api_key, base_url)

    def _build_client(self, api_key: Optional[str], base_url: Optional[str]) -> Any:
        client_config = CLIENTS[self.client_type]
        client_class = client_config["client_class"]
        if client_class is None:
            raise ConfigurationError(
                f"The '{self.client_type}' provider SDK is not installed "
                f"(pip install cosmo-ui-engine[providers])"
            )

        client_kwargs = {}
        key = api_key or os.getenv(client_config["api_key_env"])
        if key:
            client_kwargs["api_key"] = key
        if base_url is not None:
            client_kwargs["base_url"] = base_url
        elif "base_url" in client_config:
            client_kwargs["base_url"] = client_config["base_url"]
        return client_class(**client_kwargs)

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        try:
            text = self._complete(system_prompt, user_prompt)
        except AIGenerationError:
            raise
        except Exception as e:
            raise map_provider_error(e, self.model) from e

        if not text:
            raise AIInvalidResponseError(f"Empty response from {self.model}", raw_text=text)
        return text

    __call__ = generate

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        raise NotImplementedError


class OpenAIGenerator(ProviderGenerator):
    client_type = "openai"

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""


class DeepSeekGenerator(OpenAIGenerator):
    client_type = "deepseek"


class AnthropicGenerator(ProviderGenerator):
    client_type = "anthropic"

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )


GENERATORS = {
    "openai": OpenAIGenerator,
    "anthropic": AnthropicGenerator,
    "deepseek": DeepSeekGenerator,
}


def get_generator(provider: Optional[str] = None, model: Optional[str] = None, **kwargs) -> ProviderGenerator:
    """
    Build a provider adapter. ``model`` may be an alias (key in MODELS) or the
    provider's own model name; the provider defaults to the alias's client type,
    then to the configured AI_PROVIDER.
    """
    ai_config = get_ai_config()
    model = model or ai_config.model

    if model in MODELS:
        alias_provider, model = MODELS[model]
        provider = provider or alias_provider
    provider = (provider or ai_config.provider).lower()

    if provider not in GENERATORS:
        raise ConfigurationError(
            f"Provider {provider!r} not supported",
            context={'available': sorted(GENERATORS)},
        )
    return GENERATORS[provider](model, **kwargs)
