"""
Thin OpenAI client wrapper for the chat operations used by extraction.

Design goals:
- Azure OpenAI when an endpoint and key are configured (AsyncAzureOpenAI)
- Plain OpenAI otherwise (AsyncOpenAI)
- No retries here; callers decide how to surface failures
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from openai import AsyncAzureOpenAI, AsyncOpenAI

from .config import Settings, get_settings
from .exceptions import ConfigurationError


class AIClient:
    """
    Thin wrapper around the async OpenAI SDK clients.

    The model argument of ``chat`` is the deployment name on Azure and the
    model name on OpenAI; both default to configuration.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()

        if settings.azure_openai.is_configured:
            # Normalize endpoint: Azure SDK does not expect trailing slash
            endpoint = settings.azure_openai.endpoint.rstrip("/")
            self._client = AsyncAzureOpenAI(
                api_key=settings.azure_openai.api_key,
                api_version=settings.azure_openai.api_version,
                azure_endpoint=endpoint,
            )
            self._default_model = settings.azure_openai.deployment_name
            self.provider = "azure_openai"
        elif settings.openai.api_key:
            self._client = AsyncOpenAI(api_key=settings.openai.api_key)
            self._default_model = settings.openai.model
            self.provider = "openai"
        else:
            raise ConfigurationError(
                "No AI provider configured. Set AZURE_OPENAI_ENDPOINT and "
                "AZURE_OPENAI_API_KEY, or OPENAI_API_KEY."
            )

    @property
    def default_model(self) -> str:
        return self._default_model

    async def chat(
        self,
        messages: Sequence[Dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ):
        """
        Generic chat completion helper.

        Args:
            messages: OpenAI chat messages list.
            model: Optional model/deployment override.
            temperature: Sampling temperature.
            max_tokens: Optional max tokens for the response.
            **kwargs: Passed directly to the SDK (e.g. ``response_format``).
        """
        return await self._client.chat.completions.create(
            model=model or self._default_model,
            messages=list(messages),
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )


def get_ai_client() -> AIClient:
    """Get the default AI client for the application."""
    return AIClient()


__all__ = ["AIClient", "get_ai_client"]
