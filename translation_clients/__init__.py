"""
Translation Clients Package
MD Translator - translation service collaborators

Usage:
    from translation_clients import create_client
    from config.settings import settings

    async with create_client(settings) as client:
        translated = await client.translate("## Hello\\n\\nWorld")
"""

from typing import Optional

import httpx

from .base import (
    BaseTranslationClient,
    TranslationConfig,
    TranslationServiceError,
)
from .openai_client import OpenAICompatibleClient, strip_wrapping_fence


def create_client(settings, http_client: Optional[httpx.AsyncClient] = None) -> OpenAICompatibleClient:
    """
    Build the translation client described by settings.

    Raises:
        ValueError: No API key configured.
    """
    config = TranslationConfig(
        api_key=settings.get_api_key(),
        model=settings.model,
        base_url=settings.api_base_url,
        source_lang=settings.source_lang,
        target_lang=settings.target_lang,
        temperature=settings.temperature,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        retry_delay=settings.retry_delay,
    )
    return OpenAICompatibleClient(config, http_client=http_client)


__all__ = [
    "BaseTranslationClient",
    "TranslationConfig",
    "TranslationServiceError",
    "OpenAICompatibleClient",
    "strip_wrapping_fence",
    "create_client",
]

__version__ = "1.0.0"
