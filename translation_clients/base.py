"""
Base Translation Client - Abstract Interface
MD Translator - translation service collaborators
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from md_translator.exceptions import MDTranslatorError


class TranslationServiceError(MDTranslatorError):
    """The translation service did not return a usable translation"""

    def __init__(self, message: str, status_code: Optional[int] = None, attempts: int = 0):
        super().__init__(message)
        self.status_code = status_code
        self.attempts = attempts


@dataclass
class TranslationConfig:
    """Client configuration"""
    api_key: str
    model: str
    base_url: str
    source_lang: str = "en"
    target_lang: str = "pt-BR"
    temperature: float = 0.3
    timeout: float = 120.0
    max_retries: int = 3
    retry_delay: float = 2.0


class BaseTranslationClient(ABC):
    """
    A translate(text) -> text collaborator backed by an HTTP service.

    Use as an async context manager so the underlying httpx.AsyncClient is
    opened once and shared by all concurrent chunk translations:

        async with create_client(settings) as client:
            result = await pipeline.run(document, client.translate)
    """

    def __init__(self, config: TranslationConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} used outside 'async with'")
        return self._client

    @abstractmethod
    async def translate(self, text: str) -> str:
        """
        Translate one chunk of markdown.

        Raises:
            TranslationServiceError: The service failed after all retries.
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.config.model}>"
