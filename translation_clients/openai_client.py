"""
OpenAI-compatible chat completions client
MD Translator - translation service collaborators

Works with any endpoint that speaks the /chat/completions protocol
(OpenAI, Azure proxies, local gateways). Rate limits (429) and transport
errors are retried with exponential backoff and jitter; other HTTP errors
fail immediately.
"""

import asyncio
import random
from typing import Dict, List, Optional

import httpx

from config.constants import ANCHOR_PREFIX, ANCHOR_SUFFIX, RATE_LIMIT_MAX_DELAY
from config.logging_config import get_logger

from .base import BaseTranslationClient, TranslationServiceError

logger = get_logger(__name__)


SYSTEM_PROMPT = """You translate technical markdown documentation from {source_lang} to {target_lang}.

Rules:
- Keep every placeholder of the form {anchor_example} exactly as written, in the same place. Never translate, renumber, remove or add placeholders.
- Keep the markdown structure: the same headers with the same number of #, lists, tables, blank lines and indentation.
- Keep the number of lines of each text block close to the original.
- Translate the visible text of links, but never change URLs or the reference names in [text][ref] and [ref]: url definitions.
- Leave inline code, commands, file names and HTML attributes unchanged.
- Keep well-known technical terms (widget, bundle, asset, flag) in English.
- Reply with the translated markdown only, without explanations and without wrapping it in a code fence."""


def strip_wrapping_fence(translated: str, source: str) -> str:
    """
    Remove a ```markdown fence the model wrapped around its whole answer.

    Left alone when the source itself was wrapped the same way.
    """
    stripped = translated.strip()
    if not stripped.startswith("```") or source.lstrip().startswith("```"):
        return translated

    lines = stripped.split("\n")
    if len(lines) >= 2 and lines[-1].strip() == "```":
        return "\n".join(lines[1:-1])
    return translated


class OpenAICompatibleClient(BaseTranslationClient):
    """
    Chat completions translation client.

    Attributes:
        config: TranslationConfig with endpoint, model and retry policy.
        calls: Number of successful translate() calls.
    """

    CHAT_PATH = "/chat/completions"

    def __init__(self, config, http_client: Optional[httpx.AsyncClient] = None):
        super().__init__(config, http_client)
        self.system_prompt = SYSTEM_PROMPT.format(
            source_lang=config.source_lang,
            target_lang=config.target_lang,
            anchor_example=f"{ANCHOR_PREFIX}0{ANCHOR_SUFFIX}",
        )
        self.calls = 0

    @property
    def endpoint(self) -> str:
        return self.config.base_url.rstrip("/") + self.CHAT_PATH

    def build_messages(self, text: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": text},
        ]

    async def _call_api(self, text: str) -> str:
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        payload = {
            "model": self.config.model,
            "messages": self.build_messages(text),
            "temperature": self.config.temperature,
        }

        response = await self.client.post(
            self.endpoint,
            headers=headers,
            json=payload,
            timeout=self.config.timeout
        )
        response.raise_for_status()

        data = response.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise TranslationServiceError(f"Unexpected response shape: {str(data)[:200]}") from e
        if content is None:
            raise TranslationServiceError("Empty completion returned")
        return content

    @staticmethod
    def _error_detail(error: httpx.HTTPStatusError) -> str:
        detail = f"HTTP {error.response.status_code}"
        try:
            body = error.response.json()
            detail += f": {body.get('error', {}).get('message', str(body))}"
        except ValueError:
            detail += f": {error.response.text[:200]}"
        return detail

    async def translate(self, text: str) -> str:
        """
        Translate one chunk, retrying rate limits and transport errors.

        Blank chunks are returned as they are without calling the service.
        """
        if not text.strip():
            return text

        max_retries = self.config.max_retries
        attempt = 0
        last_error = ""

        while True:
            attempt += 1
            try:
                result = await self._call_api(text)
                self.calls += 1
                logger.debug(f" Translated chunk: {len(text)} -> {len(result)} chars (attempt {attempt})")
                return strip_wrapping_fence(result, text)

            except httpx.HTTPStatusError as e:
                last_error = self._error_detail(e)
                if e.response.status_code != 429:
                    logger.error(f" Translation API error: {last_error}")
                    raise TranslationServiceError(
                        last_error, status_code=e.response.status_code, attempts=attempt
                    ) from e
                if attempt > max_retries:
                    break
                # Longer backoff for rate limiting
                base_delay = min(self.config.retry_delay * 2 ** (attempt + 1), RATE_LIMIT_MAX_DELAY)
                delay = base_delay + random.uniform(0, base_delay * 0.3)
                logger.warning(f" Rate limited (429), retry {attempt}/{max_retries} in {delay:.1f}s")

            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
                if attempt > max_retries:
                    break
                base_delay = min(self.config.retry_delay * 2 ** (attempt - 1), 10)
                delay = base_delay + random.uniform(0, base_delay * 0.1)  # 10% jitter
                logger.warning(f" Transport error ({last_error}), retry {attempt}/{max_retries} in {delay:.1f}s")

            await asyncio.sleep(delay)

        logger.error(f" Translation failed after {attempt} attempts: {last_error}")
        raise TranslationServiceError(
            f"Translation failed after {attempt} attempts: {last_error}", attempts=attempt
        )
