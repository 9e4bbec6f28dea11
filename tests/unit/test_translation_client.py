"""
Unit tests for translation_clients - OpenAI-compatible HTTP client
"""
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from translation_clients import (
    OpenAICompatibleClient,
    TranslationConfig,
    TranslationServiceError,
    create_client,
    strip_wrapping_fence,
)


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler, **overrides):
    config = TranslationConfig(
        api_key="test_key",
        model="test-model",
        base_url="https://translate.test/v1/",
        retry_delay=0,
        **overrides,
    )
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAICompatibleClient(config, http_client=http_client)


class TestStripWrappingFence:
    """Test removal of fences the model adds around its answer."""

    def test_wrapped_answer(self):
        assert strip_wrapping_fence("```markdown\n# Olá\n\nTexto\n```", "# Hello\n\nText") == "# Olá\n\nTexto"

    def test_unwrapped_answer_untouched(self):
        assert strip_wrapping_fence("# Olá", "# Hello") == "# Olá"

    def test_source_starting_with_fence_untouched(self):
        text = "```\ncode\n```"
        assert strip_wrapping_fence(text, text) == text


class TestOpenAICompatibleClient:
    """Test requests, retries and errors."""

    @pytest.mark.asyncio
    async def test_translate_success(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion("Olá ⟪CODE_0⟫"))

        async with make_client(handler) as client:
            result = await client.translate("Hello ⟪CODE_0⟫")

        assert result == "Olá ⟪CODE_0⟫"
        assert client.calls == 1

        request = requests[0]
        assert str(request.url) == "https://translate.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test_key"
        payload = json.loads(request.content)
        assert payload["model"] == "test-model"
        assert payload["messages"][0]["role"] == "system"
        assert "⟪CODE_0⟫" in payload["messages"][0]["content"]
        assert payload["messages"][1] == {"role": "user", "content": "Hello ⟪CODE_0⟫"}

    @pytest.mark.asyncio
    async def test_blank_text_not_sent(self):
        handler = AsyncMock()
        async with make_client(handler) as client:
            assert await client.translate("\n\n") == "\n\n"
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_rate_limit_retried(self):
        responses = [
            httpx.Response(429, json={"error": {"message": "slow down"}}),
            httpx.Response(200, json=completion("ok")),
        ]

        def handler(request):
            return responses.pop(0)

        with patch("translation_clients.openai_client.asyncio.sleep", new=AsyncMock()) as sleep:
            async with make_client(handler) as client:
                assert await client.translate("text") == "ok"

        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transport_error_retried_then_fails(self):
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            raise httpx.ConnectError("connection refused", request=request)

        with patch("translation_clients.openai_client.asyncio.sleep", new=AsyncMock()):
            async with make_client(handler, max_retries=2) as client:
                with pytest.raises(TranslationServiceError) as exc_info:
                    await client.translate("text")

        assert attempts == 3
        assert exc_info.value.attempts == 3

    @pytest.mark.asyncio
    async def test_http_error_not_retried(self):
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            return httpx.Response(401, json={"error": {"message": "bad key"}})

        async with make_client(handler) as client:
            with pytest.raises(TranslationServiceError) as exc_info:
                await client.translate("text")

        assert attempts == 1
        assert exc_info.value.status_code == 401
        assert "bad key" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        async with make_client(handler) as client:
            with pytest.raises(TranslationServiceError):
                await client.translate("text")

    @pytest.mark.asyncio
    async def test_used_outside_context_manager(self):
        config = TranslationConfig(api_key="k", model="m", base_url="https://x")
        client = OpenAICompatibleClient(config)
        with pytest.raises(RuntimeError):
            await client.translate("text")

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        config = TranslationConfig(api_key="k", model="m", base_url="https://x")
        client = OpenAICompatibleClient(config)
        async with client:
            http_client = client.client
        assert http_client.is_closed


class TestCreateClient:
    """Test the settings factory."""

    def test_from_settings(self, test_settings):
        client = create_client(test_settings)
        assert isinstance(client, OpenAICompatibleClient)
        assert client.config.model == "test-model"
        assert client.endpoint == "https://translate.test/v1/chat/completions"
        assert test_settings.target_lang in client.system_prompt

    def test_missing_api_key(self, test_settings):
        with pytest.raises(ValueError):
            create_client(test_settings.model_copy(update={"api_key": ""}))
