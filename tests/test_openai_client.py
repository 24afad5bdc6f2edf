"""Tests for meetingintel.openai_client — OpenAIClient with mocked HTTP calls.

All requests to the chat-completions API are mocked so no network is needed.
"""
from __future__ import annotations

from unittest.mock import patch

import pytest
import requests

from meetingintel.errors import ProviderError
from meetingintel.llm_base import LLMClient
from meetingintel.openai_client import OpenAIClient, _first_choice_content
from tests.conftest import make_response


# =====================================================================
# _first_choice_content
# =====================================================================

class TestFirstChoiceContent:

    def test_well_formed(self):
        data = {"choices": [{"message": {"content": "# Report"}}]}
        assert _first_choice_content(data) == "# Report"

    @pytest.mark.parametrize("data", [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": 42}}]},
        {"choices": None},
        [],
        None,
    ])
    def test_unexpected_shapes(self, data):
        assert _first_choice_content(data) is None


# =====================================================================
# OpenAIClient.__init__
# =====================================================================

class TestOpenAIClientInit:

    def test_requires_api_key(self):
        with pytest.raises(ValueError, match="api_key"):
            OpenAIClient(api_key="")

    def test_defaults(self):
        client = OpenAIClient(api_key="sk-test")
        assert isinstance(client, LLMClient)
        assert client.default_model == "gpt-4o-mini"
        assert client.endpoint == "https://api.openai.com/v1/chat/completions"
        assert client.timeout > 0

    def test_custom_base_url_trailing_slash_stripped(self):
        client = OpenAIClient(api_key="k", base_url="http://proxy:8080/v1/")
        assert client.endpoint == "http://proxy:8080/v1/chat/completions"


# =====================================================================
# OpenAIClient.complete
# =====================================================================

class TestOpenAIComplete:

    @patch("meetingintel.openai_client.requests.post")
    def test_request_shape(self, mock_post):
        mock_post.return_value = make_response(200, {"choices": [{"message": {"content": "ok"}}]})

        client = OpenAIClient(api_key="sk-test", timeout=12)
        client.complete("SYS", "USER", max_tokens=4000, temperature=0.2)

        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.openai.com/v1/chat/completions"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert kwargs["timeout"] == 12
        body = kwargs["json"]
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"] == [
            {"role": "system", "content": "SYS"},
            {"role": "user", "content": "USER"},
        ]
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 4000

    @patch("meetingintel.openai_client.requests.post")
    def test_success_returns_content_and_usage(self, mock_post):
        mock_post.return_value = make_response(200, {
            "model": "gpt-4o-mini-2024-07-18",
            "choices": [{"message": {"role": "assistant", "content": "# Report"}}],
            "usage": {"prompt_tokens": 100, "completion_tokens": 20, "total_tokens": 120},
        })

        completion = OpenAIClient(api_key="k").complete("s", "u")
        assert completion.content == "# Report"
        assert completion.model == "gpt-4o-mini-2024-07-18"
        assert completion.usage.input_tokens == 100
        assert completion.usage.output_tokens == 20
        assert completion.usage.total_tokens == 120

    @patch("meetingintel.openai_client.requests.post")
    def test_unexpected_shape_gives_none_content(self, mock_post):
        mock_post.return_value = make_response(200, {"object": "chat.completion"})
        completion = OpenAIClient(api_key="k").complete("s", "u")
        assert completion.content is None
        assert completion.usage.total_tokens == 0

    @pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
    @patch("meetingintel.openai_client.requests.post")
    def test_non_2xx_raises_provider_error(self, mock_post, status):
        mock_post.return_value = make_response(status, text='{"error": {"message": "nope"}}')

        with pytest.raises(ProviderError) as excinfo:
            OpenAIClient(api_key="k").complete("s", "u")
        assert excinfo.value.provider_status == status
        assert "nope" in excinfo.value.body
        assert excinfo.value.public_message == "Error al procesar con OpenAI"

    @patch("meetingintel.openai_client.requests.post")
    def test_single_attempt_on_failure(self, mock_post):
        mock_post.return_value = make_response(503, text="unavailable")
        with pytest.raises(ProviderError):
            OpenAIClient(api_key="k").complete("s", "u")
        assert mock_post.call_count == 1

    @patch("meetingintel.openai_client.requests.post")
    def test_network_errors_propagate(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout("read timed out")
        with pytest.raises(requests.exceptions.Timeout):
            OpenAIClient(api_key="k").complete("s", "u")
