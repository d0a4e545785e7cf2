"""Tests for AIClientFactory client construction."""
import pytest
from unittest.mock import patch, MagicMock

from armpal_api.ai.client_factory import (
    AIClientFactory,
    AIRequestContext,
    DEFAULT_TIMEOUT,
    _HELICONE_ANTHROPIC_BASE_URL,
    _HELICONE_OPENAI_BASE_URL,
)


class TestOpenAIClientCreation:
    """Test OpenAI client creation with various configurations."""

    def test_creates_direct_client_when_helicone_disabled(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = "sk-test-key"
            mock_settings.HELICONE_ENABLED = False

            mock_openai_class = MagicMock()
            with patch("openai.OpenAI", mock_openai_class):
                AIClientFactory.create_openai_client()

            call_kwargs = mock_openai_class.call_args[1]
            assert call_kwargs["api_key"] == "sk-test-key"
            assert "base_url" not in call_kwargs
            assert "default_headers" not in call_kwargs

    def test_sdk_retries_disabled(self):
        """Completions are sent at most once."""
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = "sk-test-key"
            mock_settings.HELICONE_ENABLED = False

            mock_openai_class = MagicMock()
            with patch("openai.OpenAI", mock_openai_class):
                AIClientFactory.create_openai_client()

            assert mock_openai_class.call_args[1]["max_retries"] == 0

    def test_creates_proxied_client_when_helicone_enabled(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = "sk-test-key"
            mock_settings.HELICONE_ENABLED = True
            mock_settings.HELICONE_API_KEY = "sk-helicone-key"
            mock_settings.ENVIRONMENT = "production"

            mock_openai_class = MagicMock()
            with patch("openai.OpenAI", mock_openai_class):
                AIClientFactory.create_openai_client()

            call_kwargs = mock_openai_class.call_args[1]
            assert call_kwargs["base_url"] == _HELICONE_OPENAI_BASE_URL
            assert call_kwargs["default_headers"]["Helicone-Auth"] == "Bearer sk-helicone-key"

    def test_includes_context_headers_in_proxied_client(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = "sk-test-key"
            mock_settings.HELICONE_ENABLED = True
            mock_settings.HELICONE_API_KEY = "sk-helicone-key"
            mock_settings.ENVIRONMENT = "staging"

            context = AIRequestContext(user_id="user_123", feature_name="workout_converter")

            mock_openai_class = MagicMock()
            with patch("openai.OpenAI", mock_openai_class):
                AIClientFactory.create_openai_client(context=context)

            headers = mock_openai_class.call_args[1]["default_headers"]
            assert headers["Helicone-User-Id"] == "user_123"
            assert headers["Helicone-Property-Feature"] == "workout_converter"
            assert headers["Helicone-Property-Environment"] == "staging"

    def test_helicone_without_key_falls_back_to_direct(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = "sk-test-key"
            mock_settings.HELICONE_ENABLED = True
            mock_settings.HELICONE_API_KEY = None

            mock_openai_class = MagicMock()
            with patch("openai.OpenAI", mock_openai_class):
                AIClientFactory.create_openai_client()

            assert "base_url" not in mock_openai_class.call_args[1]

    def test_uses_default_timeout_when_not_specified(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = "sk-test-key"
            mock_settings.HELICONE_ENABLED = False

            mock_openai_class = MagicMock()
            with patch("openai.OpenAI", mock_openai_class):
                AIClientFactory.create_openai_client()

            assert mock_openai_class.call_args[1]["timeout"] == DEFAULT_TIMEOUT

    @pytest.mark.parametrize("key", [None, ""])
    def test_raises_value_error_without_api_key(self, key):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.OPENAI_API_KEY = key

            with pytest.raises(ValueError, match="OpenAI API key not configured"):
                AIClientFactory.create_openai_client()


class TestAnthropicClientCreation:

    def test_creates_proxied_client_when_helicone_enabled(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.ANTHROPIC_API_KEY = "sk-ant-test"
            mock_settings.HELICONE_ENABLED = True
            mock_settings.HELICONE_API_KEY = "sk-helicone-key"
            mock_settings.ENVIRONMENT = "development"

            mock_anthropic_class = MagicMock()
            with patch("anthropic.Anthropic", mock_anthropic_class):
                AIClientFactory.create_anthropic_client()

            call_kwargs = mock_anthropic_class.call_args[1]
            assert call_kwargs["base_url"] == _HELICONE_ANTHROPIC_BASE_URL
            assert call_kwargs["max_retries"] == 0

    def test_raises_value_error_without_api_key(self):
        with patch("armpal_api.ai.client_factory.settings") as mock_settings:
            mock_settings.ANTHROPIC_API_KEY = None

            with pytest.raises(ValueError, match="Anthropic API key not configured"):
                AIClientFactory.create_anthropic_client()
