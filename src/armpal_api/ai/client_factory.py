"""AI client factory with Helicone integration support."""
import logging
from dataclasses import dataclass, field
from typing import Any

from armpal_api.config import settings


logger = logging.getLogger(__name__)

# Helicone proxy URLs
_HELICONE_OPENAI_BASE_URL = "https://oai.helicone.ai/v1"
_HELICONE_ANTHROPIC_BASE_URL = "https://anthropic.helicone.ai"

DEFAULT_TIMEOUT = 60.0


@dataclass
class AIRequestContext:
    """Context for AI requests, used for tracking and observability."""

    user_id: str | None = None
    feature_name: str | None = None
    request_id: str | None = None
    custom_properties: dict[str, str] = field(default_factory=dict)

    def to_tracking_headers(self) -> dict[str, str]:
        """Convert context to Helicone tracking headers."""
        headers: dict[str, str] = {}

        if self.user_id:
            headers["Helicone-User-Id"] = self.user_id

        if self.feature_name:
            headers["Helicone-Property-Feature"] = self.feature_name

        if self.request_id:
            headers["Helicone-Request-Id"] = self.request_id

        headers["Helicone-Property-Environment"] = settings.ENVIRONMENT

        for key, value in self.custom_properties.items():
            header_key = f"Helicone-Property-{key.replace('_', '-').title()}"
            headers[header_key] = str(value)

        return headers


def _helicone_headers(context: AIRequestContext | None) -> dict[str, str] | None:
    """Default headers for a Helicone-proxied client, or None to go direct."""
    if not settings.HELICONE_ENABLED:
        return None
    if not settings.HELICONE_API_KEY:
        logger.warning(
            "HELICONE_ENABLED=true but HELICONE_API_KEY not set. "
            "Falling back to direct provider calls."
        )
        return None

    headers = {"Helicone-Auth": f"Bearer {settings.HELICONE_API_KEY}"}
    if context:
        headers.update(context.to_tracking_headers())
    return headers


class AIClientFactory:
    """Factory for creating AI clients with optional Helicone integration.

    Clients are created without SDK-level retries: every completion issued by
    this service is sent at most once.
    """

    @staticmethod
    def create_openai_client(
        context: AIRequestContext | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Any:
        """
        Create an OpenAI client, optionally proxied through Helicone.

        Raises:
            ValueError: If OPENAI_API_KEY is not configured
        """
        import openai

        api_key = settings.OPENAI_API_KEY
        if not api_key:
            raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout,
            "max_retries": 0,
        }

        default_headers = _helicone_headers(context)
        if default_headers:
            client_kwargs["base_url"] = _HELICONE_OPENAI_BASE_URL
            client_kwargs["default_headers"] = default_headers
            logger.debug("Creating OpenAI client with Helicone proxy")
        else:
            logger.debug("Creating OpenAI client (direct)")

        return openai.OpenAI(**client_kwargs)

    @staticmethod
    def create_anthropic_client(
        context: AIRequestContext | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Any:
        """
        Create an Anthropic client, optionally proxied through Helicone.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not configured
        """
        from anthropic import Anthropic

        api_key = settings.ANTHROPIC_API_KEY
        if not api_key:
            raise ValueError("Anthropic API key not configured. Set ANTHROPIC_API_KEY environment variable.")

        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout,
            "max_retries": 0,
        }

        default_headers = _helicone_headers(context)
        if default_headers:
            client_kwargs["base_url"] = _HELICONE_ANTHROPIC_BASE_URL
            client_kwargs["default_headers"] = default_headers
            logger.debug("Creating Anthropic client with Helicone proxy")
        else:
            logger.debug("Creating Anthropic client (direct)")

        return Anthropic(**client_kwargs)
