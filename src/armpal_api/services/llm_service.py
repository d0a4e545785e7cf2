"""LLM service: single completions against the configured provider."""
import logging
import re
from typing import Any, Dict, List, Optional, Union

from armpal_api.ai import AIClientFactory, AIRequestContext
from armpal_api.config import settings
from armpal_api.errors import AIUpstreamError, describe_exception


logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

# Anthropic requires max_tokens on every call
_ANTHROPIC_MAX_TOKENS = 8192


def _openai_user_content(user_prompt: str, image_url: Optional[str]) -> Union[str, List[Dict[str, Any]]]:
    if not image_url:
        return user_prompt
    return [
        {"type": "text", "text": user_prompt},
        {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
    ]


def _anthropic_user_content(user_prompt: str, image_url: Optional[str]) -> Union[str, List[Dict[str, Any]]]:
    if not image_url:
        return user_prompt
    return [
        {"type": "image", "source": {"type": "url", "url": image_url}},
        {"type": "text", "text": user_prompt},
    ]


class LLMService:
    """Issues exactly one completion per call. Failures are never retried."""

    @staticmethod
    def _complete_with_openai(
        system_prompt: str,
        user_prompt: str,
        context: AIRequestContext,
        temperature: Optional[float],
        max_tokens: Optional[int],
        json_mode: bool = True,
        image_url: Optional[str] = None,
        model: Optional[str] = None,
    ) -> Optional[str]:
        client = AIClientFactory.create_openai_client(context=context)
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        completion = client.chat.completions.create(
            model=model or settings.CONVERTER_MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": _openai_user_content(user_prompt, image_url)},
            ],
            **kwargs,
        )
        if not completion or not completion.choices:
            return None
        return completion.choices[0].message.content

    @staticmethod
    def _complete_with_anthropic(
        system_prompt: str,
        user_prompt: str,
        context: AIRequestContext,
        temperature: Optional[float],
        max_tokens: Optional[int],
        json_mode: bool = True,
        image_url: Optional[str] = None,
    ) -> Optional[str]:
        client = AIClientFactory.create_anthropic_client(context=context)
        kwargs = {}
        if temperature is not None:
            kwargs["temperature"] = temperature

        message = client.messages.create(
            model=settings.ANTHROPIC_MODEL,
            max_tokens=min(max_tokens or _ANTHROPIC_MAX_TOKENS, _ANTHROPIC_MAX_TOKENS),
            system=system_prompt,
            messages=[{"role": "user", "content": _anthropic_user_content(user_prompt, image_url)}],
            **kwargs,
        )
        if not message or not message.content:
            return None
        text = message.content[0].text
        if not json_mode:
            return text
        # Claude may wrap the object in markdown fences
        json_match = _JSON_OBJECT_RE.search(text or "")
        return json_match.group(0) if json_match else text

    @staticmethod
    def _complete(
        system_prompt: str,
        user_prompt: str,
        feature_name: str,
        user_id: Optional[str],
        request_id: Optional[str],
        temperature: Optional[float],
        max_tokens: Optional[int],
        json_mode: bool,
        image_url: Optional[str],
        model: Optional[str],
    ) -> Optional[str]:
        provider = settings.AI_PROVIDER
        context = AIRequestContext(
            user_id=user_id,
            feature_name=feature_name,
            request_id=request_id,
            custom_properties={"provider": provider},
        )
        try:
            if provider == "anthropic":
                return LLMService._complete_with_anthropic(
                    system_prompt, user_prompt, context, temperature, max_tokens,
                    json_mode=json_mode, image_url=image_url,
                )
            return LLMService._complete_with_openai(
                system_prompt, user_prompt, context, temperature, max_tokens,
                json_mode=json_mode, image_url=image_url, model=model,
            )
        except Exception as e:
            logger.error(f"{provider} completion for {feature_name} failed: {e!r}")
            raise AIUpstreamError(describe_exception(e)) from e

    @staticmethod
    def complete_json(
        system_prompt: str,
        user_prompt: str,
        feature_name: str,
        user_id: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        image_url: Optional[str] = None,
        model: Optional[str] = None,
    ) -> Optional[str]:
        """
        Request a JSON object from the configured provider.

        Args:
            system_prompt: Instruction turn
            user_prompt: User turn
            feature_name: Feature label for request tracking
            user_id: Optional user ID for tracking
            temperature: Sampling temperature, provider default when None
            max_tokens: Output token cap, provider default when None
            image_url: Optional image attached to the user turn
            model: OpenAI model override; CONVERTER_MODEL when None

        Returns:
            Raw response text, or None when the provider returned no content

        Raises:
            AIUpstreamError: client creation or the API call failed
        """
        return LLMService._complete(
            system_prompt, user_prompt, feature_name, user_id, None,
            temperature, max_tokens, True, image_url, model,
        )

    @staticmethod
    def complete_text(
        system_prompt: str,
        user_prompt: str,
        feature_name: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
    ) -> Optional[str]:
        """Request a free-text reply. Same single-call and error rules as complete_json."""
        return LLMService._complete(
            system_prompt, user_prompt, feature_name, user_id, request_id,
            temperature, None, False, None, model,
        )
