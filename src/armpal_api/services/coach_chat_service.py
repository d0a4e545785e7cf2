"""ArmPal AI coach chat: one free-text reply per message."""
import logging
from typing import Optional

from armpal_api.config import settings
from armpal_api.errors import AINoResponseError
from armpal_api.services.llm_service import LLMService

logger = logging.getLogger(__name__)

FEATURE_NAME = "coach_chat"
DEFAULT_MODE = "coach"
NO_REPLY = "AI returned no message"


def build_chat_prompt(mode: Optional[str] = None) -> str:
    return f"You are ArmPal AI, a helpful fitness coach. Mode: {mode or DEFAULT_MODE}."


class CoachChatService:

    @staticmethod
    def reply(
        message: str,
        mode: Optional[str] = None,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """Answer one user message. Raises AINoResponseError when the reply is blank."""
        text = LLMService.complete_text(
            build_chat_prompt(mode),
            message,
            feature_name=FEATURE_NAME,
            user_id=user_id,
            request_id=request_id,
            temperature=0.7,
            model=settings.CHAT_MODEL,
        )
        if not text or not text.strip():
            raise AINoResponseError(error=NO_REPLY)
        logger.info(f"Coach reply {request_id}: {len(text)} chars")
        return text
