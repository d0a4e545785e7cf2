"""Coach chat endpoints: POST /api/ai and POST /api/ai/chat."""
import uuid
from typing import Optional

from fastapi import APIRouter

from armpal_api.errors import InvalidRequestError, failure_label
from armpal_api.models import ChatRequest
from armpal_api.services.coach_chat_service import CoachChatService
from armpal_api.utils import scalar_to_text

router = APIRouter(prefix="/api/ai")

CHAT_FAILED = "AI failed"


@router.post("")
@router.post("/chat")
def coach_chat(payload: Optional[ChatRequest] = None):
    """Send one message to the ArmPal AI coach."""
    payload = payload or ChatRequest()
    request_id = uuid.uuid4().hex[:8]

    if not isinstance(payload.message, str) or not payload.message.strip():
        raise InvalidRequestError(error="Missing or invalid message")

    # The dashboard sends "personality"; older clients send "mode"
    mode = scalar_to_text(payload.mode) or scalar_to_text(payload.personality)

    with failure_label(CHAT_FAILED):
        reply = CoachChatService.reply(
            payload.message,
            mode=mode,
            user_id=scalar_to_text(payload.userId),
            request_id=request_id,
        )

    return {"reply": reply, "requestId": request_id}


@router.get("/chat")
def coach_chat_alive():
    return {"status": "AI endpoint alive"}
