"""
Workout converter endpoint

POST /api/ai/workout-converter accepts
{ program_text, start_date, training_days, max_cards, userId }

1. The model parses program_text into dateless workout cards.
2. Cards are dated from start_date + training_days when both are given.
3. Returns { workouts: [...] }; the client persists them.
"""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from armpal_api.errors import CONVERSION_FAILED, MissingFieldsError, ProRequiredError, failure_label
from armpal_api.models import ConversionRequest
from armpal_api.services.date_assignment import assign_dates
from armpal_api.services.entitlement_service import EntitlementService
from armpal_api.services.program_interpreter import ProgramInterpreter, clamp_max_cards
from armpal_api.utils import scalar_to_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai")

PRO_REQUIRED_MESSAGE = "AI Workout Converter is a Pro feature."


@router.post("/workout-converter")
def workout_converter(payload: Optional[ConversionRequest] = None):
    """Convert a free-text program into (optionally dated) workout cards."""
    payload = payload or ConversionRequest()
    program_text = payload.program_text
    user_id = scalar_to_text(payload.userId)

    if not isinstance(program_text, str) or not program_text.strip() or not user_id:
        raise MissingFieldsError()

    with failure_label(CONVERSION_FAILED):
        if not EntitlementService.is_pro(user_id):
            raise ProRequiredError(PRO_REQUIRED_MESSAGE)

        card_limit = clamp_max_cards(payload.max_cards)
        cards = ProgramInterpreter.interpret(
            program_text,
            max_cards=card_limit,
            user_id=user_id,
        )
        workouts = assign_dates(cards, payload.start_date, payload.training_days, card_limit)

    dated = sum(1 for w in workouts if "assigned_date" in w)
    logger.info(f"Converted program for {user_id}: {len(workouts)} cards, {dated} dated")
    return JSONResponse({"workouts": workouts})
