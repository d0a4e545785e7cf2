"""Program interpreter: free-text training program -> dateless workout cards.

One model completion per call, no retries. The model output is treated as
untrusted: it must parse as JSON, carry a ``workouts`` array, and is then
sanitized and truncated to the card limit regardless of what the prompt
asked for.
"""
import json
import logging
import math
from typing import Any, Dict, List, Optional

from armpal_api.errors import AIInvalidJSONError, AINoResponseError, AIUnexpectedShapeError
from armpal_api.services.card_sanitizer import sanitize_cards
from armpal_api.services.llm_service import LLMService
from armpal_api.utils import to_number

logger = logging.getLogger(__name__)

DEFAULT_MAX_CARDS = 50
MAX_CARDS_HARD_LIMIT = 100
MAX_PROGRAM_CHARS = 12000


def clamp_max_cards(value: Any) -> int:
    """Clamp a requested card count into [1, MAX_CARDS_HARD_LIMIT].

    Missing or non-numeric input defaults to DEFAULT_MAX_CARDS. Fractions are
    floored, so 7.5 allows 7 cards; zero and negatives become 1.
    """
    number = to_number(value)
    if number is None:
        return DEFAULT_MAX_CARDS
    return min(max(1, math.floor(number)), MAX_CARDS_HARD_LIMIT)


def truncate_program_text(text: str) -> str:
    return text[:MAX_PROGRAM_CHARS]


def build_system_prompt(card_limit: int) -> str:
    return f"""You are a precise workout program parser. Convert the user's program description into structured workout cards.

RULES:
- Return ONLY valid JSON matching the schema below: one object with a "workouts" array.
- Generate at most {card_limit} workout cards.
- Each workout object = one training session / day.
- Parse ALL formats: percentages (80%), rep ranges (8-12), RPE (RPE 7), sets x reps (5x5), supersets, notes, progression.
- If the program specifies weeks, group workouts by week and label them.
- Preserve exercise details exactly as described. Sets, reps, percentage and rpe are strings.
- For sets/reps that are ranges (e.g. 8-12), put the range string as-is in the field.
- Do NOT invent exercises not described. Do NOT assign dates.

JSON SCHEMA:
{{
  "workouts": [
    {{
      "title": "Week 1 - Push Day",
      "week_number": 1,
      "day_label": "Day 1",
      "exercises": [
        {{
          "name": "Bench Press",
          "sets": "5",
          "reps": "5",
          "percentage": "80%",
          "rpe": "",
          "notes": ""
        }}
      ]
    }}
  ]
}}"""


def build_user_prompt(program_text: str) -> str:
    return f"Convert this training program into workout cards:\n\n{truncate_program_text(program_text)}"


def parse_model_output(raw: Optional[str], card_limit: int) -> List[Dict[str, Any]]:
    """Validate raw model content and return at most ``card_limit`` cards.

    Raises:
        AINoResponseError: content is empty
        AIInvalidJSONError: content is not JSON
        AIUnexpectedShapeError: JSON has no ``workouts`` array
    """
    if not raw or not raw.strip():
        raise AINoResponseError()

    try:
        result = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Model returned invalid JSON ({e}); {len(raw)} chars")
        raise AIInvalidJSONError()

    if not isinstance(result, dict) or not isinstance(result.get("workouts"), list):
        raise AIUnexpectedShapeError()

    cards = sanitize_cards(result["workouts"])
    if len(cards) > card_limit:
        logger.info(f"Truncating {len(cards)} workout cards to limit {card_limit}")
    return cards[:card_limit]


class ProgramInterpreter:
    """Turns program text into workout cards with a single model call."""

    FEATURE_NAME = "workout_converter"

    @staticmethod
    def interpret(program_text: str, max_cards: Any = None, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Convert program text into dateless workout cards.

        Args:
            program_text: Free-form program description
            max_cards: Requested card limit, clamped with clamp_max_cards
            user_id: Caller, forwarded to request tracking only

        Returns:
            Ordered list of workout card dicts, at most the clamped limit long
        """
        card_limit = clamp_max_cards(max_cards)
        if len(program_text) > MAX_PROGRAM_CHARS:
            logger.info(f"Program text truncated from {len(program_text)} to {MAX_PROGRAM_CHARS} chars")

        raw = LLMService.complete_json(
            build_system_prompt(card_limit),
            build_user_prompt(program_text),
            feature_name=ProgramInterpreter.FEATURE_NAME,
            user_id=user_id,
            temperature=0.3,
            max_tokens=16384,
        )
        cards = parse_model_output(raw, card_limit)
        logger.info(f"Interpreted program into {len(cards)} workout cards (limit {card_limit})")
        return cards
