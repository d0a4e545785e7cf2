"""Program authoring helpers for marketplace programs.

Three single-call model helpers:
- parse raw program content into the ArmPal program layout schema
- generate marketplace metadata (description, difficulty, tags, thumbnail)
- adapt an existing program to a named modification preset
"""
import json
import logging
from typing import Any, Dict, Optional

from armpal_api.errors import ArmPalAPIError, InvalidRequestError
from armpal_api.models import ProgramMetadata
from armpal_api.services.llm_service import LLMService

logger = logging.getLogger(__name__)

PARSE_PROGRAM_PROMPT = """Convert the following training program into ArmPal schema.
Return ONLY valid JSON, no markdown or code fences:

{
  "frequency_range": [],
  "layouts": {
    "3": {
      "summary": "",
      "days": [
        {
          "name": "",
          "exercises": [
            { "name": "", "sets": "", "reps": "", "intensity": "" }
          ]
        }
      ]
    }
  }
}

Use numeric keys for layouts (e.g. "2", "3", "4", "5", "6") based on the program structure.
Each layout must have "summary" and "days". Each day must have "name" and "exercises".
Each exercise must have "name", "sets", "reps"; "intensity" is optional."""

ENRICH_PROGRAM_PROMPT = """Analyze this training program and generate marketplace metadata.
Return ONLY valid JSON, no markdown or code fences:

{
  "description": "Short marketplace description (1-2 sentences).",
  "difficulty": "Beginner | Intermediate | Advanced | Elite",
  "tags": ["Hook", "Strength", "Hypertrophy", "Toproll", "Powerlifting", "General Fitness"],
  "thumbnail_style": "dark_strength | armwrestling_hook | minimal_clean"
}

Pick 1-4 tags that fit the program. Use only: Hook, Strength, Hypertrophy, Toproll, Powerlifting, General Fitness (or subset).
thumbnail_style: use dark_strength for heavy/strength, armwrestling_hook for arm wrestling, minimal_clean for general/clean programs."""

_LAYOUT_SHAPE = (
    "keep the same ArmPal JSON structure (frequency_range, layouts with summary and days, "
    "each day with name and exercises with name, sets, reps, intensity). Return ONLY valid JSON."
)

MODIFICATIONS: Dict[str, str] = {
    "beginner": (
        "Adapt this program for beginners: reduce intensity, add progression notes, "
        f"lower volume per session, {_LAYOUT_SHAPE}"
    ),
    "strength": (
        "Adapt this program for maximum strength focus: emphasize heavy sets, lower reps, "
        f"higher intensity, {_LAYOUT_SHAPE}"
    ),
    "short_sessions": (
        "Adapt this program for shorter sessions (30-45 min): reduce exercises per day, "
        f"keep key movements, {_LAYOUT_SHAPE}"
    ),
    "hook_focus": (
        "Adapt this program for arm wrestling hook focus: emphasize cup, pronation, back pressure, "
        f"and hook-specific movements, {_LAYOUT_SHAPE}"
    ),
}

ALLOWED_TAGS = ("Hook", "Strength", "Hypertrophy", "Toproll", "Powerlifting", "General Fitness")
ALLOWED_DIFFICULTIES = ("Beginner", "Intermediate", "Advanced", "Elite")
ALLOWED_THUMBNAILS = ("dark_strength", "armwrestling_hook", "minimal_clean")
MAX_TAGS = 4


def _load_json_object(raw: Optional[str]) -> Dict[str, Any]:
    if not raw or not raw.strip():
        raise ArmPalAPIError(error="Empty response from AI")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ArmPalAPIError(error=str(e))
    if not isinstance(parsed, dict):
        raise ArmPalAPIError(error="AI response was not a JSON object")
    return parsed


def normalize_metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep metadata within the marketplace's allowed vocabulary."""
    tags = data.get("tags")
    if isinstance(tags, str):
        tags = [tags]
    if not isinstance(tags, list):
        tags = []

    kept_tags = []
    for tag in tags:
        if tag in ALLOWED_TAGS and tag not in kept_tags:
            kept_tags.append(tag)

    difficulty = data.get("difficulty")
    thumbnail = data.get("thumbnail_style")
    description = data.get("description")
    metadata = ProgramMetadata(
        description=description.strip() if isinstance(description, str) else "",
        difficulty=difficulty if difficulty in ALLOWED_DIFFICULTIES else None,
        tags=kept_tags[:MAX_TAGS],
        thumbnail_style=thumbnail if thumbnail in ALLOWED_THUMBNAILS else None,
    )
    return metadata.model_dump()


class ProgramToolsService:
    """Model-backed helpers for authoring marketplace programs."""

    @staticmethod
    def parse_program(raw_content: Any) -> Dict[str, Any]:
        """Convert raw program content into the ArmPal layout schema."""
        if not raw_content or not isinstance(raw_content, str):
            raise InvalidRequestError(error="Missing rawContent")

        raw = LLMService.complete_json(PARSE_PROGRAM_PROMPT, raw_content, feature_name="parse_program")
        return _load_json_object(raw)

    @staticmethod
    def enrich_program(raw_content: Optional[str], parsed_program: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Generate marketplace metadata from raw and parsed program content."""
        user_content = (
            f"Raw content:\n{raw_content or ''}\n\n"
            f"Parsed program (JSON):\n{json.dumps(parsed_program or {}, indent=2)}"
        )
        raw = LLMService.complete_json(ENRICH_PROGRAM_PROMPT, user_content, feature_name="enrich_program")
        return normalize_metadata(_load_json_object(raw))

    @staticmethod
    def modify_program(base_program: Optional[Dict[str, Any]], modification: Optional[str]) -> Dict[str, Any]:
        """Adapt a program to one of the MODIFICATIONS presets."""
        if not base_program or not modification or modification not in MODIFICATIONS:
            raise InvalidRequestError(error="Missing baseProgram or invalid modification")

        user_content = f"Current program (JSON):\n{json.dumps(base_program, indent=2)}"
        logger.info(f"Modifying program with preset {modification}")
        raw = LLMService.complete_json(
            MODIFICATIONS[modification], user_content, feature_name="modify_program"
        )
        return _load_json_object(raw)
