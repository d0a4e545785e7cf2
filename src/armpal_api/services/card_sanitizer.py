"""Boundary cleanup for workout cards returned by the language model.

The model is asked for a fixed schema but is not trusted to follow it. This
module turns whatever came back in ``workouts`` into cards that satisfy
``WorkoutCard``:

- non-object cards and exercises are skipped
- sets/reps/percentage/rpe are kept as strings; integers are rendered as
  their digits and ranges such as "8-12" pass through unchanged
- blank sets/reps become null; blank percentage/rpe/notes are omitted
- exercises without a name are dropped, and cards left without exercises
  are dropped
- week_number becomes a positive int or null
"""

import logging
from typing import Any, Dict, List, Optional

from armpal_api.models import ExerciseEntry, WorkoutCard
from armpal_api.utils import scalar_to_text, to_int

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("sets", "reps", "percentage", "rpe", "notes")
# Omitted from the card when blank; sets and reps stay as null
_OPTIONAL_FIELDS = ("percentage", "rpe", "notes")


def _sanitize_exercise(exercise: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(exercise, dict):
        return None
    name = scalar_to_text(exercise.get("name"))
    if not name:
        return None

    entry: Dict[str, Any] = {"name": name}
    for key in _TEXT_FIELDS:
        entry[key] = scalar_to_text(exercise.get(key))
    exercise_entry = ExerciseEntry.model_validate(entry)
    blank = {key for key in _OPTIONAL_FIELDS if getattr(exercise_entry, key) is None}
    return exercise_entry.model_dump(exclude=blank)


def _week_number(value: Any) -> Optional[int]:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        value = value.strip()
    week = to_int(value)
    return week if week is not None and week >= 1 else None


def sanitize_card(card: Any, position: int) -> Optional[Dict[str, Any]]:
    """Clean a single card. Returns None when the card has no usable exercise.

    Args:
        card: Raw card object from the model
        position: 1-based position, used for the fallback title
    """
    if not isinstance(card, dict):
        return None

    raw_exercises = card.get("exercises")
    if not isinstance(raw_exercises, list):
        return None
    exercises = [e for e in (_sanitize_exercise(x) for x in raw_exercises) if e]
    if not exercises:
        return None

    workout = WorkoutCard(
        title=scalar_to_text(card.get("title")) or f"Workout {position}",
        week_number=_week_number(card.get("week_number")),
        day_label=scalar_to_text(card.get("day_label")),
        exercises=exercises,
    )
    cleaned = workout.model_dump(exclude={"assigned_date", "exercises"})
    cleaned["exercises"] = exercises
    return cleaned


def sanitize_cards(raw_workouts: List[Any]) -> List[Dict[str, Any]]:
    """Sanitize the model's ``workouts`` array, preserving order."""
    cards = []
    for position, raw in enumerate(raw_workouts, start=1):
        card = sanitize_card(raw, position)
        if card is None:
            logger.info(f"Dropping workout card {position}: no usable exercises")
            continue
        cards.append(card)
    return cards
