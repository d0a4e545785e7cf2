"""Tests for converter data models."""
import pytest
from pydantic import ValidationError

from armpal_api.models import ConversionRequest, ExerciseEntry, WorkoutCard


class TestWorkoutCard:

    def test_card_requires_exercises(self):
        with pytest.raises(ValidationError):
            WorkoutCard(title="Rest", exercises=[])

    def test_week_number_must_be_positive(self):
        with pytest.raises(ValidationError):
            WorkoutCard(title="W0", week_number=0, exercises=[ExerciseEntry(name="Row")])

    def test_exercise_strings_kept(self):
        card = WorkoutCard(title="Day 1", exercises=[{"name": "Squat", "sets": "3", "reps": "8-12"}])
        assert card.exercises[0].reps == "8-12"
        assert card.assigned_date is None

    def test_extra_fields_ignored(self):
        entry = ExerciseEntry(name="Row", weight="60kg")
        assert "weight" not in entry.model_dump()


class TestConversionRequest:

    def test_all_fields_optional(self):
        req = ConversionRequest()
        assert req.program_text is None
        assert req.userId is None

    def test_max_cards_accepts_any_scalar(self):
        assert ConversionRequest(max_cards="abc").max_cards == "abc"
        assert ConversionRequest(max_cards=12).max_cards == 12

    def test_wrongly_typed_fields_are_not_rejected(self):
        req = ConversionRequest(start_date=20250106, training_days="1,3,5", userId=42)
        assert req.start_date == 20250106
        assert req.training_days == "1,3,5"
        assert req.userId == 42
