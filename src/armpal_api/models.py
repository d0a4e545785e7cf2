"""Data models for the workout converter and program tools."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ExerciseEntry(BaseModel):
    """One movement within a workout card.

    Numeric-looking fields stay strings so ranges like "8-12" survive intact.
    """
    name: str
    sets: Optional[str] = None
    reps: Optional[str] = None
    percentage: Optional[str] = None
    rpe: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        extra = "ignore"


class WorkoutCard(BaseModel):
    """One training session produced by the program interpreter."""
    title: str
    week_number: Optional[int] = Field(default=None, ge=1)
    day_label: Optional[str] = None
    exercises: List[ExerciseEntry] = Field(..., min_length=1)
    # Set only by date assignment, formatted "YYYY-MM-DDT09:00"
    assigned_date: Optional[str] = None

    class Config:
        extra = "ignore"


class ConversionRequest(BaseModel):
    """Request body for POST /api/ai/workout-converter.

    Fields are untyped so a missing or wrongly typed value is judged by the
    endpoint: required fields give the documented 400 body and malformed
    scheduling fields fall back to undated cards.
    """
    program_text: Optional[Any] = None
    start_date: Optional[Any] = None
    training_days: Optional[Any] = None
    max_cards: Optional[Any] = None
    userId: Optional[Any] = None


class FoodScanRequest(BaseModel):
    """Request body for POST /api/ai/food-scan."""
    imagePath: Optional[Any] = None
    userId: Optional[Any] = None
    mealDate: Optional[Any] = None


class ChatRequest(BaseModel):
    """Request body for the coach chat endpoints."""
    message: Optional[Any] = None
    mode: Optional[Any] = None
    personality: Optional[Any] = None
    userId: Optional[Any] = None


# ---------------------------------------------------------------------------
# Program tools
# ---------------------------------------------------------------------------


class ParseProgramRequest(BaseModel):
    rawContent: Optional[Any] = None


class EnrichProgramRequest(BaseModel):
    rawContent: Optional[str] = None
    parsedProgram: Optional[Dict[str, Any]] = None


class ModifyProgramRequest(BaseModel):
    baseProgram: Optional[Dict[str, Any]] = None
    modification: Optional[str] = None


class ProgramMetadata(BaseModel):
    """Marketplace metadata generated for a program."""
    description: str = ""
    difficulty: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    thumbnail_style: Optional[str] = None

    class Config:
        extra = "ignore"
