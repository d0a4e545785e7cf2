"""
Smart Food Scan: macro estimates from a meal photo.

The client uploads the photo to the ``food_scan_images`` storage bucket and
sends its key. A short-lived signed URL is handed to one vision completion,
and the estimate is recorded in ``food_scans``. That table also backs the
daily scan limit.

Scan history is best effort: a failed count or insert is logged and never
fails the scan.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client, create_client

from armpal_api.config import settings
from armpal_api.errors import (
    AIInvalidJSONError,
    AINoResponseError,
    AIUnexpectedShapeError,
    ImageAccessError,
    ScanLimitReachedError,
    describe_exception,
)
from armpal_api.services.llm_service import LLMService
from armpal_api.utils import to_number

logger = logging.getLogger(__name__)

FEATURE_NAME = "food_scan"
FOOD_SCAN_BUCKET = "food_scan_images"
FOOD_SCANS_TABLE = "food_scans"
DAILY_SCAN_LIMIT = 20
SIGNED_URL_TTL_SECONDS = 300
MACRO_KEYS = ("calories", "protein", "carbs", "fat")

FOOD_SCAN_PROMPT = """You are a precise food nutrition analysis AI. Analyze the food image and return nutritional estimates.

RULES:
- Return ONLY valid JSON matching the schema below.
- Identify ALL visible food items individually.
- Estimate portions from visual cues (plate size, utensils, hands for scale).
- Round macros to whole numbers.
- Be conservative with estimates.
- confidence: "low" if blurry/ambiguous, "medium" if decent, "high" if clearly identifiable.

JSON SCHEMA:
{
  "foods": [
    { "name": "string", "estimated_amount": "string", "calories": int, "protein": int, "carbs": int, "fat": int }
  ],
  "totals": { "calories": int, "protein": int, "carbs": int, "fat": int },
  "confidence": "low|medium|high",
  "notes": "one-line disclaimer about estimate accuracy"
}"""

FOOD_SCAN_INSTRUCTION = "Analyze all food in this image. Return nutritional estimates as JSON."


def parse_scan_result(raw: Optional[str]) -> Dict[str, Any]:
    """Validate the model's estimate: an object with a ``foods`` list and ``totals``."""
    if not raw:
        raise AINoResponseError()
    try:
        result = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Food scan JSON parse error: {e}")
        raise AIInvalidJSONError(error="Invalid JSON from AI")
    if not isinstance(result, dict) or not isinstance(result.get("foods"), list) or not result.get("totals"):
        raise AIUnexpectedShapeError()
    return result


def _whole_number(value: Any) -> int:
    number = to_number(value)
    return int(round(number)) if number is not None else 0


def scan_record(user_id: str, meal_date: str, image_path: str, result: Dict[str, Any]) -> Dict[str, Any]:
    """Build the ``food_scans`` row for a completed scan."""
    totals = result.get("totals")
    if not isinstance(totals, dict):
        totals = {}
    record: Dict[str, Any] = {
        "user_id": user_id,
        "meal_date": meal_date,
        "image_path": image_path,
        "ai_result_json": result,
        "confidence": result.get("confidence") or "medium",
        "status": "completed",
    }
    for key in MACRO_KEYS:
        record[f"total_{key}"] = _whole_number(totals.get(key))
    return record


class FoodScanService:
    """Runs one food scan against storage, the scan history and the model."""

    @classmethod
    def _get_supabase_client(cls) -> Optional[Client]:
        """Get Supabase client instance, or None when not configured."""
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.warning("Supabase credentials not configured; food scans are unavailable")
            return None
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)

    @classmethod
    def count_scans_today(cls, supabase: Client, user_id: str, today: str) -> Optional[int]:
        """Scans the user started since midnight UTC, or None when the count failed."""
        try:
            result = supabase.table(FOOD_SCANS_TABLE) \
                .select("id", count="exact") \
                .eq("user_id", user_id) \
                .gte("created_at", f"{today}T00:00:00Z") \
                .execute()
            return result.count
        except Exception as e:
            logger.error(f"Failed to count food scans for {user_id}: {e}")
            return None

    @classmethod
    def create_signed_url(cls, supabase: Client, image_path: str) -> str:
        try:
            signed = supabase.storage.from_(FOOD_SCAN_BUCKET).create_signed_url(image_path, SIGNED_URL_TTL_SECONDS)
        except Exception as e:
            raise ImageAccessError(describe_exception(e)) from e

        signed = signed or {}
        # storage3 has used both spellings of the key
        url = signed.get("signedUrl") or signed.get("signedURL")
        if not url:
            raise ImageAccessError()
        return url

    @classmethod
    def record_scan(cls, supabase: Client, record: Dict[str, Any]) -> None:
        try:
            supabase.table(FOOD_SCANS_TABLE).insert(record).execute()
        except Exception as e:
            logger.error(f"Failed to record food scan for {record.get('user_id')}: {e}")

    @classmethod
    def scan(cls, image_path: str, user_id: str, meal_date: Optional[str] = None) -> Dict[str, Any]:
        """
        Estimate the macros of an uploaded meal photo.

        Args:
            image_path: Storage key inside the food_scan_images bucket
            user_id: The ArmPal profile ID
            meal_date: "YYYY-MM-DD" the meal belongs to; today (UTC) when None

        Returns:
            The model's estimate: foods, totals, confidence, notes

        Raises:
            ScanLimitReachedError: DAILY_SCAN_LIMIT scans already ran today
            ImageAccessError: no signed URL could be created for the image
        """
        supabase = cls._get_supabase_client()
        if not supabase:
            raise ImageAccessError("Supabase storage is not configured")

        today = datetime.now(timezone.utc).date().isoformat()
        scans_today = cls.count_scans_today(supabase, user_id, today)
        if scans_today is not None and scans_today >= DAILY_SCAN_LIMIT:
            raise ScanLimitReachedError(f"Daily scan limit ({DAILY_SCAN_LIMIT}) reached. Try again tomorrow.")

        image_url = cls.create_signed_url(supabase, image_path)
        raw = LLMService.complete_json(
            FOOD_SCAN_PROMPT,
            FOOD_SCAN_INSTRUCTION,
            feature_name=FEATURE_NAME,
            user_id=user_id,
            temperature=0.3,
            max_tokens=1024,
            image_url=image_url,
            model=settings.FOOD_SCAN_MODEL,
        )
        result = parse_scan_result(raw)

        cls.record_scan(supabase, scan_record(user_id, meal_date or today, image_path, result))
        logger.info(f"Food scan for {user_id}: {len(result['foods'])} foods, confidence {result.get('confidence')}")
        return result
