"""
Smart Food Scan endpoint

POST /api/ai/food-scan accepts { imagePath, userId, mealDate } where
imagePath is a storage key inside the food_scan_images bucket, and returns
the model's estimate { foods, totals, confidence, notes }.
"""

from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from armpal_api.errors import MissingFieldsError, ProRequiredError, failure_label
from armpal_api.models import FoodScanRequest
from armpal_api.services.entitlement_service import EntitlementService
from armpal_api.services.food_scan_service import FoodScanService
from armpal_api.utils import scalar_to_text

router = APIRouter(prefix="/api/ai")

PRO_REQUIRED_MESSAGE = "Smart Food Scan is a Pro feature."
FOOD_SCAN_FAILED = "Food scan failed"


@router.post("/food-scan")
def food_scan(payload: Optional[FoodScanRequest] = None):
    """Estimate the macros of an uploaded meal photo."""
    payload = payload or FoodScanRequest()
    image_path = payload.imagePath if isinstance(payload.imagePath, str) else None
    user_id = scalar_to_text(payload.userId)

    if not image_path or not image_path.strip() or not user_id:
        raise MissingFieldsError(error="Missing imagePath or userId")

    meal_date = payload.mealDate if isinstance(payload.mealDate, str) and payload.mealDate.strip() else None

    with failure_label(FOOD_SCAN_FAILED):
        if not EntitlementService.is_pro(user_id):
            raise ProRequiredError(PRO_REQUIRED_MESSAGE)
        result = FoodScanService.scan(image_path, user_id, meal_date)

    return JSONResponse(result)
