"""Entitlement lookups for Pro-only AI features.

Reads ``profiles.is_pro`` from Supabase using the service-role key. Results
are not cached and lookups are not retried.
"""
import logging
from typing import Any, Optional

from supabase import Client, create_client

from armpal_api.config import settings, tier_gate_bypassed

logger = logging.getLogger(__name__)


class EntitlementService:
    """Service for checking whether a user may use Pro AI features."""

    @classmethod
    def _get_supabase_client(cls) -> Optional[Client]:
        """Get Supabase client instance, or None when not configured."""
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.warning("Supabase credentials not configured; entitlement lookups will deny")
            return None
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)

    @classmethod
    def get_profile(cls, user_id: str) -> Optional[dict[str, Any]]:
        """Fetch the entitlement columns of a user's profile row."""
        supabase = cls._get_supabase_client()
        if not supabase:
            return None

        result = supabase.table("profiles") \
            .select("is_pro") \
            .eq("id", user_id) \
            .maybe_single() \
            .execute()

        # maybe_single() yields None or empty data when the row is missing
        if result is None:
            return None
        return result.data or None

    @classmethod
    def is_pro(cls, user_id: str) -> bool:
        """
        Check whether the user is entitled to Pro AI features.

        Args:
            user_id: The ArmPal profile ID

        Returns:
            True if the profile is flagged Pro or BYPASS_TIER_GATE is enabled
        """
        if tier_gate_bypassed():
            logger.info(f"BYPASS_TIER_GATE enabled; granting Pro to {user_id}")
            return True

        profile = cls.get_profile(user_id)
        entitled = bool(profile and profile.get("is_pro"))
        if not entitled:
            logger.info(f"User {user_id} is not entitled to Pro AI features")
        return entitled
