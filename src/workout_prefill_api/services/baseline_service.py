"""
User baseline lookup.

Reads a user's stored performance numbers (1RMs, FTP, paces) from the hosted
backend. Any failure degrades to "no baseline", which resolves weights to 0.
"""

import logging
from typing import Optional

from workout_prefill_api.parsers.models import Baseline
from workout_prefill_api.services.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)


class BaselineService:
    """Service for reading user baselines."""

    TABLE_NAME = "user_baselines"

    @staticmethod
    def get_baseline(user_id: str) -> Optional[Baseline]:
        """
        Get the stored baseline for a user.

        Args:
            user_id: Backend user ID

        Returns:
            Baseline or None if not found or the backend is unavailable
        """
        supabase = get_supabase_client()
        if not supabase:
            return None

        try:
            result = supabase.table(BaselineService.TABLE_NAME) \
                .select("performance_numbers") \
                .eq("user_id", user_id) \
                .single() \
                .execute()
        except Exception as e:
            # single() raises exception when no rows found
            if "no rows" in str(e).lower() or "0 rows" in str(e).lower():
                logger.info(f"No baseline stored for user {user_id}")
                return None
            logger.error(f"Error fetching baseline for user {user_id}: {e}")
            return None

        numbers = (result.data or {}).get("performance_numbers")
        if not isinstance(numbers, dict):
            return None
        return Baseline.from_any(numbers)
