"""Shared Supabase client for the hosted backend."""

import logging
from typing import Optional

from supabase import Client, create_client

from workout_prefill_api.config import settings

logger = logging.getLogger(__name__)


def get_supabase_client() -> Optional[Client]:
    """Get Supabase client instance, or None when the backend is not configured."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("Supabase credentials not configured. Backend access will be disabled.")
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None
