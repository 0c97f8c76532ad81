from typing import Optional
from supabase import create_client, Client
from app.core.config import settings
from app.core.exceptions import TripStoreError
from app.utils.logger import get_logger

logger = get_logger(__name__)

supabase: Optional[Client] = None


def init_supabase() -> Optional[Client]:
    global supabase
    if not (settings.SUPABASE_URL and settings.SUPABASE_KEY):
        logger.warning("SUPABASE_URL or SUPABASE_KEY not set, trips store disabled")
        return None
    try:
        supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("Supabase client initialized successfully")
        return supabase
    except Exception as e:
        logger.error(f"Failed to initialize Supabase: {e}")
        return None


def get_supabase() -> Client:
    """Return the shared client, connecting on first use."""
    if supabase is None and init_supabase() is None:
        raise TripStoreError("Supabase not connected")
    return supabase
