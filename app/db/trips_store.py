from typing import Any, Dict, List
from app.core.exceptions import TripStoreError
from app.db.supabase_client import get_supabase
from app.utils.logger import get_logger

logger = get_logger(__name__)

TRIPS_TABLE = "trips"
SAVED_TABLE = "saved"


def create_trip(tripdetails: str) -> int:
    """Insert a generated trip document and return its id."""
    try:
        resp = (
            get_supabase()
            .table(TRIPS_TABLE)
            .insert({"tripdetails": tripdetails})
            .execute()
        )
        rows = resp.data or []
        if not rows:
            raise TripStoreError("insert returned no rows")
        trip_id = int(rows[0]["tripid"])
    except TripStoreError:
        raise
    except Exception as e:
        raise TripStoreError(f"Error saving trip: {e}") from e

    logger.info(f"Trip stored: {trip_id}")
    return trip_id


def save_for_user(user_id: int, trip_id: int) -> None:
    """Link a trip to a user; saving the same trip twice is a no-op."""
    try:
        (
            get_supabase()
            .table(SAVED_TABLE)
            .upsert(
                {"userid": user_id, "tripid": trip_id},
                on_conflict="userid,tripid",
                ignore_duplicates=True,
            )
            .execute()
        )
    except TripStoreError:
        raise
    except Exception as e:
        raise TripStoreError(f"Error saving trip {trip_id}: {e}") from e


def trip_exists(trip_id: int) -> bool:
    try:
        resp = (
            get_supabase()
            .table(TRIPS_TABLE)
            .select("tripid")
            .eq("tripid", trip_id)
            .limit(1)
            .execute()
        )
    except TripStoreError:
        raise
    except Exception as e:
        raise TripStoreError(f"Error looking up trip {trip_id}: {e}") from e
    return bool(resp.data)


def list_saved(user_id: int) -> List[Dict[str, Any]]:
    """Saved trips for a user, newest first."""
    try:
        resp = (
            get_supabase()
            .table(SAVED_TABLE)
            .select("tripid, saved_at, trips(tripdetails)")
            .eq("userid", user_id)
            .order("saved_at", desc=True)
            .execute()
        )
    except TripStoreError:
        raise
    except Exception as e:
        raise TripStoreError(f"Error fetching trips: {e}") from e

    trips = []
    for row in resp.data or []:
        trip = row.get("trips") or {}
        trips.append(
            {
                "tripid": row["tripid"],
                "tripdetails": trip.get("tripdetails", ""),
                "saved_at": row.get("saved_at"),
            }
        )
    return trips


def delete_saved(user_id: int, trip_id: int) -> bool:
    """Remove a saved trip. Returns False if the user had not saved it."""
    try:
        resp = (
            get_supabase()
            .table(SAVED_TABLE)
            .delete()
            .eq("userid", user_id)
            .eq("tripid", trip_id)
            .execute()
        )
    except TripStoreError:
        raise
    except Exception as e:
        raise TripStoreError(f"Error deleting trip {trip_id}: {e}") from e

    deleted = bool(resp.data)
    if deleted:
        logger.info(f"Deleted saved trip {trip_id} for user {user_id}")
    return deleted
