from typing import Optional
from fastapi import APIRouter, Header, HTTPException, Query
from app.core.exceptions import (
    NarrativeGenerationError,
    TripStoreError,
    WeatherUnavailableError,
)
from app.db import trips_store
from app.schemas.trip import (
    SavedTrip,
    SaveTripRequest,
    TripRequest,
    TripResponse,
    WeatherData,
)
from app.services import gazetteer
from app.services.costs import estimate_travel_costs
from app.services.itinerary import generate_trip_document
from app.services.weather import get_weather_forecast
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["trips"])


def current_user_id(x_user_id: Optional[int]) -> int:
    """User id forwarded by the authentication layer in front of this service."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


# Trips


@router.post("/generate-trip", response_model=TripResponse)
def generate_trip(
    trip: TripRequest, x_user_id: Optional[int] = Header(None, alias="X-User-Id")
):
    """
    Generate an itinerary document, store it and save it for the caller.

    Flow:
    1. Generate document (narrative + expenses + weather)
    2. Persist to trips store
    3. Link to the user's saved trips (best effort)

    Raises:
        HTTPException: 401 without a user, 500 if generation or storing fails
    """
    user_id = current_user_id(x_user_id)

    try:
        tripdetails = generate_trip_document(trip)
    except NarrativeGenerationError as e:
        logger.exception("Failed to generate trip")
        raise HTTPException(status_code=500, detail=f"Error generating trip: {e}")

    try:
        trip_id = trips_store.create_trip(tripdetails)
    except TripStoreError as e:
        logger.error(f"Failed to store generated trip: {e}")
        raise HTTPException(
            status_code=500,
            detail={
                "error": "Error saving trip",
                "tripdetails": tripdetails,
            },
        )

    try:
        trips_store.save_for_user(user_id, trip_id)
    except TripStoreError as e:
        # The trip exists; only the link to the user is missing
        logger.warning(f"Trip {trip_id} created but not saved for user {user_id}: {e}")

    return TripResponse(
        tripid=trip_id,
        tripdetails=tripdetails,
        message="Trip generated successfully",
    )


@router.get("/saved-trips", response_model=list[SavedTrip])
def get_saved_trips(x_user_id: Optional[int] = Header(None, alias="X-User-Id")):
    user_id = current_user_id(x_user_id)
    try:
        return trips_store.list_saved(user_id)
    except TripStoreError:
        logger.exception("Failed to list saved trips")
        raise HTTPException(status_code=500, detail="Error fetching trips")


@router.post("/save-trip")
def save_trip(
    request: SaveTripRequest,
    x_user_id: Optional[int] = Header(None, alias="X-User-Id"),
):
    user_id = current_user_id(x_user_id)
    try:
        if not trips_store.trip_exists(request.tripid):
            raise HTTPException(status_code=404, detail="Trip not found")
        trips_store.save_for_user(user_id, request.tripid)
    except TripStoreError:
        logger.exception(f"Failed to save trip {request.tripid}")
        raise HTTPException(status_code=500, detail="Error saving trip")

    return {"message": "Trip saved successfully"}


@router.delete("/saved-trips/{tripid}")
def delete_saved_trip(
    tripid: int, x_user_id: Optional[int] = Header(None, alias="X-User-Id")
):
    user_id = current_user_id(x_user_id)
    try:
        deleted = trips_store.delete_saved(user_id, tripid)
    except TripStoreError:
        logger.exception(f"Failed to delete trip {tripid}")
        raise HTTPException(status_code=500, detail="Error deleting trip")

    if not deleted:
        raise HTTPException(status_code=404, detail="Trip not found")
    return {"message": "Trip deleted successfully"}


# Lookups


@router.get("/weather/{destination}", response_model=WeatherData)
def get_weather(destination: str):
    """Forecast for a destination; failures come back as error_msg, not an error status."""
    if not destination.strip():
        raise HTTPException(status_code=400, detail="Destination is required")
    try:
        return get_weather_forecast(destination)
    except WeatherUnavailableError as e:
        logger.warning(f"Weather error: {e}")
        return WeatherData(error_msg="Weather data not available")


@router.get("/travel-costs")
def get_travel_costs(
    origin: str = Query(..., min_length=1),
    destination: str = Query(..., min_length=1),
    num_travelers: int = Query(1, ge=1),
):
    return estimate_travel_costs(origin, destination, num_travelers)


@router.get("/locations")
def list_locations():
    locations = gazetteer.known_locations()
    return {"status": "success", "count": len(locations), "data": locations}
