from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional
from app.schemas.trip import TripRequest
from app.services.costs import (
    TravelCostEstimate,
    estimate_travel_costs,
    format_distance_for_prompt,
    per_person,
)
from app.services.narrative import (
    NarrativeClient,
    build_system_prompt,
    build_user_prompt,
)
from app.services.routing import DistanceResolver
from app.services.weather import format_weather_for_trip, weather_unavailable_notice
from app.utils.logger import get_logger

logger = get_logger(__name__)

EXPENSES_HEADING = "## Travel Expenses"
WEATHER_HEADING = "## Weather Information"

EXPENSE_SECTION = """

---

## Travel Expenses

**Route:** {origin} → {destination} | **Distance:** {distance:.2f} km | **Travelers:** {travelers}

| Transport | Duration | Cost/Person (₹) | Total Cost (₹) |
|-----------|----------|-----------------|----------------|
| 🚗 Car    | {car_duration}       | {car_pp:.0f}            | {car_total:.0f}           |
| 🚌 Bus    | {bus_duration}       | {bus_pp:.0f}            | {bus_total:.0f}           |
| 🚆 Train  | {train_duration}       | {train_pp:.0f}            | {train_total:.0f}           |

**💡 Recommendation:** Train offers the best balance of cost and comfort for this journey.
"""

WEATHER_SECTION = """
---

## Weather Information

{weather}

**Packing Recommendations:**
Based on the weather forecast above, make sure to pack appropriate clothing and gear. Check the weather closer to your travel dates for the most accurate information.
"""


def build_expense_section(trip: TripRequest, estimate: TravelCostEstimate) -> str:
    n = trip.num_travelers
    return EXPENSE_SECTION.format(
        origin=trip.initial_destination,
        destination=trip.final_destination,
        distance=estimate.distance_km,
        travelers=n,
        car_duration=estimate.car_duration_label,
        car_pp=per_person(estimate.car_cost_total, n),
        car_total=estimate.car_cost_total,
        bus_duration=estimate.bus_duration_label,
        bus_pp=per_person(estimate.bus_cost_total, n),
        bus_total=estimate.bus_cost_total,
        train_duration=estimate.train_duration_label,
        train_pp=per_person(estimate.train_cost_total, n),
        train_total=estimate.train_cost_total,
    )


def build_weather_section(weather_text: str) -> str:
    return WEATHER_SECTION.format(weather=weather_text)


def augment(
    narrative: str,
    trip: TripRequest,
    estimate: TravelCostEstimate,
    weather_text: str,
) -> str:
    """Narrative, then travel expenses, then weather. The narrative is not modified."""
    return (
        narrative
        + build_expense_section(trip, estimate)
        + build_weather_section(weather_text)
    )


def generate_trip_document(
    trip: TripRequest,
    *,
    resolver: Optional[DistanceResolver] = None,
    narrative_client: Optional[NarrativeClient] = None,
    weather_formatter: Optional[Callable[[str], str]] = None,
) -> str:
    """
    Produce the full itinerary document for a trip request.

    Flow:
    1. Resolve distance and price the route (never fails)
    2. Start the weather lookup in the background
    3. Ask the narrative service for the itinerary body
    4. Append expenses and weather

    Raises:
        NarrativeGenerationError: the narrative service failed
    """
    client = narrative_client or NarrativeClient()
    format_weather = weather_formatter or format_weather_for_trip

    estimate = estimate_travel_costs(
        trip.initial_destination,
        trip.final_destination,
        trip.num_travelers,
        resolver=resolver,
    )
    travel_info = format_distance_for_prompt(
        trip.initial_destination, trip.final_destination, estimate
    )

    with ThreadPoolExecutor(max_workers=1) as pool:
        weather_future = pool.submit(format_weather, trip.final_destination)

        narrative = client.complete(
            build_system_prompt(trip), build_user_prompt(trip, travel_info)
        )

        try:
            weather_text = weather_future.result()
        except Exception as e:
            logger.warning("Weather lookup failed for %s: %s", trip.final_destination, e)
            weather_text = weather_unavailable_notice(trip.final_destination)

    logger.info(
        "Trip document generated: %s -> %s, %d days",
        trip.initial_destination,
        trip.final_destination,
        trip.duration_days,
    )
    return augment(narrative, trip, estimate, weather_text)
