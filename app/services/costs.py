import math
from dataclasses import dataclass, replace
from typing import Optional
from app.services.routing import DistanceResolver, DistanceResult, distance_resolver
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Pricing (INR)
BUS_RATE_PER_KM = 1.5  # per person
TRAIN_RATE_PER_KM = 0.7  # per person
CAR_KM_PER_LITRE = 12.0
FUEL_PRICE_PER_LITRE = 110.0  # one vehicle for the whole group

# Relative to driving time
BUS_DURATION_FACTOR = 1.2
TRAIN_DURATION_FACTOR = 0.9

# Shown when the route could not be located at all
DEFAULT_BUS_DURATION = "8-10 hours"
DEFAULT_TRAIN_DURATION = "6-8 hours"
DEFAULT_CAR_DURATION = "7-9 hours"


@dataclass(frozen=True)
class TravelCostEstimate:
    distance_km: float
    bus_cost_total: float
    train_cost_total: float
    car_cost_total: float
    bus_duration_label: str
    train_duration_label: str
    car_duration_label: str


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero (not banker's rounding)."""
    factor = 10 ** digits
    return math.copysign(math.floor(abs(value) * factor + 0.5) / factor, value)


def format_duration(hours: float) -> str:
    """'45 mins' under an hour, otherwise '2h 15m' or '3h'."""
    if hours < 1:
        return f"{hours * 60:.0f} mins"
    h = int(hours)
    m = int((hours - h) * 60)
    if m > 0:
        return f"{h}h {m}m"
    return f"{h}h"


def validate_num_travelers(num_travelers: int) -> int:
    if isinstance(num_travelers, bool) or not isinstance(num_travelers, int):
        raise ValueError(f"num_travelers must be an integer, got {num_travelers!r}")
    if num_travelers < 1:
        raise ValueError(f"num_travelers must be at least 1, got {num_travelers}")
    return num_travelers


def compute_costs(
    distance_km: float, num_travelers: int, duration_hours: float
) -> TravelCostEstimate:
    """
    Per-mode totals and duration labels for a trip.

    Bus and train are priced per person; car is a flat fuel cost for one
    vehicle regardless of group size. Totals are rounded to 2 decimals,
    distance to 1 decimal.

    Raises:
        ValueError: num_travelers is not a positive integer
    """
    validate_num_travelers(num_travelers)

    bus_total = distance_km * BUS_RATE_PER_KM * num_travelers
    train_total = distance_km * TRAIN_RATE_PER_KM * num_travelers
    car_total = (distance_km / CAR_KM_PER_LITRE) * FUEL_PRICE_PER_LITRE

    return TravelCostEstimate(
        distance_km=round_half_up(distance_km, 1),
        bus_cost_total=round_half_up(bus_total, 2),
        train_cost_total=round_half_up(train_total, 2),
        car_cost_total=round_half_up(car_total, 2),
        bus_duration_label=format_duration(duration_hours * BUS_DURATION_FACTOR),
        train_duration_label=format_duration(duration_hours * TRAIN_DURATION_FACTOR),
        car_duration_label=format_duration(duration_hours),
    )


def costs_for_distance(result: DistanceResult, num_travelers: int) -> TravelCostEstimate:
    estimate = compute_costs(result.distance_km, num_travelers, result.duration_hours)
    if result.is_default:
        estimate = replace(
            estimate,
            bus_duration_label=DEFAULT_BUS_DURATION,
            train_duration_label=DEFAULT_TRAIN_DURATION,
            car_duration_label=DEFAULT_CAR_DURATION,
        )
    return estimate


def estimate_travel_costs(
    origin: str,
    destination: str,
    num_travelers: int,
    resolver: Optional[DistanceResolver] = None,
) -> TravelCostEstimate:
    """Resolve the route and price it. Only fails on an invalid traveler count."""
    validate_num_travelers(num_travelers)
    result = (resolver or distance_resolver).resolve(origin, destination)
    estimate = costs_for_distance(result, num_travelers)
    logger.info(
        "Travel costs %s -> %s: %.1fkm, %d travelers",
        origin,
        destination,
        estimate.distance_km,
        num_travelers,
    )
    return estimate


def per_person(total: float, num_travelers: int) -> float:
    return total / validate_num_travelers(num_travelers)


def format_distance_for_prompt(
    origin: str, destination: str, estimate: TravelCostEstimate
) -> str:
    """Distance line for the narrative prompt; costs are never shown to the model."""
    return f"Distance between {origin} and {destination}: {estimate.distance_km:.2f} km"
