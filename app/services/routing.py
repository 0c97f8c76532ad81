import requests
from dataclasses import dataclass
from math import radians, sin, cos, sqrt, atan2
from typing import Optional, Tuple
from app.core.config import settings
from app.core.exceptions import RoutingError
from app.services import gazetteer
from app.services.gazetteer import Coordinates
from app.utils.logger import get_logger

logger = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0
ROAD_FACTOR = 1.3  # straight line -> driving distance
FALLBACK_SPEED_KMH = 60.0

DEFAULT_DISTANCE_KM = 500.0
DEFAULT_DURATION_HOURS = DEFAULT_DISTANCE_KM / FALLBACK_SPEED_KMH


@dataclass(frozen=True)
class DistanceResult:
    distance_km: float
    duration_hours: float
    is_default: bool = False  # gazetteer miss, not a real estimate

    def __post_init__(self):
        if self.distance_km < 0 or self.duration_hours < 0:
            raise ValueError("distance and duration must be non-negative")


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km."""
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = (
        sin(dlat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


def estimate_road_distance(origin: Coordinates, destination: Coordinates) -> DistanceResult:
    """Haversine distance scaled to road distance, at an assumed average speed."""
    distance = (
        haversine_distance_km(origin.lat, origin.lon, destination.lat, destination.lon)
        * ROAD_FACTOR
    )
    return DistanceResult(distance, distance / FALLBACK_SPEED_KMH)


class OpenRouteClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.api_key = settings.OPENROUTE_API_KEY if api_key is None else api_key
        self.url = url or settings.OPENROUTE_URL
        self.timeout = timeout or settings.OPENROUTE_TIMEOUT

    def route(self, origin: Coordinates, destination: Coordinates) -> Tuple[float, float]:
        """
        Driving distance (km) and duration (hours) between two points.

        Raises:
            RoutingError: missing key, HTTP/network failure or no route
        """
        if not self.api_key:
            raise RoutingError("OPENROUTE_API_KEY not set")

        body = {
            "coordinates": [
                [origin.lon, origin.lat],
                [destination.lon, destination.lat],
            ]
        }
        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json",
        }

        try:
            resp = requests.post(
                self.url, json=body, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise RoutingError(f"OpenRouteService timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise RoutingError(f"OpenRouteService request failed: {e}") from e

        if resp.status_code != 200:
            logger.warning("OpenRouteService error: %s", resp.text)
            raise RoutingError(f"OpenRouteService API error: {resp.status_code}")

        try:
            routes = resp.json().get("routes") or []
            if not routes:
                raise RoutingError("no route found")
            summary = routes[0]["summary"]
            distance_m = float(summary["distance"])
            duration_s = float(summary["duration"])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise RoutingError(f"Malformed OpenRouteService response: {e}") from e

        return distance_m / 1000.0, duration_s / 3600.0


class DistanceResolver:
    """
    Resolves two district names to a driving distance and duration.

    Always returns a usable DistanceResult:
    - unknown names -> fixed 500 km default
    - routing failure -> Haversine * road factor at 60 km/h
    """

    def __init__(self, client: Optional[OpenRouteClient] = None, use_routing: Optional[bool] = None):
        self.client = client or OpenRouteClient()
        self.use_routing = settings.USE_OPENROUTE if use_routing is None else use_routing

    def resolve(self, origin_name: str, destination_name: str) -> DistanceResult:
        origin = gazetteer.lookup(origin_name)
        destination = gazetteer.lookup(destination_name)

        if origin is None or destination is None:
            logger.warning(
                "Coordinates not found for: %s or %s, using default estimate",
                origin_name,
                destination_name,
            )
            return DistanceResult(
                DEFAULT_DISTANCE_KM, DEFAULT_DURATION_HOURS, is_default=True
            )

        if self.use_routing:
            try:
                distance, duration = self.client.route(origin, destination)
                logger.debug("OpenRouteService route: %.2fkm, %.2fh", distance, duration)
                return DistanceResult(distance, duration)
            except RoutingError as e:
                logger.warning("OpenRouteService error: %s, falling back to estimation", e)

        result = estimate_road_distance(origin, destination)
        logger.debug("Haversine estimate: %.2fkm", result.distance_km)
        return result


distance_resolver = DistanceResolver()
