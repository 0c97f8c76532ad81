class TripPlannerError(Exception):
    """Base class for errors raised by the trip planner services."""


class RoutingError(TripPlannerError):
    """The driving-route service could not produce a route."""


class WeatherUnavailableError(TripPlannerError):
    """The weather service could not produce a forecast."""


class NarrativeGenerationError(TripPlannerError):
    """The text-generation service failed; no itinerary can be produced."""


class TripStoreError(TripPlannerError):
    """Reading or writing the trips store failed."""
