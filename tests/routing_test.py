import pytest
import requests
from app.core.exceptions import RoutingError
from app.services import routing
from app.services.gazetteer import Coordinates, known_locations, lookup
from app.services.routing import (
    DEFAULT_DISTANCE_KM,
    DistanceResolver,
    DistanceResult,
    OpenRouteClient,
    haversine_distance_km,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


def route_payload(distance_m, duration_s):
    return {"routes": [{"summary": {"distance": distance_m, "duration": duration_s}}]}


def test_haversine_zero_for_same_point():
    assert haversine_distance_km(12.9716, 77.5946, 12.9716, 77.5946) == 0.0


def test_haversine_one_degree_latitude():
    assert haversine_distance_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)


def test_gazetteer_lookup():
    assert lookup("Udupi") == Coordinates(13.3409, 74.7421)
    assert lookup("  Udupi ") == Coordinates(13.3409, 74.7421)
    assert lookup("Atlantis") is None
    assert lookup("") is None
    assert len(known_locations()) == 31


def test_distance_result_rejects_negative_values():
    with pytest.raises(ValueError):
        DistanceResult(-1.0, 1.0)


def test_routed_result(monkeypatch):
    """Routing service answer is converted from metres/seconds to km/hours."""
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return FakeResponse(payload=route_payload(145000.0, 10800.0))

    monkeypatch.setattr(routing.requests, "post", fake_post)

    resolver = DistanceResolver(client=OpenRouteClient(api_key="ors-key"), use_routing=True)
    result = resolver.resolve("Bengaluru Urban", "Mysuru (Mysore)")

    assert result == DistanceResult(145.0, 3.0)
    assert len(calls) == 1
    assert calls[0]["headers"]["Authorization"] == "ors-key"
    assert calls[0]["json"]["coordinates"] == [[77.5946, 12.9716], [76.6394, 12.2958]]
    assert calls[0]["timeout"] > 0


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=403, text="forbidden"),
        FakeResponse(payload={"routes": []}),
        FakeResponse(payload=None),
        FakeResponse(payload={"routes": [{"summary": {}}]}),
    ],
)
def test_routing_failure_falls_back_to_haversine(monkeypatch, response):
    monkeypatch.setattr(routing.requests, "post", lambda *a, **kw: response)

    resolver = DistanceResolver(client=OpenRouteClient(api_key="ors-key"), use_routing=True)
    result = resolver.resolve("Bengaluru Urban", "Mysuru (Mysore)")

    expected = haversine_distance_km(12.9716, 77.5946, 12.2958, 76.6394) * 1.3
    assert result.distance_km == pytest.approx(expected)
    assert result.duration_hours == pytest.approx(expected / 60)
    assert not result.is_default


def test_network_error_falls_back(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.exceptions.ConnectionError("unreachable")

    monkeypatch.setattr(routing.requests, "post", boom)

    resolver = DistanceResolver(client=OpenRouteClient(api_key="ors-key"), use_routing=True)
    result = resolver.resolve("Udupi", "Hassan")
    assert result.distance_km > 0
    assert result.duration_hours > 0


def test_missing_api_key_raises_routing_error():
    with pytest.raises(RoutingError):
        OpenRouteClient(api_key="").route(Coordinates(0, 0), Coordinates(1, 1))


def test_unknown_location_returns_default(monkeypatch):
    def unexpected(*args, **kwargs):
        raise AssertionError("routing service must not be called")

    monkeypatch.setattr(routing.requests, "post", unexpected)

    resolver = DistanceResolver(client=OpenRouteClient(api_key="ors-key"), use_routing=True)
    result = resolver.resolve("Bengaluru Urban", "Gotham")

    assert result.distance_km == DEFAULT_DISTANCE_KM == 500.0
    assert result.is_default


def test_distinct_known_locations_positive():
    resolver = DistanceResolver(use_routing=False)
    names = known_locations()
    for origin, destination in zip(names, names[1:]):
        result = resolver.resolve(origin, destination)
        assert result.distance_km > 0, f"{origin} -> {destination}"
        assert result.duration_hours > 0, f"{origin} -> {destination}"
