import pytest
from app.core.exceptions import NarrativeGenerationError
from app.schemas.trip import TripRequest
from app.services.costs import compute_costs
from app.services.itinerary import (
    EXPENSES_HEADING,
    WEATHER_HEADING,
    augment,
    build_expense_section,
    generate_trip_document,
)
from app.services.routing import DistanceResolver
from app.utils.validators import assert_trip_document_valid, validate_trip_document

NARRATIVE = """# Trip to Mysuru (Mysore)

Mysuru is the city of palaces.

## 🌟 Top 5 Must-Visit Places

[MUSTVISIT]
1. **Mysore Palace** - The seat of the Wadiyars
2. **Chamundi Hills** - Temple with a view over the city
3. **Brindavan Gardens** - Musical fountains at dusk
4. **St. Philomena's Church** - Neo-gothic landmark
5. **Devaraja Market** - Flowers, spices and sandalwood
[/MUSTVISIT]

## Day 1: Journey to Mysuru (Mysore)
- Depart after breakfast
"""


def make_trip(**overrides):
    data = {
        "initial_destination": "Bengaluru Urban",
        "final_destination": "Mysuru (Mysore)",
        "start_date": "2025-06-01",
        "end_date": "2025-06-03",
        "num_travelers": 4,
        "mood": "historical",
    }
    data.update(overrides)
    return TripRequest(**data)


class FakeNarrativeClient:
    def __init__(self, text=NARRATIVE, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def complete(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.text


def test_expense_section_table():
    trip = make_trip()
    section = build_expense_section(trip, compute_costs(100.0, 4, 2.25))

    assert "**Route:** Bengaluru Urban → Mysuru (Mysore)" in section
    assert "**Distance:** 100.00 km | **Travelers:** 4" in section
    # per person / total, whole rupees
    assert "| 🚗 Car    | 2h 15m       | 229            | 917           |" in section
    assert "| 150            | 600           |" in section
    assert "| 70            | 280           |" in section
    assert "Train offers the best balance of cost and comfort" in section


def test_augment_section_order():
    trip = make_trip()
    document = augment(NARRATIVE, trip, compute_costs(100.0, 4, 2.0), "sunny all week")

    assert document.startswith(NARRATIVE)
    assert document.index(EXPENSES_HEADING) < document.index(WEATHER_HEADING)
    assert document.index("sunny all week") > document.index(WEATHER_HEADING)
    assert_trip_document_valid(document, narrative=NARRATIVE, allow_warnings=False)


def test_generate_trip_document():
    client = FakeNarrativeClient()
    trip = make_trip()

    document = generate_trip_document(
        trip,
        resolver=DistanceResolver(use_routing=False),
        narrative_client=client,
        weather_formatter=lambda place: f"Forecast for {place}",
    )

    assert len(client.calls) == 1
    system_prompt, user_prompt = client.calls[0]
    assert "Mysuru (Mysore)" in system_prompt
    assert "Distance between Bengaluru Urban and Mysuru (Mysore):" in user_prompt
    assert "₹" not in user_prompt

    assert "Forecast for Mysuru (Mysore)" in document
    assert_trip_document_valid(document, narrative=NARRATIVE, allow_warnings=False)

    result = validate_trip_document(document)
    assert result["stats"]["must_visit_places"] == 5
    print(f"\n✅ Document length: {result['stats']['length']} chars")


def test_weather_failure_still_produces_document():
    def broken_weather(place):
        raise RuntimeError("weather service down")

    document = generate_trip_document(
        make_trip(),
        resolver=DistanceResolver(use_routing=False),
        narrative_client=FakeNarrativeClient(),
        weather_formatter=broken_weather,
    )

    assert "Weather information not available for Mysuru (Mysore)" in document
    assert document.index(EXPENSES_HEADING) < document.index(WEATHER_HEADING)
    assert_trip_document_valid(document, narrative=NARRATIVE)


def test_unknown_destination_uses_default_costs():
    document = generate_trip_document(
        make_trip(final_destination="Goa", num_travelers=2),
        resolver=DistanceResolver(use_routing=False),
        narrative_client=FakeNarrativeClient(),
        weather_formatter=lambda place: "n/a",
    )

    assert "**Distance:** 500.00 km" in document
    assert "8-10 hours" in document


def test_narrative_failure_propagates():
    with pytest.raises(NarrativeGenerationError):
        generate_trip_document(
            make_trip(),
            resolver=DistanceResolver(use_routing=False),
            narrative_client=FakeNarrativeClient(
                error=NarrativeGenerationError("groq API error: 500")
            ),
            weather_formatter=lambda place: "n/a",
        )


def test_validator_flags_wrong_order():
    document = NARRATIVE + "\n" + WEATHER_HEADING + "\n\n" + EXPENSES_HEADING + "\n"
    result = validate_trip_document(document)

    assert not result["valid"]
    kinds = {v["type"] for v in result["violations"]}
    assert "section_order" in kinds
    assert "missing_transport" in kinds
