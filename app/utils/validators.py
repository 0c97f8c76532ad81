import re
from typing import Any, Dict, List

from app.services.itinerary import EXPENSES_HEADING, WEATHER_HEADING

TRANSPORT_ROWS = ("Car", "Bus", "Train")
HTML_TAG = re.compile(r"</?[a-zA-Z][^>]*>")
MUSTVISIT_BLOCK = re.compile(r"\[MUSTVISIT\](.*?)\[/MUSTVISIT\]", re.DOTALL)


# Validation Functions


def validate_trip_document(document: str, narrative: str = None) -> Dict[str, Any]:
    """
    Check a generated trip document against its layout rules.

    Rules:
    - narrative comes first and, when given, is unchanged
    - exactly one expenses section, followed by exactly one weather section
    - expenses table has car, bus and train rows
    - no HTML tags

    Returns:
        {
            "valid": bool,
            "violations": [{"type": str, "severity": str, "message": str}],
            "stats": {...}
        }
    """
    violations: List[Dict[str, Any]] = []
    expenses_at = document.find(EXPENSES_HEADING)
    weather_at = document.find(WEATHER_HEADING)

    stats = {
        "length": len(document),
        "expenses_offset": expenses_at,
        "weather_offset": weather_at,
        "must_visit_places": 0,
    }

    def add(kind: str, severity: str, message: str) -> None:
        violations.append({"type": kind, "severity": severity, "message": message})

    # 1. Sections present exactly once
    for heading in (EXPENSES_HEADING, WEATHER_HEADING):
        count = document.count(heading)
        if count != 1:
            add("section_count", "error", f"'{heading}' appears {count} times")

    # 2. Order: narrative -> expenses -> weather
    if expenses_at != -1 and weather_at != -1 and weather_at < expenses_at:
        add("section_order", "error", "Weather section precedes expenses section")

    # 3. Narrative untouched
    if narrative is not None and not document.startswith(narrative):
        add("narrative_modified", "error", "Document does not start with the narrative")

    # 4. Transport rows
    if expenses_at != -1:
        table = document[expenses_at : weather_at if weather_at > expenses_at else None]
        for mode in TRANSPORT_ROWS:
            if f" {mode} " not in table:
                add("missing_transport", "error", f"No {mode} row in expenses table")

    # 5. Markdown only
    if HTML_TAG.search(document):
        add("html_tags", "warning", "Document contains HTML tags")

    # 6. Must-visit block (written by the narrative service, advisory only)
    block = MUSTVISIT_BLOCK.search(document)
    if block:
        stats["must_visit_places"] = len(
            [line for line in block.group(1).splitlines() if re.match(r"\s*\d+\.", line)]
        )
    else:
        add("missing_must_visit", "warning", "No [MUSTVISIT] block in narrative")

    return {
        "valid": len([v for v in violations if v["severity"] == "error"]) == 0,
        "violations": violations,
        "stats": stats,
    }


def assert_trip_document_valid(
    document: str, narrative: str = None, allow_warnings: bool = True
) -> None:
    """
    Assert document is valid, raise AssertionError if not.

    Args:
        allow_warnings: If False, warnings also cause assertion failure
    """
    result = validate_trip_document(document, narrative)
    errors = [v for v in result["violations"] if v["severity"] == "error"]
    warnings = [v for v in result["violations"] if v["severity"] == "warning"]

    if errors:
        raise AssertionError(
            f"Trip document has {len(errors)} errors:\n"
            + "\n".join(f"  - {v['message']}" for v in errors)
        )

    if not allow_warnings and warnings:
        raise AssertionError(
            f"Trip document has {len(warnings)} warnings:\n"
            + "\n".join(f"  - {v['message']}" for v in warnings)
        )
