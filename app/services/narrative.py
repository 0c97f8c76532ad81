import requests
import textwrap
from typing import Optional
from app.core.config import settings
from app.core.exceptions import NarrativeGenerationError
from app.schemas.trip import TripRequest
from app.utils.logger import get_logger

logger = get_logger(__name__)

MOOD_ACTIVITIES = {
    "cultural": "cultural exploration, museums, temples, local traditions, art galleries",
    "natural_beauty": "nature exploration, scenic viewpoints, parks, gardens, natural landscapes",
    "historical": "historical monuments, heritage sites, forts, palaces, ancient architecture",
    "adventure": "adventure activities, trekking, outdoor sports, thrilling experiences",
    "relaxation": "relaxation, spa, peaceful locations, wellness, serene environments",
}
DEFAULT_ACTIVITIES = "diverse tourist attractions and local experiences"


# Prompt templates

SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are a professional Indian travel planner. Create detailed itineraries using markdown formatting (NO HTML tags).
    - Use real restaurant names in {destination} with specific dishes
    - Attractions within 100km of {destination}
    - Focus on {activities} activities
    - Day 1 is journey/arrival day with travel details
    - Middle days are full exploration with morning/afternoon/evening structure
    - Each exploration day MUST have specific breakfast, lunch, dinner places (NO PRICES)
    - Last day is return journey with breakfast and departure
    - Use markdown formatting: # for titles, ## for day headers, ### for subsections, ** for bold, - for bullets
    - DO NOT include any prices, costs, budget information, or accommodation costs
    - DO NOT use HTML tags
    - mention entry fees or ticket prices"""
)

USER_PROMPT = textwrap.dedent(
    """\
    Create a personalized {days}-day trip itinerary for {destination} from {start} to {end}.
    This is for a {companions} trip focusing on these activities: {activities}.

    TRAVEL INFORMATION:
    {travel_info}

    IMPORTANT: DO NOT include any cost estimates, budget breakdowns, or accommodation prices in your response. Only provide the itinerary, attractions, and restaurant recommendations.

    Please include:
    1. A brief introduction to {destination} highlighting why it's perfect for this type of trip
    2. **TOP 5 MUST-VISIT PLACES** section (REQUIRED - place this right after the introduction)
    3. A day-by-day itinerary with clear Morning, Afternoon, and Evening sections for each day
    4. At least 5-7 specific attraction recommendations (within 100km of {destination}) with brief descriptions
    5. 3-5 restaurant recommendations with specific dishes (DO NOT include prices)
    6. 2-3 insider tips that most tourists might not know about

    IMPORTANT STRUCTURE:

    ## 🌟 Top 5 Must-Visit Places

    RIGHT AFTER the introduction, include this section with EXACTLY this format:
    [MUSTVISIT]
    1. **Place Name** - One line description of why it's unmissable
    2. **Place Name** - One line description of why it's unmissable
    3. **Place Name** - One line description of why it's unmissable
    4. **Place Name** - One line description of why it's unmissable
    5. **Place Name** - One line description of why it's unmissable
    [/MUSTVISIT]

    ---

    Day 1 should be: Journey from {origin} to {destination}
    - Include travel details and arrival
    - Hotel check-in
    - Light evening activities

    Days 2 to {last_exploration_day} should be: Exploration days
    Each day must have:
    - **Best place for Breakfast:** (restaurant name, famous dishes - NO PRICES)
    - **Morning Activities:** (specific attraction with what it's famous for and what you can do)
    - **Best place for Lunch:** (restaurant name, famous dishes - NO PRICES)
    - **Afternoon Activities:** (another attraction)
    - **Best place for Dinner:** (restaurant name, famous dishes - NO PRICES)

    Day {days} should be: Return journey from {destination} back to {origin}
    - Breakfast recommendation
    - Checkout and departure
    - Return travel details

    Format the response with clear markdown formatting:
    - Use # for main title (Trip to {destination})
    - Use ## for day headers (Day 1: Journey to {destination}, Day 2: Explore [Location], etc.)
    - Use ### for section headers (Morning, Afternoon, Evening)
    - Use **bold** for restaurant names, attraction names, and important information
    - Use bullet points (- ) for lists
    - Use --- for section dividers
    - Prefix insider tips with "**Insider Tip:**"

    DO NOT INCLUDE:
    - Any prices or costs
    - Budget breakdowns
    - Accommodation costs
    - Transportation costs
    - Entry fees

    IMPORTANT:
    - Make the content detailed and specific to {destination}
    - Use real restaurant names in {destination}
    - Attractions should be within 100km of {destination}
    - Each exploration day must have breakfast, lunch, and dinner recommendations (NO PRICES)
    - Day 1 is arrival/journey, last day is departure/return
    - DO NOT use HTML tags, use markdown formatting only
    - Use ** for bold, # for headers, - for bullets

    This is a {days}-day itinerary focused on {activities} for {num_travelers} travelers."""
)


def describe_companions(num_travelers: int) -> str:
    if num_travelers == 1:
        return "solo"
    if num_travelers == 2:
        return "couple"
    if num_travelers <= 5:
        return f"group of {num_travelers}"
    return f"large group of {num_travelers}"


def activities_for_mood(mood: Optional[str]) -> str:
    return MOOD_ACTIVITIES.get((mood or "").strip().lower(), DEFAULT_ACTIVITIES)


def _long_date(d) -> str:
    # "January 2, 2006" without a zero-padded day
    return f"{d:%B} {d.day}, {d:%Y}"


def build_system_prompt(trip: TripRequest) -> str:
    return SYSTEM_PROMPT.format(
        destination=trip.final_destination,
        activities=activities_for_mood(trip.mood),
    )


def build_user_prompt(trip: TripRequest, travel_info: str) -> str:
    days = trip.duration_days
    return USER_PROMPT.format(
        days=days,
        last_exploration_day=days - 1,
        destination=trip.final_destination,
        origin=trip.initial_destination,
        start=_long_date(trip.start),
        end=_long_date(trip.end),
        companions=describe_companions(trip.num_travelers),
        activities=activities_for_mood(trip.mood),
        travel_info=travel_info,
        num_travelers=trip.num_travelers,
    )


class NarrativeClient:
    """Chat-completion client for the Groq OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.api_key = settings.GROQ_API_KEY if api_key is None else api_key
        self.url = url or settings.GROQ_URL
        self.model = model or settings.GROQ_MODEL
        self.timeout = timeout or settings.GROQ_TIMEOUT

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one completion and return the first choice's text.

        Raises:
            NarrativeGenerationError: missing key, transport failure,
                non-2xx response or no choices
        """
        if not self.api_key:
            raise NarrativeGenerationError("GROQ_API_KEY not set")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = requests.post(
                self.url, json=body, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise NarrativeGenerationError(f"groq request failed: {e}") from e

        if not resp.ok:
            raise NarrativeGenerationError(f"groq API error: {resp.text}")

        try:
            choices = resp.json().get("choices") or []
        except (ValueError, AttributeError) as e:
            raise NarrativeGenerationError(f"groq returned invalid JSON: {e}") from e

        if not choices:
            raise NarrativeGenerationError("no response from Groq API")

        content = (choices[0].get("message") or {}).get("content") or ""
        logger.info("Narrative generated: %d chars", len(content))
        return content
