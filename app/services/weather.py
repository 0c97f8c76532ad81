import datetime as dt
import requests
from typing import Any, Dict, Optional
from app.core.config import settings
from app.core.exceptions import WeatherUnavailableError
from app.schemas.trip import Forecast, WeatherData
from app.utils.logger import get_logger

logger = get_logger(__name__)

MIDDAY_HOURS = range(11, 15)  # 11:00-14:59 local


def parse_forecast(payload: Dict[str, Any]) -> WeatherData:
    """
    Reduce a 5-day/3-hour OpenWeather payload to one midday slot per date.

    The first slot of each date whose local hour falls in MIDDAY_HOURS is kept.
    """
    city = payload.get("city") or {}
    data = WeatherData(city=city.get("name", ""), country=city.get("country", ""))

    seen = set()
    for item in payload.get("list", []):
        stamp = dt.datetime.fromtimestamp(item["dt"])
        date = stamp.strftime("%Y-%m-%d")
        if stamp.hour not in MIDDAY_HOURS or date in seen:
            continue

        main = item["main"]
        condition = (item.get("weather") or [{}])[0]
        data.forecasts.append(
            Forecast(
                date=date,
                temp=main["temp"],
                feels_like=main["feels_like"],
                temp_min=main["temp_min"],
                temp_max=main["temp_max"],
                humidity=main["humidity"],
                description=condition.get("description", ""),
                icon=condition.get("icon", ""),
                wind_speed=(item.get("wind") or {}).get("speed", 0.0),
                rain_chance=item.get("pop", 0.0) * 100,
            )
        )
        seen.add(date)

    return data


def get_weather_forecast(
    destination: str, api_key: Optional[str] = None
) -> WeatherData:
    """
    Fetch the 5-day forecast for a place name.

    Raises:
        WeatherUnavailableError: missing key, HTTP failure or unparseable payload
    """
    api_key = settings.OPENWEATHER_API_KEY if api_key is None else api_key
    if not api_key:
        raise WeatherUnavailableError("OPENWEATHER_API_KEY not set")

    params = {"q": destination, "appid": api_key, "units": "metric"}
    try:
        resp = requests.get(
            settings.OPENWEATHER_URL, params=params, timeout=settings.OPENWEATHER_TIMEOUT
        )
    except requests.exceptions.RequestException as e:
        raise WeatherUnavailableError(f"Failed to fetch weather data: {e}") from e

    if resp.status_code != 200:
        raise WeatherUnavailableError(f"weather API error: {resp.text}")

    try:
        return parse_forecast(resp.json())
    except (ValueError, KeyError, TypeError, IndexError) as e:
        raise WeatherUnavailableError(f"Failed to parse weather data: {e}") from e


def format_weather(weather: WeatherData) -> str:
    lines = [f"\n🌤️ **Weather Forecast for {weather.city}, {weather.country}**\n\n"]

    for f in weather.forecasts:
        lines.append(f"**{f.date}:**\n")
        lines.append(
            f"- Temperature: {f.temp:.1f}°C (Feels like: {f.feels_like:.1f}°C)\n"
        )
        lines.append(f"- High/Low: {f.temp_max:.1f}°C / {f.temp_min:.1f}°C\n")
        lines.append(f"- Condition: {f.description}\n")
        lines.append(f"- Humidity: {f.humidity}%\n")
        lines.append(f"- Wind Speed: {f.wind_speed:.1f} m/s\n")
        lines.append(f"- Rain Chance: {f.rain_chance:.0f}%\n\n")

    lines.append("💡 **Weather Tips:**\n")
    lines.append("- Check weather updates closer to your travel dates\n")
    lines.append("- Pack accordingly based on the forecast\n")
    lines.append("- Consider weather when planning outdoor activities\n\n")
    return "".join(lines)


def weather_unavailable_notice(destination: str) -> str:
    return f"\n⚠️ Weather information not available for {destination}\n"


def format_weather_for_trip(destination: str) -> str:
    """Markdown weather block for a trip document. Never raises."""
    try:
        weather = get_weather_forecast(destination)
    except WeatherUnavailableError as e:
        logger.warning("Weather unavailable for %s: %s", destination, e)
        return weather_unavailable_notice(destination)
    return format_weather(weather)
