"""OpenWeatherMap client for stadium weather.

Resolves a home team abbreviation to fixed stadium coordinates and fetches
either the forecast point nearest to kickoff or current conditions. All
requests go through the client's RequestScheduler (60 requests per minute,
200ms spacing by default). Readings are in imperial units.

Unavailable data is an absence, not an error: a team without coordinates or
a kickoff beyond the forecast horizon yields None.
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv

from nfl_picker.config import Settings
from nfl_picker.monitoring import get_logger
from nfl_picker.providers.base import ProviderClient
from nfl_picker.providers.errors import ProviderRequestError, SchedulerStoppedError
from nfl_picker.providers.models import GameWeather
from nfl_picker.providers.scheduler import RequestScheduler
from nfl_picker.providers.stadiums import get_stadium_coordinates

log = get_logger()

BASE_URL = "https://api.openweathermap.org/data/2.5"

# Forecasts further out than this are not requested
FORECAST_HORIZON = timedelta(hours=120)

BAD_CONDITIONS = {"Thunderstorm", "Snow", "Sleet", "Hail"}
MODERATE_CONDITIONS = {"Rain", "Drizzle", "Mist", "Fog"}

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def wind_direction(degrees: float | None) -> str:
    """Convert a meteorological bearing to a 16-point compass label."""
    if degrees is None:
        return "N"
    return COMPASS_POINTS[int(degrees / 22.5 + 0.5) % 16]


def calculate_weather_impact(weather: GameWeather) -> int:
    """Score playing conditions from 0 (worst) to 100 (best).

    Starts from 50 and applies one adjustment per factor:

    - Temperature: 50-70F +20, 40-80F +10, below 20F or above 90F -30,
      below 30F or above 85F -15
    - Wind: under 10 mph +15, under 20 mph +5, over 30 mph -25, over 20 mph -10
    - Precipitation: none +15, under 0.1 +5, over 0.5 -20, over 0.1 -10
    - Visibility: 10 km or more +10, under 5 km -15
    - Conditions: thunderstorm/snow/sleet/hail -25, rain/drizzle/mist/fog -10,
      clear +10

    Args:
        weather: Reading to score

    Returns:
        Integer score clamped to [0, 100]
    """
    impact = 50

    temperature = weather.temperature
    if 50 <= temperature <= 70:
        impact += 20
    elif 40 <= temperature <= 80:
        impact += 10
    elif temperature < 20 or temperature > 90:
        impact -= 30
    elif temperature < 30 or temperature > 85:
        impact -= 15

    wind_speed = weather.wind_speed
    if wind_speed < 10:
        impact += 15
    elif wind_speed < 20:
        impact += 5
    elif wind_speed > 30:
        impact -= 25
    elif wind_speed > 20:
        impact -= 10

    precipitation = weather.precipitation
    if precipitation == 0:
        impact += 15
    elif precipitation < 0.1:
        impact += 5
    elif precipitation > 0.5:
        impact -= 20
    elif precipitation > 0.1:
        impact -= 10

    if weather.visibility >= 10:
        impact += 10
    elif weather.visibility < 5:
        impact -= 15

    if weather.conditions in BAD_CONDITIONS:
        impact -= 25
    elif weather.conditions in MODERATE_CONDITIONS:
        impact -= 10
    elif weather.conditions == "Clear":
        impact += 10

    return max(0, min(100, impact))


def select_closest_forecast(entries: list[dict], kickoff: datetime) -> dict | None:
    """Pick the forecast point nearest to kickoff.

    Args:
        entries: Forecast points, each with a ``dt`` Unix timestamp
        kickoff: Scheduled kickoff (naive values are treated as UTC)

    Returns:
        The entry with the smallest absolute time difference; the first such
        entry in input order on ties. None for an empty list.
    """
    target = _as_utc(kickoff).timestamp()
    closest = None
    smallest_diff = float("inf")

    for entry in entries:
        diff = abs(entry["dt"] - target)
        if diff < smallest_diff:
            smallest_diff = diff
            closest = entry

    return closest


def parse_weather(payload: dict, precipitation_window: str, fetched_at: datetime) -> GameWeather:
    """Normalize a current-conditions or forecast-point payload.

    Args:
        payload: OpenWeatherMap reading (``/weather`` body or one ``list`` entry)
        precipitation_window: "1h" for current conditions, "3h" for forecasts
        fetched_at: Timestamp recorded as last_updated

    Returns:
        GameWeather with visibility converted from metres to kilometres
    """
    main = payload["main"]
    wind = payload.get("wind") or {}
    conditions = payload.get("weather") or []
    rain = (payload.get("rain") or {}).get(precipitation_window)
    snow = (payload.get("snow") or {}).get(precipitation_window)
    observed = payload.get("dt")

    return GameWeather(
        temperature=main["temp"],
        feels_like=main.get("feels_like", main["temp"]),
        humidity=main.get("humidity", 0),
        wind_speed=wind.get("speed", 0.0),
        wind_direction=wind_direction(wind.get("deg")),
        conditions=conditions[0].get("main", "Unknown") if conditions else "Unknown",
        precipitation=rain or snow or 0.0,
        visibility=payload.get("visibility", 10000) / 1000,
        observed_at=datetime.fromtimestamp(observed, tz=timezone.utc) if observed else None,
        last_updated=fetched_at,
    )


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class OpenWeatherClient(ProviderClient):
    """Async client for OpenWeatherMap current conditions and forecasts.

    Example:
        client = OpenWeatherClient()
        weather = await client.get_game_weather("GB", game.game_date)
        if weather:
            print(calculate_weather_impact(weather))
    """

    PROVIDER = "openweather"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = BASE_URL,
        rate_limit: int = 60,
        timeout: float = 15.0,
        request_spacing: float = 0.2,
        scheduler: RequestScheduler | None = None,
    ) -> None:
        """Initialize the OpenWeatherMap client.

        Args:
            api_key: API key. If not provided, reads OPENWEATHER_API_KEY.
            base_url: API base URL
            rate_limit: Requests allowed per minute
            timeout: Per-request timeout in seconds
            request_spacing: Delay after each request in seconds
            scheduler: Pre-built scheduler (overrides rate_limit/spacing)

        Raises:
            ValueError: If no API key is provided or found in environment.
        """
        load_dotenv()

        self.api_key = api_key or os.getenv("OPENWEATHER_API_KEY")
        if not self.api_key:
            raise ValueError(
                "OPENWEATHER_API_KEY not found in environment. "
                "Set it in .env or pass api_key parameter."
            )

        super().__init__(
            base_url=base_url,
            timeout=timeout,
            scheduler=scheduler
            or RequestScheduler(self.PROVIDER, limit=rate_limit, request_spacing=request_spacing),
            default_params={"appid": self.api_key, "units": "imperial"},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenWeatherClient":
        return cls(
            settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            rate_limit=settings.openweather_rate_limit,
            timeout=settings.openweather_timeout,
            request_spacing=settings.openweather_request_spacing,
        )

    async def get_current_weather(self, team_abbr: str) -> GameWeather | None:
        """Fetch current conditions at a team's stadium.

        Args:
            team_abbr: Home team abbreviation (e.g., "GB")

        Returns:
            GameWeather, or None if the team has no known stadium

        Raises:
            ProviderRequestError: If the request fails or the body is malformed
        """
        coordinates = get_stadium_coordinates(team_abbr)
        if coordinates is None:
            log.warning("stadium_coordinates_missing", team=team_abbr)
            return None

        data = await self._get_json("/weather", {"lat": coordinates.lat, "lon": coordinates.lon})
        if not data:
            return None
        try:
            return parse_weather(data, "1h", datetime.now(timezone.utc))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise self._malformed("/weather", e) from e

    async def get_forecast(
        self, team_abbr: str, kickoff: datetime, now: datetime | None = None
    ) -> GameWeather | None:
        """Fetch the forecast point closest to kickoff at a team's stadium.

        No request is made when the team has no coordinates or kickoff is more
        than 120 hours away; callers should fall back to current conditions.

        Args:
            team_abbr: Home team abbreviation
            kickoff: Scheduled kickoff
            now: Reference time (defaults to the current UTC time)

        Returns:
            GameWeather for the nearest forecast point, or None

        Raises:
            ProviderRequestError: If the request fails or the body is malformed
        """
        coordinates = get_stadium_coordinates(team_abbr)
        if coordinates is None:
            log.warning("stadium_coordinates_missing", team=team_abbr)
            return None

        kickoff = _as_utc(kickoff)
        now = _as_utc(now) if now else datetime.now(timezone.utc)
        if kickoff - now > FORECAST_HORIZON:
            log.info(
                "forecast_out_of_range",
                team=team_abbr,
                kickoff=kickoff.isoformat(),
                hours_until_kickoff=round((kickoff - now).total_seconds() / 3600, 1),
            )
            return None

        data = await self._get_json("/forecast", {"lat": coordinates.lat, "lon": coordinates.lon})
        try:
            closest = select_closest_forecast((data or {}).get("list") or [], kickoff)
            if closest is None:
                return None
            return parse_weather(closest, "3h", datetime.now(timezone.utc))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise self._malformed("/forecast", e) from e

    def _malformed(self, endpoint: str, error: Exception) -> ProviderRequestError:
        message = f"malformed payload: {type(error).__name__}: {error}"
        log.warning("malformed_weather_payload", provider=self.PROVIDER, endpoint=endpoint, error=message)
        return ProviderRequestError(self.PROVIDER, endpoint, message, status_code=200)

    async def get_game_weather(
        self, team_abbr: str, kickoff: datetime, now: datetime | None = None
    ) -> GameWeather | None:
        """Forecast for kickoff, falling back to current conditions.

        Raises:
            ProviderRequestError: If either request fails
        """
        weather = await self.get_forecast(team_abbr, kickoff, now=now)
        if weather is None:
            weather = await self.get_current_weather(team_abbr)
        return weather

    async def get_bulk_weather(
        self, team_abbrs: list[str], max_concurrency: int = 10
    ) -> dict[str, GameWeather | None]:
        """Fetch current conditions for many stadiums.

        At most ``max_concurrency`` lookups are in flight at once; the
        scheduler still serializes the underlying requests. A failed lookup
        maps to None instead of failing the batch.

        Args:
            team_abbrs: Home team abbreviations
            max_concurrency: Concurrent lookup bound

        Returns:
            Dict of team abbreviation -> GameWeather or None
        """
        semaphore = asyncio.Semaphore(max_concurrency)

        async def fetch(team_abbr: str) -> tuple[str, GameWeather | None]:
            async with semaphore:
                try:
                    return team_abbr, await self.get_current_weather(team_abbr)
                except (ProviderRequestError, SchedulerStoppedError) as e:
                    log.warning("bulk_weather_failed", team=team_abbr, error=str(e))
                    return team_abbr, None

        results = await asyncio.gather(*(fetch(abbr) for abbr in dict.fromkeys(team_abbrs)))
        return dict(results)
