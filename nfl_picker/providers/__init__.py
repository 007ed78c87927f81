"""Rate-governed provider clients for statistics and weather data.

This package provides:
- RequestScheduler: per-provider FIFO queue with a rolling per-minute quota
- MySportsFeedsClient: teams, games, team stats and injuries
- OpenWeatherClient: stadium forecasts/current conditions and weather impact
- Pydantic models for the normalized records
"""

from nfl_picker.providers.errors import (
    MissingTeamError,
    ProviderRequestError,
    SchedulerStoppedError,
)
from nfl_picker.providers.models import (
    Game,
    GameWeather,
    PlayerInjury,
    Season,
    SeasonType,
    Team,
    TeamStats,
)
from nfl_picker.providers.mysportsfeeds import MySportsFeedsClient, get_current_season
from nfl_picker.providers.openweather import (
    OpenWeatherClient,
    calculate_weather_impact,
    select_closest_forecast,
)
from nfl_picker.providers.scheduler import RateWindow, RequestScheduler

__all__ = [
    # Scheduling
    "RequestScheduler",
    "RateWindow",
    # Clients
    "MySportsFeedsClient",
    "OpenWeatherClient",
    "get_current_season",
    "calculate_weather_impact",
    "select_closest_forecast",
    # Errors
    "ProviderRequestError",
    "SchedulerStoppedError",
    "MissingTeamError",
    # Models
    "Team",
    "Game",
    "TeamStats",
    "PlayerInjury",
    "GameWeather",
    "Season",
    "SeasonType",
]
