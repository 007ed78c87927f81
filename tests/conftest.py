"""Shared pytest fixtures for NFL Picker tests."""

import re
from datetime import datetime, timezone

import pytest

from nfl_picker.monitoring import configure_logging
from nfl_picker.providers.models import Game, GameWeather, PlayerInjury, Team, TeamStats
from nfl_picker.providers.openweather import OpenWeatherClient
from nfl_picker.providers.scheduler import RequestScheduler

DEGRADED_WEATHER_BODY = {"cod": 200, "message": "degraded"}


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Configure structlog for test output."""
    configure_logging("development")


@pytest.fixture
def chiefs():
    return Team(id="51", name="Chiefs", abbreviation="KC", city="Kansas City", conference="AFC", division="West")


@pytest.fixture
def packers():
    return Team(id="62", name="Packers", abbreviation="GB", city="Green Bay", conference="NFC", division="North")


@pytest.fixture
def teams(chiefs, packers):
    return [chiefs, packers]


@pytest.fixture
def game():
    """Chiefs (away) at Packers (home), week 5."""
    return Game(
        id="1001",
        week=5,
        year=2024,
        season_type="regular",
        away_team_id="51",
        home_team_id="62",
        game_date=datetime(2024, 10, 6, 17, 0, tzinfo=timezone.utc),
        game_time="5:00 PM UTC",
        venue="Lambeau Field",
    )


@pytest.fixture
def strong_stats():
    """8-2 team with a +10 point differential per game.

    Sub-scores: strength 77, offense 81, defense 44, momentum 90, overall 72.
    """
    return TeamStats(
        team_id="51",
        week=5,
        year=2024,
        games_played=10,
        wins=8,
        losses=2,
        points_for=280,
        points_against=180,
        total_yards=3800,
        total_yards_allowed=3200,
        takeaways=15,
        sacks=30,
        third_down_percentage=45,
        third_down_percentage_allowed=35,
        red_zone_percentage=60,
        red_zone_percentage_allowed=50,
    )


@pytest.fixture
def weak_stats():
    """3-7 team with a -8 point differential per game.

    Sub-scores: strength 31, offense 57, defense 29, momentum 25, overall 48.
    """
    return TeamStats(
        team_id="62",
        week=5,
        year=2024,
        games_played=10,
        wins=3,
        losses=7,
        points_for=170,
        points_against=250,
        total_yards=3000,
        total_yards_allowed=3600,
        takeaways=8,
        sacks=20,
        third_down_percentage=35,
        third_down_percentage_allowed=42,
        red_zone_percentage=45,
        red_zone_percentage_allowed=58,
    )


@pytest.fixture
def clear_weather():
    return GameWeather(
        temperature=60,
        feels_like=58,
        humidity=40,
        wind_speed=5,
        wind_direction="NW",
        conditions="Clear",
        precipitation=0,
        visibility=10,
        last_updated=datetime(2024, 10, 6, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_injury():
    """Factory for injury reports."""

    def _make(team_id: str, position: str, status: str, player_id: str = "700") -> PlayerInjury:
        return PlayerInjury(
            id=f"inj_{player_id}",
            player_id=player_id,
            team_id=team_id,
            position=position,
            status=status,
            last_updated=datetime(2024, 10, 5, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def degraded_weather_client(monkeypatch, httpx_mock):
    """OpenWeather client whose forecast and current endpoints answer 200 without readings."""
    monkeypatch.setattr("nfl_picker.providers.openweather.load_dotenv", lambda: None)
    httpx_mock.add_response(
        url=re.compile(r"https://api\.openweathermap\.org/data/2\.5/forecast\?.*"),
        json=DEGRADED_WEATHER_BODY,
    )
    httpx_mock.add_response(
        url=re.compile(r"https://api\.openweathermap\.org/data/2\.5/weather\?.*"),
        json=DEGRADED_WEATHER_BODY,
    )
    return OpenWeatherClient(
        api_key="weather_key",
        scheduler=RequestScheduler("openweather", limit=60, request_spacing=0),
    )
