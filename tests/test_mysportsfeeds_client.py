"""Tests for the MySportsFeeds client.

Uses pytest-httpx to mock feed responses and verify normalization, error
mapping and endpoint construction.
"""

from datetime import date, datetime, timezone

import httpx
import pytest
from freezegun import freeze_time

from nfl_picker.providers.errors import ProviderRequestError
from nfl_picker.providers.mysportsfeeds import (
    MySportsFeedsClient,
    get_current_season,
    map_game_status,
    map_injury_status,
    map_practice_status,
)
from nfl_picker.providers.scheduler import RequestScheduler

FEED_URL = "https://api.mysportsfeeds.com/v2.1/pull/nfl"

MOCK_TEAMS = {
    "teams": [
        {
            "team": {
                "id": 51,
                "name": "Chiefs",
                "abbreviation": "KC",
                "city": "Kansas City",
                "conference": "AFC",
                "division": "West",
                "logos": [{"href": "https://cdn.example.com/kc.png"}],
                "colors": {"primary": "#E31837", "secondary": "#FFB81C"},
            }
        },
        # Missing name and abbreviation: skipped
        {"team": {"id": 99}},
    ]
}

MOCK_GAMES = {
    "games": [
        {
            "schedule": {
                "id": 1001,
                "week": 5,
                "startTime": "2024-10-06T17:00:00Z",
                "awayTeam": {"id": 51},
                "homeTeam": {"id": 62},
                "venue": {"name": "Lambeau Field", "city": "Green Bay", "state": "WI"},
                "playedStatus": "COMPLETED",
            },
            "score": {"awayScoreTotal": 24, "homeScoreTotal": 17},
        },
        {
            "schedule": {
                "id": 1002,
                "startTime": "2024-10-07T00:20:00Z",
                "awayTeam": {"id": 70},
                "homeTeam": {"id": 71},
            },
            "score": None,
        },
    ]
}

MOCK_STATS = {
    "teamStatsTotals": [
        {
            "team": {"id": 51},
            "stats": {
                "gamesPlayed": 4,
                "wins": 3,
                "losses": 1,
                "pointsFor": 100,
                "pointsAgainst": 80,
                "thirdDownPercentage": 44.5,
            },
        }
    ]
}

MOCK_INJURIES = {
    "playerInjuries": [
        {
            "id": 9,
            "player": {"id": 700, "primaryPosition": "qb"},
            "team": {"id": 51},
            "status": "OUT",
            "injury": "Ankle",
            "practiceStatus": "DNP",
            "gameStatus": "Questionable",
        }
    ]
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr("nfl_picker.providers.mysportsfeeds.load_dotenv", lambda: None)
    return MySportsFeedsClient(
        api_key="test_key",
        scheduler=RequestScheduler("mysportsfeeds", limit=100, request_spacing=0),
    )


class TestMySportsFeedsClientInit:
    """Tests for client initialization."""

    def test_client_requires_api_key(self, monkeypatch):
        """Client raises ValueError when no API key is available."""
        monkeypatch.delenv("MYSPORTSFEEDS_API_KEY", raising=False)
        monkeypatch.setattr("nfl_picker.providers.mysportsfeeds.load_dotenv", lambda: None)
        with pytest.raises(ValueError, match="MYSPORTSFEEDS_API_KEY not found"):
            MySportsFeedsClient()

    def test_client_accepts_env_key(self, monkeypatch):
        monkeypatch.setenv("MYSPORTSFEEDS_API_KEY", "env_key")
        monkeypatch.setattr("nfl_picker.providers.mysportsfeeds.load_dotenv", lambda: None)
        client = MySportsFeedsClient()
        assert client.api_key == "env_key"
        assert client.scheduler.limit == 100
        assert client.scheduler.request_spacing == 0.1


class TestCurrentSeason:
    """Tests for the calendar season heuristic."""

    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(2024, 9, 1), (2024, "regular")),
            (date(2024, 12, 31), (2024, "regular")),
            (date(2025, 1, 15), (2025, "regular")),
            (date(2025, 2, 28), (2025, "regular")),
            (date(2025, 3, 1), (2025, "preseason")),
            (date(2025, 5, 31), (2025, "preseason")),
            (date(2025, 6, 1), (2025, "postseason")),
            (date(2025, 8, 31), (2025, "postseason")),
        ],
    )
    def test_season_by_month(self, today, expected):
        assert tuple(get_current_season(today)) == expected

    @freeze_time("2024-10-15")
    def test_defaults_to_today(self, client):
        season = client.get_current_season()
        assert season.year == 2024
        assert season.season_type == "regular"


class TestStatusMapping:
    """Tests for provider status normalization."""

    def test_game_status(self):
        assert map_game_status("COMPLETED") == "final"
        assert map_game_status("LIVE") == "live"
        assert map_game_status("UNPLAYED") == "scheduled"
        assert map_game_status(None) == "scheduled"

    def test_injury_status(self):
        assert map_injury_status("Questionable") == "questionable"
        assert map_injury_status("IR") == "injured-reserve"
        assert map_injury_status("PUP") == "pup"
        assert map_injury_status("") == "healthy"

    def test_practice_status(self):
        assert map_practice_status("DNP") == "did-not-participate"
        assert map_practice_status("Limited") == "limited"
        assert map_practice_status(None) == "unknown"


class TestMySportsFeedsClientFeeds:
    """Tests for feed requests and normalization."""

    @pytest.mark.asyncio
    async def test_get_teams_normalizes_and_skips_malformed(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{FEED_URL}/teams.json", json=MOCK_TEAMS)

        teams = await client.get_teams()

        assert len(teams) == 1
        team = teams[0]
        assert team.id == "51"
        assert team.abbreviation == "KC"
        assert team.logo == "https://cdn.example.com/kc.png"
        assert team.primary_color == "#E31837"

        request = httpx_mock.get_request()
        assert request.headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_get_games_uses_week_endpoint(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{FEED_URL}/2024-reg/week/5/games.json", json=MOCK_GAMES)

        games = await client.get_games(5, 2024, "regular")

        assert [g.id for g in games] == ["1001", "1002"]
        played, upcoming = games
        assert played.away_team_id == "51"
        assert played.home_team_id == "62"
        assert played.game_date == datetime(2024, 10, 6, 17, 0, tzinfo=timezone.utc)
        assert played.game_time == "5:00 PM UTC"
        assert played.venue == "Lambeau Field"
        assert played.status == "final"
        assert (played.away_score, played.home_score) == (24, 17)

        # Missing week and venue fall back to the request and "TBD"
        assert upcoming.week == 5
        assert upcoming.venue == "TBD"
        assert upcoming.status == "scheduled"
        assert upcoming.away_score is None

    @pytest.mark.asyncio
    async def test_get_games_postseason_slug(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{FEED_URL}/2024-post/week/1/games.json", json={"games": []})
        assert await client.get_games(1, 2024, "postseason") == []

    @pytest.mark.asyncio
    async def test_get_team_stats_defaults_missing_values(self, client, httpx_mock):
        httpx_mock.add_response(
            url=f"{FEED_URL}/2024-reg/week/5/team_stats_totals.json", json=MOCK_STATS
        )

        stats = await client.get_team_stats(5, 2024, "regular")

        assert len(stats) == 1
        assert stats[0].team_id == "51"
        assert stats[0].games_played == 4
        assert stats[0].ties == 0
        assert stats[0].third_down_percentage == 44.5
        assert stats[0].total_yards == 0
        assert (stats[0].week, stats[0].year) == (5, 2024)

    @pytest.mark.asyncio
    async def test_get_player_injuries_normalizes_statuses(self, client, httpx_mock):
        httpx_mock.add_response(
            url=f"{FEED_URL}/2024-reg/week/5/player_injuries.json", json=MOCK_INJURIES
        )

        injuries = await client.get_player_injuries(5, 2024, "regular")

        assert len(injuries) == 1
        injury = injuries[0]
        assert injury.player_id == "700"
        assert injury.team_id == "51"
        assert injury.position == "QB"
        assert injury.status == "out"
        assert injury.practice_status == "did-not-participate"
        assert injury.game_status == "questionable"
        assert injury.injury == "Ankle"

    @pytest.mark.asyncio
    async def test_empty_payload_returns_empty_list(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{FEED_URL}/teams.json", json={})
        assert await client.get_teams() == []


class TestMySportsFeedsClientErrors:
    """Tests for failure mapping."""

    @pytest.mark.asyncio
    async def test_http_error_raises_provider_error(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{FEED_URL}/teams.json", status_code=500)

        with pytest.raises(ProviderRequestError) as exc_info:
            await client.get_teams()

        assert exc_info.value.status_code == 500
        assert exc_info.value.endpoint == "/teams.json"
        assert exc_info.value.provider == "mysportsfeeds"
        assert client.scheduler.metrics.failures == 1

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self, client, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        with pytest.raises(ProviderRequestError, match="transport error") as exc_info:
            await client.get_teams()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_failed_request_does_not_block_next(self, client, httpx_mock):
        """Calls are never retried; the next queued call still runs."""
        httpx_mock.add_response(url=f"{FEED_URL}/teams.json", status_code=429)
        httpx_mock.add_response(url=f"{FEED_URL}/2024-reg/week/5/games.json", json={"games": []})

        with pytest.raises(ProviderRequestError):
            await client.get_teams()
        assert await client.get_games(5, 2024, "regular") == []

        assert len(httpx_mock.get_requests()) == 2
