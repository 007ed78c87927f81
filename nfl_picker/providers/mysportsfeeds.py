"""MySportsFeeds client for NFL teams, games, team stats and injuries.

All requests go through the client's RequestScheduler (100 requests per
minute, 100ms spacing by default). Raw payloads are normalized into the
frozen models from ``nfl_picker.providers.models``.

Endpoints (relative to https://api.mysportsfeeds.com/v2.1/pull/nfl):
    /teams.json
    /{year}-{pre|reg|post}/week/{week}/games.json
    /{year}-{pre|reg|post}/week/{week}/team_stats_totals.json
    /{year}-{pre|reg|post}/week/{week}/player_injuries.json
"""

import os
from datetime import date, datetime, timezone

from dotenv import load_dotenv

from nfl_picker.config import Settings
from nfl_picker.monitoring import get_logger
from nfl_picker.providers.base import ProviderClient
from nfl_picker.providers.models import (
    SEASON_TYPE_SLUGS,
    Game,
    GameStatus,
    InjuryStatus,
    PlayerInjury,
    PracticeStatus,
    Season,
    SeasonType,
    Team,
    TeamStats,
)
from nfl_picker.providers.scheduler import RequestScheduler

log = get_logger()

BASE_URL = "https://api.mysportsfeeds.com/v2.1/pull/nfl"

# TeamStats field -> provider stats key
STAT_FIELDS: dict[str, str] = {
    "games_played": "gamesPlayed",
    "wins": "wins",
    "losses": "losses",
    "ties": "ties",
    "points_for": "pointsFor",
    "points_against": "pointsAgainst",
    "total_yards": "totalYards",
    "passing_yards": "passingYards",
    "rushing_yards": "rushingYards",
    "total_yards_allowed": "totalYardsAllowed",
    "passing_yards_allowed": "passingYardsAllowed",
    "rushing_yards_allowed": "rushingYardsAllowed",
    "turnovers": "turnovers",
    "takeaways": "takeaways",
    "sacks": "sacks",
    "sacks_allowed": "sacksAllowed",
    "third_down_percentage": "thirdDownPercentage",
    "third_down_percentage_allowed": "thirdDownPercentageAllowed",
    "red_zone_percentage": "redZonePercentage",
    "red_zone_percentage_allowed": "redZonePercentageAllowed",
    "time_of_possession": "timeOfPossession",
    "penalties": "penalties",
    "penalty_yards": "penaltyYards",
}


def get_current_season(today: date | None = None) -> Season:
    """Infer the season year and phase from the calendar.

    - Sep-Dec and Jan-Feb: regular season
    - Mar-May: preseason
    - Jun-Aug: postseason

    The year is always the calendar year of ``today``, including January and
    February.

    Args:
        today: Date to classify (defaults to the current date)

    Returns:
        Season(year, season_type)
    """
    today = today or datetime.now().date()
    if today.month >= 9 or today.month <= 2:
        return Season(today.year, "regular")
    if 3 <= today.month <= 5:
        return Season(today.year, "preseason")
    return Season(today.year, "postseason")


# Provider value (lowercased) -> normalized value; anything else falls back
# to the mapper's default
GAME_STATUS_ALIASES: dict[str, GameStatus] = {
    "live": "live",
    "in_progress": "live",
    "final": "final",
    "closed": "final",
    "completed": "final",
    "postponed": "postponed",
    "cancelled": "cancelled",
    "canceled": "cancelled",
}

INJURY_STATUS_ALIASES: dict[str, InjuryStatus] = {
    "questionable": "questionable",
    "doubtful": "doubtful",
    "out": "out",
    "ir": "injured-reserve",
    "injured-reserve": "injured-reserve",
    "injured reserve": "injured-reserve",
    "pup": "pup",
    "physically-unable-to-perform": "pup",
}

PRACTICE_STATUS_ALIASES: dict[str, PracticeStatus] = {
    "full": "full",
    "limited": "limited",
    "dnp": "did-not-participate",
    "did-not-participate": "did-not-participate",
}


def map_game_status(status: str | None) -> GameStatus:
    """Normalize a provider game status (unknown values mean scheduled)."""
    return GAME_STATUS_ALIASES.get((status or "").lower(), "scheduled")


def map_injury_status(status: str | None) -> InjuryStatus:
    """Normalize a provider injury designation (unknown values mean healthy)."""
    return INJURY_STATUS_ALIASES.get((status or "").lower(), "healthy")


def map_practice_status(status: str | None) -> PracticeStatus:
    """Normalize a provider practice participation level."""
    return PRACTICE_STATUS_ALIASES.get((status or "").lower(), "unknown")


def _format_game_time(kickoff: datetime) -> str:
    hour = kickoff.strftime("%I").lstrip("0") or "12"
    return f"{hour}:{kickoff.strftime('%M %p')} {kickoff.tzname() or 'UTC'}"


def _parse_kickoff(value: str) -> datetime:
    kickoff = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if kickoff.tzinfo is None:
        kickoff = kickoff.replace(tzinfo=timezone.utc)
    return kickoff


class MySportsFeedsClient(ProviderClient):
    """Async client for the MySportsFeeds NFL feeds.

    Example:
        client = MySportsFeedsClient()
        season = get_current_season()
        games = await client.get_games(1, season.year, season.season_type)
    """

    PROVIDER = "mysportsfeeds"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = BASE_URL,
        rate_limit: int = 100,
        timeout: float = 30.0,
        request_spacing: float = 0.1,
        scheduler: RequestScheduler | None = None,
    ) -> None:
        """Initialize the MySportsFeeds client.

        Args:
            api_key: API key. If not provided, reads MYSPORTSFEEDS_API_KEY.
            base_url: Feed base URL
            rate_limit: Requests allowed per minute
            timeout: Per-request timeout in seconds
            request_spacing: Delay after each request in seconds
            scheduler: Pre-built scheduler (overrides rate_limit/spacing)

        Raises:
            ValueError: If no API key is provided or found in environment.
        """
        load_dotenv()

        self.api_key = api_key or os.getenv("MYSPORTSFEEDS_API_KEY")
        if not self.api_key:
            raise ValueError(
                "MYSPORTSFEEDS_API_KEY not found in environment. "
                "Set it in .env or pass api_key parameter."
            )

        super().__init__(
            base_url=base_url,
            timeout=timeout,
            scheduler=scheduler
            or RequestScheduler(self.PROVIDER, limit=rate_limit, request_spacing=request_spacing),
            auth=(self.api_key, "MYSPORTSFEEDS"),
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "MySportsFeedsClient":
        return cls(
            settings.mysportsfeeds_api_key,
            base_url=settings.mysportsfeeds_base_url,
            rate_limit=settings.mysportsfeeds_rate_limit,
            timeout=settings.mysportsfeeds_timeout,
            request_spacing=settings.mysportsfeeds_request_spacing,
        )

    def get_current_season(self, today: date | None = None) -> Season:
        return get_current_season(today)

    async def get_teams(self) -> list[Team]:
        """Fetch all teams.

        Returns:
            List of Team models (empty if the payload has no teams)

        Raises:
            ProviderRequestError: If the request fails
        """
        data = await self._get_json("/teams.json")
        teams = []
        for entry in (data or {}).get("teams") or []:
            try:
                teams.append(self._parse_team(entry))
            except (KeyError, TypeError, ValueError) as e:
                log.warning("malformed_team_skipped", provider=self.PROVIDER, error=str(e))
        return teams

    async def get_games(self, week: int, year: int, season_type: SeasonType) -> list[Game]:
        """Fetch the schedule for one week.

        Raises:
            ProviderRequestError: If the request fails
        """
        data = await self._get_json(self._week_endpoint(week, year, season_type, "games.json"))
        games = []
        for entry in (data or {}).get("games") or []:
            try:
                games.append(self._parse_game(entry, week, year, season_type))
            except (KeyError, TypeError, ValueError) as e:
                log.warning("malformed_game_skipped", provider=self.PROVIDER, week=week, error=str(e))
        return games

    async def get_team_stats(self, week: int, year: int, season_type: SeasonType) -> list[TeamStats]:
        """Fetch season-to-date team totals as of one week.

        Raises:
            ProviderRequestError: If the request fails
        """
        data = await self._get_json(
            self._week_endpoint(week, year, season_type, "team_stats_totals.json")
        )
        stats = []
        for entry in (data or {}).get("teamStatsTotals") or []:
            try:
                stats.append(self._parse_team_stats(entry, week, year))
            except (KeyError, TypeError, ValueError) as e:
                log.warning("malformed_team_stats_skipped", provider=self.PROVIDER, week=week, error=str(e))
        return stats

    async def get_player_injuries(
        self, week: int, year: int, season_type: SeasonType
    ) -> list[PlayerInjury]:
        """Fetch the injury report for one week.

        Raises:
            ProviderRequestError: If the request fails
        """
        data = await self._get_json(
            self._week_endpoint(week, year, season_type, "player_injuries.json")
        )
        now = datetime.now(timezone.utc)
        injuries = []
        for entry in (data or {}).get("playerInjuries") or []:
            try:
                injuries.append(self._parse_injury(entry, now))
            except (KeyError, TypeError, ValueError) as e:
                log.warning("malformed_injury_skipped", provider=self.PROVIDER, week=week, error=str(e))
        return injuries

    @staticmethod
    def _week_endpoint(week: int, year: int, season_type: SeasonType, feed: str) -> str:
        return f"/{year}-{SEASON_TYPE_SLUGS[season_type]}/week/{week}/{feed}"

    @staticmethod
    def _parse_team(entry: dict) -> Team:
        team = entry["team"]
        logos = team.get("logos") or []
        colors = team.get("colors") or {}
        return Team(
            id=str(team["id"]),
            name=team["name"],
            abbreviation=team["abbreviation"],
            city=team.get("city") or "",
            conference=team.get("conference") or "",
            division=team.get("division") or "",
            logo=logos[0].get("href") if logos else None,
            primary_color=colors.get("primary"),
            secondary_color=colors.get("secondary"),
        )

    @staticmethod
    def _parse_game(entry: dict, week: int, year: int, season_type: SeasonType) -> Game:
        schedule = entry["schedule"]
        score = entry.get("score") or {}
        venue = schedule.get("venue") or {}
        kickoff = _parse_kickoff(schedule["startTime"])

        return Game(
            id=str(schedule["id"]),
            week=schedule.get("week") or week,
            year=schedule.get("season") or year,
            season_type=season_type,
            away_team_id=str(schedule["awayTeam"]["id"]),
            home_team_id=str(schedule["homeTeam"]["id"]),
            game_date=kickoff,
            game_time=_format_game_time(kickoff),
            timezone=schedule.get("timezone"),
            venue=venue.get("name") or "TBD",
            venue_city=venue.get("city") or "TBD",
            venue_state=venue.get("state") or "TBD",
            status=map_game_status(schedule.get("status") or schedule.get("playedStatus")),
            away_score=score.get("awayScoreTotal"),
            home_score=score.get("homeScoreTotal"),
            quarter=score.get("currentQuarter"),
            time_remaining=score.get("currentTimeRemaining"),
        )

    @staticmethod
    def _parse_team_stats(entry: dict, week: int, year: int) -> TeamStats:
        raw = entry.get("stats") or {}
        values = {field: raw.get(key) or 0 for field, key in STAT_FIELDS.items()}
        return TeamStats(
            team_id=str(entry["team"]["id"]),
            week=raw.get("week") or week,
            year=raw.get("season") or year,
            **values,
        )

    @staticmethod
    def _parse_injury(entry: dict, fetched_at: datetime) -> PlayerInjury:
        player = entry["player"]
        position = player.get("position") or player.get("primaryPosition") or ""
        return PlayerInjury(
            id=str(entry.get("id") or player["id"]),
            player_id=str(player["id"]),
            team_id=str(entry["team"]["id"]),
            position=position.upper(),
            status=map_injury_status(entry.get("status")),
            injury=entry.get("injury") or "Unknown",
            practice_status=map_practice_status(entry.get("practiceStatus")),
            game_status=map_injury_status(entry.get("gameStatus")),
            last_updated=fetched_at,
        )
