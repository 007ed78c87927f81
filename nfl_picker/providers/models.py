"""Pydantic models for normalized provider data.

Every record is a frozen snapshot of one provider response. Provider clients
build these from raw payloads; the prediction engine only ever reads them.
"""

from datetime import datetime
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator

SeasonType = Literal["preseason", "regular", "postseason"]
GameStatus = Literal["scheduled", "live", "final", "postponed", "cancelled"]
InjuryStatus = Literal["healthy", "questionable", "doubtful", "out", "injured-reserve", "pup"]
PracticeStatus = Literal["full", "limited", "did-not-participate", "unknown"]

# URL segment used by the statistics provider for each season type
SEASON_TYPE_SLUGS: dict[str, str] = {
    "preseason": "pre",
    "regular": "reg",
    "postseason": "post",
}


class Season(NamedTuple):
    """A season year and phase."""

    year: int
    season_type: SeasonType


class Team(BaseModel):
    """NFL team metadata.

    Attributes:
        id: Provider-assigned team id
        name: Team nickname (e.g., "Chiefs")
        abbreviation: Team abbreviation (e.g., "KC")
        city: Home city
        conference: Conference (e.g., "AFC")
        division: Division (e.g., "West")
        logo: Logo URL (optional)
        primary_color: Primary color hex (optional)
        secondary_color: Secondary color hex (optional)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    abbreviation: str
    city: str = ""
    conference: str = ""
    division: str = ""
    logo: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None


class Game(BaseModel):
    """Scheduled or played game snapshot.

    Attributes:
        id: Provider-assigned game id
        week: Week number
        year: Season year
        season_type: Season phase
        away_team_id: Visiting team id
        home_team_id: Host team id
        game_date: Scheduled kickoff
        game_time: Human-readable kickoff time (e.g., "1:00 PM UTC")
        timezone: Venue timezone, if provided
        venue: Stadium name ("TBD" when unknown)
        venue_city: Stadium city ("TBD" when unknown)
        venue_state: Stadium state ("TBD" when unknown)
        status: Game status
        away_score: Live or final away score (optional)
        home_score: Live or final home score (optional)
        quarter: Current quarter while live (optional)
        time_remaining: Clock while live (optional)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    week: int
    year: int
    season_type: SeasonType
    away_team_id: str
    home_team_id: str
    game_date: datetime
    game_time: str = ""
    timezone: str | None = None
    venue: str = "TBD"
    venue_city: str = "TBD"
    venue_state: str = "TBD"
    status: GameStatus = "scheduled"
    away_score: int | None = None
    home_score: int | None = None
    quarter: int | None = None
    time_remaining: str | None = None


class TeamStats(BaseModel):
    """Season-to-date team totals as of one week.

    Percentages are on a 0-100 scale. Totals, not per-game averages: the
    metric calculators divide by games_played.
    """

    model_config = ConfigDict(frozen=True)

    team_id: str
    week: int
    year: int
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0
    points_against: float = 0
    total_yards: float = 0
    passing_yards: float = 0
    rushing_yards: float = 0
    total_yards_allowed: float = 0
    passing_yards_allowed: float = 0
    rushing_yards_allowed: float = 0
    turnovers: int = 0
    takeaways: int = 0
    sacks: float = 0
    sacks_allowed: float = 0
    third_down_percentage: float = 0
    third_down_percentage_allowed: float = 0
    red_zone_percentage: float = 0
    red_zone_percentage_allowed: float = 0
    time_of_possession: float = 0
    penalties: int = 0
    penalty_yards: float = 0

    @field_validator("games_played", "wins", "losses", "ties")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:
        """Validate record counts are not negative.

        Raises:
            ValueError: If the count is negative
        """
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0, got {v}")
        return v


class PlayerInjury(BaseModel):
    """Single injury report entry.

    Attributes:
        id: Provider report id
        player_id: Provider player id
        team_id: Provider team id
        position: Player position (e.g., "QB"), empty when unknown
        status: Normalized injury status
        injury: Injury description (e.g., "Ankle")
        practice_status: Normalized practice participation
        game_status: Normalized game designation
        last_updated: When this report was normalized
    """

    model_config = ConfigDict(frozen=True)

    id: str
    player_id: str
    team_id: str
    position: str = ""
    status: InjuryStatus = "healthy"
    injury: str = "Unknown"
    practice_status: PracticeStatus = "unknown"
    game_status: InjuryStatus = "healthy"
    last_updated: datetime


class GameWeather(BaseModel):
    """Weather reading for a venue, in imperial units.

    Attributes:
        temperature: Degrees Fahrenheit
        feels_like: Apparent temperature, degrees Fahrenheit
        humidity: Relative humidity percentage
        wind_speed: Miles per hour
        wind_direction: 16-point compass label (e.g., "NNE")
        conditions: Condition label (e.g., "Clear", "Rain", "Snow")
        precipitation: Rain or snow volume for the reading's period
        visibility: Kilometres
        observed_at: Observation or forecast timestamp
        last_updated: When the reading was fetched
    """

    model_config = ConfigDict(frozen=True)

    temperature: float
    feels_like: float
    humidity: float
    wind_speed: float
    wind_direction: str
    conditions: str = "Unknown"
    precipitation: float = 0.0
    visibility: float = 10.0
    observed_at: datetime | None = None
    last_updated: datetime
