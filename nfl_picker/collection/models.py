"""Pydantic models describing the output of a collection run."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from nfl_picker.engine.models import GamePrediction
from nfl_picker.providers.models import (
    Game,
    GameWeather,
    PlayerInjury,
    SeasonType,
    Team,
    TeamStats,
)

RunStatus = Literal["success", "partial", "failed"]


class WeekData(BaseModel):
    """Schedule, stats and injuries for one week, without predictions."""

    week: int
    year: int
    season_type: SeasonType
    games: list[Game] = Field(default_factory=list)
    team_stats: list[TeamStats] = Field(default_factory=list)
    injuries: list[PlayerInjury] = Field(default_factory=list)


class CollectionResult(BaseModel):
    """Snapshot produced by one collection run.

    Attributes:
        run_id: Correlation id bound to every log event of the run
        week: Week collected
        year: Season year
        season_type: Season segment
        status: "success" when every phase succeeded, "failed" when every
            provider phase failed, otherwise "partial"
        failed_phases: Names of the phases that raised
        teams: Collected teams
        games: Collected games
        team_stats: Collected stats snapshots
        injuries: Collected injury reports
        weather: Venue weather keyed by game id (None when unavailable)
        predictions: Generated predictions
        errors: Error messages from failed phases
        started_at: Run start
        completed_at: Run end
        duration_ms: Run duration
    """

    run_id: str
    week: int
    year: int
    season_type: SeasonType
    status: RunStatus
    failed_phases: list[str] = Field(default_factory=list)
    teams: list[Team] = Field(default_factory=list)
    games: list[Game] = Field(default_factory=list)
    team_stats: list[TeamStats] = Field(default_factory=list)
    injuries: list[PlayerInjury] = Field(default_factory=list)
    weather: dict[str, GameWeather | None] = Field(default_factory=dict)
    predictions: list[GamePrediction] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    started_at: datetime
    completed_at: datetime
    duration_ms: int = 0

    def counts(self) -> dict[str, int]:
        """Record counts per data type."""
        return {
            "teams": len(self.teams),
            "games": len(self.games),
            "stats": len(self.team_stats),
            "injuries": len(self.injuries),
            "weather": sum(1 for w in self.weather.values() if w is not None),
            "predictions": len(self.predictions),
        }
