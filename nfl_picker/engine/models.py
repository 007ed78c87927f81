"""Pydantic models for per-team metrics and game predictions."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Confidence = Literal["high", "medium", "low"]
Recommendation = Literal["away", "home", "none"]


class TeamMetrics(BaseModel):
    """Normalized sub-scores and situational adjustments for one team.

    Attributes:
        team_strength: Win percentage blended with point differential (0-100)
        offensive_power: Scoring and efficiency (0-100)
        defensive_power: Points/yards prevented and takeaways (0-100)
        injury_impact: 100 means injuries have no effect (0-100)
        weather_impact: Playing conditions, 50 when unknown (0-100)
        schedule_strength: Opponent difficulty proxy (0-100)
        home_field_advantage: Probability points added for the host
        rest_advantage: Probability points for extra rest
        momentum: Recent-form score, 50 is neutral
        overall: Weighted blend of the six sub-scores
    """

    model_config = ConfigDict(frozen=True)

    team_strength: int = Field(ge=0, le=100)
    offensive_power: int = Field(ge=0, le=100)
    defensive_power: int = Field(ge=0, le=100)
    injury_impact: int = Field(ge=0, le=100)
    weather_impact: int = Field(ge=0, le=100)
    schedule_strength: int = Field(ge=0, le=100)
    home_field_advantage: float = 0.0
    rest_advantage: float = 0.0
    momentum: int = 50
    overall: int


class PredictionMetricsSet(BaseModel):
    """Metrics for both teams plus their element-wise average."""

    model_config = ConfigDict(frozen=True)

    away_team: TeamMetrics
    home_team: TeamMetrics
    overall: TeamMetrics


class GamePrediction(BaseModel):
    """Win-probability estimate for one game.

    Attributes:
        id: Prediction id ("pred_<game id>")
        game_id: Game the prediction is for
        week: Game week
        year: Season year
        away_team_id: Visiting team id
        home_team_id: Host team id
        away_win_probability: Integer percentage
        home_win_probability: Integer percentage (sums with away to 100)
        confidence: Tier derived from the probability gap
        recommendation: Side to favor, "none" when confidence is low
        metrics: Per-team and blended metrics
        factors: Ordered explanatory statements
        last_updated: Generation timestamp
        model_version: Scoring model version tag
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str
    game_id: str
    week: int
    year: int
    away_team_id: str
    home_team_id: str
    away_win_probability: int = Field(ge=0, le=100)
    home_win_probability: int = Field(ge=0, le=100)
    confidence: Confidence
    recommendation: Recommendation
    metrics: PredictionMetricsSet
    factors: list[str]
    last_updated: datetime
    model_version: str

    @model_validator(mode="after")
    def validate_probabilities_sum(self) -> "GamePrediction":
        """Validate the probability pair sums to exactly 100.

        Raises:
            ValueError: If the pair does not sum to 100
        """
        total = self.away_win_probability + self.home_win_probability
        if total != 100:
            raise ValueError(f"win probabilities must sum to 100, got {total}")
        return self
