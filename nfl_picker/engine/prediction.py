"""Prediction engine: turns per-team metrics into a win-probability pair.

The scoring itself (``build_prediction``) is a pure, synchronous function.
``PredictionEngine`` wraps it with the I/O needed for a batch of games:
resolving team records, picking each team's latest stats, and looking up
venue weather when it was not collected ahead of time.

Example:
    engine = PredictionEngine(weather_client=OpenWeatherClient())
    predictions = await engine.generate_predictions(games, stats, injuries, teams)
"""

import asyncio
from datetime import datetime, timezone

from nfl_picker.engine.factors import generate_factors
from nfl_picker.engine.metrics import (
    calculate_overall_metrics,
    calculate_team_metrics,
    round_half_up,
)
from nfl_picker.engine.models import (
    Confidence,
    GamePrediction,
    PredictionMetricsSet,
    Recommendation,
    TeamMetrics,
)
from nfl_picker.monitoring import get_logger, log_prediction
from nfl_picker.providers.errors import (
    MissingTeamError,
    ProviderRequestError,
    SchedulerStoppedError,
)
from nfl_picker.providers.models import Game, GameWeather, PlayerInjury, Team, TeamStats
from nfl_picker.providers.openweather import OpenWeatherClient

log = get_logger()

MODEL_VERSION = "1.0.0"

HIGH_CONFIDENCE_GAP = 25
MEDIUM_CONFIDENCE_GAP = 15
MOMENTUM_FACTOR = 0.1


def calculate_win_probabilities(away: TeamMetrics, home: TeamMetrics) -> tuple[int, int]:
    """Convert both teams' metrics into integer win percentages.

    Each side starts from its overall score plus rest advantage and a
    momentum adjustment of ``(momentum - 50) * 0.1``; the host also adds its
    home-field bonus. The away share is rounded and the home share is its
    complement, so the pair always sums to exactly 100.

    Args:
        away: Visiting team metrics
        home: Host team metrics

    Returns:
        Tuple of (away probability, home probability)
    """
    away_base = away.overall + away.rest_advantage + (away.momentum - 50) * MOMENTUM_FACTOR
    home_base = (
        home.overall
        + home.home_field_advantage
        + home.rest_advantage
        + (home.momentum - 50) * MOMENTUM_FACTOR
    )

    total = away_base + home_base
    if total <= 0:
        return 50, 50

    away_probability = max(0, min(100, round_half_up(away_base / total * 100)))
    return away_probability, 100 - away_probability


def determine_confidence(away_probability: int, home_probability: int) -> Confidence:
    """Tier the probability gap: >= 25 high, >= 15 medium, else low."""
    gap = abs(away_probability - home_probability)
    if gap >= HIGH_CONFIDENCE_GAP:
        return "high"
    if gap >= MEDIUM_CONFIDENCE_GAP:
        return "medium"
    return "low"


def determine_recommendation(
    away_probability: int, home_probability: int, confidence: Confidence
) -> Recommendation:
    """Favor the likelier side unless confidence is low or it is a tie."""
    if confidence == "low":
        return "none"
    if away_probability > home_probability:
        return "away"
    if home_probability > away_probability:
        return "home"
    return "none"


def latest_stats(team_stats: list[TeamStats], team_id: str) -> TeamStats | None:
    """Most recent snapshot (highest year, then week) for a team."""
    candidates = [s for s in team_stats if s.team_id == team_id]
    if not candidates:
        return None
    return max(candidates, key=lambda s: (s.year, s.week))


def build_prediction(
    game: Game,
    away_team: Team,
    home_team: Team,
    away_stats: TeamStats | None,
    home_stats: TeamStats | None,
    away_injuries: list[PlayerInjury],
    home_injuries: list[PlayerInjury],
    weather: GameWeather | None,
    *,
    home_field_advantage: float = 0.03,
    model_version: str = MODEL_VERSION,
    generated_at: datetime | None = None,
) -> GamePrediction:
    """Score one game from already-resolved inputs.

    Args:
        game: Game to predict
        away_team: Visiting team record
        home_team: Host team record
        away_stats: Visiting team's latest stats (None if unavailable)
        home_stats: Host team's latest stats (None if unavailable)
        away_injuries: Visiting team's injury reports
        home_injuries: Host team's injury reports
        weather: Host venue reading (None if unavailable)
        home_field_advantage: Home bonus as a fraction
        model_version: Version tag stored on the prediction
        generated_at: Timestamp to record (defaults to now, UTC)

    Returns:
        GamePrediction with probabilities summing to 100
    """
    away_metrics = calculate_team_metrics(
        away_stats, away_injuries, weather, is_home_team=False, home_field_advantage=home_field_advantage
    )
    home_metrics = calculate_team_metrics(
        home_stats, home_injuries, weather, is_home_team=True, home_field_advantage=home_field_advantage
    )
    overall_metrics = calculate_overall_metrics(away_metrics, home_metrics)

    away_probability, home_probability = calculate_win_probabilities(away_metrics, home_metrics)
    confidence = determine_confidence(away_probability, home_probability)
    recommendation = determine_recommendation(away_probability, home_probability, confidence)

    return GamePrediction(
        id=f"pred_{game.id}",
        game_id=game.id,
        week=game.week,
        year=game.year,
        away_team_id=game.away_team_id,
        home_team_id=game.home_team_id,
        away_win_probability=away_probability,
        home_win_probability=home_probability,
        confidence=confidence,
        recommendation=recommendation,
        metrics=PredictionMetricsSet(
            away_team=away_metrics,
            home_team=home_metrics,
            overall=overall_metrics,
        ),
        factors=generate_factors(away_metrics, home_metrics, weather, away_team, home_team),
        last_updated=generated_at or datetime.now(timezone.utc),
        model_version=model_version,
    )


class PredictionEngine:
    """Generates predictions for a batch of games.

    Holds no state between runs: every call works only on the inputs it is
    given, plus an optional weather client for venues whose weather was not
    pre-collected.

    Attributes:
        weather_client: Client used for missing weather (None disables lookups)
        home_field_advantage: Home bonus as a fraction
        model_version: Version tag stored on every prediction
    """

    def __init__(
        self,
        weather_client: OpenWeatherClient | None = None,
        *,
        home_field_advantage: float = 0.03,
        model_version: str = MODEL_VERSION,
    ) -> None:
        self.weather_client = weather_client
        self.home_field_advantage = home_field_advantage
        self.model_version = model_version

    async def generate_predictions(
        self,
        games: list[Game],
        team_stats: list[TeamStats],
        injuries: list[PlayerInjury],
        teams: list[Team],
        weather_by_game: dict[str, GameWeather | None] | None = None,
    ) -> list[GamePrediction]:
        """Predict every game, skipping (and logging) the ones that fail.

        Args:
            games: Games to predict
            team_stats: Stats snapshots for any number of teams/weeks
            injuries: Injury reports for any number of teams
            teams: Known teams
            weather_by_game: Pre-collected weather keyed by game id; games
                missing from it fall back to the weather client

        Returns:
            Predictions for the games that could be scored, in input order
        """
        teams_by_id = {team.id: team for team in teams}

        async def predict_or_skip(game: Game) -> GamePrediction | None:
            try:
                prediction = await self.predict_game(
                    game, team_stats, injuries, teams_by_id, weather_by_game
                )
            except Exception as e:
                log.error(
                    "prediction_failed",
                    game_id=game.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

            log_prediction(
                game.id,
                game.away_team_id,
                game.home_team_id,
                prediction.away_win_probability,
                prediction.home_win_probability,
                prediction.confidence,
                self.model_version,
            )
            return prediction

        results = await asyncio.gather(*(predict_or_skip(game) for game in games))
        return [prediction for prediction in results if prediction is not None]

    async def predict_game(
        self,
        game: Game,
        team_stats: list[TeamStats],
        injuries: list[PlayerInjury],
        teams_by_id: dict[str, Team],
        weather_by_game: dict[str, GameWeather | None] | None = None,
    ) -> GamePrediction:
        """Predict a single game.

        Raises:
            MissingTeamError: If either team id is not in teams_by_id
        """
        away_team = teams_by_id.get(game.away_team_id)
        if away_team is None:
            raise MissingTeamError(game.id, game.away_team_id)
        home_team = teams_by_id.get(game.home_team_id)
        if home_team is None:
            raise MissingTeamError(game.id, game.home_team_id)

        weather = await self._resolve_weather(game, home_team, weather_by_game)

        return build_prediction(
            game,
            away_team,
            home_team,
            latest_stats(team_stats, game.away_team_id),
            latest_stats(team_stats, game.home_team_id),
            [i for i in injuries if i.team_id == game.away_team_id],
            [i for i in injuries if i.team_id == game.home_team_id],
            weather,
            home_field_advantage=self.home_field_advantage,
            model_version=self.model_version,
        )

    async def _resolve_weather(
        self,
        game: Game,
        home_team: Team,
        weather_by_game: dict[str, GameWeather | None] | None,
    ) -> GameWeather | None:
        if weather_by_game is not None and game.id in weather_by_game:
            return weather_by_game[game.id]
        if self.weather_client is None:
            return None

        try:
            return await self.weather_client.get_game_weather(home_team.abbreviation, game.game_date)
        except (ProviderRequestError, SchedulerStoppedError) as e:
            log.warning("game_weather_unavailable", game_id=game.id, error=str(e))
            return None
