"""Collection orchestrator: fetches a week's data and generates predictions.

A run fetches teams, games, stats and injuries concurrently, then weather
for each game's host venue, then predictions. Each phase records a
DataUpdateLog. A failed phase never aborts the run: the result is marked
"partial" (or "failed" when nothing could be fetched) and the snapshot is
still written to the sink.

Example:
    service = DataCollectionService.from_settings()
    result = await service.collect_all_data(week=5)
    print(result.status, len(result.predictions))
"""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

from nfl_picker.collection.models import CollectionResult, RunStatus, WeekData
from nfl_picker.collection.sink import LoggingSink, PersistenceSink
from nfl_picker.config import Settings, get_settings
from nfl_picker.engine.models import GamePrediction
from nfl_picker.engine.prediction import PredictionEngine
from nfl_picker.monitoring import (
    DataUpdateLog,
    bind_correlation_id,
    get_logger,
    log_data_update,
    unbind_correlation_id,
)
from nfl_picker.providers.errors import ProviderRequestError, SchedulerStoppedError
from nfl_picker.providers.models import (
    Game,
    GameWeather,
    PlayerInjury,
    Season,
    SeasonType,
    Team,
    TeamStats,
)
from nfl_picker.providers.mysportsfeeds import MySportsFeedsClient
from nfl_picker.providers.openweather import OpenWeatherClient

log = get_logger()

T = TypeVar("T")

DEFAULT_WEEK = 1
PROVIDER_PHASES = ("teams", "games", "stats", "injuries")


class DataCollectionService:
    """Owns the provider clients, the prediction engine and a sink.

    Attributes:
        stats_client: MySportsFeeds client
        weather_client: OpenWeatherMap client
        engine: Prediction engine
        sink: Destination for finished runs
        enable_weather_updates: Whether venue weather is fetched
        weather_batch_size: Concurrent venue lookups
        week_concurrency: Concurrent weeks in collect_weeks
    """

    def __init__(
        self,
        stats_client: MySportsFeedsClient,
        weather_client: OpenWeatherClient,
        *,
        engine: PredictionEngine | None = None,
        sink: PersistenceSink | None = None,
        enable_weather_updates: bool = True,
        weather_batch_size: int = 5,
        week_concurrency: int = 2,
    ) -> None:
        self.stats_client = stats_client
        self.weather_client = weather_client
        self.enable_weather_updates = enable_weather_updates
        self.engine = engine or PredictionEngine(
            weather_client if enable_weather_updates else None
        )
        self.sink = sink or LoggingSink()
        self.weather_batch_size = weather_batch_size
        self.week_concurrency = week_concurrency
        self._update_logs: list[DataUpdateLog] = []

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, sink: PersistenceSink | None = None
    ) -> "DataCollectionService":
        """Build a service with clients and engine configured from Settings.

        Raises:
            ValidationError: If required credentials are missing
        """
        settings = settings or get_settings()
        weather_client = OpenWeatherClient.from_settings(settings)
        engine = PredictionEngine(
            weather_client if settings.enable_weather_updates else None,
            home_field_advantage=settings.home_field_advantage,
            model_version=settings.model_version,
        )
        return cls(
            MySportsFeedsClient.from_settings(settings),
            weather_client,
            engine=engine,
            sink=sink,
            enable_weather_updates=settings.enable_weather_updates,
            weather_batch_size=settings.weather_batch_size,
            week_concurrency=settings.week_concurrency,
        )

    # Phases

    async def collect_teams(self) -> list[Team]:
        return await self._run_phase("teams", self.stats_client.get_teams)

    async def collect_games(self, week: int, year: int, season_type: SeasonType) -> list[Game]:
        return await self._run_phase(
            "games", lambda: self.stats_client.get_games(week, year, season_type)
        )

    async def collect_team_stats(
        self, week: int, year: int, season_type: SeasonType
    ) -> list[TeamStats]:
        return await self._run_phase(
            "stats", lambda: self.stats_client.get_team_stats(week, year, season_type)
        )

    async def collect_player_injuries(
        self, week: int, year: int, season_type: SeasonType
    ) -> list[PlayerInjury]:
        return await self._run_phase(
            "injuries", lambda: self.stats_client.get_player_injuries(week, year, season_type)
        )

    async def collect_weather_data(
        self, games: list[Game], teams: list[Team]
    ) -> dict[str, GameWeather | None]:
        """Fetch kickoff weather at each game's host venue.

        At most ``weather_batch_size`` venue lookups are in flight at once.
        A venue that cannot be resolved or fetched maps to None; the phase is
        then logged as partial.

        Args:
            games: Games whose host venues need weather
            teams: Known teams, used to resolve host abbreviations

        Returns:
            Dict of game id -> GameWeather or None (empty when disabled)
        """
        if not self.enable_weather_updates:
            log.info("weather_collection_disabled")
            return {}

        started_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()
        teams_by_id = {team.id: team for team in teams}
        semaphore = asyncio.Semaphore(self.weather_batch_size)
        errors: list[str] = []

        async def fetch(game: Game) -> tuple[str, GameWeather | None]:
            home_team = teams_by_id.get(game.home_team_id)
            if home_team is None:
                log.warning("weather_host_unknown", game_id=game.id, team_id=game.home_team_id)
                return game.id, None

            async with semaphore:
                try:
                    weather = await self.weather_client.get_game_weather(
                        home_team.abbreviation, game.game_date
                    )
                except (ProviderRequestError, SchedulerStoppedError) as e:
                    log.warning("game_weather_failed", game_id=game.id, error=str(e))
                    errors.append(str(e))
                    return game.id, None
            return game.id, weather

        weather_by_game = dict(await asyncio.gather(*(fetch(game) for game in games)))

        self._log_update(
            "weather",
            "partial" if errors else "success",
            sum(1 for w in weather_by_game.values() if w is not None),
            started_at,
            start_time,
            errors,
        )
        return weather_by_game

    async def generate_predictions(
        self,
        games: list[Game],
        team_stats: list[TeamStats],
        injuries: list[PlayerInjury],
        teams: list[Team],
        weather_by_game: dict[str, GameWeather | None] | None = None,
    ) -> list[GamePrediction]:
        return await self._run_phase(
            "predictions",
            lambda: self.engine.generate_predictions(
                games, team_stats, injuries, teams, weather_by_game
            ),
        )

    # Runs

    def resolve_season(
        self,
        week: int | None = None,
        year: int | None = None,
        season_type: SeasonType | None = None,
    ) -> tuple[int, int, SeasonType]:
        """Fill any missing part of (week, year, season_type).

        Year and season type come from the calendar heuristic; the week
        defaults to 1 because the current week cannot be inferred.
        """
        if week is not None and year is not None and season_type is not None:
            return week, year, season_type

        season: Season = self.stats_client.get_current_season()
        return (
            week if week is not None else DEFAULT_WEEK,
            year if year is not None else season.year,
            season_type or season.season_type,
        )

    async def collect_all_data(
        self,
        week: int | None = None,
        year: int | None = None,
        season_type: SeasonType | None = None,
    ) -> CollectionResult:
        """Run every phase for one week and write the snapshot to the sink.

        Args:
            week: Week to collect (defaults to 1)
            year: Season year (inferred when omitted)
            season_type: Season segment (inferred when omitted)

        Returns:
            CollectionResult with status success, partial or failed
        """
        week, year, season_type = self.resolve_season(week, year, season_type)
        run_id = f"run_{uuid.uuid4().hex[:12]}"
        bind_correlation_id(run_id)
        try:
            return await self._collect_week(run_id, week, year, season_type)
        finally:
            unbind_correlation_id()

    async def collect_weeks(
        self,
        weeks: list[int],
        year: int,
        season_type: SeasonType,
        max_concurrency: int | None = None,
    ) -> list[CollectionResult]:
        """Collect several weeks, at most ``max_concurrency`` at a time.

        Returns:
            One CollectionResult per week, in the order given
        """
        semaphore = asyncio.Semaphore(max_concurrency or self.week_concurrency)

        async def collect(week: int) -> CollectionResult:
            async with semaphore:
                return await self.collect_all_data(week, year, season_type)

        log.info("multi_week_collection_started", weeks=weeks, year=year, season_type=season_type)
        return list(await asyncio.gather(*(collect(week) for week in weeks)))

    # Request-serving reads

    async def get_teams(self) -> list[Team]:
        """Fetch teams directly from the statistics provider.

        Raises:
            ProviderRequestError: If the request fails
        """
        return await self.stats_client.get_teams()

    async def get_week_data(
        self,
        week: int,
        year: int | None = None,
        season_type: SeasonType | None = None,
    ) -> WeekData:
        """Fetch schedule, stats and injuries for one week.

        Raises:
            ProviderRequestError: If any request fails
        """
        week, year, season_type = self.resolve_season(week, year, season_type)
        games, team_stats, injuries = await asyncio.gather(
            self.stats_client.get_games(week, year, season_type),
            self.stats_client.get_team_stats(week, year, season_type),
            self.stats_client.get_player_injuries(week, year, season_type),
        )
        return WeekData(
            week=week,
            year=year,
            season_type=season_type,
            games=games,
            team_stats=team_stats,
            injuries=injuries,
        )

    async def run_predictions(
        self,
        week: int,
        year: int | None = None,
        season_type: SeasonType | None = None,
    ) -> list[GamePrediction]:
        """Fetch one week's inputs and predict every game.

        Venue weather is looked up per game by the engine.

        Raises:
            ProviderRequestError: If teams or week data cannot be fetched
        """
        teams, week_data = await asyncio.gather(
            self.get_teams(), self.get_week_data(week, year, season_type)
        )
        return await self.engine.generate_predictions(
            week_data.games, week_data.team_stats, week_data.injuries, teams
        )

    def get_update_logs(self) -> list[DataUpdateLog]:
        """Copy of every phase outcome recorded so far."""
        return list(self._update_logs)

    # Internals

    async def _collect_week(
        self, run_id: str, week: int, year: int, season_type: SeasonType
    ) -> CollectionResult:
        started_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()
        log.info("data_collection_started", week=week, year=year, season_type=season_type)

        results = await asyncio.gather(
            self.collect_teams(),
            self.collect_games(week, year, season_type),
            self.collect_team_stats(week, year, season_type),
            self.collect_player_injuries(week, year, season_type),
            return_exceptions=True,
        )

        failed_phases: list[str] = []
        errors: list[str] = []
        collected = {}
        for phase, outcome in zip(PROVIDER_PHASES, results):
            if isinstance(outcome, Exception):
                failed_phases.append(phase)
                errors.append(f"{phase}: {outcome}")
                collected[phase] = []
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                collected[phase] = outcome

        teams, games = collected["teams"], collected["games"]
        team_stats, injuries = collected["stats"], collected["injuries"]

        weather_by_game: dict[str, GameWeather | None] = {}
        predictions: list[GamePrediction] = []
        if "teams" in failed_phases or "games" in failed_phases:
            log.warning("predictions_skipped", failed_phases=failed_phases)
        else:
            weather_by_game = await self.collect_weather_data(games, teams)
            predictions = await self.generate_predictions(
                games, team_stats, injuries, teams, weather_by_game
            )

        status = self._run_status(failed_phases)
        result = CollectionResult(
            run_id=run_id,
            week=week,
            year=year,
            season_type=season_type,
            status=status,
            failed_phases=failed_phases,
            teams=teams,
            games=games,
            team_stats=team_stats,
            injuries=injuries,
            weather=weather_by_game,
            predictions=predictions,
            errors=errors,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            duration_ms=int((time.perf_counter() - start_time) * 1000),
        )

        await self.sink.write(result)

        self._log_update(
            "comprehensive",
            status,
            sum(result.counts().values()),
            started_at,
            start_time,
            errors,
        )
        log.info(
            "data_collection_finished",
            status=status,
            duration_ms=result.duration_ms,
            **result.counts(),
        )
        return result

    @staticmethod
    def _run_status(failed_phases: list[str]) -> RunStatus:
        if all(phase in failed_phases for phase in PROVIDER_PHASES):
            return "failed"
        if failed_phases:
            return "partial"
        return "success"

    async def _run_phase(self, data_type: str, fetch: Callable[[], Awaitable[list[T]]]) -> list[T]:
        """Run one phase, record its outcome, and re-raise on failure."""
        started_at = datetime.now(timezone.utc)
        start_time = time.perf_counter()
        log.info("collection_phase_started", data_type=data_type)

        try:
            records = await fetch()
        except Exception as e:
            log.error("collection_phase_failed", data_type=data_type, error=str(e))
            self._log_update(data_type, "failed", 0, started_at, start_time, [str(e)])
            raise

        self._log_update(data_type, "success", len(records), started_at, start_time)
        return records

    def _log_update(
        self,
        data_type: str,
        status: RunStatus,
        records: int,
        started_at: datetime,
        start_time: float,
        errors: list[str] | None = None,
    ) -> DataUpdateLog:
        completed_at = datetime.now(timezone.utc)
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        written = records if status == "success" else 0

        entry = DataUpdateLog(
            id=f"update_{int(completed_at.timestamp() * 1000)}_{data_type}",
            data_type=data_type,
            status=status,
            records_processed=records,
            records_updated=written,
            records_created=written,
            errors=list(errors or []),
            started_at=started_at,
            completed_at=completed_at,
            duration_ms=duration_ms,
        )
        self._update_logs.append(entry)
        log_data_update(
            data_type,
            status,
            entry.records_processed,
            entry.records_updated,
            entry.records_created,
            entry.errors,
            duration_ms,
        )
        return entry
