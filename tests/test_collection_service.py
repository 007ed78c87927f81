"""Tests for the collection orchestrator.

Provider clients are replaced with mocks so each phase's success or failure
can be controlled independently.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from nfl_picker.collection.models import CollectionResult
from nfl_picker.collection.service import DataCollectionService
from nfl_picker.providers.errors import ProviderRequestError
from nfl_picker.providers.models import Season


def provider_error(endpoint: str) -> ProviderRequestError:
    return ProviderRequestError("mysportsfeeds", endpoint, "HTTP 500 Internal Server Error", status_code=500)


@pytest.fixture
def stats_client(teams, game, strong_stats, weak_stats):
    client = MagicMock()
    client.get_current_season.return_value = Season(2024, "regular")
    client.get_teams = AsyncMock(return_value=teams)
    client.get_games = AsyncMock(return_value=[game])
    client.get_team_stats = AsyncMock(return_value=[strong_stats, weak_stats])
    client.get_player_injuries = AsyncMock(return_value=[])
    return client


@pytest.fixture
def weather_client(clear_weather):
    client = MagicMock()
    client.get_game_weather = AsyncMock(return_value=clear_weather)
    return client


@pytest.fixture
def sink():
    sink = MagicMock()
    sink.write = AsyncMock()
    return sink


@pytest.fixture
def service(stats_client, weather_client, sink):
    return DataCollectionService(stats_client, weather_client, sink=sink)


class TestCollectAllData:
    """Tests for full collection runs."""

    @pytest.mark.asyncio
    async def test_successful_run(self, service, stats_client, weather_client, sink, game):
        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        assert isinstance(result, CollectionResult)
        assert result.status == "success"
        assert result.failed_phases == []
        assert result.run_id.startswith("run_")
        assert (result.week, result.year, result.season_type) == (5, 2024, "regular")
        assert result.weather[game.id].conditions == "Clear"
        assert len(result.predictions) == 1
        assert result.predictions[0].metrics.home_team.weather_impact == 100

        stats_client.get_games.assert_awaited_once_with(5, 2024, "regular")
        weather_client.get_game_weather.assert_awaited_once_with("GB", game.game_date)
        sink.write.assert_awaited_once_with(result)

    @pytest.mark.asyncio
    async def test_update_logs_record_every_phase(self, service):
        await service.collect_all_data(week=5, year=2024, season_type="regular")

        logs = service.get_update_logs()
        assert sorted(entry.data_type for entry in logs) == [
            "comprehensive",
            "games",
            "injuries",
            "predictions",
            "stats",
            "teams",
            "weather",
        ]
        teams_log = next(entry for entry in logs if entry.data_type == "teams")
        assert teams_log.status == "success"
        assert teams_log.records_processed == 2
        assert teams_log.records_created == 2
        assert teams_log.id.endswith("_teams")

    @pytest.mark.asyncio
    async def test_update_logs_are_a_copy(self, service):
        await service.collect_teams()

        logs = service.get_update_logs()
        logs.clear()

        assert len(service.get_update_logs()) == 1

    @pytest.mark.asyncio
    async def test_stats_failure_is_partial(self, service, stats_client, sink):
        stats_client.get_team_stats.side_effect = provider_error("/2024-reg/week/5/team_stats_totals.json")

        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        assert result.status == "partial"
        assert result.failed_phases == ["stats"]
        assert result.team_stats == []
        # Predictions still run with neutral stats
        assert len(result.predictions) == 1
        assert result.predictions[0].metrics.away_team.team_strength == 50
        assert result.errors[0].startswith("stats: ")
        sink.write.assert_awaited_once()

        stats_log = next(e for e in service.get_update_logs() if e.data_type == "stats")
        assert stats_log.status == "failed"
        assert stats_log.records_updated == 0
        assert stats_log.errors

    @pytest.mark.asyncio
    async def test_games_failure_skips_weather_and_predictions(
        self, service, stats_client, weather_client
    ):
        stats_client.get_games.side_effect = provider_error("/2024-reg/week/5/games.json")

        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        assert result.status == "partial"
        assert result.predictions == []
        assert result.weather == {}
        weather_client.get_game_weather.assert_not_called()

    @pytest.mark.asyncio
    async def test_all_provider_phases_failing_is_failed(self, service, stats_client, sink):
        for method in ("get_teams", "get_games", "get_team_stats", "get_player_injuries"):
            getattr(stats_client, method).side_effect = provider_error(f"/{method}")

        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        assert result.status == "failed"
        assert result.failed_phases == ["teams", "games", "stats", "injuries"]
        assert len(result.errors) == 4
        sink.write.assert_awaited_once_with(result)

        comprehensive = service.get_update_logs()[-1]
        assert comprehensive.data_type == "comprehensive"
        assert comprehensive.status == "failed"

    @pytest.mark.asyncio
    async def test_weather_failure_is_neutral(self, service, weather_client, game):
        weather_client.get_game_weather.side_effect = ProviderRequestError(
            "openweather", "/weather", "ReadTimeout: timed out"
        )

        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        assert result.status == "success"
        assert result.weather == {game.id: None}
        assert result.predictions[0].metrics.home_team.weather_impact == 50

        weather_log = next(e for e in service.get_update_logs() if e.data_type == "weather")
        assert weather_log.status == "partial"

    @pytest.mark.asyncio
    async def test_malformed_weather_payload_keeps_run_alive(
        self, stats_client, sink, degraded_weather_client, game
    ):
        service = DataCollectionService(stats_client, degraded_weather_client, sink=sink)

        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        assert result.status == "success"
        assert result.weather == {game.id: None}
        assert len(result.predictions) == 1
        assert result.predictions[0].metrics.home_team.weather_impact == 50
        sink.write.assert_awaited_once_with(result)

        weather_log = next(e for e in service.get_update_logs() if e.data_type == "weather")
        assert weather_log.status == "partial"
        assert "malformed payload" in weather_log.errors[0]

    @pytest.mark.asyncio
    async def test_weather_disabled(self, stats_client, weather_client, sink):
        service = DataCollectionService(
            stats_client, weather_client, sink=sink, enable_weather_updates=False
        )

        result = await service.collect_all_data(week=5, year=2024, season_type="regular")

        weather_client.get_game_weather.assert_not_called()
        assert result.weather == {}
        assert result.predictions[0].metrics.home_team.weather_impact == 50

    @pytest.mark.asyncio
    async def test_infers_season_and_defaults_week(self, service, stats_client):
        result = await service.collect_all_data()

        assert (result.week, result.year, result.season_type) == (1, 2024, "regular")
        stats_client.get_games.assert_awaited_once_with(1, 2024, "regular")

    @pytest.mark.asyncio
    async def test_explicit_values_override_inference(self, service, stats_client):
        result = await service.collect_all_data(week=3, season_type="postseason")

        assert (result.week, result.year, result.season_type) == (3, 2024, "postseason")


class TestCollectWeeks:
    """Tests for multi-week collection."""

    @pytest.mark.asyncio
    async def test_results_in_week_order(self, service):
        results = await service.collect_weeks([3, 1, 2], 2024, "regular")

        assert [r.week for r in results] == [3, 1, 2]
        assert len({r.run_id for r in results}) == 3

    @pytest.mark.asyncio
    async def test_concurrency_bound(self, service, stats_client, game):
        in_flight = 0
        max_in_flight = 0

        async def slow_games(week, year, season_type):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return [game]

        stats_client.get_games.side_effect = slow_games

        await service.collect_weeks([1, 2, 3, 4], 2024, "regular", max_concurrency=2)

        assert max_in_flight == 2


class TestRequestServing:
    """Tests for the direct read operations."""

    @pytest.mark.asyncio
    async def test_get_week_data(self, service, game):
        week_data = await service.get_week_data(5, 2024, "regular")

        assert week_data.games == [game]
        assert len(week_data.team_stats) == 2
        assert week_data.injuries == []

    @pytest.mark.asyncio
    async def test_run_predictions_fetches_weather_per_game(self, service, weather_client):
        predictions = await service.run_predictions(5, 2024, "regular")

        assert len(predictions) == 1
        assert predictions[0].recommendation == "away"
        weather_client.get_game_weather.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_teams_propagates_errors(self, service, stats_client):
        stats_client.get_teams.side_effect = provider_error("/teams.json")

        with pytest.raises(ProviderRequestError):
            await service.get_teams()
