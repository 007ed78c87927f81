"""Typer CLI entry point for NFL game predictions.

Commands:
- nfl-picker teams
- nfl-picker games 5
- nfl-picker predict 5 --year 2024
- nfl-picker collect --week 5
- nfl-picker version
"""

import asyncio
import os

from dotenv import load_dotenv

# Load .env file before anything else
load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console

from nfl_picker import __version__
from nfl_picker.cli.formatters import (
    format_collection_summary,
    format_games_table,
    format_predictions_table,
    format_teams_table,
)
from nfl_picker.collection import DataCollectionService
from nfl_picker.config import get_settings
from nfl_picker.monitoring import configure_logging
from nfl_picker.providers.errors import ProviderRequestError

cli = typer.Typer(
    name="nfl-picker",
    help="""NFL Picker - Win probabilities from team stats, injuries and weather.

QUICK START:
  nfl-picker teams
  nfl-picker games 5
  nfl-picker predict 5 --year 2024 --season-type regular
  nfl-picker collect --week 5

DATA SOURCES:
  • Stats: MySportsFeeds (teams, schedules, team totals, injuries)
  • Weather: OpenWeatherMap (stadium forecasts and current conditions)
""",
    add_completion=False,
)

# Disable colors if NO_COLOR env var is set (standard convention)
console = Console(no_color=os.getenv("NO_COLOR") is not None)

SEASON_TYPE_HELP = "preseason, regular or postseason (inferred from the date if omitted)"


def _service() -> DataCollectionService:
    try:
        return DataCollectionService.from_settings(get_settings())
    except (ValidationError, ValueError) as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}", style="red")
        raise typer.Exit(code=1)


def _check_season_type(season_type: str | None) -> str | None:
    if season_type is not None and season_type not in ("preseason", "regular", "postseason"):
        console.print(f"[bold red]Error:[/bold red] unknown season type '{season_type}'", style="red")
        raise typer.Exit(code=1)
    return season_type


@cli.command()
def teams():
    """List every team known to the statistics provider."""
    service = _service()
    try:
        result = asyncio.run(service.get_teams())
    except ProviderRequestError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", style="red")
        raise typer.Exit(code=1)

    console.print(format_teams_table(result))


@cli.command()
def games(
    week: int = typer.Argument(..., min=1, max=22, help="Week number"),
    year: int = typer.Option(None, "--year", "-y", help="Season year (inferred if omitted)"),
    season_type: str = typer.Option(None, "--season-type", "-s", help=SEASON_TYPE_HELP),
):
    """Show the schedule for a week."""
    season_type = _check_season_type(season_type)
    service = _service()

    async def fetch():
        return await asyncio.gather(
            service.get_teams(), service.get_week_data(week, year, season_type)
        )

    try:
        team_list, week_data = asyncio.run(fetch())
    except ProviderRequestError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", style="red")
        raise typer.Exit(code=1)

    teams_by_id = {team.id: team for team in team_list}
    title = f"Week {week_data.week}, {week_data.year} ({week_data.season_type})"
    console.print(format_games_table(week_data.games, teams_by_id, title))


@cli.command()
def predict(
    week: int = typer.Argument(..., min=1, max=22, help="Week number"),
    year: int = typer.Option(None, "--year", "-y", help="Season year (inferred if omitted)"),
    season_type: str = typer.Option(None, "--season-type", "-s", help=SEASON_TYPE_HELP),
):
    """Predict every game of a week.

    \b
    CONFIDENCE:
      high    probability gap of 25 points or more
      medium  gap of 15 to 24 points
      low     smaller gaps (no pick is made)
    """
    season_type = _check_season_type(season_type)
    service = _service()

    async def run():
        return await asyncio.gather(
            service.get_teams(), service.run_predictions(week, year, season_type)
        )

    try:
        team_list, predictions = asyncio.run(run())
    except ProviderRequestError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", style="red")
        raise typer.Exit(code=1)

    if not predictions:
        console.print("[yellow]No games to predict.[/yellow]")
        return

    teams_by_id = {team.id: team for team in team_list}
    console.print(format_predictions_table(predictions, teams_by_id, f"Week {week} Predictions"))


@cli.command()
def collect(
    week: int = typer.Option(None, "--week", "-w", min=1, max=22, help="Week number (default 1)"),
    year: int = typer.Option(None, "--year", "-y", help="Season year (inferred if omitted)"),
    season_type: str = typer.Option(None, "--season-type", "-s", help=SEASON_TYPE_HELP),
):
    """Run a full collection: teams, games, stats, injuries, weather, predictions."""
    season_type = _check_season_type(season_type)
    service = _service()

    result = asyncio.run(service.collect_all_data(week, year, season_type))

    console.print(format_collection_summary(result))
    for error in result.errors:
        console.print(f"[red]•[/red] {error}")
    if result.status == "failed":
        raise typer.Exit(code=1)


@cli.command()
def version():
    """Show version and configuration info."""
    console.print(f"[bold cyan]NFL Picker[/bold cyan] v{__version__}")
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print(
        f"  MySportsFeeds: {'✓ configured' if os.getenv('MYSPORTSFEEDS_API_KEY') else '✗ missing MYSPORTSFEEDS_API_KEY'}"
    )
    console.print(
        f"  OpenWeather: {'✓ configured' if os.getenv('OPENWEATHER_API_KEY') else '✗ missing OPENWEATHER_API_KEY'}"
    )
    console.print(f"  Weather updates: {os.getenv('ENABLE_WEATHER_UPDATES', 'true')}")


def main():
    """Entry point for CLI."""
    # Use production mode if ENVIRONMENT=production, otherwise development
    configure_logging("production" if os.getenv("ENVIRONMENT") == "production" else "development")

    cli()


if __name__ == "__main__":
    main()
