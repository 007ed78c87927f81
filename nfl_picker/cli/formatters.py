"""Rich table formatters for teams, games, predictions and collection runs.

Confidence tiers are color-coded: high green, medium yellow, low dim.
"""

from rich.table import Table

from nfl_picker.collection.models import CollectionResult
from nfl_picker.engine.models import GamePrediction
from nfl_picker.providers.models import Game, Team

CONFIDENCE_STYLES = {"high": "bold green", "medium": "yellow", "low": "dim"}
STATUS_STYLES = {"success": "green", "partial": "yellow", "failed": "red"}


def _team_label(team_id: str, teams_by_id: dict[str, Team]) -> str:
    team = teams_by_id.get(team_id)
    return team.abbreviation if team else team_id


def format_teams_table(teams: list[Team]) -> Table:
    """Format teams as a table sorted by conference, division, name."""
    table = Table(title=f"NFL Teams ({len(teams)})")
    table.add_column("Abbr", style="bold cyan")
    table.add_column("Team")
    table.add_column("Conference")
    table.add_column("Division")

    for team in sorted(teams, key=lambda t: (t.conference, t.division, t.name)):
        table.add_row(team.abbreviation, f"{team.city} {team.name}".strip(), team.conference, team.division)
    return table


def format_games_table(games: list[Game], teams_by_id: dict[str, Team], title: str) -> Table:
    """Format a week's schedule, with scores for games already played."""
    table = Table(title=title)
    table.add_column("Kickoff", style="dim")
    table.add_column("Away", style="bold")
    table.add_column("Home", style="bold")
    table.add_column("Venue")
    table.add_column("Status")
    table.add_column("Score", justify="right")

    for game in sorted(games, key=lambda g: g.game_date):
        score = ""
        if game.away_score is not None and game.home_score is not None:
            score = f"{game.away_score}-{game.home_score}"
        table.add_row(
            game.game_date.strftime("%a %m/%d %H:%M"),
            _team_label(game.away_team_id, teams_by_id),
            _team_label(game.home_team_id, teams_by_id),
            game.venue,
            game.status,
            score,
        )
    return table


def format_predictions_table(
    predictions: list[GamePrediction], teams_by_id: dict[str, Team], title: str
) -> Table:
    """Format predictions, most confident first.

    Args:
        predictions: Generated predictions
        teams_by_id: Lookup used for team abbreviations
        title: Table title

    Returns:
        Rich Table with one row per game
    """
    table = Table(title=title)
    table.add_column("Matchup", style="bold")
    table.add_column("Away %", justify="right")
    table.add_column("Home %", justify="right")
    table.add_column("Confidence")
    table.add_column("Pick")
    table.add_column("Key Factors")

    ranked = sorted(
        predictions,
        key=lambda p: abs(p.away_win_probability - p.home_win_probability),
        reverse=True,
    )
    for prediction in ranked:
        away = _team_label(prediction.away_team_id, teams_by_id)
        home = _team_label(prediction.home_team_id, teams_by_id)
        pick = {"away": away, "home": home}.get(prediction.recommendation, "-")
        style = CONFIDENCE_STYLES[prediction.confidence]
        table.add_row(
            f"{away} @ {home}",
            str(prediction.away_win_probability),
            str(prediction.home_win_probability),
            f"[{style}]{prediction.confidence}[/{style}]",
            pick,
            "\n".join(prediction.factors) or "-",
        )
    return table


def format_collection_summary(result: CollectionResult) -> Table:
    """Summarize a collection run as a two-column table."""
    style = STATUS_STYLES[result.status]
    table = Table(
        title=f"Collection Week {result.week}, {result.year} ({result.season_type})",
        show_header=False,
    )
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Status", f"[{style}]{result.status}[/{style}]")
    for name, count in result.counts().items():
        table.add_row(name.capitalize(), str(count))
    table.add_row("Duration", f"{result.duration_ms} ms")
    if result.failed_phases:
        table.add_row("Failed Phases", ", ".join(result.failed_phases))
    return table
