"""Human-readable factors explaining a prediction.

Checks run in a fixed order and each contributes at most one statement;
conditions that are not met contribute nothing.
"""

from nfl_picker.engine.models import TeamMetrics
from nfl_picker.providers.models import GameWeather, Team

STRENGTH_GAP = 10
OFFENSE_GAP = 15
DEFENSE_GAP = 15
INJURY_GAP = 20
MOMENTUM_GAP = 20
HIGH_WIND_MPH = 20

ADVERSE_CONDITIONS = {"Rain", "Snow", "Thunderstorm", "Sleet", "Hail"}


def _leader(
    away_value: float, home_value: float, gap: float, away_team: Team, home_team: Team
) -> Team | None:
    """Return the team ahead by at least ``gap``, if either is."""
    if away_value - home_value >= gap:
        return away_team
    if home_value - away_value >= gap:
        return home_team
    return None


def generate_factors(
    away_metrics: TeamMetrics,
    home_metrics: TeamMetrics,
    weather: GameWeather | None,
    away_team: Team,
    home_team: Team,
) -> list[str]:
    """Build the ordered list of explanatory statements for a game.

    Order: team strength, offense, defense, injuries, weather conditions,
    wind, home field, momentum.

    Args:
        away_metrics: Visiting team metrics
        home_metrics: Host team metrics
        weather: Venue reading, or None
        away_team: Visiting team
        home_team: Host team

    Returns:
        List of factor strings (possibly empty)
    """
    factors = []

    stronger = _leader(
        away_metrics.team_strength, home_metrics.team_strength, STRENGTH_GAP, away_team, home_team
    )
    if stronger:
        factors.append(f"{stronger.name} has significantly stronger overall team performance")

    better_offense = _leader(
        away_metrics.offensive_power, home_metrics.offensive_power, OFFENSE_GAP, away_team, home_team
    )
    if better_offense:
        factors.append(f"{better_offense.name} has superior offensive firepower")

    better_defense = _leader(
        away_metrics.defensive_power, home_metrics.defensive_power, DEFENSE_GAP, away_team, home_team
    )
    if better_defense:
        factors.append(f"{better_defense.name} has stronger defensive unit")

    # Lower injury_impact means more injured, so the healthier team "leads"
    healthier = _leader(
        away_metrics.injury_impact, home_metrics.injury_impact, INJURY_GAP, away_team, home_team
    )
    if healthier:
        injured = home_team if healthier is away_team else away_team
        factors.append(f"{injured.name} dealing with significant injuries")

    if weather is not None:
        if weather.conditions in ADVERSE_CONDITIONS:
            factors.append(
                f"{weather.conditions} expected at {home_team.name} stadium may limit both offenses"
            )
        if weather.wind_speed > HIGH_WIND_MPH:
            factors.append("High winds may impact passing game")

    if home_metrics.home_field_advantage > 0:
        factors.append(f"{home_team.name} benefits from home field advantage")

    hotter = _leader(away_metrics.momentum, home_metrics.momentum, MOMENTUM_GAP, away_team, home_team)
    if hotter:
        factors.append(f"{hotter.name} has strong momentum coming into this game")

    return factors
