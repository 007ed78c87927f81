"""Pure metric calculators for the prediction engine.

Each calculator maps a team's optional stats snapshot, injury list or weather
reading to a 0-100 sub-score. Missing inputs produce neutral values instead of
errors. All rounding is half-up, so 68.5 becomes 69.
"""

import math

from nfl_picker.engine.models import TeamMetrics
from nfl_picker.providers.models import GameWeather, PlayerInjury, TeamStats
from nfl_picker.providers.openweather import calculate_weather_impact

NEUTRAL_SCORE = 50

# Normalization targets: a team at the target scores 100 on that component
POINTS_PER_GAME_TARGET = 30
YARDS_PER_GAME_TARGET = 400

# Sub-score weights for the per-team overall score
OVERALL_WEIGHTS = {
    "team_strength": 0.25,
    "offensive_power": 0.20,
    "defensive_power": 0.20,
    "injury_impact": 0.15,
    "weather_impact": 0.10,
    "schedule_strength": 0.10,
}

OFFENSIVE_SKILL_POSITIONS = {"QB", "RB", "WR", "TE"}
DEFENSIVE_POSITIONS = {
    "DE", "DT", "NT", "EDGE", "LB", "ILB", "OLB", "MLB", "CB", "S", "FS", "SS", "DB",
}

# Injury status -> remaining availability (100 = unaffected)
INJURY_SEVERITY = {
    "out": 0,
    "injured-reserve": 0,
    "pup": 0,
    "doubtful": 25,
    "questionable": 50,
}

# (minimum win percentage, momentum score), checked in order
MOMENTUM_STEPS = [(0.75, 90), (0.6, 75), (0.4, 50), (0.25, 25)]
MOMENTUM_FLOOR = 10
MOMENTUM_MIN_GAMES = 3


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def calculate_team_strength(stats: TeamStats | None) -> int:
    """Blend win percentage (70%) with point differential per game (30%).

    The differential is mapped to ``50 + 2 * diff`` and clamped to [0, 100].
    Without stats the team is neutral (50).
    """
    if stats is None:
        return NEUTRAL_SCORE

    if stats.games_played > 0:
        win_percentage = stats.wins / stats.games_played * 100
        point_differential = (stats.points_for - stats.points_against) / stats.games_played
    else:
        win_percentage = 50.0
        point_differential = 0.0

    normalized_differential = _clamp(50 + point_differential * 2)
    return round_half_up(win_percentage * 0.7 + normalized_differential * 0.3)


def calculate_offensive_power(stats: TeamStats | None) -> int:
    """Score offense from points, yards, third-down and red-zone rates.

    Weights: points per game 40%, yards per game 30%, third-down % 20%,
    red-zone % 10%. Returns 50 without stats or before any game is played.
    """
    if stats is None or stats.games_played == 0:
        return NEUTRAL_SCORE

    points_per_game = stats.points_for / stats.games_played
    yards_per_game = stats.total_yards / stats.games_played

    normalized_points = min(100, points_per_game / POINTS_PER_GAME_TARGET * 100)
    normalized_yards = min(100, yards_per_game / YARDS_PER_GAME_TARGET * 100)

    score = (
        normalized_points * 0.4
        + normalized_yards * 0.3
        + stats.third_down_percentage * 0.2
        + stats.red_zone_percentage * 0.1
    )
    return round_half_up(_clamp(score))


def calculate_defensive_power(stats: TeamStats | None) -> int:
    """Score defense; lower allowed numbers and more takeaways/sacks score higher.

    Weights: points allowed 30%, yards allowed 25%, opponent third-down %
    20%, opponent red-zone % 15%, takeaways per game 5%, sacks per game 5%.
    Returns 50 without stats or before any game is played.
    """
    if stats is None or stats.games_played == 0:
        return NEUTRAL_SCORE

    games = stats.games_played
    normalized_points = max(0, 100 - stats.points_against / games / POINTS_PER_GAME_TARGET * 100)
    normalized_yards = max(0, 100 - stats.total_yards_allowed / games / YARDS_PER_GAME_TARGET * 100)
    normalized_third_down = 100 - stats.third_down_percentage_allowed
    normalized_red_zone = 100 - stats.red_zone_percentage_allowed
    normalized_takeaways = min(100, stats.takeaways / games * 50)
    normalized_sacks = min(100, stats.sacks / games * 20)

    score = (
        normalized_points * 0.3
        + normalized_yards * 0.25
        + normalized_third_down * 0.2
        + normalized_red_zone * 0.15
        + normalized_takeaways * 0.05
        + normalized_sacks * 0.05
    )
    return round_half_up(_clamp(score))


def position_weight(position: str) -> int:
    """Importance weight of a position: 3 skill offense, 2 defense, 1 other."""
    position = position.upper()
    if position in OFFENSIVE_SKILL_POSITIONS:
        return 3
    if position in DEFENSIVE_POSITIONS:
        return 2
    return 1


def calculate_injury_impact(injuries: list[PlayerInjury]) -> int:
    """Weighted availability across a team's injury list (100 = no effect).

    Each injury contributes its status severity (out/IR/PUP 0, doubtful 25,
    questionable 50, otherwise 100) weighted by position importance.
    """
    if not injuries:
        return 100

    total_impact = 0
    total_weight = 0
    for injury in injuries:
        weight = position_weight(injury.position)
        total_impact += INJURY_SEVERITY.get(injury.status, 100) * weight
        total_weight += weight

    return round_half_up(total_impact / total_weight)


def calculate_weather_score(weather: GameWeather | None) -> int:
    """Weather impact for a game, neutral (50) when no reading is available."""
    if weather is None:
        return NEUTRAL_SCORE
    return calculate_weather_impact(weather)


def calculate_schedule_strength(stats: TeamStats | None) -> int:
    # Proxy: no opponent lookback data, so the team's own strength stands in
    if stats is None:
        return NEUTRAL_SCORE
    return calculate_team_strength(stats)


def calculate_rest_advantage(stats: TeamStats | None) -> float:
    # No inter-game rest data is collected yet
    return 0.0


def calculate_momentum(stats: TeamStats | None) -> int:
    """Step function over win percentage; neutral before three games."""
    if stats is None or stats.games_played < MOMENTUM_MIN_GAMES:
        return NEUTRAL_SCORE

    win_percentage = stats.wins / stats.games_played
    for threshold, score in MOMENTUM_STEPS:
        if win_percentage >= threshold:
            return score
    return MOMENTUM_FLOOR


def calculate_team_metrics(
    stats: TeamStats | None,
    injuries: list[PlayerInjury],
    weather: GameWeather | None,
    is_home_team: bool,
    home_field_advantage: float = 0.03,
) -> TeamMetrics:
    """Compute every sub-score and adjustment for one side of a game.

    Args:
        stats: Latest stats snapshot, or None if unavailable
        injuries: The team's injury reports
        weather: Reading for the host venue, or None
        is_home_team: Whether the team hosts the game
        home_field_advantage: Home bonus as a fraction (0.03 = 3 points)

    Returns:
        TeamMetrics with overall = weighted blend of the six sub-scores
    """
    sub_scores = {
        "team_strength": calculate_team_strength(stats),
        "offensive_power": calculate_offensive_power(stats),
        "defensive_power": calculate_defensive_power(stats),
        "injury_impact": calculate_injury_impact(injuries),
        "weather_impact": calculate_weather_score(weather),
        "schedule_strength": calculate_schedule_strength(stats),
    }
    overall = sum(sub_scores[name] * weight for name, weight in OVERALL_WEIGHTS.items())

    return TeamMetrics(
        **sub_scores,
        home_field_advantage=home_field_advantage * 100 if is_home_team else 0.0,
        rest_advantage=calculate_rest_advantage(stats),
        momentum=calculate_momentum(stats),
        overall=round_half_up(overall),
    )


def calculate_overall_metrics(away: TeamMetrics, home: TeamMetrics) -> TeamMetrics:
    """Element-wise average of both teams' metrics, for display.

    The home-field bonus is carried over from the home side unchanged.
    """

    def average(field: str) -> int:
        return round_half_up((getattr(away, field) + getattr(home, field)) / 2)

    return TeamMetrics(
        team_strength=average("team_strength"),
        offensive_power=average("offensive_power"),
        defensive_power=average("defensive_power"),
        injury_impact=average("injury_impact"),
        weather_impact=average("weather_impact"),
        schedule_strength=average("schedule_strength"),
        home_field_advantage=home.home_field_advantage,
        rest_advantage=(away.rest_advantage + home.rest_advantage) / 2,
        momentum=average("momentum"),
        overall=average("overall"),
    )
