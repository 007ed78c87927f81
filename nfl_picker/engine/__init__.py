"""Prediction engine: metric calculators, probability blending and factors."""

from nfl_picker.engine.factors import generate_factors
from nfl_picker.engine.metrics import (
    calculate_defensive_power,
    calculate_injury_impact,
    calculate_momentum,
    calculate_offensive_power,
    calculate_overall_metrics,
    calculate_team_metrics,
    calculate_team_strength,
)
from nfl_picker.engine.models import GamePrediction, PredictionMetricsSet, TeamMetrics
from nfl_picker.engine.prediction import (
    MODEL_VERSION,
    PredictionEngine,
    build_prediction,
    calculate_win_probabilities,
    determine_confidence,
    determine_recommendation,
)

__all__ = [
    "PredictionEngine",
    "build_prediction",
    "calculate_win_probabilities",
    "determine_confidence",
    "determine_recommendation",
    "generate_factors",
    "calculate_team_metrics",
    "calculate_overall_metrics",
    "calculate_team_strength",
    "calculate_offensive_power",
    "calculate_defensive_power",
    "calculate_injury_impact",
    "calculate_momentum",
    "GamePrediction",
    "PredictionMetricsSet",
    "TeamMetrics",
    "MODEL_VERSION",
]
