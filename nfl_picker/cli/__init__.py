"""CLI package for NFL Picker.

Provides commands for listing teams and games, predicting a week and
running a full collection.
"""

from nfl_picker.cli.main import cli

__all__ = ["cli"]
