"""NFL Picker - rate-governed data collection and win-probability predictions."""

__version__ = "1.0.0"
