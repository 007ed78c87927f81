"""Monitoring module for structured logging and observability.

This module provides logging capabilities using structlog:
- Structured JSON logging for production
- Human-readable console output for development
- Correlation IDs for run tracing
- Records for provider calls, predictions and collection phases

Also provides metrics dataclasses for:
- Provider call tracking
- Collection phase outcomes
"""

from nfl_picker.monitoring.logging import (
    configure_logging,
    get_logger,
    bind_correlation_id,
    unbind_correlation_id,
    log_api_call,
    log_prediction,
    log_data_update,
)
from nfl_picker.monitoring.metrics import DataUpdateLog, ProviderMetrics

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "unbind_correlation_id",
    "log_api_call",
    "log_prediction",
    "log_data_update",
    "DataUpdateLog",
    "ProviderMetrics",
]
