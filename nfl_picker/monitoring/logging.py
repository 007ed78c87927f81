"""Structured logging configuration using structlog.

This module configures structlog for the collection and prediction pipeline:
- JSON output in production mode (filterable, parseable)
- Colored console output in development mode (human-readable)
- Correlation IDs for tracing one collection run across providers
- Observability records for outbound calls, predictions and collection phases

Usage:
    from nfl_picker.monitoring import configure_logging, get_logger

    # Configure once at startup
    configure_logging("production")  # or "development"

    log = get_logger()
    log.info("teams_collected", team_count=32)
"""

import logging
import sys

import structlog


def configure_logging(mode: str = "development", level: int = logging.INFO) -> None:
    """Configure structlog for the application.

    Args:
        mode: Either "production" (JSON output) or "development" (colored console)
        level: Minimum stdlib log level
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if mode == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller's module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current context.

    All subsequent log events in this context include the correlation_id field,
    so every provider call made during one collection run can be traced.

    Args:
        correlation_id: Unique identifier for this operation (e.g., run ID)
    """
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def unbind_correlation_id() -> None:
    """Remove correlation ID from context."""
    structlog.contextvars.unbind_contextvars("correlation_id")


def log_api_call(
    provider: str,
    endpoint: str,
    status_code: int | None,
    duration_ms: int,
    error: str | None = None,
) -> None:
    """Record a single outbound provider call.

    Successful (2xx) calls are logged at info, client errors (4xx) at warning,
    and everything else (5xx, transport failures without a status) at error.

    Args:
        provider: Provider name (e.g., "mysportsfeeds", "openweather")
        endpoint: Request path relative to the provider base URL
        status_code: HTTP status, or None when the transport failed
        duration_ms: Measured call latency
        error: Error message for failed calls
    """
    log = get_logger()
    fields = {
        "provider": provider,
        "endpoint": endpoint,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    if error:
        fields["error"] = error

    if status_code is not None and 200 <= status_code < 300:
        log.info("api_call_succeeded", **fields)
    elif status_code is not None and 400 <= status_code < 500:
        log.warning("api_call_client_error", **fields)
    else:
        log.error("api_call_failed", **fields)


def log_prediction(
    game_id: str,
    away_team_id: str,
    home_team_id: str,
    away_probability: int,
    home_probability: int,
    confidence: str,
    model_version: str,
) -> None:
    """Record a generated game prediction."""
    get_logger().info(
        "prediction_generated",
        game_id=game_id,
        away_team_id=away_team_id,
        home_team_id=home_team_id,
        away_probability=away_probability,
        home_probability=home_probability,
        confidence=confidence,
        model_version=model_version,
    )


def log_data_update(
    data_type: str,
    status: str,
    records_processed: int,
    records_updated: int,
    records_created: int,
    errors: list[str] | None = None,
    duration_ms: int | None = None,
) -> None:
    """Record the outcome of one collection phase.

    Args:
        data_type: Phase name ("teams", "games", "stats", ...)
        status: "success", "partial" or "failed"
        records_processed: Records seen by the phase
        records_updated: Records updated by the phase
        records_created: Records created by the phase
        errors: Error messages collected by the phase
        duration_ms: Phase duration
    """
    log = get_logger()
    fields = {
        "data_type": data_type,
        "status": status,
        "records_processed": records_processed,
        "records_updated": records_updated,
        "records_created": records_created,
        "errors": errors or [],
        "duration_ms": duration_ms,
    }

    if status == "success":
        log.info("data_update_completed", **fields)
    elif status == "partial":
        log.warning("data_update_partial", **fields)
    else:
        log.error("data_update_failed", **fields)
