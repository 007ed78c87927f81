"""Tests for structured logging helpers."""

import structlog
from structlog.testing import capture_logs

from nfl_picker.monitoring import (
    bind_correlation_id,
    log_api_call,
    log_data_update,
    log_prediction,
    unbind_correlation_id,
)


class TestLogApiCall:
    """log_api_call picks the level from the status code."""

    def test_success_is_info(self):
        with capture_logs() as logs:
            log_api_call("openweather", "/weather", 200, 85)

        assert logs[0]["event"] == "api_call_succeeded"
        assert logs[0]["log_level"] == "info"
        assert logs[0]["duration_ms"] == 85
        assert "error" not in logs[0]

    def test_client_error_is_warning(self):
        with capture_logs() as logs:
            log_api_call("mysportsfeeds", "/teams.json", 429, 12, error="HTTP 429 Too Many Requests")

        assert logs[0]["event"] == "api_call_client_error"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["error"] == "HTTP 429 Too Many Requests"

    def test_transport_failure_is_error(self):
        with capture_logs() as logs:
            log_api_call("mysportsfeeds", "/teams.json", None, 30000, error="ReadTimeout")

        assert logs[0]["event"] == "api_call_failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["status_code"] is None


class TestLogDataUpdate:
    def test_levels_by_status(self):
        with capture_logs() as logs:
            log_data_update("teams", "success", 32, 32, 32)
            log_data_update("weather", "partial", 10, 0, 0, errors=["timeout"])
            log_data_update("games", "failed", 0, 0, 0, errors=["HTTP 500"], duration_ms=40)

        assert [entry["event"] for entry in logs] == [
            "data_update_completed",
            "data_update_partial",
            "data_update_failed",
        ]
        assert logs[0]["errors"] == []
        assert logs[2]["duration_ms"] == 40


def test_log_prediction_fields():
    with capture_logs() as logs:
        log_prediction("1001", "51", "62", 61, 39, "medium", "1.0.0")

    assert logs[0]["event"] == "prediction_generated"
    assert logs[0]["away_probability"] == 61
    assert logs[0]["confidence"] == "medium"


def test_correlation_id_binding():
    bind_correlation_id("run_abc123")
    try:
        assert structlog.contextvars.get_contextvars()["correlation_id"] == "run_abc123"
    finally:
        unbind_correlation_id()

    assert "correlation_id" not in structlog.contextvars.get_contextvars()
