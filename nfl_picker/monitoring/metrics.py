"""Production metrics dataclasses for observability.

Provides dataclasses for tracking:
- Provider call metrics (requests, failures, rate-limit waits, latency)
- Collection phase outcomes (the data update log)

Usage:
    from nfl_picker.monitoring.metrics import ProviderMetrics

    pm = ProviderMetrics(provider="openweather", requests=20, failures=1)
    print(f"Failure rate: {pm.failure_rate}%")  # 5.0%
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ProviderMetrics:
    """Metrics for one rate-governed provider.

    Attributes:
        provider: Provider identifier (e.g., "mysportsfeeds")
        requests: Number of units executed by the scheduler
        failures: Number of units that raised
        rate_limit_waits: Number of times the quota forced the drain to wait
        total_latency_ms: Sum of unit execution times
        last_request_at: Timestamp of the most recent execution
    """

    provider: str
    requests: int = 0
    failures: int = 0
    rate_limit_waits: int = 0
    total_latency_ms: int = 0
    last_request_at: datetime | None = None

    @property
    def average_latency_ms(self) -> float:
        """Mean execution time per request, 0.0 if nothing has run."""
        return round(self.total_latency_ms / self.requests, 1) if self.requests > 0 else 0.0

    @property
    def failure_rate(self) -> float:
        """Percentage of requests that failed, 0.0 if nothing has run."""
        return round(self.failures / self.requests * 100, 1) if self.requests > 0 else 0.0

    def to_dict(self) -> dict:
        """Export metrics as dictionary including computed rates."""
        return {
            "provider": self.provider,
            "requests": self.requests,
            "failures": self.failures,
            "rate_limit_waits": self.rate_limit_waits,
            "total_latency_ms": self.total_latency_ms,
            "average_latency_ms": self.average_latency_ms,
            "failure_rate": self.failure_rate,
            "last_request_at": self.last_request_at.isoformat() if self.last_request_at else None,
        }


@dataclass
class DataUpdateLog:
    """Outcome of one collection phase.

    Attributes:
        id: Unique identifier ("update_<epoch ms>_<data_type>")
        data_type: Phase name ("teams", "games", "stats", "injuries",
            "weather", "predictions", "comprehensive")
        status: "success", "partial" or "failed"
        records_processed: Total records seen
        records_updated: Records updated (0 unless the phase succeeded)
        records_created: Records created (0 unless the phase succeeded)
        errors: Error messages
        started_at: Phase start
        completed_at: Phase end
        duration_ms: Phase duration
    """

    id: str
    data_type: str
    status: str
    records_processed: int = 0
    records_updated: int = 0
    records_created: int = 0
    errors: list[str] = field(default_factory=list)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0

    def to_dict(self) -> dict:
        """Export the log entry as a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "data_type": self.data_type,
            "status": self.status,
            "records_processed": self.records_processed,
            "records_updated": self.records_updated,
            "records_created": self.records_created,
            "errors": list(self.errors),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
        }
