"""Exception types raised by provider clients and the prediction engine."""


class ProviderRequestError(Exception):
    """An outbound provider call failed.

    Raised for non-success HTTP statuses and transport failures. Carries the
    originating endpoint, the status code when one was received, and the
    measured call latency.

    Attributes:
        provider: Provider name (e.g., "mysportsfeeds")
        endpoint: Request path relative to the provider base URL
        status_code: HTTP status, or None for transport failures
        duration_ms: Call latency in milliseconds
    """

    def __init__(
        self,
        provider: str,
        endpoint: str,
        message: str,
        status_code: int | None = None,
        duration_ms: int = 0,
    ) -> None:
        self.provider = provider
        self.endpoint = endpoint
        self.status_code = status_code
        self.duration_ms = duration_ms
        status = f"HTTP {status_code}" if status_code is not None else "transport error"
        super().__init__(f"{provider} {endpoint} failed ({status}): {message}")


class SchedulerStoppedError(Exception):
    """A queued request was failed because its scheduler stopped draining."""


class MissingTeamError(LookupError):
    """A game references a team id absent from the fetched team set."""

    def __init__(self, game_id: str, team_id: str) -> None:
        self.game_id = game_id
        self.team_id = team_id
        super().__init__(f"Team {team_id} not found for game {game_id}")
