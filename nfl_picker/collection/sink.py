"""Write-only destinations for collection snapshots."""

from typing import Protocol

from nfl_picker.collection.models import CollectionResult
from nfl_picker.monitoring import get_logger

log = get_logger()


class PersistenceSink(Protocol):
    """Anything that can store a finished collection run."""

    async def write(self, result: CollectionResult) -> None: ...


class LoggingSink:
    """Default sink: logs a summary of the snapshot instead of storing it."""

    async def write(self, result: CollectionResult) -> None:
        log.info(
            "collection_snapshot",
            run_id=result.run_id,
            week=result.week,
            year=result.year,
            season_type=result.season_type,
            status=result.status,
            **result.counts(),
        )
