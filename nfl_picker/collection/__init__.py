"""Collection orchestration: phased data collection and prediction runs."""

from nfl_picker.collection.models import CollectionResult, WeekData
from nfl_picker.collection.service import DataCollectionService
from nfl_picker.collection.sink import LoggingSink, PersistenceSink

__all__ = [
    "DataCollectionService",
    "CollectionResult",
    "WeekData",
    "LoggingSink",
    "PersistenceSink",
]
