from dataclasses import dataclass
from typing import Dict, Any, Optional, Union
from datetime import datetime, timezone
import time


MILLIS_PER_DAY = 86400000


def currentMillis() -> int:
    return int(time.time() * 1000)


def millisToDatetime(millis: int) -> datetime:
    # Whole seconds plus the sub-second remainder, as a UTC datetime
    millis = int(millis)
    seconds, remainder = divmod(millis, 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=remainder * 1000)


@dataclass
class LogStream:
    name: str
    firstEventTimestamp: Optional[int] = None
    lastIngestionTime: Optional[int] = None

    @classmethod
    def fromApi(cls, data: Dict[str, Any]) -> 'LogStream':
        return cls(
            name=data['logStreamName'],
            firstEventTimestamp=data.get('firstEventTimestamp'),
            lastIngestionTime=data.get('lastIngestionTime')
        )

    def startedAfter(self, watermark: int) -> bool:
        return self.firstEventTimestamp is not None and self.firstEventTimestamp > watermark

    def ingestedAfter(self, watermark: int) -> bool:
        return self.lastIngestionTime is not None and self.lastIngestionTime > watermark


@dataclass
class LogEvent:
    timestamp: int
    ingestionTime: int
    message: Union[str, bytes]

    @classmethod
    def fromApi(cls, data: Dict[str, Any]) -> 'LogEvent':
        return cls(
            timestamp=data.get('timestamp', 0),
            ingestionTime=data.get('ingestionTime', 0),
            message=data.get('message', '')
        )
