from typing import Iterator, Optional
import logging

from .base import BaseLogSource
from .models import LogStream, LogEvent
from .pagination import paginate
from utils.metrics import MetricsCollector


class EventFetcher:

    def __init__(self, source: BaseLogSource, metrics: Optional[MetricsCollector] = None):
        self.source = source
        self.metrics = metrics
        self.logger = logging.getLogger(self.__class__.__name__)

    def drain(self, group: str, stream: LogStream, watermark: int) -> Iterator[LogEvent]:
        """
        Yield the events of one stream ingested after the watermark.

        Pages are requested from the head of the stream. Events at or below
        the watermark were forwarded by an earlier cycle and are dropped.
        """
        self.logger.debug(
            f"CloudWatch Logs processing stream {stream.name} in '{group}' (watermark {watermark})"
        )

        pages = paginate(
            lambda token: self.source.getEvents(group, stream.name, token),
            stopOnEmpty=True
        )

        for page in pages:
            for event in page:
                if self.metrics:
                    self.metrics.recordEventFetched()

                if event.ingestionTime > watermark:
                    yield event
                elif self.metrics:
                    self.metrics.recordEventFiltered()
