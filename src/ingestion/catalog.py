# Group and stream discovery

from typing import List, Optional
import logging

from .base import BaseLogSource
from .models import LogStream, millisToDatetime
from .pagination import paginate
from utils.metrics import MetricsCollector


class GroupCatalog:

    def __init__(self, source: BaseLogSource):
        self.source = source
        self.logger = logging.getLogger(self.__class__.__name__)

    def list(self, prefix: str) -> List[str]:
        """
        Resolve a prefix into every matching log group name.

        Order is whatever the source returns; each group appears once.
        """
        groups = []
        seen = set()

        for page in paginate(lambda token: self.source.listGroups(prefix, token)):
            for name in page:
                if name not in seen:
                    seen.add(name)
                    groups.append(name)

        self.logger.debug(f"Prefix '{prefix}' matched {len(groups)} log groups")
        return groups


class StreamCatalog:

    def __init__(self, source: BaseLogSource, metrics: Optional[MetricsCollector] = None):
        self.source = source
        self.metrics = metrics
        self.logger = logging.getLogger(self.__class__.__name__)

    def listNewStreams(self, group: str, watermark: int) -> List[LogStream]:
        """
        List streams of a group that started after the watermark, oldest first.

        The source returns streams newest first, so the first stream that
        started at or before the watermark ends the scan: nothing after it,
        on this page or a later one, can qualify.
        """
        streams: List[LogStream] = []

        for page in paginate(lambda token: self.source.listStreams(group, token)):
            for stream in page:
                if self.metrics:
                    self.metrics.recordStreamScanned()

                if not stream.startedAfter(watermark):
                    self.logger.debug(
                        f"Ignoring log stream {stream.name} which started at "
                        f"{self._describeStart(stream)}, stopping scan"
                    )
                    return streams

                self.logger.debug(
                    f"Processing log stream {stream.name} which started at {self._describeStart(stream)}"
                )
                streams.insert(0, stream)

        self.logger.debug(f"CloudWatch Logs hit end of tokens for streams in '{group}'")
        return streams

    @staticmethod
    def _describeStart(stream: LogStream) -> str:
        if stream.firstEventTimestamp is None:
            return 'never'
        return millisToDatetime(stream.firstEventTimestamp).isoformat()
