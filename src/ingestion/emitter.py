from typing import Dict, Any, List, Optional
import logging

from .models import LogStream, LogEvent, millisToDatetime
from decoding.codecs import Codec
from output.sinks import OutputSink
from utils.errors import DecodeError
from utils.metrics import MetricsCollector


class EventEmitter:
    """
    Decodes log events into records, stamps them with their CloudWatch
    origin and pushes each one to the output sink.
    """

    def __init__(
        self,
        codec: Codec,
        sink: OutputSink,
        config: Optional[Dict[str, Any]] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        config = config or {}
        self.codec = codec
        self.sink = sink
        self.metrics = metrics
        self.tags: List[str] = list(config.get('tags') or [])
        self.addField: Dict[str, Any] = dict(config.get('add_field') or {})
        self.eventType: Optional[str] = config.get('type')
        self.logger = logging.getLogger(self.__class__.__name__)

    def emit(self, group: str, stream: LogStream, event: LogEvent) -> int:
        pushed = 0

        try:
            units = list(self.codec.split(event.message))
        except DecodeError as e:
            self._skip(group, stream, e)
            return 0

        for unit in units:
            try:
                records = self.codec.decodeUnit(unit)
            except DecodeError as e:
                self._skip(group, stream, e)
                continue

            for record in records:
                self.sink.push(self._enrich(record, group, stream, event))
                pushed += 1

        if self.metrics:
            self.metrics.recordEventEmitted(pushed)

        return pushed

    def _enrich(self, record: Dict[str, Any], group: str, stream: LogStream, event: LogEvent) -> Dict[str, Any]:
        record['@timestamp'] = millisToDatetime(event.timestamp)

        cloudwatch = record.get('cloudwatch')
        if not isinstance(cloudwatch, dict):
            cloudwatch = {}
            record['cloudwatch'] = cloudwatch
        cloudwatch['ingestion_time'] = millisToDatetime(event.ingestionTime)
        cloudwatch['log_group'] = group
        cloudwatch['log_stream'] = stream.name

        self._decorate(record)
        return record

    def _decorate(self, record: Dict[str, Any]) -> None:
        if self.eventType and 'type' not in record:
            record['type'] = self.eventType

        if self.tags:
            existing = record.get('tags')
            if not isinstance(existing, list):
                existing = [] if existing is None else [existing]
            record['tags'] = existing + [tag for tag in self.tags if tag not in existing]

        for field, value in self.addField.items():
            record.setdefault(field, value)

    def _skip(self, group: str, stream: LogStream, error: DecodeError) -> None:
        self.logger.warning(f"Skipping undecodable record in {group}/{stream.name}: {error}")
        if self.metrics:
            self.metrics.recordDecodeError()
