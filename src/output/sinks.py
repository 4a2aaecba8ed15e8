# Output sinks for enriched records.

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, TextIO
from datetime import datetime
from pathlib import Path
import json
import logging
import queue
import sys

from utils.errors import ConfigError


def toJson(record: Dict[str, Any]) -> str:
    def serialize(value):
        if isinstance(value, datetime):
            return value.isoformat().replace('+00:00', 'Z')
        if isinstance(value, bytes):
            return value.decode('utf-8', errors='replace')
        return str(value)

    return json.dumps(record, default=serialize, sort_keys=True)


class OutputSink(ABC):

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def push(self, record: Dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass


class StdoutSink(OutputSink):

    def __init__(self, config: Dict[str, Any], stream: Optional[TextIO] = None):
        super().__init__(config)
        self.stream = stream or sys.stdout

    def push(self, record: Dict[str, Any]) -> None:
        self.stream.write(toJson(record) + '\n')
        self.stream.flush()


class FileSink(OutputSink):
    # Appends one JSON document per line

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        path = config.get('path')
        if not path:
            raise ConfigError("File output requires 'path'")
        self.path = Path(path).expanduser()
        self._fh = None

    def push(self, record: Dict[str, Any]) -> None:
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.path, 'a')
        self._fh.write(toJson(record) + '\n')
        self._fh.flush()

    def close(self) -> None:
        if self._fh:
            self._fh.close()
            self._fh = None


class QueueSink(OutputSink):
    """
    Hands records to an in-process queue.

    With block disabled, records that do not fit a full queue are dropped
    and counted.
    """

    def __init__(self, config: Dict[str, Any], target: Optional[queue.Queue] = None):
        super().__init__(config)
        self.queue = target if target is not None else queue.Queue(maxsize=int(config.get('maxsize', 0)))
        self.block = config.get('block', True)
        self.dropped = 0

    def push(self, record: Dict[str, Any]) -> None:
        if self.block:
            self.queue.put(record)
            return

        try:
            self.queue.put_nowait(record)
        except queue.Full:
            self.dropped += 1
            self.logger.warning(f"Output queue full, dropped record ({self.dropped} dropped so far)")


SINKS = {
    'stdout': StdoutSink,
    'file': FileSink,
    'queue': QueueSink,
}


def createSink(config: Dict[str, Any]) -> OutputSink:
    sinkType = config.get('type', 'stdout')
    sinkClass = SINKS.get(sinkType)
    if sinkClass is None:
        raise ConfigError(f"Unknown output type '{sinkType}', expected one of {sorted(SINKS)}")
    return sinkClass(config)
