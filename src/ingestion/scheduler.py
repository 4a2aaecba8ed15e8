"""
Polling Scheduler

Drives the incremental polling cycle:
1. Resolve configured log groups (wildcard prefixes are listed each cycle)
2. Process each group in turn: read watermark, discover new streams,
   drain their events, emit, then advance the watermark
3. Sleep for the configured interval, waking early on stop()

Groups are processed strictly one after another by a single worker, which
is what lets the checkpoint write come last for every group.
"""

from typing import Callable, List, Optional, Sequence, Union
import logging
import threading
import time

from .catalog import GroupCatalog, StreamCatalog
from .checkpoint import CheckpointStore
from .emitter import EventEmitter
from .fetcher import EventFetcher
from .models import currentMillis
from utils.errors import CheckpointIOError
from utils.metrics import MetricsCollector

WILDCARD = '*'
DEFAULT_INTERVAL = 60


class Scheduler:

    def __init__(
        self,
        logGroups: Union[str, Sequence[str]],
        groupCatalog: GroupCatalog,
        streamCatalog: StreamCatalog,
        fetcher: EventFetcher,
        emitter: EventEmitter,
        checkpoints: CheckpointStore,
        interval: float = DEFAULT_INTERVAL,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], int] = currentMillis
    ):
        """
        Args:
            logGroups: Group name(s); a name ending in '*' is a prefix
            interval: Seconds to wait between cycles
            clock: Returns the current time in epoch-millis
        """
        if isinstance(logGroups, str):
            logGroups = [logGroups]
        self.logGroups: List[str] = list(logGroups)
        self.groupCatalog = groupCatalog
        self.streamCatalog = streamCatalog
        self.fetcher = fetcher
        self.emitter = emitter
        self.checkpoints = checkpoints
        self.interval = interval
        self.metrics = metrics or MetricsCollector()
        self.clock = clock
        self.logger = logging.getLogger(self.__class__.__name__)
        self._stopEvent = threading.Event()

    def stop(self) -> None:
        self._stopEvent.set()

    def isStopped(self) -> bool:
        return self._stopEvent.is_set()

    def run(self) -> None:
        self.logger.info(
            f"Starting CloudWatch Logs polling for {self.logGroups} (interval: {self.interval}s)"
        )

        while not self.isStopped():
            self.runCycle()

            if not self.isStopped():
                self.logger.debug(f"Waiting {self.interval} seconds until next poll...")
                self._stopEvent.wait(self.interval)

        self.logger.info("Polling stopped")

    def runCycle(self) -> int:
        """
        Run one polling cycle over every configured group.

        Returns:
            Number of events emitted during the cycle
        """
        cycleStart = time.time()
        emitted = 0

        for group in self.resolveGroups():
            if self.isStopped():
                self.logger.info("Stop requested, leaving remaining log groups for later")
                break

            try:
                emitted += self.processGroup(group)
                self.metrics.recordGroupProcessed()
            except CheckpointIOError as e:
                self.logger.critical(f"Checkpoint failure for log group '{group}': {e}", exc_info=True)
                self.metrics.recordGroupFailed()
                self.metrics.record_error('checkpoint')
            except Exception as e:
                self.logger.error(f"Error processing log group '{group}': {e}", exc_info=True)
                self.metrics.recordGroupFailed()
                self.metrics.record_error('group')

        self.metrics.record_cycle_time(time.time() - cycleStart)
        self.metrics.log_metrics()
        return emitted

    def resolveGroups(self) -> List[str]:
        groups: List[str] = []

        for identifier in self.logGroups:
            if identifier.endswith(WILDCARD):
                prefix = identifier.rstrip(WILDCARD)
                try:
                    matched = self.groupCatalog.list(prefix)
                except Exception as e:
                    self.logger.error(f"Error listing log groups for prefix '{prefix}': {e}", exc_info=True)
                    self.metrics.record_error('group_listing')
                    continue
            else:
                matched = [identifier]

            for group in matched:
                if group not in groups:
                    groups.append(group)

        return groups

    def processGroup(self, group: str) -> int:
        """
        Forward every event of a group ingested since its watermark.

        The new watermark is the time captured before discovery starts (or the
        current watermark, if the clock has fallen behind it), and
        it is written only after every qualifying stream has been drained.
        Any failure before that leaves the old watermark in place.
        """
        watermark = self.checkpoints.read(group)
        cycleTimestamp = self.clock()

        streams = self.streamCatalog.listNewStreams(group, watermark)
        emitted = 0

        for stream in streams:
            if not stream.ingestedAfter(watermark):
                continue

            for event in self.fetcher.drain(group, stream, watermark):
                self.emitter.emit(group, stream, event)
                emitted += 1

        # The watermark never moves backwards, even if the clock does
        newWatermark = max(watermark, cycleTimestamp)
        if newWatermark != cycleTimestamp:
            self.logger.warning(
                f"Clock is behind the checkpoint for log group '{group}' "
                f"({cycleTimestamp} < {watermark}), keeping the current watermark"
            )
        self.checkpoints.write(group, newWatermark)

        self.logger.info(
            f"Processed log group '{group}': {len(streams)} new streams, {emitted} events "
            f"(watermark {watermark} -> {newWatermark})"
        )
        return emitted
