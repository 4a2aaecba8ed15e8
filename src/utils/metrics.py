from typing import Dict, Any
from collections import defaultdict
from datetime import datetime, timezone
import logging


class MetricsCollector:

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.reset()

    def reset(self) -> None:
        self.startTime = datetime.now(timezone.utc)

        self.groups_processed = 0
        self.groups_failed = 0

        self.streams_scanned = 0

        self.events_fetched = 0
        self.events_filtered = 0
        self.events_emitted = 0
        self.records_pushed = 0
        self.decode_errors = 0

        self.errors = defaultdict(int)

        self.cycle_times = []

    def recordGroupProcessed(self) -> None:
        self.groups_processed += 1

    def recordGroupFailed(self) -> None:
        self.groups_failed += 1

    def recordStreamScanned(self) -> None:
        self.streams_scanned += 1

    def recordEventFetched(self) -> None:
        self.events_fetched += 1

    def recordEventFiltered(self) -> None:
        self.events_filtered += 1

    def recordEventEmitted(self, recordCount: int = 1) -> None:
        self.events_emitted += 1
        self.records_pushed += recordCount

    def recordDecodeError(self) -> None:
        self.decode_errors += 1

    def record_error(self, component: str) -> None:
        self.errors[component] += 1

    def record_cycle_time(self, duration_seconds: float) -> None:
        self.cycle_times.append(duration_seconds)

    def getMetrics(self) -> Dict[str, Any]:
        runtimeSeconds = (datetime.now(timezone.utc) - self.startTime).total_seconds()

        metrics = {
            'runtimeSeconds': runtimeSeconds,
            'groups': {
                'processed': self.groups_processed,
                'failed': self.groups_failed
            },
            'streams': {
                'scanned': self.streams_scanned
            },
            'events': {
                'fetched': self.events_fetched,
                'filtered': self.events_filtered,
                'emitted': self.events_emitted,
                'events_per_second': self.events_emitted / runtimeSeconds if runtimeSeconds > 0 else 0
            },
            'records': {
                'pushed': self.records_pushed,
                'decode_errors': self.decode_errors
            },
            'errors': dict(self.errors),
            'performance': {
                'cycles': len(self.cycle_times),
                'avg_cycle_time_ms': sum(self.cycle_times) / len(self.cycle_times) * 1000 if self.cycle_times else 0,
                'max_cycle_time_ms': max(self.cycle_times) * 1000 if self.cycle_times else 0
            }
        }

        return metrics

    def log_metrics(self) -> None:
        metrics = self.getMetrics()

        self.logger.info("=== Poller Metrics ===")
        self.logger.info(f"Runtime: {metrics['runtimeSeconds']:.2f} seconds")
        self.logger.info(f"Groups processed: {metrics['groups']['processed']} (failed: {metrics['groups']['failed']})")
        self.logger.info(f"Streams scanned: {metrics['streams']['scanned']}")
        self.logger.info(f"Events fetched: {metrics['events']['fetched']}")
        self.logger.info(f"Events emitted: {metrics['events']['emitted']}")
        self.logger.info(f"Records pushed: {metrics['records']['pushed']}")

        if metrics['records']['decode_errors']:
            self.logger.warning(f"Decode errors: {metrics['records']['decode_errors']}")

        if metrics['errors']:
            self.logger.warning(f"Errors: {metrics['errors']}")
