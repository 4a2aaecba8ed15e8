"""
CloudWatch Logs Poller

Main orchestration module that wires the polling engine to its configuration,
codec and output sink.
"""

import sys
import signal
import logging
from pathlib import Path
from typing import Optional

import click

# Add src to path
sys.path.insert(0, str(Path(__file__).parent))

from utils.config_loader import ConfigLoader
from utils.errors import ConfigError
from utils.logger import setupLogging
from utils.metrics import MetricsCollector
from ingestion.catalog import GroupCatalog, StreamCatalog
from ingestion.checkpoint import CheckpointStore
from ingestion.cloudwatch_client import CloudWatchLogsClient
from ingestion.emitter import EventEmitter
from ingestion.fetcher import EventFetcher
from ingestion.scheduler import Scheduler
from decoding.codecs import createCodec
from output.sinks import createSink


class CloudWatchLogsPoller:
    """
    Main poller orchestrator.

    Coordinates:
    1. Log group and stream discovery
    2. Event fetching since each group's watermark
    3. Decoding and enrichment
    4. Delivery to the output sink and checkpointing
    """

    def __init__(self, config_path: Optional[str] = None, source=None, **overrides):
        """
        Initialize the poller.

        Args:
            config_path: Path to configuration file
            source: Log source to use instead of a boto3-backed client
            overrides: cloudwatch_logs options taking precedence over the file

        Raises:
            FileNotFoundError: If config file not found
            ConfigError: If config validation fails
        """
        self.config_loader = ConfigLoader(config_path)
        self.config_loader.load()
        self.config_loader.applyOverrides(**overrides)
        self.settings = self.config_loader.validate()
        self.config = self.config_loader.config

        setupLogging(self.config)
        self.logger = logging.getLogger(self.__class__.__name__)

        self.metrics = MetricsCollector()

        self.logger.info("Initializing poller components...")

        self.source = source if source is not None else CloudWatchLogsClient(self.settings)
        self.sink = createSink(self.config.get('output', {}) or {})
        codec = createCodec(self.settings['codec'], self.settings['codec_options'])

        self.checkpoints = CheckpointStore(
            checkpointDir=self.settings['checkpoint_dir'],
            maxHistoryDays=self.settings['max_history']
        )

        self.scheduler = Scheduler(
            logGroups=self.settings['log_group'],
            groupCatalog=GroupCatalog(self.source),
            streamCatalog=StreamCatalog(self.source, self.metrics),
            fetcher=EventFetcher(self.source, self.metrics),
            emitter=EventEmitter(codec, self.sink, self.settings, self.metrics),
            checkpoints=self.checkpoints,
            interval=self.settings['interval'],
            metrics=self.metrics
        )

        self.logger.info(f"Poller initialized for log groups {self.settings['log_group']}")

    def run_once(self) -> int:
        try:
            return self.scheduler.runCycle()
        finally:
            self.sink.close()

    def run_continuous(self) -> None:
        self._installSignalHandlers()
        try:
            self.scheduler.run()
        finally:
            self.sink.close()
            self.metrics.log_metrics()

    def stop(self) -> None:
        self.scheduler.stop()

    def test_connections(self) -> bool:
        self.logger.info("Testing connections...")
        status = self.source.getStatus()
        connected = status['configValid'] and status['connected']
        self.logger.info(f"{status['source']}: {'OK' if connected else 'FAILED'}")
        return connected

    def get_status(self) -> dict:
        return {
            'source': self.source.getStatus(),
            'log_groups': self.settings['log_group'],
            'checkpoints': {
                group: self.checkpoints.read(group)
                for group in self.settings['log_group']
                if not group.endswith('*')
            },
            'metrics': self.metrics.getMetrics()
        }

    def _installSignalHandlers(self) -> None:
        def handler(signum, frame):
            self.logger.info(f"Received signal {signum}, finishing current log group and shutting down...")
            self.stop()

        signal.signal(signal.SIGINT, handler)
        signal.signal(signal.SIGTERM, handler)


@click.command()
@click.option(
    '--config',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to configuration file'
)
@click.option(
    '--log-group',
    multiple=True,
    help='Log group to poll; end with * to poll every group with that prefix (repeatable)'
)
@click.option(
    '--interval',
    default=None,
    type=float,
    help='Seconds between polling cycles (default: 60)'
)
@click.option(
    '--max-history',
    default=None,
    type=float,
    help='Days of history to read on first start (default: all)'
)
@click.option(
    '--checkpoint-dir',
    default=None,
    help='Directory holding checkpoint files (default: home directory)'
)
@click.option(
    '--once',
    is_flag=True,
    help='Run a single polling cycle and exit'
)
@click.option(
    '--test-connections',
    is_flag=True,
    help='Test connections and exit'
)
def cli(config, log_group, interval, max_history, checkpoint_dir, once, test_connections):
    """CloudWatch Logs Poller"""

    try:
        poller = CloudWatchLogsPoller(
            config,
            log_group=list(log_group) or None,
            interval=interval,
            max_history=max_history,
            checkpoint_dir=checkpoint_dir
        )

        if test_connections:
            sys.exit(0 if poller.test_connections() else 1)

        if once:
            poller.run_once()
        else:
            poller.run_continuous()

    except ConfigError as e:
        print(f"Error: Invalid configuration - {e}", file=sys.stderr)
        sys.exit(2)
    except FileNotFoundError as e:
        print(f"Error: Configuration file not found - {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(0)


if __name__ == '__main__':
    cli()
