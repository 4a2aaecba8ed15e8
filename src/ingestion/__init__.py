"""
Log Ingestion Module

Incrementally polls AWS CloudWatch Logs and forwards new events downstream.

Architecture:
- Paginated log source interface with a boto3-backed implementation
- Group and stream discovery bounded by a per-group watermark
- Event fetching filtered by ingestion time
- Atomic per-group checkpoint files
- A single-worker scheduler driving the polling cycle
"""

from .base import BaseLogSource
from .catalog import GroupCatalog, StreamCatalog
from .checkpoint import CheckpointStore
from .cloudwatch_client import CloudWatchLogsClient
from .emitter import EventEmitter
from .fetcher import EventFetcher
from .models import LogStream, LogEvent
from .pagination import paginate
from .scheduler import Scheduler

__all__ = [
    'BaseLogSource',
    'GroupCatalog',
    'StreamCatalog',
    'CheckpointStore',
    'CloudWatchLogsClient',
    'EventEmitter',
    'EventFetcher',
    'LogStream',
    'LogEvent',
    'paginate',
    'Scheduler',
]
