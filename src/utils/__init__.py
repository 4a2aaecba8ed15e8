"""
Utilities Module

Common utilities for configuration, logging, metrics and errors.
"""

from .config_loader import ConfigLoader
from .errors import PollerError, ConfigError, TransientFetchError, DecodeError, CheckpointIOError
from .logger import setupLogging
from .metrics import MetricsCollector

__all__ = [
    'ConfigLoader',
    'PollerError',
    'ConfigError',
    'TransientFetchError',
    'DecodeError',
    'CheckpointIOError',
    'setupLogging',
    'MetricsCollector',
]
