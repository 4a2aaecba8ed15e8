"""
Checkpoint Store

Persists one watermark per log group: the epoch-millis boundary below which
events have already been forwarded. Each group maps to a sincedb file named
after the MD5 digest of the group name, so arbitrary group names land on a
stable, filesystem-safe path that restarts reuse without a mapping table.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional

from .models import MILLIS_PER_DAY, currentMillis
from utils.errors import CheckpointIOError

# Absolute epoch, used when no history bound is configured
EPOCH_WATERMARK = 1


class CheckpointStore:
    """
    Reads and atomically writes per-group watermarks.

    Owned by a single worker; concurrent writers to the same directory are
    not supported.
    """

    def __init__(
        self,
        checkpointDir: Optional[str] = None,
        maxHistoryDays: Optional[float] = None,
        clock: Callable[[], int] = currentMillis
    ):
        """
        Args:
            checkpointDir: Root directory of sincedb files (default: home directory)
            maxHistoryDays: Bound on how far back a cold start reads
            clock: Returns the current time in epoch-millis
        """
        self.checkpointDir = Path(checkpointDir).expanduser() if checkpointDir else Path.home()
        self.maxHistoryDays = maxHistoryDays
        self.clock = clock
        self.logger = logging.getLogger(self.__class__.__name__)
        self._paths: Dict[str, Path] = {}

    def pathFor(self, group: str) -> Path:
        if group not in self._paths:
            digest = hashlib.md5(group.encode('utf-8')).hexdigest()
            self._paths[group] = self.checkpointDir / f".sincedb_{digest}"
        return self._paths[group]

    def coldStart(self) -> int:
        if self.maxHistoryDays is not None:
            return self.clock() - int(self.maxHistoryDays * MILLIS_PER_DAY)
        return EPOCH_WATERMARK

    def read(self, group: str) -> int:
        """
        Return the persisted watermark for a group.

        A missing, unparseable or negative value yields the cold-start value.

        Raises:
            CheckpointIOError: If the file exists but cannot be read
        """
        path = self.pathFor(group)

        try:
            content = path.read_bytes().strip()
        except FileNotFoundError:
            watermark = self.coldStart()
            self.logger.info(f"No checkpoint for log group '{group}', starting from {watermark}")
            return watermark
        except OSError as e:
            raise CheckpointIOError(group, str(path), e) from e

        # ASCII decimal digits only
        watermark = int(content) if content.isdigit() else -1

        if watermark < 0:
            fallback = self.coldStart()
            self.logger.warning(
                f"Ignoring invalid checkpoint {content!r} for log group '{group}' "
                f"at {path}, starting from {fallback}"
            )
            return fallback

        return watermark

    def write(self, group: str, value: int) -> None:
        """
        Replace the watermark for a group.

        The value is written to a temporary file in the same directory and
        renamed over the target, so readers see either the old or the new
        value and never a partial one.

        Raises:
            CheckpointIOError: If the value could not be persisted
        """
        path = self.pathFor(group)
        tempPath = None

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tempPath = tempfile.mkstemp(dir=str(path.parent), prefix=path.name, suffix='.tmp')
            with os.fdopen(fd, 'w') as f:
                f.write(str(int(value)))
                f.flush()
                os.fsync(f.fileno())

            os.replace(tempPath, path)
            tempPath = None
        except OSError as e:
            raise CheckpointIOError(group, str(path), e) from e
        finally:
            if tempPath is not None and os.path.exists(tempPath):
                os.unlink(tempPath)

        self.logger.debug(f"Checkpoint for log group '{group}' advanced to {value}")
