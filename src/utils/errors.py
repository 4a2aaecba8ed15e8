# Error taxonomy shared by the poller components.


class PollerError(Exception):
    pass


class ConfigError(PollerError):
    # Invalid or missing options. Fatal at startup.
    pass


class TransientFetchError(PollerError):
    """
    Network or API failure during a listing or fetch call.

    The group's checkpoint is not advanced, so the next scheduled cycle
    retries from the last good watermark.
    """

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class DecodeError(PollerError):
    # Malformed payload; only the offending record is skipped.
    pass


class CheckpointIOError(PollerError):
    def __init__(self, group: str, path: str, cause: Exception):
        super().__init__(f"Checkpoint I/O failed for log group '{group}' at {path}: {cause}")
        self.group = group
        self.path = path
        self.cause = cause
