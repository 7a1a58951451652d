# Engine error taxonomy

from typing import Optional


class AnalyticsEngineError(Exception):
    """Base class for errors surfaced to callers"""

    status_code: int = 500


class EventValidationError(AnalyticsEngineError):
    """An event is missing a required field or a field is malformed"""

    status_code = 400


class SerializationError(AnalyticsEngineError):
    """An event could not be encoded for storage"""

    status_code = 500


class StoreUnavailable(AnalyticsEngineError):
    """The backing store could not be reached or returned an error"""

    status_code = 503

    def __init__(self, operation: str, partition_key: Optional[str], cause: Exception):
        self.operation = operation
        self.partition_key = partition_key
        self.cause = cause
        target = f" on '{partition_key}'" if partition_key else ""
        super().__init__(f"Store {operation} failed{target}: {cause}")
