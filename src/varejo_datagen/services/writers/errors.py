"""Error classification for sink writes."""

from enum import Enum

from varejo_datagen.shared.exceptions import SinkError


class ErrorCategory(Enum):
    """Error categories used as log fields and metric labels."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    TIMEOUT = "timeout"
    SERIALIZATION = "serialization"
    UNKNOWN = "unknown"


def classify_sink_error(exception: BaseException) -> ErrorCategory:
    """Classify a driver exception (or a SinkError wrapping one)."""
    if isinstance(exception, SinkError) and exception.original_error is not None:
        exception = exception.original_error

    error_message = str(exception).lower()
    error_type = type(exception).__name__.lower()

    # Timeouts (pymongo ServerSelectionTimeoutError, cassandra OperationTimedOut)
    if any(keyword in error_type for keyword in ["timeout", "timedout"]):
        return ErrorCategory.TIMEOUT

    if any(
        keyword in error_type
        for keyword in ["connection", "network", "nohostavailable", "autoreconnect"]
    ):
        return ErrorCategory.NETWORK

    if any(
        keyword in error_type or keyword in error_message
        for keyword in ["auth", "unauthorized", "forbidden"]
    ):
        return ErrorCategory.AUTHENTICATION

    if any(
        keyword in error_type
        for keyword in ["json", "serialization", "encoding", "invaliddocument", "bson"]
    ):
        return ErrorCategory.SERIALIZATION

    return ErrorCategory.UNKNOWN
