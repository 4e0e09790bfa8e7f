from typing import Optional

from gameasure.constants import (
    EXIT_CODE_DELIVERY_FAILED,
    EXIT_CODE_FAILURE,
    EXIT_CODE_INVALID_HIT,
)


class GAMeasurementError(Exception):
    """
    Base error for hits that could not be encoded or delivered.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An error occurred while sending analytics hits."):
        self.message = message
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_FAILURE


class HitEncodingError(GAMeasurementError):
    """
    Error raised when a hit cannot be turned into an encoded query string.

    Args:
        key (Optional[str]): The offending query item key, if known.
        reason (Optional[str]): Why the item could not be encoded.
    """
    def __init__(self, key: Optional[str] = None, reason: Optional[str] = None,
                 message: str = "Unable to encode hit{where}.{info}"):
        self.key = key
        where = f" item {key!r}" if key else ""
        info = f" Details: {reason}" if reason else ""
        super().__init__(message.format(where=where, info=info))

    def get_exit_code(self) -> int:
        return EXIT_CODE_INVALID_HIT


class TransportError(GAMeasurementError):
    """
    Network level failure while posting a batch (DNS, connection, timeout).

    Args:
        reason (Exception): The underlying transport exception.
    """
    def __init__(self, reason: Exception):
        self.reason = reason
        super().__init__(str(reason) or reason.__class__.__name__)

    def get_exit_code(self) -> int:
        return EXIT_CODE_DELIVERY_FAILED


class ServerRejectionError(GAMeasurementError):
    """
    The collection endpoint answered with a status other than 200.

    Args:
        status_code (int): The HTTP status code received.
    """
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(str(status_code))

    def get_exit_code(self) -> int:
        return EXIT_CODE_DELIVERY_FAILED


class EngineNotRunningError(GAMeasurementError):
    def __init__(self, message: str = "The dispatch loop is not running."):
        super().__init__(message)
