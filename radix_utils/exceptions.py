from typing import Optional


class RadixUtilsError(Exception):
    """Base class for errors raised by radix_utils."""
    pass


class GatewayRequestError(RadixUtilsError):
    """Raised when a Gateway API request fails."""

    def __init__(self, message: str, path: str, status: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status = status


class TransactionEventError(RadixUtilsError):
    """Raised when an event cannot be read from a transaction receipt."""
    pass


class NoEventsError(TransactionEventError):
    """Raised when a transaction receipt carries no detailed events."""
    pass


class EventNotFoundError(TransactionEventError):
    """Raised when a named event is absent from a transaction receipt."""

    def __init__(self, event_name: str):
        super().__init__(f"Event '{event_name}' not found in transaction receipt")
        self.event_name = event_name
