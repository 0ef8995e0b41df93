"""
Custom exceptions for the booking engine.
Raised in engine.py / models.py and mapped to user messages by the HTTP layer.
"""


class BookingEngineError(Exception):
    """Base exception for all booking engine errors."""
    pass


class SlotUnavailableError(BookingEngineError):
    """Raised when an APPROVED booking already overlaps the requested interval."""
    pass


class RoomUnavailableError(BookingEngineError):
    """Raised when the requested room is disabled."""
    pass


class RoomNotFoundError(BookingEngineError):
    """Raised when the requested room does not exist."""
    pass


class EmployeeNotFoundError(BookingEngineError):
    """Raised when the booking owner does not exist."""
    pass


class InvalidIntervalError(BookingEngineError):
    """Raised when start_time is not strictly before end_time."""
    pass


class BookingNotFoundError(BookingEngineError):
    """Raised when no booking exists for the given id."""
    pass


class InvalidStatusError(BookingEngineError):
    """Raised when the booking's current status does not allow the operation."""
    pass


class NotPendingError(BookingEngineError):
    """Raised when an approval decision is attempted on an already-decided booking."""
    pass


class UnauthorizedError(BookingEngineError):
    """Raised when the caller neither owns the booking nor holds the needed capability."""
    pass


class MissingReasonError(BookingEngineError):
    """Raised when an operation that must be explained is called without a reason."""
    pass


class InvalidTransitionError(BookingEngineError):
    """
    Raised by the state machine for an illegal status change.
    Correctly gated callers never see this; it indicates a bug.
    """
    pass
