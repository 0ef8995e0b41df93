"""
Account lock errors raised by lock_policy.py.
"""
from apps.bookings.exceptions import BookingEngineError


class LockPolicyError(BookingEngineError):
    """Base exception for account lock/unlock errors."""
    pass


class NoPendingRequestError(LockPolicyError):
    """Raised when an unlock/reject finds no PENDING request and nothing to unlock."""
    pass


class EmployeeAlreadyLockedError(LockPolicyError):
    """Raised when locking an employee who already has an open unlock request."""
    pass
