"""
Access verification errors.

A wrong secret is NOT one of these: verify_access() returns False for it.
These are for a correct secret that is not valid right now.
"""
from apps.bookings.exceptions import BookingEngineError


class AccessError(BookingEngineError):
    """Base exception for access verification failures."""
    pass


class BookingNotApprovedError(AccessError):
    """Raised when the secret matches but the booking is not APPROVED."""
    pass


class OutsideBookingWindowError(AccessError):
    """Raised when the secret matches but the access attempt is outside [start, end]."""
    pass
