"""
Access verifier — decides whether a presented secret opens a room's door.

Public API:
  verify_access(booking_id, presented_secret, now=None, clock=None)
  record_access(booking_id, clock=None)
  check_unused_bookings(clock=None)
  get_access_logs(booking_id)
  access_qr_payload(booking)
  generate_access_qr(booking_id, caller)

A wrong secret is a normal outcome (``False``, "try again"); a right secret
that is not valid at this moment raises, so the door UI can say why.
"""
import hmac
import json
import logging

import segno
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.bookings.engine import get_booking_by_id
from apps.bookings.credentials import normalize_secret
from apps.bookings.exceptions import BookingNotFoundError, UnauthorizedError
from apps.bookings.models import Booking
from apps.core.clock import resolve_clock

from .exceptions import BookingNotApprovedError, OutsideBookingWindowError
from .models import AccessEvent

logger = logging.getLogger(__name__)

QR_SCALE = 6   # pixels per module


def _ensure_usable(booking: Booking, now) -> None:
    if not booking.is_active:
        raise BookingNotApprovedError(
            f"Booking {booking.id_short} is {booking.get_status_display().lower()}, not approved."
        )
    if not booking.covers(now):
        raise OutsideBookingWindowError(
            f"Booking {booking.id_short} is only valid from "
            f"{booking.start_time:%Y-%m-%d %H:%M} to {booking.end_time:%H:%M}."
        )


def verify_access(booking_id, presented_secret, now=None, clock=None) -> bool:
    """
    Check a secret presented at the door for ``booking_id``.

    Returns False for a wrong secret regardless of time.

    Raises:
      BookingNotFoundError      — no such booking
      BookingNotApprovedError   — right secret, booking not APPROVED
      OutsideBookingWindowError — right secret, ``now`` outside [start, end]
    """
    booking = get_booking_by_id(booking_id)
    now = now or resolve_clock(clock).now()

    presented = normalize_secret(presented_secret).encode()
    stored = normalize_secret(booking.secret).encode()
    if not hmac.compare_digest(presented, stored):
        logger.info('Access denied for booking %s: wrong secret', booking.id)
        return False

    _ensure_usable(booking, now)
    return True


def record_access(booking_id, clock=None) -> AccessEvent:
    """
    Log an entry for a booking whose secret was just accepted.

    Status and window are checked again inside the transaction: the booking
    may have been cancelled between verification and entry.
    """
    now = resolve_clock(clock).now()
    with transaction.atomic():
        try:
            booking = Booking.objects.select_for_update().get(pk=booking_id)
        except (Booking.DoesNotExist, ValidationError, ValueError):
            raise BookingNotFoundError(f"Booking {booking_id} not found.")
        _ensure_usable(booking, now)
        event = AccessEvent.objects.create(booking=booking, access_time=now)

    logger.info('Access recorded for booking %s at %s', booking.id, now.isoformat())
    return event


def check_unused_bookings(clock=None) -> list:
    """APPROVED bookings whose window has fully elapsed without any access event."""
    now = resolve_clock(clock).now()
    return list(
        Booking.objects.no_shows(now)
        .select_related('employee', 'room')
        .order_by('end_time')
    )


def get_access_logs(booking_id) -> list:
    """Access events for a booking, newest first."""
    get_booking_by_id(booking_id)
    return list(AccessEvent.objects.filter(booking_id=booking_id).order_by('-access_time'))


# ── QR credential ─────────────────────────────────────────────────────────────

def access_qr_payload(booking: Booking) -> str:
    """JSON scanned by the door reader: ``{"bookingId": ..., "secretNumber": ...}``."""
    return json.dumps({'bookingId': str(booking.id), 'secretNumber': booking.secret})


def generate_access_qr(booking_id, caller, scale=QR_SCALE) -> str:
    """
    Render the booking's door credential as a PNG data URL.

    Only the booking's owner may fetch it; the secret is theirs alone.

    Raises:
      BookingNotFoundError — no such booking
      UnauthorizedError    — caller does not own the booking
    """
    booking = get_booking_by_id(booking_id)
    if not caller.owns(booking.employee_id):
        raise UnauthorizedError("Only the owner of this booking can view its access code.")

    qr = segno.make(access_qr_payload(booking), error='m')
    return qr.png_data_uri(scale=scale)
