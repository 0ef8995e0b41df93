"""
Booking engine — pure business logic, no HTTP/request awareness.

Public API:
  has_conflict(room_id, start_time, end_time, exclude_booking_id=None)
  create_booking(employee_id, room_id, start_time, end_time, policy=None)
  cancel_booking(booking_id, caller, reason)
  approve_booking(booking_id, caller, is_approved, reason='', clock=None)
  get_booking_by_id(booking_id)
  get_user_bookings(employee_id, status=None)
  list_pending_approvals()

Every mutating call is one unit of work: a transaction.atomic() block opened
at entry and closed (commit or rollback) by the context manager. Nothing is
retried here; database errors propagate after rollback.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.capabilities import Capability
from apps.core.clock import resolve_clock
from apps.employees.models import Employee
from apps.rooms.models import Room

from .credentials import generate_secret
from .exceptions import (
    BookingNotFoundError,
    EmployeeNotFoundError,
    InvalidIntervalError,
    InvalidStatusError,
    MissingReasonError,
    NotPendingError,
    RoomNotFoundError,
    RoomUnavailableError,
    SlotUnavailableError,
    UnauthorizedError,
)
from .locking import room_guard
from .models import (
    ApprovalDecision,
    ApprovalRecord,
    Booking,
    BookingStatus,
    BookingStatusLog,
    CANCELLABLE_STATUSES,
)
from .policies import get_approval_policy

logger = logging.getLogger(__name__)


def _hydrated():
    return Booking.objects.select_related('employee', 'room', 'approval', 'approval__approver')


def _load_for_update(booking_id) -> Booking:
    try:
        return Booking.objects.select_for_update().get(pk=booking_id)
    except (Booking.DoesNotExist, ValidationError, ValueError):
        raise BookingNotFoundError(f"Booking {booking_id} not found.")


# ── Conflict detection ────────────────────────────────────────────────────────

def has_conflict(room_id, start_time, end_time, exclude_booking_id=None) -> bool:
    """
    True if an APPROVED booking on ``room_id`` overlaps [start_time, end_time).

    Touching endpoints do not conflict. PENDING bookings never block a slot,
    so unapproved requests cannot starve a room.
    """
    qs = Booking.objects.approved().for_room(room_id).overlapping(start_time, end_time)
    if exclude_booking_id:
        qs = qs.exclude(pk=exclude_booking_id)
    return qs.exists()


# ── Core: Booking Creation ────────────────────────────────────────────────────

def create_booking(employee_id, room_id, start_time, end_time, policy=None) -> Booking:
    """
    Reserve ``room_id`` for ``employee_id`` over [start_time, end_time).

    Steps (all inside one transaction, under the room guard and a
    SELECT FOR UPDATE on the room row):
      1. Reject if an APPROVED booking overlaps the interval
      2. Reject if the room is disabled
      3. Generate the entry secret
      4. Insert the booking as PENDING
      5. Auto-approve, or open a WAITING approval record if the policy says so

    Past-dated requests are expected to be filtered out by the caller.

    Raises:
      InvalidIntervalError  — start_time is not before end_time
      RoomNotFoundError     — no such room
      EmployeeNotFoundError — no such employee
      SlotUnavailableError  — interval overlaps an APPROVED booking
      RoomUnavailableError  — room is disabled
    """
    if start_time >= end_time:
        raise InvalidIntervalError("Booking start time must be before its end time.")

    policy = policy or get_approval_policy()

    with room_guard(room_id), transaction.atomic():
        # 1. Lock the room row so concurrent writers queue behind us
        try:
            room = Room.objects.select_for_update().get(pk=room_id)
        except (Room.DoesNotExist, ValidationError, ValueError):
            raise RoomNotFoundError(f"Room {room_id} not found.")

        try:
            employee = Employee.objects.get(pk=employee_id)
        except (Employee.DoesNotExist, ValidationError, ValueError):
            raise EmployeeNotFoundError(f"Employee {employee_id} not found.")

        if has_conflict(room.id, start_time, end_time):
            raise SlotUnavailableError(
                f"{room.name} is already booked for part of this time slot. "
                "Please choose a different time."
            )

        # 2. Disabled rooms keep their history but take no new bookings
        if room.is_disabled:
            raise RoomUnavailableError(f"{room.name} is disabled and cannot be booked.")

        # 3 + 4. Insert as PENDING with a fresh secret
        booking = Booking.objects.create(
            employee=employee,
            room=room,
            start_time=start_time,
            end_time=end_time,
            status=BookingStatus.PENDING,
            secret=generate_secret(),
        )
        BookingStatusLog.objects.create(
            booking=booking,
            from_status='',
            to_status=BookingStatus.PENDING,
            changed_by=str(employee.id),
            reason='Booking created',
        )

        # 5. Approval policy decides the initial status
        if policy.requires_approval(room):
            ApprovalRecord.objects.create(booking=booking, decision=ApprovalDecision.WAITING)
            logger.info('Booking %s on %s waiting for approval', booking.id, room.name)
        else:
            booking.approve(changed_by='system', reason='Auto-approved')
            logger.info('Booking %s on %s auto-approved', booking.id, room.name)

    return _hydrated().get(pk=booking.pk)


# ── Core: Cancellation ────────────────────────────────────────────────────────

def cancel_booking(booking_id, caller, reason) -> Booking:
    """
    Cancel a PENDING or APPROVED booking. The slot is free again immediately.

    Only the owner, or a caller holding MANAGE_BOOKINGS, may cancel.

    Raises:
      MissingReasonError   — reason is empty or blank
      BookingNotFoundError — no such booking
      UnauthorizedError    — caller is neither owner nor booking manager
      InvalidStatusError   — booking is already REJECTED or CANCELLED
    """
    if not reason or not reason.strip():
        raise MissingReasonError("Please give a reason for cancelling this booking.")

    with transaction.atomic():
        booking = _load_for_update(booking_id)

        if not caller.owns(booking.employee_id) and not caller.can(Capability.MANAGE_BOOKINGS):
            raise UnauthorizedError("You are not allowed to cancel this booking.")

        if booking.status not in CANCELLABLE_STATUSES:
            raise InvalidStatusError(
                f"A {booking.get_status_display().lower()} booking cannot be cancelled."
            )

        booking.cancel(changed_by=str(caller.employee_id), reason=reason)

    logger.info('Booking %s cancelled by %s', booking.id, caller.employee_id)
    return _hydrated().get(pk=booking.pk)


# ── Core: Manual Approval ─────────────────────────────────────────────────────

def approve_booking(booking_id, caller, is_approved, reason='', clock=None) -> Booking:
    """
    Record a reviewer's decision on a booking waiting for approval.

    Approving re-checks the slot against APPROVED bookings (excluding this
    one): pending requests never block, so another booking may have taken
    the interval while this one waited.

    Raises:
      UnauthorizedError    — caller lacks APPROVE_BOOKINGS
      BookingNotFoundError — no such booking
      NotPendingError      — booking is not PENDING or was already decided
      SlotUnavailableError — approving would double-book the room
    """
    if not caller.can(Capability.APPROVE_BOOKINGS):
        raise UnauthorizedError("You are not allowed to decide booking approvals.")

    clock = resolve_clock(clock)

    try:
        room_id = Booking.objects.values_list('room_id', flat=True).get(pk=booking_id)
    except (Booking.DoesNotExist, ValidationError, ValueError):
        raise BookingNotFoundError(f"Booking {booking_id} not found.")

    with room_guard(room_id), transaction.atomic():
        # Same row lock create_booking takes, so the re-check below is race-free
        Room.objects.select_for_update().get(pk=room_id)
        booking = _load_for_update(booking_id)

        approval = ApprovalRecord.objects.select_for_update().filter(booking=booking).first()
        if booking.status != BookingStatus.PENDING or approval is None or not approval.is_waiting:
            raise NotPendingError("This booking is not waiting for approval; it was already decided.")

        if is_approved and has_conflict(
            booking.room_id, booking.start_time, booking.end_time, exclude_booking_id=booking.id,
        ):
            raise SlotUnavailableError(
                "Another booking was approved for this time slot in the meantime."
            )

        approver = Employee.objects.filter(pk=caller.employee_id).first()
        approval.decide(is_approved, approver, reason, at=clock.now())
        if is_approved:
            booking.approve(changed_by=str(caller.employee_id), reason=reason)
        else:
            booking.reject(changed_by=str(caller.employee_id), reason=reason)

    logger.info(
        'Booking %s %s by %s', booking.id,
        'approved' if is_approved else 'rejected', caller.employee_id,
    )
    return _hydrated().get(pk=booking.pk)


# ── Queries ───────────────────────────────────────────────────────────────────

def get_booking_by_id(booking_id) -> Booking:
    try:
        return _hydrated().get(pk=booking_id)
    except (Booking.DoesNotExist, ValidationError, ValueError):
        raise BookingNotFoundError(f"Booking {booking_id} not found.")


def get_user_bookings(employee_id, status=None) -> list:
    """Bookings owned by ``employee_id``, newest start first, optionally by status."""
    qs = _hydrated().filter(employee_id=employee_id)
    if status:
        qs = qs.filter(status=status)
    return list(qs.order_by('-start_time'))


def list_pending_approvals() -> list:
    """Bookings waiting on a reviewer, oldest request first."""
    return list(
        _hydrated()
        .filter(status=BookingStatus.PENDING, approval__decision=ApprovalDecision.WAITING)
        .order_by('created_at')
    )
