"""Booking creation, cancellation and approval."""
import pytest

from apps.bookings import engine
from apps.bookings.exceptions import (
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
from apps.bookings.models import ApprovalDecision, BookingStatus, BookingStatusLog
from apps.bookings.policies import ApprovalPolicy, CapacityPolicy

from .conftest import at

pytestmark = pytest.mark.django_db

HEX = set('0123456789ABCDEF')


# ── Creation ──────────────────────────────────────────────────────────────────

def test_standard_room_is_auto_approved(room, employee):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    assert booking.status == BookingStatus.APPROVED
    assert len(booking.secret) == 8
    assert set(booking.secret) <= HEX
    assert not hasattr(booking, 'approval') or booking.approval is None


def test_vip_room_waits_for_approval(vip_room, employee):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))

    assert booking.status == BookingStatus.PENDING
    assert booking.approval.decision == ApprovalDecision.WAITING
    assert booking.approval.approver is None


def test_creation_writes_status_log(room, employee):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    transitions = list(
        BookingStatusLog.objects.filter(booking=booking).values_list('from_status', 'to_status')
    )
    assert transitions == [('', 'PENDING'), ('PENDING', 'APPROVED')]


def test_overlapping_request_is_rejected(room, employee, other_employee):
    engine.create_booking(employee.id, room.id, at(9), at(10))

    with pytest.raises(SlotUnavailableError):
        engine.create_booking(other_employee.id, room.id, at(9, 30), at(10, 30))


def test_touching_intervals_both_succeed(room, employee):
    first = engine.create_booking(employee.id, room.id, at(9), at(10))
    second = engine.create_booking(employee.id, room.id, at(10), at(11))

    assert first.status == second.status == BookingStatus.APPROVED


def test_pending_booking_does_not_block(vip_room, employee, other_employee):
    engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    second = engine.create_booking(other_employee.id, vip_room.id, at(9), at(10))

    assert second.status == BookingStatus.PENDING


def test_disabled_room_is_rejected(disabled_room, employee):
    with pytest.raises(RoomUnavailableError):
        engine.create_booking(employee.id, disabled_room.id, at(9), at(10))


def test_conflict_is_reported_before_disabled_room(room, employee):
    engine.create_booking(employee.id, room.id, at(9), at(10))
    room.is_disabled = True
    room.save()

    with pytest.raises(SlotUnavailableError):
        engine.create_booking(employee.id, room.id, at(9), at(10))


@pytest.mark.parametrize('start,end', [(at(10), at(9)), (at(10), at(10))])
def test_empty_or_inverted_interval_is_rejected(room, employee, start, end):
    with pytest.raises(InvalidIntervalError):
        engine.create_booking(employee.id, room.id, start, end)


def test_unknown_room_and_employee(room, employee):
    with pytest.raises(RoomNotFoundError):
        engine.create_booking(employee.id, '00000000-0000-0000-0000-000000000000', at(9), at(10))
    with pytest.raises(EmployeeNotFoundError):
        engine.create_booking('00000000-0000-0000-0000-000000000000', room.id, at(9), at(10))


@pytest.mark.parametrize('bad_id', ['not-a-uuid', None, 42.5])
def test_malformed_room_id_is_not_found(employee, bad_id):
    with pytest.raises(RoomNotFoundError):
        engine.create_booking(employee.id, bad_id, at(9), at(10))


def test_upper_case_room_id_books_the_same_room(room, employee, other_employee):
    engine.create_booking(employee.id, str(room.id).upper(), at(9), at(10))

    with pytest.raises(SlotUnavailableError):
        engine.create_booking(other_employee.id, room.id, at(9), at(10))


def test_policy_can_be_swapped(vip_room, room, employee):
    never = engine.create_booking(employee.id, vip_room.id, at(9), at(10), policy=ApprovalPolicy())
    by_size = engine.create_booking(employee.id, room.id, at(9), at(10), policy=CapacityPolicy(min_capacity=5))

    assert never.status == BookingStatus.APPROVED
    assert by_size.status == BookingStatus.PENDING


def test_policy_comes_from_settings(settings, vip_room, employee):
    settings.BOOKING_APPROVAL_POLICY = 'apps.bookings.policies.ApprovalPolicy'

    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))

    assert booking.status == BookingStatus.APPROVED


# ── Cancellation ──────────────────────────────────────────────────────────────

def test_owner_cancels_and_slot_is_freed(room, employee, other_employee, employee_caller):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    cancelled = engine.cancel_booking(booking.id, employee_caller, 'Meeting moved')

    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancellation_reason == 'Meeting moved'
    again = engine.create_booking(other_employee.id, room.id, at(9), at(10))
    assert again.status == BookingStatus.APPROVED


def test_admin_can_cancel_someone_elses_booking(room, employee, admin_caller):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    cancelled = engine.cancel_booking(booking.id, admin_caller, 'Facilities maintenance')

    assert cancelled.status == BookingStatus.CANCELLED


def test_stranger_cannot_cancel(room, employee, other_caller):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    with pytest.raises(UnauthorizedError):
        engine.cancel_booking(booking.id, other_caller, 'Not mine')

    assert engine.get_booking_by_id(booking.id).status == BookingStatus.APPROVED


def test_pending_booking_can_be_cancelled(vip_room, employee, employee_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))

    cancelled = engine.cancel_booking(booking.id, employee_caller, 'No longer needed')

    assert cancelled.status == BookingStatus.CANCELLED


def test_rejected_booking_cannot_be_cancelled(vip_room, employee, employee_caller, admin_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    engine.approve_booking(booking.id, admin_caller, False, 'Board meeting')

    with pytest.raises(InvalidStatusError):
        engine.cancel_booking(booking.id, employee_caller, 'Too late')


def test_cancel_twice_fails(room, employee, employee_caller):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))
    engine.cancel_booking(booking.id, employee_caller, 'Moved')

    with pytest.raises(InvalidStatusError):
        engine.cancel_booking(booking.id, employee_caller, 'Moved again')


@pytest.mark.parametrize('reason', ['', '   ', None])
def test_cancel_requires_a_reason(room, employee, employee_caller, reason):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    with pytest.raises(MissingReasonError):
        engine.cancel_booking(booking.id, employee_caller, reason)

    assert engine.get_booking_by_id(booking.id).status == BookingStatus.APPROVED


def test_cancel_unknown_booking(employee_caller):
    with pytest.raises(BookingNotFoundError):
        engine.cancel_booking('00000000-0000-0000-0000-000000000000', employee_caller, 'x')


# ── Approval ──────────────────────────────────────────────────────────────────

def test_approve_vip_booking(vip_room, employee, admin, admin_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))

    approved = engine.approve_booking(booking.id, admin_caller, True, 'OK for the board')

    assert approved.status == BookingStatus.APPROVED
    assert approved.approval.decision == ApprovalDecision.APPROVED
    assert approved.approval.approver == admin
    assert approved.approval.reason == 'OK for the board'
    assert approved.approval.decided_at is not None


def test_reject_vip_booking(vip_room, employee, admin_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))

    rejected = engine.approve_booking(booking.id, admin_caller, False, 'Reserved for execs')

    assert rejected.status == BookingStatus.REJECTED
    assert rejected.approval.decision == ApprovalDecision.REJECTED
    assert rejected.approval.reason == 'Reserved for execs'


def test_second_decision_fails(vip_room, employee, admin_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    engine.approve_booking(booking.id, admin_caller, True)

    with pytest.raises(NotPendingError):
        engine.approve_booking(booking.id, admin_caller, True)


def test_auto_approved_booking_has_nothing_to_approve(room, employee, admin_caller):
    booking = engine.create_booking(employee.id, room.id, at(9), at(10))

    with pytest.raises(NotPendingError):
        engine.approve_booking(booking.id, admin_caller, True)


def test_cancelled_pending_booking_cannot_be_approved(vip_room, employee, employee_caller, admin_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    engine.cancel_booking(booking.id, employee_caller, 'Changed plans')

    with pytest.raises(NotPendingError):
        engine.approve_booking(booking.id, admin_caller, True)


def test_plain_employee_cannot_approve(vip_room, employee, employee_caller):
    booking = engine.create_booking(employee.id, vip_room.id, at(9), at(10))

    with pytest.raises(UnauthorizedError):
        engine.approve_booking(booking.id, employee_caller, True)


def test_approval_cannot_double_book(vip_room, employee, other_employee, admin_caller):
    first = engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    second = engine.create_booking(other_employee.id, vip_room.id, at(9, 30), at(10, 30))
    engine.approve_booking(first.id, admin_caller, True)

    with pytest.raises(SlotUnavailableError):
        engine.approve_booking(second.id, admin_caller, True)

    assert engine.get_booking_by_id(second.id).status == BookingStatus.PENDING
    # Rejecting does not need a free slot
    rejected = engine.approve_booking(second.id, admin_caller, False, 'Slot taken')
    assert rejected.status == BookingStatus.REJECTED


# ── Queries ───────────────────────────────────────────────────────────────────

def test_user_bookings_newest_first_and_filtered(room, other_room, vip_room, employee, other_employee):
    early = engine.create_booking(employee.id, room.id, at(9), at(10))
    late = engine.create_booking(employee.id, other_room.id, at(14), at(15))
    pending = engine.create_booking(employee.id, vip_room.id, at(11), at(12))
    engine.create_booking(other_employee.id, room.id, at(16), at(17))

    assert [b.id for b in engine.get_user_bookings(employee.id)] == [late.id, pending.id, early.id]
    assert [b.id for b in engine.get_user_bookings(employee.id, BookingStatus.PENDING)] == [pending.id]


def test_pending_approvals_queue(vip_room, room, employee, admin_caller):
    first = engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    second = engine.create_booking(employee.id, vip_room.id, at(11), at(12))
    engine.create_booking(employee.id, room.id, at(9), at(10))

    assert [b.id for b in engine.list_pending_approvals()] == [first.id, second.id]

    engine.approve_booking(first.id, admin_caller, True)
    assert [b.id for b in engine.list_pending_approvals()] == [second.id]


def test_get_unknown_booking():
    with pytest.raises(BookingNotFoundError):
        engine.get_booking_by_id('00000000-0000-0000-0000-000000000000')
    with pytest.raises(BookingNotFoundError):
        engine.get_booking_by_id('not-a-uuid')
