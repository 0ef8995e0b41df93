"""Half-open interval conflict detection."""
import pytest

from apps.bookings import engine
from apps.bookings.engine import has_conflict

from .conftest import at

pytestmark = pytest.mark.django_db


@pytest.fixture()
def nine_to_ten(room, employee):
    return engine.create_booking(employee.id, room.id, at(9), at(10))


@pytest.mark.parametrize('start,end,expected', [
    (at(9), at(10), True),          # identical
    (at(9, 30), at(10, 30), True),  # overlaps the end
    (at(8, 30), at(9, 30), True),   # overlaps the start
    (at(9, 15), at(9, 45), True),   # inside
    (at(8), at(11), True),          # surrounds
    (at(10), at(11), False),        # touches the end
    (at(8), at(9), False),          # touches the start
    (at(11), at(12), False),        # disjoint
])
def test_overlap_matrix(room, nine_to_ten, start, end, expected):
    assert has_conflict(room.id, start, end) is expected


def test_other_rooms_are_independent(other_room, nine_to_ten):
    assert not has_conflict(other_room.id, at(9), at(10))


def test_excluded_booking_is_ignored(room, nine_to_ten):
    assert not has_conflict(room.id, at(9), at(10), exclude_booking_id=nine_to_ten.id)


def test_only_approved_bookings_block(vip_room, employee, room, employee_caller, nine_to_ten):
    engine.create_booking(employee.id, vip_room.id, at(9), at(10))
    assert not has_conflict(vip_room.id, at(9), at(10))

    engine.cancel_booking(nine_to_ten.id, employee_caller, 'Freed')
    assert not has_conflict(room.id, at(9), at(10))
