"""Shared pytest fixtures."""
from datetime import datetime, timezone as dt_timezone

import pytest

from apps.core.capabilities import Caller, resolve_caller
from apps.core.clock import FixedClock
from apps.employees.models import Employee
from apps.rooms.models import Room, RoomType


def at(hour, minute=0, day=1, month=2, year=2024):
    """Aware UTC datetime; defaults to 2024-02-01."""
    return datetime(year, month, day, hour, minute, tzinfo=dt_timezone.utc)


@pytest.fixture()
def clock():
    return FixedClock(at(8, 0))


@pytest.fixture()
def room(db):
    return Room.objects.create(name='Aurora', capacity=6)


@pytest.fixture()
def other_room(db):
    return Room.objects.create(name='Borealis', capacity=10)


@pytest.fixture()
def vip_room(db):
    return Room.objects.create(name='Boardroom', capacity=20, room_type=RoomType.VIP)


@pytest.fixture()
def disabled_room(db):
    return Room.objects.create(name='Cubby', capacity=2, is_disabled=True)


@pytest.fixture()
def employee(db):
    return Employee.objects.create(name='Ben Booker', email='ben@example.com')


@pytest.fixture()
def other_employee(db):
    return Employee.objects.create(name='Chloe Chen', email='chloe@example.com')


@pytest.fixture()
def admin(db):
    return Employee.objects.create(name='Ada Admin', email='ada@example.com', is_admin=True)


@pytest.fixture()
def employee_caller(employee) -> Caller:
    return resolve_caller(employee)


@pytest.fixture()
def other_caller(other_employee) -> Caller:
    return resolve_caller(other_employee)


@pytest.fixture()
def admin_caller(admin) -> Caller:
    return resolve_caller(admin)
