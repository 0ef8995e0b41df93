from io import StringIO

import pytest
from django.core.management import call_command

from apps.employees.models import Employee
from apps.rooms.models import Room

pytestmark = pytest.mark.django_db


def test_seed_is_idempotent():
    call_command('seed_data', stdout=StringIO())
    call_command('seed_data', stdout=StringIO())

    assert Room.objects.count() == 4
    assert Room.objects.filter(room_type='VIP').count() == 1
    assert Room.objects.filter(is_disabled=True).count() == 1
    assert Employee.objects.count() == 4
    assert Employee.objects.filter(is_admin=True).count() == 1


def test_flush_removes_extra_rows():
    Room.objects.create(name='Scratch', capacity=1)

    call_command('seed_data', '--flush', stdout=StringIO())

    assert not Room.objects.filter(name='Scratch').exists()
    assert Room.objects.count() == 4
