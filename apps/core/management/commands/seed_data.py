"""
Seed management command.

Populates the database with demo data:
  - 4 rooms (1 VIP, 1 disabled)
  - 4 employees (1 admin)

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from django.core.management.base import BaseCommand
from apps.bookings.models import Booking
from apps.employees.models import Employee, UnlockRequest
from apps.rooms.models import Room, RoomType


ROOMS = [
    {'name': 'Aurora',    'location': 'Floor 2, east wing', 'capacity': 6,  'room_type': RoomType.STANDARD},
    {'name': 'Borealis',  'location': 'Floor 2, west wing', 'capacity': 10, 'room_type': RoomType.STANDARD},
    {'name': 'Boardroom', 'location': 'Floor 5',            'capacity': 20, 'room_type': RoomType.VIP},
    {'name': 'Cubby',     'location': 'Floor 1',            'capacity': 2,  'room_type': RoomType.STANDARD,
     'is_disabled': True},
]

EMPLOYEES = [
    {'name': 'Ada Admin',     'email': 'ada@example.com',     'is_admin': True},
    {'name': 'Ben Booker',    'email': 'ben@example.com'},
    {'name': 'Chloe Chen',    'email': 'chloe@example.com'},
    {'name': 'Dmitri Dvorak', 'email': 'dmitri@example.com'},
]


class Command(BaseCommand):
    help = 'Seed demo rooms and employees'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing rooms, employees and bookings before seeding',
        )

    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Booking.objects.all().delete()
            UnlockRequest.objects.all().delete()
            Employee.objects.all().delete()
            Room.objects.all().delete()

        self.stdout.write('Seeding rooms...')
        for data in ROOMS:
            data = dict(data)
            Room.objects.get_or_create(name=data.pop('name'), defaults=data)
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(ROOMS)} rooms ready'))

        self.stdout.write('Seeding employees...')
        for data in EMPLOYEES:
            data = dict(data)
            Employee.objects.get_or_create(email=data.pop('email'), defaults=data)
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(EMPLOYEES)} employees ready'))
