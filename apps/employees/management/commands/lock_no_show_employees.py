"""
management command: lock_no_show_employees

Locks employees who let too many APPROVED bookings lapse without ever
entering the room, and opens an unlock request for each of them.

Run via OS cron once a night:
  15 2 * * *  /path/to/venv/bin/python manage.py lock_no_show_employees

Use --dry-run to list who a real run would lock, without locking anyone.
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from apps.employees.lock_policy import auto_check_and_lock, no_show_counts
from apps.employees.models import Employee


class Command(BaseCommand):
    help = 'Lock employees whose no-show count reached the threshold in the trailing period'

    def add_arguments(self, parser):
        parser.add_argument(
            '--period-days', type=int, default=settings.NO_SHOW_PERIOD_DAYS,
            help='Trailing window, in days, scanned for no-shows',
        )
        parser.add_argument(
            '--threshold', type=int, default=settings.NO_SHOW_LOCK_THRESHOLD,
            help='No-shows at or above which an account is locked',
        )
        parser.add_argument(
            '--dry-run', action='store_true',
            help='List the employees a real run would lock, and change nothing',
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            counts = no_show_counts(options['period_days'], options['threshold'])
            candidates = list(
                Employee.objects.filter(pk__in=list(counts), is_locked=False).order_by('name')
            )
            for employee in candidates:
                self.stdout.write(f'  would lock {employee.email} ({counts[employee.id]} no-shows)')
            self.stdout.write(
                self.style.WARNING(
                    f'lock_no_show_employees: would lock {len(candidates)} employees (dry run)'
                )
            )
            return

        locked = auto_check_and_lock(
            period_days=options['period_days'],
            threshold=options['threshold'],
        )
        for employee in locked:
            self.stdout.write(f'  locked {employee.email} ({employee.no_show_count} no-shows)')

        self.stdout.write(
            self.style.SUCCESS(f'lock_no_show_employees: locked {len(locked)} employees')
        )
