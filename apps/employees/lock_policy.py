"""
Account lock policy — locks habitual no-shows and manages the unlock queue.

Public API:
  no_show_counts(period_days=None, threshold=1, clock=None)
  count_no_shows(employee_id, period_days=None, clock=None)
  auto_check_and_lock(period_days=None, threshold=None, clock=None)
  lock_employee(employee_id, reason, clock=None)
  unlock_employee(employee_id, caller, reason, clock=None)
  reject_unlock_request(employee_id, caller, reason, clock=None)
  get_lock_history(employee_id)
  get_pending_unlock_requests()

A no-show is an APPROVED booking whose window ended inside the trailing
period without a single access event. Every lock opens exactly one PENDING
UnlockRequest for a human reviewer.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count

from apps.bookings.exceptions import EmployeeNotFoundError, UnauthorizedError
from apps.bookings.models import Booking
from apps.core.capabilities import Capability
from apps.core.clock import resolve_clock

from .exceptions import EmployeeAlreadyLockedError, NoPendingRequestError
from .models import Employee, UnlockRequest, UnlockRequestStatus

logger = logging.getLogger(__name__)

AUTO_LOCK_REASON = 'Automatically locked due to {count} unused bookings in {days} days'


def _period(period_days):
    return settings.NO_SHOW_PERIOD_DAYS if period_days is None else period_days


def _get_for_update(employee_id) -> Employee:
    try:
        return Employee.objects.select_for_update().get(pk=employee_id)
    except (Employee.DoesNotExist, ValidationError, ValueError):
        raise EmployeeNotFoundError(f"Employee {employee_id} not found.")


def _pending_request(employee, for_update=False):
    qs = UnlockRequest.objects.filter(employee=employee, status=UnlockRequestStatus.PENDING)
    if for_update:
        qs = qs.select_for_update()
    return qs.first()


def _lock(employee: Employee, reason: str, at) -> UnlockRequest:
    employee.is_locked = True
    employee.save(update_fields=['is_locked', 'updated_at'])
    return UnlockRequest.objects.create(
        employee=employee,
        request_time=at,
        status=UnlockRequestStatus.PENDING,
        reason=reason,
    )


# ── No-show counting ──────────────────────────────────────────────────────────

def no_show_counts(period_days=None, threshold=1, clock=None) -> dict:
    """
    {employee_id: no-show count} for employees at or above ``threshold``
    within the trailing ``period_days``.
    """
    now = resolve_clock(clock).now()
    since = now - timedelta(days=_period(period_days))
    rows = (
        Booking.objects.no_shows(now, since=since)
        .order_by()
        .values('employee_id')
        .annotate(no_show_count=Count('id'))
        .filter(no_show_count__gte=threshold)
    )
    return {row['employee_id']: row['no_show_count'] for row in rows}


def count_no_shows(employee_id, period_days=None, clock=None) -> int:
    now = resolve_clock(clock).now()
    since = now - timedelta(days=_period(period_days))
    return Booking.objects.no_shows(now, since=since).filter(employee_id=employee_id).count()


# ── Core: Automatic lock ──────────────────────────────────────────────────────

def auto_check_and_lock(period_days=None, threshold=None, clock=None) -> list:
    """
    Lock every unlocked employee with at least ``threshold`` no-shows in the
    trailing ``period_days`` (defaults: settings.NO_SHOW_PERIOD_DAYS and
    settings.NO_SHOW_LOCK_THRESHOLD).

    Runs as one transaction: if anything fails mid-scan, no employee from this
    run stays locked. Returns the newly locked employees, each with a
    ``no_show_count`` attribute.
    """
    period_days = _period(period_days)
    threshold = settings.NO_SHOW_LOCK_THRESHOLD if threshold is None else threshold
    now = resolve_clock(clock).now()

    with transaction.atomic():
        counts = no_show_counts(period_days, threshold, clock=clock)
        if not counts:
            return []

        locked = []
        candidates = (
            Employee.objects.select_for_update()
            .filter(pk__in=list(counts), is_locked=False)
            .order_by('name')
        )
        for employee in candidates:
            count = counts[employee.id]
            _lock(employee, AUTO_LOCK_REASON.format(count=count, days=period_days), now)
            employee.no_show_count = count
            locked.append(employee)

    for employee in locked:
        logger.warning(
            'Employee %s locked automatically: %d no-shows in %d days',
            employee.id, employee.no_show_count, period_days,
        )
    return locked


# ── Core: Manual overrides ────────────────────────────────────────────────────

def lock_employee(employee_id, reason, clock=None) -> UnlockRequest:
    """
    Lock an account by hand and open its unlock request.

    Raises EmployeeAlreadyLockedError if an unlock request is already open.
    """
    now = resolve_clock(clock).now()
    with transaction.atomic():
        employee = _get_for_update(employee_id)
        if _pending_request(employee) is not None:
            raise EmployeeAlreadyLockedError(
                f"{employee.name} is already locked and waiting for review."
            )
        request = _lock(employee, reason, now)

    logger.info('Employee %s locked manually: %s', employee.id, reason)
    return request


def unlock_employee(employee_id, caller, reason, clock=None) -> Employee:
    """
    Approve the open unlock request and clear the lock flag.

    A locked employee without an open request is still unlocked, but no
    resolved request is fabricated for them.

    Raises:
      UnauthorizedError     — caller lacks MANAGE_LOCKS
      EmployeeNotFoundError — no such employee
      NoPendingRequestError — employee is not locked and has no open request
    """
    if not caller.can(Capability.MANAGE_LOCKS):
        raise UnauthorizedError("You are not allowed to unlock accounts.")

    now = resolve_clock(clock).now()
    with transaction.atomic():
        employee = _get_for_update(employee_id)
        pending = _pending_request(employee, for_update=True)
        if pending is None and not employee.is_locked:
            raise NoPendingRequestError(
                f"{employee.name} is not locked and has no unlock request to approve."
            )

        if pending is not None:
            approver = Employee.objects.filter(pk=caller.employee_id).first()
            pending.resolve(UnlockRequestStatus.APPROVED, approver, reason, now)
        else:
            logger.warning('Unlocking %s without an open unlock request', employee.id)

        employee.is_locked = False
        employee.save(update_fields=['is_locked', 'updated_at'])

    logger.info('Employee %s unlocked by %s', employee.id, caller.employee_id)
    return employee


def reject_unlock_request(employee_id, caller, reason, clock=None) -> UnlockRequest:
    """Decline the open unlock request; the account stays locked."""
    if not caller.can(Capability.MANAGE_LOCKS):
        raise UnauthorizedError("You are not allowed to review unlock requests.")

    now = resolve_clock(clock).now()
    with transaction.atomic():
        employee = _get_for_update(employee_id)
        pending = _pending_request(employee, for_update=True)
        if pending is None:
            raise NoPendingRequestError(f"{employee.name} has no unlock request to reject.")
        approver = Employee.objects.filter(pk=caller.employee_id).first()
        pending.resolve(UnlockRequestStatus.REJECTED, approver, reason, now)

    logger.info('Unlock request for %s rejected by %s', employee.id, caller.employee_id)
    return pending


# ── Queries ───────────────────────────────────────────────────────────────────

def get_lock_history(employee_id) -> list:
    """Every lock/unlock request for an employee, newest first."""
    return list(
        UnlockRequest.objects.filter(employee_id=employee_id)
        .select_related('employee', 'approver')
        .order_by('-request_time')
    )


def get_pending_unlock_requests() -> list:
    """The review queue, oldest request first."""
    return list(
        UnlockRequest.objects.filter(status=UnlockRequestStatus.PENDING)
        .select_related('employee')
        .order_by('request_time')
    )
