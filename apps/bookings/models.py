"""
Bookings app models:
  - Booking          : Core booking record with state machine
  - ApprovalRecord   : Manual-review decision for bookings on VIP rooms
  - BookingStatusLog : Full audit trail of state transitions
"""
import logging

from django.db import models
from django.utils import timezone
from apps.core.models import BaseModel, UUIDModel
from apps.employees.models import Employee
from apps.rooms.models import Room

from .exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


# ── Booking State Machine ─────────────────────────────────────────────────────

class BookingStatus(models.TextChoices):
    PENDING   = 'PENDING',   'Pending'
    APPROVED  = 'APPROVED',  'Approved'
    REJECTED  = 'REJECTED',  'Rejected'
    CANCELLED = 'CANCELLED', 'Cancelled'


# The only authority on legal status changes. REJECTED and CANCELLED are terminal.
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING:   frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
    BookingStatus.APPROVED:  frozenset({BookingStatus.CANCELLED}),
    BookingStatus.REJECTED:  frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

CANCELLABLE_STATUSES = (BookingStatus.PENDING, BookingStatus.APPROVED)


def can_transition(from_status, to_status) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


class BookingQuerySet(models.QuerySet):

    def approved(self):
        return self.filter(status=BookingStatus.APPROVED)

    def for_room(self, room_id):
        return self.filter(room_id=room_id)

    def overlapping(self, start_time, end_time):
        """Half-open overlap: NOT (end <= start OR start >= end)."""
        return self.filter(start_time__lt=end_time, end_time__gt=start_time)

    def no_shows(self, now, since=None):
        """APPROVED bookings whose window ended before ``now`` with no access event."""
        qs = self.approved().filter(end_time__lt=now, access_events__isnull=True)
        if since is not None:
            qs = qs.filter(end_time__gt=since)
        return qs


class Booking(BaseModel):
    """
    A reservation of one room by one employee for [start_time, end_time).
    Status transitions controlled by explicit methods — not direct field writes.
    """
    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name='bookings')
    # Purging a room removes its entire booking history
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='bookings')

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)

    status = models.CharField(
        max_length=10, choices=BookingStatus.choices,
        default=BookingStatus.PENDING, db_index=True,
    )

    # Entry credential presented at the door; assigned once, never rotated
    secret = models.CharField(max_length=8, editable=False)
    cancellation_reason = models.TextField(null=True, blank=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-start_time']
        indexes = [
            models.Index(fields=['room', 'status', 'start_time'], name='ix_booking_room_status_start'),
        ]

    def __str__(self):
        return (
            f"#{self.id_short} | {self.employee.name} | {self.room.name} | "
            f"{self.start_time:%Y-%m-%d %H:%M}–{self.end_time:%H:%M} [{self.status}]"
        )

    @property
    def is_active(self):
        """True while the booking holds its slot and opens the door."""
        return self.status == BookingStatus.APPROVED

    def covers(self, moment) -> bool:
        """True if ``moment`` lies inside the access window (both ends inclusive)."""
        return self.start_time <= moment <= self.end_time

    # ── State transition helpers ──────────────────────────────────────────────

    def approve(self, changed_by='system', reason=''):
        """PENDING → APPROVED (auto-approval or reviewer decision)."""
        self._transition(BookingStatus.APPROVED, changed_by, reason)
        self.save(update_fields=['status', 'updated_at'])

    def reject(self, changed_by='system', reason=''):
        """PENDING → REJECTED. The booking never occupied the room."""
        self._transition(BookingStatus.REJECTED, changed_by, reason)
        self.save(update_fields=['status', 'updated_at'])

    def cancel(self, changed_by='system', reason=''):
        """PENDING/APPROVED → CANCELLED; frees the slot immediately."""
        if not reason or not reason.strip():
            raise InvalidTransitionError(
                f"Booking {self.id_short} cannot be cancelled without a reason."
            )
        self._transition(BookingStatus.CANCELLED, changed_by, reason)
        self.cancellation_reason = reason
        self.save(update_fields=['status', 'cancellation_reason', 'updated_at'])

    def _transition(self, new_status, changed_by, reason=''):
        old_status = self.status
        if not can_transition(old_status, new_status):
            logger.error(
                'Illegal booking transition %s -> %s for booking %s (by %s)',
                old_status, new_status, self.id, changed_by,
            )
            raise InvalidTransitionError(
                f"Booking {self.id_short} cannot move from {old_status} to {new_status}."
            )
        self.status = new_status
        BookingStatusLog.objects.create(
            booking=self,
            from_status=old_status,
            to_status=new_status,
            changed_by=changed_by,
            reason=reason,
        )


# ── Approval Record ───────────────────────────────────────────────────────────

class ApprovalDecision(models.TextChoices):
    WAITING  = 'WAITING',  'Waiting for Approval'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


class ApprovalRecord(UUIDModel):
    """
    Exists only for bookings the approval policy sent to manual review.
    Moves WAITING → APPROVED/REJECTED exactly once.
    """
    booking = models.OneToOneField(Booking, on_delete=models.CASCADE, related_name='approval')
    approver = models.ForeignKey(
        Employee, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='approval_decisions',
    )
    decision = models.CharField(
        max_length=10, choices=ApprovalDecision.choices,
        default=ApprovalDecision.WAITING, db_index=True,
    )
    reason = models.TextField(blank=True)
    decided_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Approval Record'
        verbose_name_plural = 'Approval Records'
        ordering = ['created_at']

    def __str__(self):
        return f"Approval for {self.booking.id_short}: {self.get_decision_display()}"

    @property
    def is_waiting(self):
        return self.decision == ApprovalDecision.WAITING

    def decide(self, approved: bool, approver, reason='', at=None):
        if not self.is_waiting:
            raise InvalidTransitionError(
                f"Approval for booking {self.booking.id_short} was already {self.decision}."
            )
        self.decision = ApprovalDecision.APPROVED if approved else ApprovalDecision.REJECTED
        self.approver = approver
        self.reason = reason or ''
        self.decided_at = at or timezone.now()
        self.save(update_fields=['decision', 'approver', 'reason', 'decided_at'])


# ── Booking Audit Log ─────────────────────────────────────────────────────────

class BookingStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a booking."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='status_logs')
    from_status = models.CharField(max_length=10, choices=BookingStatus.choices, blank=True)
    to_status = models.CharField(max_length=10, choices=BookingStatus.choices)
    changed_by = models.CharField(max_length=80, help_text='system / employee id / admin')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Booking Status Log'
        verbose_name_plural = 'Booking Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"Booking {str(self.booking_id)[:8]}: {self.from_status or '—'} → {self.to_status}"
