"""
Employee models:
  - Employee      : booking owner; carries the account lock flag
  - UnlockRequest : review queue entry created whenever an account is locked
"""
from django.db import models
from django.utils import timezone
from apps.core.models import BaseModel, UUIDModel


class Employee(BaseModel):
    name = models.CharField(max_length=120)
    email = models.EmailField(unique=True)
    is_admin = models.BooleanField(
        default=False,
        help_text='Resolved into booking/lock capabilities at the access-control boundary',
    )
    is_locked = models.BooleanField(
        default=False, db_index=True,
        help_text='Locked accounts cannot create bookings (enforced at login)',
    )

    class Meta:
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} <{self.email}>"


class UnlockRequestStatus(models.TextChoices):
    PENDING  = 'PENDING',  'Pending'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


class UnlockRequest(UUIDModel):
    """
    One row per lock event. Stays PENDING until a reviewer approves (unlock)
    or rejects (account stays locked) it.
    """
    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name='unlock_requests',
    )
    request_time = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(
        max_length=10, choices=UnlockRequestStatus.choices,
        default=UnlockRequestStatus.PENDING, db_index=True,
    )
    reason = models.TextField(help_text='Why the account was locked')
    approver = models.ForeignKey(
        Employee, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='decided_unlock_requests',
    )
    decision_reason = models.TextField(blank=True)
    decision_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Unlock Request'
        verbose_name_plural = 'Unlock Requests'
        ordering = ['-request_time']
        # At most one open request per employee
        constraints = [
            models.UniqueConstraint(
                fields=['employee'],
                condition=models.Q(status='PENDING'),
                name='uq_pending_unlock_request',
            )
        ]

    def __str__(self):
        return f"{self.employee.name}: {self.get_status_display()} ({self.request_time:%Y-%m-%d %H:%M})"

    @property
    def is_pending(self):
        return self.status == UnlockRequestStatus.PENDING

    def resolve(self, status, approver, reason, at):
        """Close the request. Only PENDING requests can be resolved."""
        if not self.is_pending:
            raise ValueError(f"Unlock request {self.id_short} is already {self.status}")
        self.status = status
        self.approver = approver
        self.decision_reason = reason
        self.decision_time = at
        self.save(update_fields=['status', 'approver', 'decision_reason', 'decision_time'])
