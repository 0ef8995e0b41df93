"""
AccessEvent — one accepted credential at a room's door.
"""
from django.db import models
from django.utils import timezone
from apps.core.models import UUIDModel
from apps.bookings.models import Booking


class AccessEvent(UUIDModel):
    """Immutable. Re-entries create more rows; no-show detection only asks "any?"."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='access_events')
    access_time = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = 'Access Event'
        verbose_name_plural = 'Access Events'
        ordering = ['-access_time']

    def __str__(self):
        return f"Access to booking {self.booking.id_short} at {self.access_time:%Y-%m-%d %H:%M}"
