"""
Room model — a bookable meeting room.
"""
from django.db import models
from apps.core.models import BaseModel


class RoomType(models.TextChoices):
    STANDARD = 'STANDARD', 'Standard'
    VIP      = 'VIP',      'VIP (approval required)'


class Room(BaseModel):
    name = models.CharField(max_length=120, unique=True)
    location = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField(default=1)
    room_type = models.CharField(
        max_length=10, choices=RoomType.choices, default=RoomType.STANDARD,
    )
    is_disabled = models.BooleanField(
        default=False, db_index=True,
        help_text='Disabled rooms keep their history but accept no new bookings',
    )

    class Meta:
        verbose_name = 'Room'
        verbose_name_plural = 'Rooms'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.get_room_type_display()})"

    @property
    def is_vip(self):
        return self.room_type == RoomType.VIP
