"""
Injectable time source.

Every engine function that compares against "now" accepts an optional
``clock``; production code uses ``system_clock`` and tests pass a
``FixedClock`` so window and expiry logic is deterministic.
"""
from datetime import datetime, timedelta

from django.utils import timezone


class Clock:
    """Wall clock backed by django.utils.timezone (aware datetimes)."""

    def now(self) -> datetime:
        return timezone.now()


class FixedClock(Clock):
    """A clock frozen at ``at`` until moved with ``advance`` or ``set``."""

    def __init__(self, at: datetime):
        if timezone.is_naive(at):
            at = timezone.make_aware(at)
        self._now = at

    def now(self) -> datetime:
        return self._now

    def set(self, at: datetime) -> None:
        if timezone.is_naive(at):
            at = timezone.make_aware(at)
        self._now = at

    def advance(self, **delta) -> datetime:
        self._now = self._now + timedelta(**delta)
        return self._now


system_clock = Clock()


def resolve_clock(clock=None) -> Clock:
    return clock if clock is not None else system_clock
