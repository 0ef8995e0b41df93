"""
Approval policies — decide at creation time whether a booking waits for a
human decision or is approved on the spot.

The active policy is named by settings.BOOKING_APPROVAL_POLICY so it can be
replaced (capacity-based, department-based, ...) without touching the engine.
"""
from django.conf import settings
from django.utils.module_loading import import_string


class ApprovalPolicy:
    """Base policy: nothing needs approval."""

    def requires_approval(self, room) -> bool:
        return False


class VipRoomPolicy(ApprovalPolicy):
    """VIP rooms need manual approval; every other room is auto-approved."""

    def requires_approval(self, room) -> bool:
        return room.is_vip


class CapacityPolicy(ApprovalPolicy):
    """Rooms seating at least ``min_capacity`` people need approval."""

    def __init__(self, min_capacity=20):
        self.min_capacity = min_capacity

    def requires_approval(self, room) -> bool:
        return room.capacity >= self.min_capacity


def get_approval_policy() -> ApprovalPolicy:
    """Instantiate the policy configured in settings."""
    return import_string(settings.BOOKING_APPROVAL_POLICY)()
