"""
Capability token handed to the engine by the access-control boundary.

Authorization is resolved once, where the caller is authenticated, and the
engine only ever asks ``caller.can(...)``. Nothing inside the engine looks at
job titles or role names.

Public API:
  Capability
  Caller
  resolve_caller(employee)
"""
from dataclasses import dataclass, field
from enum import Enum


class Capability(str, Enum):
    MANAGE_BOOKINGS = 'manage_bookings'    # cancel anybody's booking
    APPROVE_BOOKINGS = 'approve_bookings'  # decide VIP approval records
    MANAGE_LOCKS = 'manage_locks'          # unlock / reject unlock requests


ADMIN_CAPABILITIES = frozenset(Capability)


@dataclass(frozen=True)
class Caller:
    """An authenticated employee plus the capabilities granted to them."""
    employee_id: object
    capabilities: frozenset = field(default_factory=frozenset)

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def owns(self, employee_id) -> bool:
        return str(self.employee_id) == str(employee_id)


def resolve_caller(employee) -> Caller:
    """Build the capability token for an Employee row."""
    capabilities = ADMIN_CAPABILITIES if employee.is_admin else frozenset()
    return Caller(employee_id=employee.id, capabilities=capabilities)
