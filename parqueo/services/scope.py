# parqueo/services/scope.py
"""
Role-based query scoping.
Each caller is reduced to a CallerScope; the predicates below are the only
place that decides what a role may see or touch, so every query applies the
same rules.

  ADMIN                 : everything; optionally working inside one lot
  SECURITY_OFFICER      : must be bound to a lot; gates and spaces of that lot only
  ADMINISTRATIVE_STAFF  : read-only, records of their own vehicles
  STUDENT               : read-only, records of their own vehicles
"""

from dataclasses import dataclass
from typing import Optional
from sqlalchemy import select
from parqueo.models.enums import UserRole
from parqueo.models.parking_record import ParkingRecord
from parqueo.models.parking_space import ParkingSpace
from parqueo.models.vehicle import Vehicle

GATE_ROLES = {UserRole.ADMIN.value, UserRole.SECURITY_OFFICER.value}
OWN_VEHICLE_ROLES = {UserRole.STUDENT.value, UserRole.ADMINISTRATIVE_STAFF.value}


@dataclass(frozen=True)
class CallerScope:
    user_id: Optional[int] = None
    role: Optional[str] = None        # None = internal caller (scripts, tests)
    parking_id: Optional[int] = None  # lot the caller is working in

    @property
    def requires_lot_binding(self) -> bool:
        return self.role == UserRole.SECURITY_OFFICER.value

    @property
    def sees_own_vehicles_only(self) -> bool:
        return self.role in OWN_VEHICLE_ROLES

    @property
    def can_operate_gate(self) -> bool:
        return self.role is None or self.role in GATE_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role is None or self.role == UserRole.ADMIN.value


def space_in_scope(scope: CallerScope, space: ParkingSpace) -> bool:
    return scope.parking_id is None or space.parking_id == scope.parking_id


def record_filter(scope: CallerScope) -> list:
    """Criteria restricting ParkingRecord queries to what the caller may read."""
    if scope.sees_own_vehicles_only:
        own_vehicles = select(Vehicle.id).where(Vehicle.owner_id == scope.user_id)
        return [ParkingRecord.vehicle_id.in_(own_vehicles)]
    return []
