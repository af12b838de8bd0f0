# parqueo/dependencies.py
"""
Caller identity for the routers.
Authentication happens upstream; the gateway forwards the verified identity as
X-User-Id / X-User-Role / X-Parking-Id headers, which become a CallerScope.
"""

from typing import Optional
from fastapi import Depends, Header
from parqueo.models.enums import UserRole
from parqueo.services.errors import ParkingError, ReasonCode
from parqueo.services.scope import CallerScope

_ROLES = {r.value for r in UserRole}


def get_caller(
    x_user_id: Optional[int] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_parking_id: Optional[int] = Header(default=None),
) -> CallerScope:
    role = x_user_role.upper() if x_user_role else None
    if role is not None and role not in _ROLES:
        raise ParkingError(ReasonCode.FORBIDDEN, error=f"Unknown role {x_user_role}")
    return CallerScope(user_id=x_user_id, role=role, parking_id=x_parking_id)


def require_gate_operator(scope: CallerScope = Depends(get_caller)) -> CallerScope:
    """ADMIN or SECURITY_OFFICER."""
    if not scope.can_operate_gate:
        raise ParkingError(ReasonCode.FORBIDDEN)
    return scope


def require_admin(scope: CallerScope = Depends(get_caller)) -> CallerScope:
    if not scope.is_admin:
        raise ParkingError(ReasonCode.FORBIDDEN)
    return scope
