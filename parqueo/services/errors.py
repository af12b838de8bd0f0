# parqueo/services/errors.py
"""
Domain errors raised by the parking core.
Every rejection carries a fixed machine-readable reason code; the HTTP layer
translates codes to status codes (see parqueo.main) and never inspects messages.
"""

from enum import Enum
from typing import Optional


class ReasonCode(str, Enum):
    # Admission (entry flow)
    INVALID_INPUT = "INVALID_INPUT"
    SCOPE_REQUIRED = "SCOPE_REQUIRED"
    VEHICLE_NOT_FOUND = "VEHICLE_NOT_FOUND"
    UNREGISTERED_BLOCKED = "UNREGISTERED_BLOCKED"
    VEHICLE_ALREADY_PARKED = "VEHICLE_ALREADY_PARKED"
    SPACE_NOT_FOUND = "SPACE_NOT_FOUND"
    OUT_OF_SCOPE = "OUT_OF_SCOPE"
    SPACE_ALREADY_OCCUPIED = "SPACE_ALREADY_OCCUPIED"
    NO_HANDICAP_SPACES = "NO_HANDICAP_SPACES"
    NO_AVAILABLE_SPACES = "NO_AVAILABLE_SPACES"
    DUPLICATE_PLATE = "DUPLICATE_PLATE"
    # Session lifecycle (exit flow)
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    ALREADY_EXITED = "ALREADY_EXITED"
    # Registry administration
    LOT_NOT_FOUND = "LOT_NOT_FOUND"
    LOT_NOT_EMPTY = "LOT_NOT_EMPTY"
    DUPLICATE_LOT_NAME = "DUPLICATE_LOT_NAME"
    DUPLICATE_SPACE_NUMBER = "DUPLICATE_SPACE_NUMBER"
    VEHICLE_LIMIT_REACHED = "VEHICLE_LIMIT_REACHED"
    FORBIDDEN = "FORBIDDEN"


DEFAULT_ERRORS = {
    ReasonCode.INVALID_INPUT: "License plate or vehicle ID is required",
    ReasonCode.SCOPE_REQUIRED: "Security officer must be assigned to a parking",
    ReasonCode.VEHICLE_NOT_FOUND: "Vehicle not found",
    ReasonCode.UNREGISTERED_BLOCKED: "Vehicle blocked",
    ReasonCode.VEHICLE_ALREADY_PARKED: "Vehicle is already parked",
    ReasonCode.SPACE_NOT_FOUND: "Parking space not found",
    ReasonCode.OUT_OF_SCOPE: "You can only assign spaces in your assigned parking",
    ReasonCode.SPACE_ALREADY_OCCUPIED: "Parking space is already occupied",
    ReasonCode.NO_HANDICAP_SPACES: "No handicap spaces available",
    ReasonCode.NO_AVAILABLE_SPACES: "No compatible parking spaces available",
    ReasonCode.DUPLICATE_PLATE: "License plate already exists",
    ReasonCode.RECORD_NOT_FOUND: "Parking record not found",
    ReasonCode.ALREADY_EXITED: "Vehicle has already exited",
    ReasonCode.LOT_NOT_FOUND: "Parking not found",
    ReasonCode.LOT_NOT_EMPTY: "Cannot delete parking with existing spaces. Delete all spaces first.",
    ReasonCode.DUPLICATE_LOT_NAME: "Parking name already exists",
    ReasonCode.DUPLICATE_SPACE_NUMBER: "Space number already exists",
    ReasonCode.VEHICLE_LIMIT_REACHED: "Maximum vehicles per user reached",
    ReasonCode.FORBIDDEN: "Insufficient permissions",
}


class ParkingError(Exception):
    """Base for every domain rejection. Never used for infrastructure faults."""

    def __init__(self, code: ReasonCode, message: Optional[str] = None, error: Optional[str] = None, **extra):
        self.code = ReasonCode(code)
        self.error = error or DEFAULT_ERRORS.get(self.code, self.code.value)
        self.message = message
        self.extra = extra
        super().__init__(f"{self.code.value}: {self.error}")

    def to_dict(self) -> dict:
        body = {"error": self.error, "code": self.code.value}
        if self.message:
            body["message"] = self.message
        body.update(self.extra)
        return body


class AdmissionRejected(ParkingError):
    """Entry refused by the assignment engine."""


class SessionError(ParkingError):
    """Exit refused by the session lifecycle."""


class RegistryError(ParkingError):
    """Lot / space / vehicle administration refused."""


class CommitFailed(Exception):
    """The atomic commit failed for a non-domain reason and was rolled back."""
