# parqueo/models/enums.py
"""
Type tags stored as plain strings in the database.
Values match the persisted shape exactly (upper-case tags).
"""

from enum import Enum


class SpaceType(str, Enum):
    CAR = "CAR"
    MOTORCYCLE = "MOTORCYCLE"
    HANDICAP = "HANDICAP"


class VehicleType(str, Enum):
    CAR = "CAR"
    MOTORCYCLE = "MOTORCYCLE"


class AttemptType(str, Enum):
    ENTRY = "ENTRY"
    EXIT = "EXIT"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    SECURITY_OFFICER = "SECURITY_OFFICER"
    ADMINISTRATIVE_STAFF = "ADMINISTRATIVE_STAFF"
    STUDENT = "STUDENT"


class RecordState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
