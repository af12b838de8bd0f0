# parqueo/schemas/vehicle.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from parqueo.models.enums import VehicleType


class VehicleCreate(BaseModel):
    license_plate: str
    owner_id: int
    type: VehicleType = VehicleType.CAR
    brand: str = "Unknown"
    color: str = "Unknown"
    requires_handicap_space: bool = False


class VehicleOut(BaseModel):
    id: int
    license_plate: str
    brand: str
    color: str
    type: str
    requires_handicap_space: bool
    has_entered_once: bool
    owner_id: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
