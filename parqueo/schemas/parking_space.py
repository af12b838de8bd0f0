# parqueo/schemas/parking_space.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from parqueo.models.enums import SpaceType


class ParkingSpaceCreate(BaseModel):
    space_number: str
    parking_id: int
    space_type: SpaceType = SpaceType.CAR


class ParkingSpaceOut(BaseModel):
    id: int
    space_number: str
    space_type: str
    parking_id: int
    is_occupied: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
