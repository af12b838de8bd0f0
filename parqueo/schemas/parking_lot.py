# parqueo/schemas/parking_lot.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ParkingLotCreate(BaseModel):
    name: str


class ParkingLotOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ParkingLotSummaryOut(ParkingLotOut):
    total_spaces: int
    occupied_spaces: int
    available_spaces: int
