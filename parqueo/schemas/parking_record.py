# parqueo/schemas/parking_record.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from parqueo.models.enums import RecordState, VehicleType
from parqueo.schemas.parking_space import ParkingSpaceOut
from parqueo.schemas.vehicle import VehicleOut


class EntryCreate(BaseModel):
    """Entry of a known vehicle by id (admin console)."""
    vehicle_id: int
    parking_space_id: Optional[int] = None
    prefer_handicap: Optional[bool] = None


class QuickEntryCreate(BaseModel):
    """Gate entry by plate; unknown plates are admitted once as walk-ins."""
    license_plate: str
    parking_space_id: Optional[int] = None
    prefer_handicap: Optional[bool] = None
    unregistered_vehicle_type: Optional[VehicleType] = None
    unregistered_requires_handicap: Optional[bool] = None


class ParkingRecordOut(BaseModel):
    id: int
    vehicle_id: int
    parking_space_id: int
    entry_time: datetime
    exit_time: Optional[datetime]
    state: RecordState
    vehicle: Optional[VehicleOut] = None
    parking_space: Optional[ParkingSpaceOut] = None

    class Config:
        from_attributes = True


class AdmissionOut(ParkingRecordOut):
    is_unregistered: bool = False
    message: Optional[str] = None


class OccupationOut(BaseModel):
    total_spaces: int
    occupied_spaces: int
    available_spaces: int
    occupation_rate: float
    active_parking: list[ParkingRecordOut]
