# parqueo/schemas/access_attempt.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AccessAttemptOut(BaseModel):
    id: int
    license_plate: str
    attempt_type: str
    success: bool
    failure_reason: Optional[str]
    vehicle_id: Optional[int]
    parking_id: Optional[int]
    security_officer_id: Optional[int]
    attempt_time: datetime

    class Config:
        from_attributes = True


class PaginationOut(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class FailedAttemptsOut(BaseModel):
    attempts: list[AccessAttemptOut]
    pagination: PaginationOut
