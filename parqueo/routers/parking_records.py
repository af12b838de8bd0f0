# parqueo/routers/parking_records.py
"""Gate operations (entry / exit) and parking record queries."""

from datetime import datetime, timedelta, date
from math import ceil
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from parqueo.config import settings
from parqueo.database import get_db
from parqueo.dependencies import get_caller, require_admin, require_gate_operator
from parqueo.schemas.access_attempt import FailedAttemptsOut
from parqueo.schemas.parking_record import AdmissionOut, EntryCreate, ParkingRecordOut, QuickEntryCreate
from parqueo.services import access_log
from parqueo.services.admission_service import AdmissionRequest, AdmissionResult, admit_vehicle
from parqueo.services.errors import ReasonCode, SessionError
from parqueo.services.scope import CallerScope, record_filter
from parqueo.services.session_service import close_session, find_record, list_records

router = APIRouter()


def _admission_out(result: AdmissionResult) -> AdmissionOut:
    record = ParkingRecordOut.model_validate(result.record)
    return AdmissionOut(**record.model_dump(), is_unregistered=result.is_unregistered, message=result.message)


@router.get("/parking-records", response_model=list[ParkingRecordOut], summary="List parking records")
def get_all_records(db: Session = Depends(get_db), scope: CallerScope = Depends(get_caller)):
    """Students and staff only see records of their own vehicles."""
    return list_records(db, scope)


@router.get("/parking-records/active", response_model=list[ParkingRecordOut], summary="Vehicles currently parked")
def get_active_records(db: Session = Depends(get_db), scope: CallerScope = Depends(get_caller)):
    return list_records(db, scope, active_only=True)


@router.get("/parking-records/failed-attempts", response_model=FailedAttemptsOut,
            summary="Failed entry attempts report")
def get_failed_attempts(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    parking_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    scope: CallerScope = Depends(require_gate_operator),
):
    """
    Defaults to the last FAILED_ATTEMPTS_DEFAULT_DAYS days.
    end_date includes the whole day.
    """
    now = datetime.utcnow()
    start = (datetime.combine(start_date, datetime.min.time()) if start_date
             else now - timedelta(days=settings.FAILED_ATTEMPTS_DEFAULT_DAYS))
    end = datetime.combine(end_date, datetime.max.time()) if end_date else now
    limit = limit or settings.FAILED_ATTEMPTS_PAGE_SIZE
    if scope.requires_lot_binding:
        parking_id = scope.parking_id

    attempts, total = access_log.failed_attempts(db, start, end, parking_id, page, limit)
    return {
        "attempts": attempts,
        "pagination": {"page": page, "limit": limit, "total": total, "total_pages": ceil(total / limit)},
    }


@router.get("/parking-records/{record_id}", response_model=ParkingRecordOut, summary="Get one parking record")
def get_record(record_id: int, db: Session = Depends(get_db), scope: CallerScope = Depends(get_caller)):
    record = find_record(db, record_id)
    visible = record is not None and (
        not record_filter(scope) or record.vehicle.owner_id == scope.user_id
    )
    if not visible:
        raise SessionError(ReasonCode.RECORD_NOT_FOUND)
    return record


@router.post("/parking-records/entry", response_model=AdmissionOut, status_code=status.HTTP_201_CREATED,
             summary="Admit a registered vehicle by id")
async def create_entry(body: EntryCreate, db: Session = Depends(get_db),
                       scope: CallerScope = Depends(require_admin)):
    result = await admit_vehicle(db, AdmissionRequest(
        vehicle_id=body.vehicle_id,
        parking_space_id=body.parking_space_id,
        prefer_handicap=body.prefer_handicap,
    ), scope)
    return _admission_out(result)


@router.post("/parking-records/quick-entry", response_model=AdmissionOut, status_code=status.HTTP_201_CREATED,
             summary="Admit a vehicle at the gate by license plate")
async def quick_entry(body: QuickEntryCreate, db: Session = Depends(get_db),
                      scope: CallerScope = Depends(require_gate_operator)):
    """Unknown plates get one walk-in admission and are blocked afterwards."""
    result = await admit_vehicle(db, AdmissionRequest(
        license_plate=body.license_plate,
        parking_space_id=body.parking_space_id,
        prefer_handicap=body.prefer_handicap,
        unregistered_vehicle_type=body.unregistered_vehicle_type.value if body.unregistered_vehicle_type else None,
        unregistered_requires_handicap=body.unregistered_requires_handicap,
    ), scope)
    return _admission_out(result)


@router.post("/parking-records/{record_id}/exit", response_model=ParkingRecordOut, summary="Register an exit")
async def create_exit(record_id: int, db: Session = Depends(get_db),
                      scope: CallerScope = Depends(require_gate_operator)):
    return await close_session(db, record_id, scope)
