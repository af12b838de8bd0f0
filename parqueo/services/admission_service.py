# parqueo/services/admission_service.py
"""
Assignment engine: decides whether a vehicle may enter and which space it gets.

Flow (guards first, one mutation boundary at the end):
  1. plate or vehicle id required                       → INVALID_INPUT
  2. officers must be bound to a lot                    → SCOPE_REQUIRED
  3. resolve vehicle; unknown plate = walk-in with one pass,
     ownerless vehicle that already used it             → UNREGISTERED_BLOCKED
  4. vehicle already has an open record anywhere        → VEHICLE_ALREADY_PARKED
  5. explicit space (exists / in lot / free) or auto-assign the lowest
     compatible free space number                       → SPACE_* / OUT_OF_SCOPE / NO_*_SPACES
  6. atomic commit: [walk-in vehicle | spend ownerless pass] + occupy space
     + open record + success attempt

Every rejection after step 3 is written to the access log before it propagates.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from parqueo.config import settings
from parqueo.models.enums import AttemptType, SpaceType, VehicleType
from parqueo.models.parking_record import ParkingRecord
from parqueo.models.parking_space import ParkingSpace
from parqueo.models.vehicle import Vehicle, normalize_plate
from parqueo.services import access_log, space_registry, vehicle_registry
from parqueo.services.errors import AdmissionRejected, CommitFailed, ParkingError, ReasonCode
from parqueo.services.scope import CallerScope, space_in_scope
from parqueo.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AdmissionRequest:
    license_plate: Optional[str] = None
    vehicle_id: Optional[int] = None
    parking_space_id: Optional[int] = None
    prefer_handicap: Optional[bool] = None        # None behaves like True
    unregistered_vehicle_type: Optional[str] = None
    unregistered_requires_handicap: Optional[bool] = None


@dataclass
class AdmissionResult:
    record: ParkingRecord
    is_unregistered: bool = False
    message: Optional[str] = None


def compatible_space_types(vehicle: Vehicle, prefer_handicap: Optional[bool] = None):
    """Returns (allowed space types, handicap_required)."""
    handicap_required = bool(vehicle.requires_handicap_space) and prefer_handicap is not False
    if handicap_required:
        return frozenset({SpaceType.HANDICAP}), True
    if vehicle.type == VehicleType.MOTORCYCLE.value:
        return frozenset({SpaceType.MOTORCYCLE, SpaceType.HANDICAP}), False
    return frozenset({SpaceType.CAR, SpaceType.HANDICAP}), False


async def admit_vehicle(db: Session, request: AdmissionRequest,
                        scope: Optional[CallerScope] = None) -> AdmissionResult:
    scope = scope or CallerScope()
    plate = normalize_plate(request.license_plate) if request.license_plate else ""

    if not plate and request.vehicle_id is None:
        raise AdmissionRejected(ReasonCode.INVALID_INPUT)
    if scope.requires_lot_binding and scope.parking_id is None:
        raise AdmissionRejected(ReasonCode.SCOPE_REQUIRED)

    vehicle, is_walk_in = _resolve_vehicle(db, plate, request)
    one_time_pass = vehicle.is_unregistered
    plate = plate or vehicle.license_plate

    try:
        if not is_walk_in and vehicle.entry_pass_spent:
            raise AdmissionRejected(
                ReasonCode.UNREGISTERED_BLOCKED,
                message=settings.UNREGISTERED_BLOCKED_MESSAGE,
                is_unregistered=True,
                was_blocked=True,
            )
        if not is_walk_in and vehicle_registry.find_active_record(db, vehicle.id):
            raise AdmissionRejected(ReasonCode.VEHICLE_ALREADY_PARKED)

        space = _select_space(db, vehicle, request, scope)
        record = _commit_admission(db, vehicle, is_walk_in, space, plate, scope)

    except ParkingError as rejection:
        db.rollback()
        access_log.append(
            db, plate, AttemptType.ENTRY, success=False, reason=rejection.code,
            vehicle_id=None if is_walk_in else vehicle.id,
            parking_id=scope.parking_id, officer_id=scope.user_id,
        )
        raise

    logger.info(f"[ENTRY] Plate={plate} → space {space.space_number} (lot {space.parking_id})"
                f"{' | unregistered, one-time pass' if one_time_pass else ''}")
    return AdmissionResult(
        record=record,
        is_unregistered=one_time_pass,
        message=settings.ONE_TIME_ENTRY_MESSAGE if one_time_pass else None,
    )


def _resolve_vehicle(db: Session, plate: str, request: AdmissionRequest):
    """Returns (vehicle, is_walk_in). Walk-ins are built here but persisted only at commit."""
    if not plate:
        vehicle = vehicle_registry.find_vehicle(db, request.vehicle_id)
        if not vehicle:
            raise AdmissionRejected(ReasonCode.VEHICLE_NOT_FOUND)
        return vehicle, False

    vehicle = vehicle_registry.find_vehicle_by_plate(db, plate)
    if vehicle:
        return vehicle, False

    hinted_type = getattr(request.unregistered_vehicle_type, "value", request.unregistered_vehicle_type) or "CAR"
    if hinted_type not in {t.value for t in VehicleType}:
        raise AdmissionRejected(ReasonCode.INVALID_INPUT, error=f"Unknown vehicle type {hinted_type}")
    return vehicle_registry.new_walk_in(plate, hinted_type, request.unregistered_requires_handicap), True


def _select_space(db: Session, vehicle: Vehicle, request: AdmissionRequest,
                  scope: CallerScope) -> ParkingSpace:
    if request.parking_space_id:
        space = space_registry.find_space(db, request.parking_space_id)
        if not space:
            raise AdmissionRejected(ReasonCode.SPACE_NOT_FOUND)
        if not space_in_scope(scope, space):
            raise AdmissionRejected(ReasonCode.OUT_OF_SCOPE)
        if space.is_occupied:
            raise AdmissionRejected(ReasonCode.SPACE_ALREADY_OCCUPIED)
        return space

    types, handicap_required = compatible_space_types(vehicle, request.prefer_handicap)
    space = space_registry.first_free_space(db, types, scope.parking_id)
    if space:
        return space
    if handicap_required:
        raise AdmissionRejected(ReasonCode.NO_HANDICAP_SPACES, message=settings.NO_HANDICAP_SPACES_MESSAGE)
    raise AdmissionRejected(ReasonCode.NO_AVAILABLE_SPACES)


def _open_record_conflict(error: IntegrityError) -> ReasonCode:
    """Which open-record index refused the insert: the space one or the vehicle one."""
    detail = str(error.orig)
    if "uq_parking_records_open_space" in detail or "parking_records.parking_space_id" in detail:
        return ReasonCode.SPACE_ALREADY_OCCUPIED
    return ReasonCode.VEHICLE_ALREADY_PARKED


def _commit_admission(db: Session, vehicle: Vehicle, is_walk_in: bool, space: ParkingSpace,
                      plate: str, scope: CallerScope) -> ParkingRecord:
    """
    The single mutation boundary. Domain conflicts found here (lost races)
    surface as AdmissionRejected; anything else is rolled back and surfaces
    as CommitFailed.
    """
    now = datetime.utcnow()
    try:
        if is_walk_in:
            vehicle_registry.save_walk_in(db, vehicle)
        elif vehicle.is_unregistered and not vehicle_registry.spend_entry_pass(db, vehicle.id):
            # Another admission used the single pass first
            raise AdmissionRejected(ReasonCode.UNREGISTERED_BLOCKED, message=settings.UNREGISTERED_BLOCKED_MESSAGE,
                                    is_unregistered=True, was_blocked=True)

        if not space_registry.occupy(db, space.id):
            raise AdmissionRejected(ReasonCode.SPACE_ALREADY_OCCUPIED)

        record = ParkingRecord(vehicle_id=vehicle.id, parking_space_id=space.id, entry_time=now)
        db.add(record)
        try:
            db.flush()
        except IntegrityError as e:
            raise AdmissionRejected(_open_record_conflict(e))

        access_log.append(
            db, plate, AttemptType.ENTRY, success=True,
            vehicle_id=vehicle.id, parking_id=space.parking_id,
            officer_id=scope.user_id, attempt_time=now, commit=False,
        )
        db.commit()
    except ParkingError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"[ENTRY] Commit failed for plate {plate} into space {space.id}: {e}", exc_info=True)
        raise CommitFailed(f"Admission of {plate} could not be committed") from e

    db.refresh(record)
    return record
