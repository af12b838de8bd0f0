# parqueo/services/vehicle_registry.py
"""
Vehicle Registry — plate lookups, walk-in vehicle creation, active-session
lookup, and owner registration (capped per owner).
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from parqueo.config import settings
from parqueo.models.enums import VehicleType
from parqueo.models.parking_record import ParkingRecord
from parqueo.models.user import User
from parqueo.models.vehicle import Vehicle, normalize_plate
from parqueo.services.errors import AdmissionRejected, ReasonCode, RegistryError
from parqueo.utils.logger import get_logger

logger = get_logger(__name__)


def find_vehicle_by_plate(db: Session, plate: str) -> Optional[Vehicle]:
    """Find a vehicle by plate (case-insensitive). Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.license_plate == normalize_plate(plate)).first()


def find_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()


def find_active_record(db: Session, vehicle_id: int) -> Optional[ParkingRecord]:
    return (
        db.query(ParkingRecord)
        .filter(ParkingRecord.vehicle_id == vehicle_id, ParkingRecord.exit_time == None)  # noqa: E711
        .first()
    )


def spend_entry_pass(db: Session, vehicle_id: int) -> bool:
    """Mark an ownerless vehicle's single admission as used. False means it was already spent."""
    return db.execute(Vehicle.spending_pass(vehicle_id)).rowcount == 1


def new_walk_in(plate: str, vehicle_type: Optional[str] = None, requires_handicap: Optional[bool] = None) -> Vehicle:
    """Build (not persist) an ownerless vehicle holding its single entry pass."""
    return Vehicle(
        license_plate=plate,
        brand="Unknown",
        color="Unknown",
        type=VehicleType(vehicle_type or VehicleType.CAR).value,
        requires_handicap_space=bool(requires_handicap),
        has_entered_once=True,
        owner_id=None,
        created_at=datetime.utcnow(),
    )


def save_walk_in(db: Session, vehicle: Vehicle) -> Vehicle:
    """
    Persist a walk-in inside the caller's unit of work (flush, no commit).
    A concurrent request that created the same plate first wins; the loser
    gets DUPLICATE_PLATE and must roll back.
    """
    db.add(vehicle)
    try:
        db.flush()
    except IntegrityError:
        raise AdmissionRejected(ReasonCode.DUPLICATE_PLATE)
    return vehicle


def create_unregistered_vehicle(db: Session, plate: str, vehicle_type: Optional[str] = None,
                                requires_handicap: Optional[bool] = None) -> Vehicle:
    return save_walk_in(db, new_walk_in(plate, vehicle_type, requires_handicap))


def register_vehicle(db: Session, license_plate: str, owner_id: int, vehicle_type: str = "CAR",
                     brand: str = "Unknown", color: str = "Unknown",
                     requires_handicap_space: bool = False) -> Vehicle:
    """Register an owned vehicle. Plates are stored upper-case."""
    if not db.query(User).filter(User.id == owner_id).first():
        raise RegistryError(ReasonCode.INVALID_INPUT, error="Owner not found")

    owned = db.query(Vehicle).filter(Vehicle.owner_id == owner_id).count()
    if owned >= settings.MAX_VEHICLES_PER_OWNER:
        raise RegistryError(
            ReasonCode.VEHICLE_LIMIT_REACHED,
            error=f"Maximum of {settings.MAX_VEHICLES_PER_OWNER} vehicles per user allowed",
        )

    vehicle = Vehicle(
        license_plate=license_plate,
        brand=brand,
        color=color,
        type=VehicleType(vehicle_type).value,
        requires_handicap_space=requires_handicap_space,
        has_entered_once=False,
        owner_id=owner_id,
        created_at=datetime.utcnow(),
    )
    db.add(vehicle)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise RegistryError(ReasonCode.DUPLICATE_PLATE)
    db.refresh(vehicle)
    logger.info(f"Vehicle {vehicle.license_plate} registered to user {owner_id}")
    return vehicle
