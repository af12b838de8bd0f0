# parqueo/services/lot_service.py
"""Parking lot administration and per-lot occupancy counts."""

from datetime import datetime
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from parqueo.models.parking_lot import ParkingLot
from parqueo.models.parking_space import ParkingSpace
from parqueo.services.errors import ReasonCode, RegistryError
from parqueo.utils.logger import get_logger

logger = get_logger(__name__)


def find_lot(db: Session, parking_id: int):
    return db.query(ParkingLot).filter(ParkingLot.id == parking_id).first()


def list_lots_with_counts(db: Session) -> list[dict]:
    occupied = func.coalesce(func.sum(case((ParkingSpace.is_occupied == True, 1), else_=0)), 0)  # noqa: E712
    rows = (
        db.query(ParkingLot, func.count(ParkingSpace.id), occupied)
        .outerjoin(ParkingSpace, ParkingSpace.parking_id == ParkingLot.id)
        .group_by(ParkingLot.id)
        .order_by(ParkingLot.name.asc())
        .all()
    )
    return [
        {
            "id": lot.id,
            "name": lot.name,
            "created_at": lot.created_at,
            "total_spaces": total,
            "occupied_spaces": int(busy),
            "available_spaces": total - int(busy),
        }
        for lot, total, busy in rows
    ]


def create_lot(db: Session, name: str) -> ParkingLot:
    if not name or not name.strip():
        raise RegistryError(ReasonCode.INVALID_INPUT, error="Parking name is required")
    lot = ParkingLot(name=name.strip(), created_at=datetime.utcnow())
    db.add(lot)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise RegistryError(ReasonCode.DUPLICATE_LOT_NAME)
    db.refresh(lot)
    logger.info(f"Parking lot '{lot.name}' created (id={lot.id})")
    return lot


def delete_lot(db: Session, parking_id: int):
    """Lots that still own spaces cannot be deleted."""
    lot = find_lot(db, parking_id)
    if not lot:
        raise RegistryError(ReasonCode.LOT_NOT_FOUND)
    if db.query(ParkingSpace).filter(ParkingSpace.parking_id == parking_id).count() > 0:
        raise RegistryError(ReasonCode.LOT_NOT_EMPTY)
    name = lot.name
    db.delete(lot)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Parking lot {parking_id} still referenced, not deleted: {e.orig}")
        raise RegistryError(ReasonCode.LOT_NOT_EMPTY, error="Parking is still referenced and cannot be deleted")
    logger.info(f"Parking lot '{name}' deleted")
