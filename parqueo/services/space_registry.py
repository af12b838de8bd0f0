# parqueo/services/space_registry.py
"""
Space Registry — lookups over parking spaces plus the two controlled
occupancy transitions. Nothing else in the codebase writes is_occupied.
"""

from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from parqueo.models.enums import SpaceType
from parqueo.models.parking_lot import ParkingLot
from parqueo.models.parking_space import ParkingSpace
from parqueo.services.errors import ReasonCode, RegistryError
from parqueo.utils.logger import get_logger

logger = get_logger(__name__)


def find_space(db: Session, space_id: int) -> Optional[ParkingSpace]:
    return db.query(ParkingSpace).filter(ParkingSpace.id == space_id).first()


def _type_values(types: Iterable) -> list[str]:
    return sorted(SpaceType(t).value for t in types)


def find_free_spaces(db: Session, types: Iterable, parking_id: Optional[int] = None):
    """Free spaces of the given types, lowest space number first (id breaks ties across lots)."""
    q = db.query(ParkingSpace).filter(
        ParkingSpace.is_occupied == False,  # noqa: E712
        ParkingSpace.space_type.in_(_type_values(types)),
    )
    if parking_id is not None:
        q = q.filter(ParkingSpace.parking_id == parking_id)
    return q.order_by(ParkingSpace.space_number.asc(), ParkingSpace.id.asc())


def first_free_space(db: Session, types: Iterable, parking_id: Optional[int] = None) -> Optional[ParkingSpace]:
    return find_free_spaces(db, types, parking_id).first()


def occupy(db: Session, space_id: int) -> bool:
    """Flip free → occupied. False means the space was already taken (conflict)."""
    return db.execute(ParkingSpace.occupying(space_id)).rowcount == 1


def vacate(db: Session, space_id: int) -> bool:
    """Flip occupied → free. False means the space was already free (conflict)."""
    return db.execute(ParkingSpace.vacating(space_id)).rowcount == 1


# ── Administration ───────────────────────────────────────────────────────────

def list_spaces(db: Session, parking_id: Optional[int] = None):
    q = db.query(ParkingSpace)
    if parking_id is not None:
        q = q.filter(ParkingSpace.parking_id == parking_id)
    return q.order_by(ParkingSpace.space_number.asc()).all()


def list_available_spaces(db: Session, parking_id: Optional[int] = None, space_type: Optional[str] = None):
    types = [space_type] if space_type else list(SpaceType)
    return find_free_spaces(db, types, parking_id).all()


def create_space(db: Session, parking_id: int, space_number: str, space_type: str = "CAR") -> ParkingSpace:
    if not db.query(ParkingLot).filter(ParkingLot.id == parking_id).first():
        raise RegistryError(ReasonCode.LOT_NOT_FOUND)
    space = ParkingSpace(
        space_number=space_number.strip().upper(),
        space_type=SpaceType(space_type).value,
        is_occupied=False,
        parking_id=parking_id,
        created_at=datetime.utcnow(),
    )
    db.add(space)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise RegistryError(ReasonCode.DUPLICATE_SPACE_NUMBER)
    db.refresh(space)
    logger.info(f"Space {space.space_number} ({space.space_type}) created in lot {parking_id}")
    return space
