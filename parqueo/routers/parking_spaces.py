# parqueo/routers/parking_spaces.py
"""Parking space listing and creation. Occupancy is never editable here."""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parqueo.database import get_db
from parqueo.dependencies import get_caller, require_admin
from parqueo.models.enums import SpaceType
from parqueo.schemas.parking_space import ParkingSpaceCreate, ParkingSpaceOut
from parqueo.services import space_registry
from parqueo.services.errors import ReasonCode, RegistryError
from parqueo.services.scope import CallerScope

router = APIRouter()


@router.get("/parking-spaces", response_model=list[ParkingSpaceOut])
def list_spaces(parking_id: Optional[int] = None, db: Session = Depends(get_db),
                scope: CallerScope = Depends(get_caller)):
    return space_registry.list_spaces(db, scope.parking_id or parking_id)


@router.get("/parking-spaces/available", response_model=list[ParkingSpaceOut])
def list_available(parking_id: Optional[int] = None, space_type: Optional[SpaceType] = None,
                   db: Session = Depends(get_db), scope: CallerScope = Depends(get_caller)):
    """Free spaces in the order auto-assignment would pick them."""
    return space_registry.list_available_spaces(db, scope.parking_id or parking_id, space_type)


@router.get("/parking-spaces/{space_id}", response_model=ParkingSpaceOut)
def get_space(space_id: int, db: Session = Depends(get_db)):
    space = space_registry.find_space(db, space_id)
    if not space:
        raise RegistryError(ReasonCode.SPACE_NOT_FOUND)
    return space


@router.post("/parking-spaces", response_model=ParkingSpaceOut, status_code=status.HTTP_201_CREATED)
def create_space(body: ParkingSpaceCreate, db: Session = Depends(get_db),
                 scope: CallerScope = Depends(require_admin)):
    return space_registry.create_space(db, body.parking_id, body.space_number, body.space_type.value)
