# parqueo/routers/vehicles.py
"""Vehicle registration and plate lookup."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parqueo.database import get_db
from parqueo.dependencies import require_admin, require_gate_operator
from parqueo.schemas.vehicle import VehicleCreate, VehicleOut
from parqueo.services import vehicle_registry
from parqueo.services.errors import ReasonCode, RegistryError
from parqueo.services.scope import CallerScope

router = APIRouter()


@router.post("/vehicles", response_model=VehicleOut, status_code=status.HTTP_201_CREATED,
             summary="Register a vehicle for an owner")
def register_vehicle(body: VehicleCreate, db: Session = Depends(get_db),
                     scope: CallerScope = Depends(require_admin)):
    return vehicle_registry.register_vehicle(
        db,
        license_plate=body.license_plate,
        owner_id=body.owner_id,
        vehicle_type=body.type.value,
        brand=body.brand,
        color=body.color,
        requires_handicap_space=body.requires_handicap_space,
    )


@router.get("/vehicles/lookup/{plate}", response_model=VehicleOut, summary="Look up a plate number")
def lookup_vehicle(plate: str, db: Session = Depends(get_db),
                   scope: CallerScope = Depends(require_gate_operator)):
    vehicle = vehicle_registry.find_vehicle_by_plate(db, plate)
    if not vehicle:
        raise RegistryError(ReasonCode.VEHICLE_NOT_FOUND)
    return vehicle
