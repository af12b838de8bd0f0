# parqueo/routers/parkings.py
"""Parking lot administration."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from parqueo.database import get_db
from parqueo.dependencies import require_admin
from parqueo.schemas.parking_lot import ParkingLotCreate, ParkingLotOut, ParkingLotSummaryOut
from parqueo.services import lot_service
from parqueo.services.scope import CallerScope

router = APIRouter()


@router.get("/parkings", response_model=list[ParkingLotSummaryOut], summary="List lots with space counts")
def list_parkings(db: Session = Depends(get_db)):
    """Public — the login screen lists lots so officers can pick theirs."""
    return lot_service.list_lots_with_counts(db)


@router.post("/parkings", response_model=ParkingLotOut, status_code=status.HTTP_201_CREATED)
def create_parking(body: ParkingLotCreate, db: Session = Depends(get_db),
                   scope: CallerScope = Depends(require_admin)):
    return lot_service.create_lot(db, body.name)


@router.delete("/parkings/{parking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_parking(parking_id: int, db: Session = Depends(get_db),
                   scope: CallerScope = Depends(require_admin)):
    lot_service.delete_lot(db, parking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
