# parqueo/routers/reports.py
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parqueo.database import get_db
from parqueo.dependencies import require_gate_operator
from parqueo.schemas.parking_record import OccupationOut
from parqueo.services.report_service import current_occupation
from parqueo.services.scope import CallerScope

router = APIRouter()


@router.get("/reports/occupation", response_model=OccupationOut, summary="Current occupation")
def get_current_occupation(parking_id: Optional[int] = None, db: Session = Depends(get_db),
                           scope: CallerScope = Depends(require_gate_operator)):
    return current_occupation(db, scope.parking_id or parking_id)
