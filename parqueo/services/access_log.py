# parqueo/services/access_log.py
"""
Access Log — append-only audit of gate attempts.
append() never raises: a broken audit write is reported here and the
triggering admission carries on.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from parqueo.models.access_attempt import AccessAttempt
from parqueo.models.enums import AttemptType
from parqueo.models.user import User
from parqueo.models.vehicle import normalize_plate
from parqueo.utils.logger import get_logger

logger = get_logger(__name__)


def append(db: Session, plate: str, attempt_type: AttemptType, success: bool,
           reason: Optional[str] = None, vehicle_id: Optional[int] = None,
           parking_id: Optional[int] = None, officer_id: Optional[int] = None,
           attempt_time: Optional[datetime] = None, commit: bool = True) -> None:
    """
    Record one attempt.
    commit=True  — standalone write, committed immediately (rejections).
    commit=False — staged in a SAVEPOINT of the caller's open unit of work, so
                   it lands with the caller's commit, and a failed insert rolls
                   back only the savepoint (successful admissions).
    """
    try:
        officer_id = _known_officer(db, officer_id)
        attempt = AccessAttempt(
            license_plate=normalize_plate(plate),
            attempt_type=AttemptType(attempt_type).value,
            success=success,
            failure_reason=getattr(reason, "value", reason),
            vehicle_id=vehicle_id,
            parking_id=parking_id,
            security_officer_id=officer_id,
            attempt_time=attempt_time or datetime.utcnow(),
        )
        if commit:
            db.add(attempt)
            db.commit()
        else:
            with db.begin_nested():
                db.add(attempt)
    except Exception as e:
        logger.error(f"[AUDIT] Could not log {getattr(attempt_type, 'value', attempt_type)} attempt for {plate}: {e}",
                     exc_info=True)
        if commit:
            _safe_rollback(db)
        return

    if not success:
        logger.warning(f"[AUDIT] {AttemptType(attempt_type).value} refused | Plate={normalize_plate(plate)} "
                       f"| Reason={getattr(reason, 'value', reason)} | Lot={parking_id}")


def _known_officer(db: Session, officer_id: Optional[int]) -> Optional[int]:
    """Officer ids come from the gateway; ids with no local user row are not linked."""
    if officer_id is None:
        return None
    if db.query(User.id).filter(User.id == officer_id).first() is None:
        logger.warning(f"[AUDIT] Officer {officer_id} has no local user row, attempt logged without officer")
        return None
    return officer_id


def _safe_rollback(db: Session):
    try:
        db.rollback()
    except Exception as e:
        logger.error(f"[AUDIT] Rollback after failed audit write also failed: {e}")


def failed_attempts(db: Session, start: datetime, end: datetime, parking_id: Optional[int] = None,
                    page: int = 1, limit: int = 20):
    """Failed attempts in [start, end], newest first. Returns (rows, total)."""
    q = db.query(AccessAttempt).filter(
        AccessAttempt.success == False,  # noqa: E712
        AccessAttempt.attempt_time >= start,
        AccessAttempt.attempt_time <= end,
    )
    if parking_id is not None:
        q = q.filter(AccessAttempt.parking_id == parking_id)
    total = q.count()
    rows = (
        q.order_by(AccessAttempt.attempt_time.desc(), AccessAttempt.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total
