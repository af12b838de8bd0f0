# parqueo/services/session_service.py
"""
Session lifecycle: closes an open parking record and frees its space in one commit.
Exits are not written to the access log; only entries are audited.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from parqueo.models.parking_record import ParkingRecord
from parqueo.services import space_registry
from parqueo.services.errors import CommitFailed, ParkingError, ReasonCode, SessionError
from parqueo.services.scope import CallerScope, record_filter
from parqueo.utils.logger import get_logger

logger = get_logger(__name__)


def find_record(db: Session, record_id: int) -> Optional[ParkingRecord]:
    return db.query(ParkingRecord).filter(ParkingRecord.id == record_id).first()


async def close_session(db: Session, record_id: int, scope: Optional[CallerScope] = None) -> ParkingRecord:
    scope = scope or CallerScope()
    record = find_record(db, record_id)
    if not record:
        raise SessionError(ReasonCode.RECORD_NOT_FOUND)
    if not record.is_open:
        raise SessionError(ReasonCode.ALREADY_EXITED)

    space_id = record.parking_space_id
    try:
        if db.execute(ParkingRecord.closing(record.id, datetime.utcnow())).rowcount != 1:
            # A concurrent exit closed it between our read and our write
            raise SessionError(ReasonCode.ALREADY_EXITED)
        if not space_registry.vacate(db, space_id):
            logger.warning(f"[EXIT] Space {space_id} was already free while record {record_id} was open")
        db.commit()
    except ParkingError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"[EXIT] Commit failed for record {record_id}: {e}", exc_info=True)
        raise CommitFailed(f"Exit of record {record_id} could not be committed") from e

    db.refresh(record)
    logger.info(f"[EXIT] Record {record.id} closed | space {space_id} freed | by user {scope.user_id}")
    return record


def list_records(db: Session, scope: Optional[CallerScope] = None, active_only: bool = False):
    """Records the caller may read, newest entry first."""
    scope = scope or CallerScope()
    q = db.query(ParkingRecord).filter(*record_filter(scope))
    if active_only:
        q = q.filter(ParkingRecord.exit_time == None)  # noqa: E711
    return q.order_by(ParkingRecord.entry_time.desc(), ParkingRecord.id.desc()).all()
