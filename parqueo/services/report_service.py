# parqueo/services/report_service.py
"""Current occupation snapshot, optionally for a single lot."""

from typing import Optional
from sqlalchemy.orm import Session
from parqueo.models.parking_record import ParkingRecord
from parqueo.models.parking_space import ParkingSpace


def current_occupation(db: Session, parking_id: Optional[int] = None) -> dict:
    spaces = db.query(ParkingSpace)
    active = db.query(ParkingRecord).filter(ParkingRecord.exit_time == None)  # noqa: E711
    if parking_id is not None:
        spaces = spaces.filter(ParkingSpace.parking_id == parking_id)
        active = active.join(ParkingSpace, ParkingRecord.parking_space_id == ParkingSpace.id).filter(
            ParkingSpace.parking_id == parking_id
        )

    total = spaces.count()
    occupied = spaces.filter(ParkingSpace.is_occupied == True).count()  # noqa: E712
    rate = (occupied / total) * 100 if total > 0 else 0
    return {
        "total_spaces": total,
        "occupied_spaces": occupied,
        "available_spaces": total - occupied,
        "occupation_rate": round(rate, 2),
        "active_parking": active.order_by(ParkingRecord.entry_time.desc()).all(),
    }
