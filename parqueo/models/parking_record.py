# parqueo/models/parking_record.py
"""
Parking records table — one parking session of one vehicle in one space.
Lifecycle is OPEN (exit_time NULL) → CLOSED; records are never deleted.
Partial unique indexes keep at most one OPEN record per vehicle and per space.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, text, update
from sqlalchemy.orm import relationship
from parqueo.database import Base
from parqueo.models.enums import RecordState

_OPEN = text("exit_time IS NULL")


class ParkingRecord(Base):
    __tablename__ = "parking_records"
    __table_args__ = (
        Index("uq_parking_records_open_vehicle", "vehicle_id", unique=True,
              sqlite_where=_OPEN, postgresql_where=_OPEN),
        Index("uq_parking_records_open_space", "parking_space_id", unique=True,
              sqlite_where=_OPEN, postgresql_where=_OPEN),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    parking_space_id = Column(Integer, ForeignKey("parking_spaces.id"), nullable=False, index=True)
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime)

    vehicle = relationship("Vehicle")
    parking_space = relationship("ParkingSpace")

    @property
    def state(self) -> RecordState:
        return RecordState.OPEN if self.exit_time is None else RecordState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is RecordState.OPEN

    @classmethod
    def closing(cls, record_id: int, when: datetime):
        """
        OPEN → CLOSED, the only transition a record has.
        Returns a conditional UPDATE that matches zero rows if the record is
        already CLOSED, so two concurrent exits cannot both succeed.
        """
        return (
            update(cls)
            .where(cls.id == record_id, cls.exit_time.is_(None))
            .values(exit_time=when)
        )

    def __repr__(self):
        return f"<ParkingRecord {self.id} vehicle={self.vehicle_id} space={self.parking_space_id} {self.state.value}>"
