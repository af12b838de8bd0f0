# parqueo/models/access_attempt.py
"""
Access attempts table — append-only audit of gate entries.
Failed attempts carry a reason code; used by the failed-attempts report.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from parqueo.database import Base


class AccessAttempt(Base):
    __tablename__ = "access_attempts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_plate = Column(String(20), nullable=False, index=True)
    attempt_type = Column(String(10), nullable=False)   # ENTRY | EXIT
    success = Column(Boolean, nullable=False)
    failure_reason = Column(String(50))
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"))
    parking_id = Column(Integer, ForeignKey("parking_lots.id", ondelete="SET NULL"), index=True)
    security_officer_id = Column(Integer, ForeignKey("users.id"))
    attempt_time = Column(DateTime, nullable=False, index=True)

    parking = relationship("ParkingLot")
    vehicle = relationship("Vehicle")
    security_officer = relationship("User")

    def __repr__(self):
        return f"<AccessAttempt {self.id} plate={self.license_plate} success={self.success} reason={self.failure_reason}>"
