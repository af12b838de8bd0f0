# parqueo/models/parking_lot.py
"""
Parking lots table — a named facility that owns its spaces.
A lot can only be deleted once it owns no spaces (restrict-delete); audit rows
and officers that pointed at it keep their data with the lot unset.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from parqueo.database import Base


class ParkingLot(Base):
    __tablename__ = "parking_lots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    created_at = Column(DateTime)

    spaces = relationship(
        "ParkingSpace",
        back_populates="parking",
        passive_deletes="all",
        order_by="ParkingSpace.space_number",
    )

    def __repr__(self):
        return f"<ParkingLot {self.id} name={self.name}>"
