# parqueo/models/parking_space.py
"""
Parking spaces table — one physical slot inside a lot.
space_number is unique within its lot; parking_id never changes after creation.
is_occupied has exactly two transitions (occupying / vacating), both conditional
UPDATEs executed by services.space_registry inside an admission or exit commit.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, update
from sqlalchemy.orm import relationship, validates
from parqueo.database import Base


class ParkingSpace(Base):
    __tablename__ = "parking_spaces"
    __table_args__ = (
        UniqueConstraint("parking_id", "space_number", name="uq_parking_spaces_lot_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    space_number = Column(String(20), nullable=False, index=True)
    space_type = Column(String(20), nullable=False, default="CAR")   # CAR | MOTORCYCLE | HANDICAP
    is_occupied = Column(Boolean, nullable=False, default=False, index=True)
    parking_id = Column(Integer, ForeignKey("parking_lots.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime)

    parking = relationship("ParkingLot", back_populates="spaces")

    @validates("parking_id")
    def _lot_is_immutable(self, key, value):
        if self.parking_id is not None and value != self.parking_id:
            raise ValueError(f"Space {self.space_number} cannot move to another lot")
        return value

    @classmethod
    def occupying(cls, space_id: int):
        """free → occupied; matches zero rows if someone else took the space first."""
        return (
            update(cls)
            .where(cls.id == space_id, cls.is_occupied == False)  # noqa: E712
            .values(is_occupied=True)
        )

    @classmethod
    def vacating(cls, space_id: int):
        """occupied → free."""
        return (
            update(cls)
            .where(cls.id == space_id, cls.is_occupied == True)  # noqa: E712
            .values(is_occupied=False)
        )

    def __repr__(self):
        return f"<ParkingSpace {self.id} {self.space_number} type={self.space_type} occupied={self.is_occupied}>"
