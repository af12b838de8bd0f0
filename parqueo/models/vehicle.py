# parqueo/models/vehicle.py
"""
Vehicles table.
Registered vehicles have an owner; walk-ins (owner_id NULL) are created by the
assignment engine on their first and only admission (has_entered_once).
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, update
from sqlalchemy.orm import relationship, validates
from parqueo.database import Base


def normalize_plate(plate: str) -> str:
    return plate.strip().upper()


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_plate = Column(String(20), unique=True, nullable=False, index=True)
    brand = Column(String(100), nullable=False, default="Unknown")
    color = Column(String(50), nullable=False, default="Unknown")
    type = Column(String(20), nullable=False, default="CAR")   # CAR | MOTORCYCLE
    requires_handicap_space = Column(Boolean, nullable=False, default=False)
    has_entered_once = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, ForeignKey("users.id"), index=True)   # NULL = unregistered walk-in
    created_at = Column(DateTime)

    owner = relationship("User", back_populates="vehicles")

    @validates("license_plate")
    def _upper_plate(self, key, value):
        return normalize_plate(value)

    @property
    def is_unregistered(self) -> bool:
        return self.owner_id is None

    @property
    def entry_pass_spent(self) -> bool:
        """Walk-ins get exactly one admission."""
        return self.is_unregistered and bool(self.has_entered_once)

    @classmethod
    def spending_pass(cls, vehicle_id: int):
        """Uses up an ownerless vehicle's single entry; matches zero rows once spent."""
        return (
            update(cls)
            .where(cls.id == vehicle_id, cls.owner_id == None, cls.has_entered_once == False)  # noqa: E711,E712
            .values(has_entered_once=True)
        )

    def __repr__(self):
        return f"<Vehicle {self.license_plate} type={self.type} owner={self.owner_id}>"
