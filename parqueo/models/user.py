# parqueo/models/user.py
"""
Users table — vehicle owners and the officers who operate the gates.
Only the columns the parking core reads live here; credentials are handled
by the external authentication service.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from parqueo.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    role = Column(String(30), nullable=False)   # ADMIN | SECURITY_OFFICER | ADMINISTRATIVE_STAFF | STUDENT
    parking_id = Column(Integer, ForeignKey("parking_lots.id", ondelete="SET NULL"))   # lot an officer is bound to
    created_at = Column(DateTime)

    vehicles = relationship("Vehicle", back_populates="owner")

    def __repr__(self):
        return f"<User {self.id} {self.email} role={self.role}>"
