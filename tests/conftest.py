"""Shared fixtures: a fresh in-memory SQLite schema per test plus small factories."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("PARQUEO_LOG_DIR", os.path.join(tempfile.gettempdir(), "parqueo-test-logs"))

import pytest
from datetime import datetime
from parqueo.database import SessionLocal, create_tables, drop_tables
from parqueo.models.parking_lot import ParkingLot
from parqueo.models.parking_space import ParkingSpace
from parqueo.models.user import User
from parqueo.models.vehicle import Vehicle


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables()


@pytest.fixture
def make_lot(db):
    def _make(name="Main"):
        lot = ParkingLot(name=name, created_at=datetime.utcnow())
        db.add(lot)
        db.commit()
        return lot
    return _make


@pytest.fixture
def make_space(db):
    def _make(lot, number, space_type="CAR", occupied=False):
        space = ParkingSpace(space_number=number, space_type=space_type, is_occupied=occupied,
                             parking_id=lot.id, created_at=datetime.utcnow())
        db.add(space)
        db.commit()
        return space
    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="STUDENT", parking_id=None):
        counter["n"] += 1
        user = User(name=f"User {counter['n']}", email=f"user{counter['n']}@parqueo.com",
                    role=role, parking_id=parking_id, created_at=datetime.utcnow())
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_vehicle(db, make_user):
    def _make(plate="ABC123", vehicle_type="CAR", handicap=False, owner=True, has_entered_once=False):
        owner_id = make_user().id if owner is True else (owner.id if owner else None)
        vehicle = Vehicle(license_plate=plate, type=vehicle_type, requires_handicap_space=handicap,
                          has_entered_once=has_entered_once, owner_id=owner_id,
                          created_at=datetime.utcnow())
        db.add(vehicle)
        db.commit()
        return vehicle
    return _make
