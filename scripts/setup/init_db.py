"""
Initialize database — creates all tables and optionally seeds a demo lot.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import datetime
from sqlalchemy import inspect, text
from parqueo.database import SessionLocal, create_tables, engine
from parqueo.config import settings
from parqueo.models.enums import SpaceType, UserRole
from parqueo.models.parking_lot import ParkingLot
from parqueo.models.user import User
from parqueo.services import lot_service, space_registry

DEMO_LOT = "Main"
DEMO_SPACES = [
    ("A01", SpaceType.CAR), ("A02", SpaceType.CAR), ("A03", SpaceType.CAR),
    ("M01", SpaceType.MOTORCYCLE), ("M02", SpaceType.MOTORCYCLE),
    ("H01", SpaceType.HANDICAP),
]
DEMO_USERS = [
    ("System Administrator", "admin@parqueo.com", UserRole.ADMIN),
    ("Carlos Mora", "security@parqueo.com", UserRole.SECURITY_OFFICER),
    ("Maria Rodriguez", "staff@parqueo.com", UserRole.ADMINISTRATIVE_STAFF),
    ("Juan Perez", "student@parqueo.com", UserRole.STUDENT),
]


def seed():
    db = SessionLocal()
    try:
        lot = db.query(ParkingLot).filter(ParkingLot.name == DEMO_LOT).first()
        if lot:
            print(f"   ↷ Lot '{DEMO_LOT}' already seeded")
            return
        lot = lot_service.create_lot(db, DEMO_LOT)
        for number, space_type in DEMO_SPACES:
            space_registry.create_space(db, lot.id, number, space_type.value)
        for name, email, role in DEMO_USERS:
            bound = lot.id if role == UserRole.SECURITY_OFFICER else None
            db.add(User(name=name, email=email, role=role.value, parking_id=bound,
                        created_at=datetime.utcnow()))
        db.commit()
        print(f"   ✓ Lot '{DEMO_LOT}' with {len(DEMO_SPACES)} spaces and {len(DEMO_USERS)} users")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create Parqueo tables")
    parser.add_argument("--seed", action="store_true", help="Insert a demo lot, spaces and users")
    args = parser.parse_args()

    print("🗄️  Parqueo DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        print("\n🌱 Seeding demo data...")
        seed()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn parqueo.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
