# scripts/setup/init_db.py
"""
Initialize database: creates all tables.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text

from app.config import settings
from app.database import SessionLocal, create_tables, engine
from app.services.gateway import DataGateway


DEMO_VENDOR_ID = "00000000-0000-4000-8000-000000000001"


def seed_demo_vendor():
    """One vendor serving 94107 with two active services, for trying the search page."""
    gateway = DataGateway(SessionLocal())
    try:
        gateway.upsert("profiles", {"id": DEMO_VENDOR_ID, "full_name": "Demo Vendor", "role": "vendor"},
                       ignore_duplicates=True)
        gateway.upsert("vendor_profiles", {"id": DEMO_VENDOR_ID, "business_name": "Demo Mobile Wash",
                                           "business_description": "Seeded by init_db.py",
                                           "is_mobile": True, "service_radius": 15},
                       ignore_duplicates=True)
        gateway.upsert("vendor_service_areas", {"vendor_id": DEMO_VENDOR_ID, "zip_code": "94107"},
                       conflict_key=("vendor_id", "zip_code"), ignore_duplicates=True)
        if not gateway.select("services", {"vendor_id": DEMO_VENDOR_ID}, limit=1):
            gateway.insert("services", {"vendor_id": DEMO_VENDOR_ID, "name": "Express Exterior",
                                        "description": "Hand wash and dry", "service_type": "basic_wash",
                                        "price": 35, "duration": 45})
            gateway.insert("services", {"vendor_id": DEMO_VENDOR_ID, "name": "Full Detail",
                                        "description": "Interior and exterior detail",
                                        "service_type": "full_detail", "price": 180, "duration": 180})
    finally:
        gateway.db.close()


def main():
    parser = argparse.ArgumentParser(description="Create marketplace tables")
    parser.add_argument("--seed", action="store_true", help="Insert a demo vendor for ZIP 94107")
    args = parser.parse_args()

    print("🗄️  WashGo DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

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
    print("✅ All tables created")

    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        seed_demo_vendor()
        print("\n🌱 Demo vendor seeded (ZIP 94107)")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
