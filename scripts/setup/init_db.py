# scripts/setup/init_db.py
"""
Initialize database — creates all tables, optionally seeds the default roster.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text

from cleanup_tracker.database import SessionLocal, create_tables, engine
from cleanup_tracker.config import settings
from cleanup_tracker.errors import TrackerError
from cleanup_tracker.services.user_service import seed_default_users


def main():
    parser = argparse.ArgumentParser(description="Create Cleanup Tracker tables")
    parser.add_argument("--seed", action="store_true", help="Seed the default roster if no users exist")
    args = parser.parse_args()

    print("Cleanup Tracker DB Initialization")
    print("=" * 40)
    print(f"Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        sys.exit(1)

    print("\nCreating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        db = SessionLocal()
        try:
            seeded, count = seed_default_users(db)
        except TrackerError as e:
            print(f"Seeding refused: {e.message}")
            sys.exit(1)
        finally:
            db.close()
        print(f"\nRoster {'seeded' if seeded else 'already present'}: {count} users")

    print("\nDatabase ready! Start the backend with:")
    print(f"   uvicorn cleanup_tracker.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
