"""
Database seeding script for the demo fleet.

Creates the four role accounts and resets vehicles, drivers, trips, fuel
and maintenance to the demo data set.

Usage:
    python -m fleetflow.seed_data
"""

import asyncio

from fleetflow.app.core.config import settings
from fleetflow.app.core.logging_config import setup_logging
from fleetflow.app.db.session import AsyncSessionLocal, Base, engine
from fleetflow.app.services.seed import DEMO_USERS, seed_demo_data

# Register every table with Base before create_all
from fleetflow.app.models import user, audit_log, vehicle, driver, trip, fuel_expense, maintenance  # noqa: F401


async def main():
    setup_logging(settings.log_level)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    async with AsyncSessionLocal() as db:
        print("Starting demo data seeding...")
        counts = await seed_demo_data(db, reset=True)
    
    await engine.dispose()
    
    print("\nDemo data seeded:")
    for table, count in counts.items():
        print(f"  - {table}: {count}")
    print("\nDemo accounts:")
    for email, _, password, role in DEMO_USERS:
        print(f"  - {role.label}: {email} / {password}")


if __name__ == "__main__":
    asyncio.run(main())
