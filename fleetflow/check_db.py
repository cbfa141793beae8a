"""
Database connectivity check.

Connects with the configured DATABASE_URL and prints row counts for each table.

Usage:
    python -m fleetflow.check_db
"""

import asyncio
import sys

from sqlalchemy import select, func

from fleetflow.app.core.config import settings
from fleetflow.app.db.session import AsyncSessionLocal, engine
from fleetflow.app.models.user import User
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.fuel_expense import FuelExpense
from fleetflow.app.models.maintenance import Maintenance

TABLES = [User, Vehicle, Driver, Trip, FuelExpense, Maintenance]


def _redacted(url: str) -> str:
    # Hide the password portion of user:password@host
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


async def check_db() -> int:
    print(f"Testing connection to: {_redacted(settings.database_url)}")
    try:
        async with AsyncSessionLocal() as db:
            for model in TABLES:
                count = (await db.execute(select(func.count()).select_from(model))).scalar()
                print(f"  {model.__tablename__:<22} {count}")
    except Exception as e:
        print(f"Connection Failed: {e}")
        return 1
    finally:
        await engine.dispose()
    
    print("Connection Successful!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check_db()))
