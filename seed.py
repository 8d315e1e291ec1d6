"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations (or POST /api/v1/init-db):
    python seed.py

Creates:
  - 1 demo user  (demo@example.com / demo1234)
  - 12 sample charging stations around San Francisco, mixed status,
    connector, power and price
"""

import asyncio
import logging

from src.config import Settings
from src.domain.enums import ConnectorType, StationStatus
from src.infrastructure.database import Database
from src.infrastructure.repositories import StationRepository, UserRepository
from src.infrastructure.security import PasswordHasher

logger = logging.getLogger("seed")

DEMO_USER = {"username": "demo", "email": "demo@example.com", "password": "demo1234"}

STATIONS = [
    # Downtown / SoMa
    {"name": "Union Square Garage", "latitude": 37.7880, "longitude": -122.4075, "address": "333 Post St", "connector_type": ConnectorType.CCS, "power_output": 150, "status": StationStatus.AVAILABLE, "price_per_kwh": 0.48},
    {"name": "Moscone Center", "latitude": 37.7842, "longitude": -122.4016, "address": "747 Howard St", "connector_type": ConnectorType.TYPE_2, "power_output": 22, "status": StationStatus.OCCUPIED, "price_per_kwh": 0.35},
    {"name": "Ferry Building", "latitude": 37.7955, "longitude": -122.3937, "address": "1 Ferry Building", "connector_type": ConnectorType.TESLA, "power_output": 250, "status": StationStatus.AVAILABLE, "price_per_kwh": 0.52},
    {"name": "Oracle Park Lot A", "latitude": 37.7786, "longitude": -122.3893, "address": "24 Willie Mays Plaza", "connector_type": ConnectorType.CHADEMO, "power_output": 50, "status": StationStatus.MAINTENANCE, "price_per_kwh": 0.40},
    # Neighbourhoods
    {"name": "Mission Bay Campus", "latitude": 37.7680, "longitude": -122.3910, "address": "1600 Owens St", "connector_type": ConnectorType.TYPE_1, "power_output": 7, "status": StationStatus.AVAILABLE, "price_per_kwh": 0.25},
    {"name": "Golden Gate Park Concourse", "latitude": 37.7709, "longitude": -122.4669, "address": "55 Music Concourse Dr", "connector_type": ConnectorType.TYPE_2, "power_output": 11, "status": StationStatus.AVAILABLE, "price_per_kwh": 0.30},
    {"name": "Marina Safeway", "latitude": 37.8036, "longitude": -122.4330, "address": "15 Marina Blvd", "connector_type": ConnectorType.CCS, "power_output": 100, "status": StationStatus.OCCUPIED, "price_per_kwh": 0.45},
    {"name": "Stonestown Galleria", "latitude": 37.7286, "longitude": -122.4765, "address": "3251 20th Ave", "connector_type": ConnectorType.TESLA, "power_output": 150, "status": StationStatus.AVAILABLE, "price_per_kwh": 0.42},
    # Bay Area
    {"name": "Oakland Jack London Square", "latitude": 37.7946, "longitude": -122.2776, "address": "70 Washington St", "connector_type": ConnectorType.CCS, "power_output": 350, "status": StationStatus.AVAILABLE, "price_per_kwh": 0.55},
    {"name": "Berkeley Downtown", "latitude": 37.8703, "longitude": -122.2680, "address": "2025 Center St", "connector_type": ConnectorType.TYPE_2, "power_output": 22, "status": StationStatus.AVAILABLE, "price_per_kwh": None},
    {"name": "SFO Long-Term Parking", "latitude": 37.6213, "longitude": -122.3790, "address": "SFO Long-Term Lot", "connector_type": ConnectorType.CHADEMO, "power_output": 62, "status": StationStatus.OCCUPIED, "price_per_kwh": 0.38},
    {"name": "Palo Alto City Hall", "latitude": 37.4443, "longitude": -122.1598, "address": "250 Hamilton Ave", "connector_type": None, "power_output": None, "status": StationStatus.MAINTENANCE, "price_per_kwh": 0.20},
]


async def seed(database: Database, hasher: PasswordHasher) -> None:
    async with database.session_factory() as session:
        users = UserRepository(session)
        # Check if already seeded
        if await users.count() > 0:
            logger.info("Database already seeded. Skipping.")
            return

        user = await users.create_user(
            username=DEMO_USER["username"],
            email=DEMO_USER["email"],
            password_hash=hasher.hash(DEMO_USER["password"]),
        )
        logger.info("  Created demo user %s", user.email)

        stations = StationRepository(session)
        for data in STATIONS:
            await stations.create_station(created_by=user.id, **data)
        logger.info("  Created %d charging stations", len(STATIONS))

        await session.commit()
        logger.info("Seed complete!")


async def main() -> None:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")
    database = Database(settings.database_url)
    logger.info("Seeding database...")
    try:
        await seed(database, PasswordHasher(rounds=settings.bcrypt_rounds))
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
