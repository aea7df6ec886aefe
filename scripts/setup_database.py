"""
Database setup script.

Creates every table, seeds the driver panel password from
DEFAULT_DRIVER_PASSWORD and loads starter treks into an empty catalogue.
Safe to run more than once.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select, func

from trek_backend.app.core.config import settings
from trek_backend.app.db.session import AsyncSessionLocal, engine, Base
from trek_backend.app.models.trek import Trek
from trek_backend.app.models.trek_enums import TrekDifficulty
from trek_backend.app.models.booking import Booking  # noqa: F401
from trek_backend.app.models.submission import Feedback, BusinessQuery  # noqa: F401
from trek_backend.app.models.live_trek import GpsConfig
from trek_backend.app.models.team_member import TeamMember
from trek_backend.app.services.live_tracking import (
    DRIVER_PASSWORD_KEY,
    DRIVER_PASSWORD_DESCRIPTION,
    set_gps_config_value
)

STARTER_TREKS = [
    {
        "name": "Kalsubai Peak",
        "description": "Night climb to the highest point in Maharashtra with a sunrise above the clouds.",
        "duration": "1 Day",
        "trek_length": 12.0,
        "difficulty": TrekDifficulty.MODERATE,
        "max_altitude": 5400,
        "base_village": "Bari",
        "transport": "Pune to Bari by private bus",
        "meals": "Breakfast and lunch",
        "sightseeing": "Sunrise point, Kalsubai temple",
        "image": "https://images.unsplash.com/photo-1464822759023-fed622ff2c3b",
    },
    {
        "name": "Rajmachi Fort",
        "description": "Forest trail to the twin forts of Shriwardhan and Manaranjan through the monsoon waterfalls.",
        "duration": "2 Days",
        "trek_length": 15.0,
        "difficulty": TrekDifficulty.EASY,
        "max_altitude": 2710,
        "base_village": "Udhewadi",
        "transport": "Lonavala to Udhewadi by jeep",
        "meals": "Dinner, breakfast and lunch",
        "sightseeing": "Kondhane caves, Udhewadi lake",
        "image": "https://images.unsplash.com/photo-1501785888041-af3ef285b470",
    },
]

STARTER_TEAM = [
    {"name": "Trek Leader", "role": "Lead Guide", "display_order": 1},
    {"name": "Sweep Leader", "role": "Safety and First Aid", "display_order": 2},
    {"name": "Trail Cook", "role": "Camp Kitchen", "display_order": 3},
    {"name": "Driver", "role": "Transport", "display_order": 4},
]
PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1551632811-561732d1e306"
PLACEHOLDER_INSTAGRAM = "https://www.instagram.com/"


async def setup_database():
    """
    Create tables and seed starting data.

    Seeds:
    - GPS config ``driver_password`` (only when DEFAULT_DRIVER_PASSWORD is set
      and no value is stored yet)
    - Starter treks (only when the catalogue is empty)
    - Week Heroes team cards (only when there are none)
    """
    print("🚀 Setting up Ronins Trek database...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print(f"✅ Tables created/verified: {', '.join(sorted(Base.metadata.tables))}")

    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(GpsConfig).where(GpsConfig.config_key == DRIVER_PASSWORD_KEY)
        )
        if result.scalar_one_or_none() is not None:
            print("ℹ️  Driver password already configured, skipping")
        elif settings.default_driver_password:
            await set_gps_config_value(
                db, DRIVER_PASSWORD_KEY, settings.default_driver_password, DRIVER_PASSWORD_DESCRIPTION
            )
            print("✅ Driver password seeded from DEFAULT_DRIVER_PASSWORD")
        else:
            print("⚠️  DEFAULT_DRIVER_PASSWORD not set; driver login stays disabled until configured")

        trek_count = (await db.execute(select(func.count(Trek.id)))).scalar()
        if trek_count:
            print(f"ℹ️  {trek_count} treks already present, skipping starter data")
        else:
            for fields in STARTER_TREKS:
                db.add(Trek(**fields))
            print(f"✅ Loaded {len(STARTER_TREKS)} starter treks")

        member_count = (await db.execute(select(func.count(TeamMember.id)))).scalar()
        if member_count:
            print(f"ℹ️  {member_count} team members already present, skipping")
        else:
            for fields in STARTER_TEAM:
                db.add(TeamMember(
                    image_url=PLACEHOLDER_IMAGE,
                    instagram_url=PLACEHOLDER_INSTAGRAM,
                    **fields
                ))
            print(f"✅ Loaded {len(STARTER_TEAM)} team member cards")

        await db.commit()

    await engine.dispose()
    print("\n🎉 Database setup completed successfully!")


if __name__ == "__main__":
    asyncio.run(setup_database())
