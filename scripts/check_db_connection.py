"""
Raw connectivity check against the configured PostgreSQL server.

Uses asyncpg directly so problems show up without the ORM in the way.
Exits 0 on success and 1 on failure.
"""

import asyncio
import sys
from pathlib import Path

import asyncpg
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from trek_backend.app.core.config import settings  # noqa: E402


def _dsn() -> str:
    # asyncpg wants a plain postgresql:// DSN
    return settings.sqlalchemy_database_url.replace("+asyncpg", "")


async def check_db() -> int:
    print(f"Host: {settings.db_host}")
    print(f"User: {settings.db_user}")
    print(f"Database: {settings.db_name}")
    print(f"Port: {settings.db_port}\n")

    try:
        conn = await asyncpg.connect(_dsn())
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        print(f"❌ Connection Failed: {e}")
        return 1

    try:
        await conn.fetchval("SELECT 1")
        print("✅ Connection Successful!")

        tables = await conn.fetch(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = 'public' ORDER BY table_name"
        )
        print(f"✅ Found {len(tables)} tables")
        for row in tables:
            print(f"  - {row['table_name']}")

        if any(row["table_name"] == "treks" for row in tables):
            count = await conn.fetchval("SELECT COUNT(*) FROM treks")
            print(f"✅ Treks table accessible with {count} records")
        else:
            print("⚠️  Treks table not found; run scripts/setup_database.py")
    finally:
        await conn.close()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check_db()))
