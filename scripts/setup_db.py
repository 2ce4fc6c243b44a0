"""
Database setup script.

Creates the records table in the configured database.
The service also does this at startup; run this to provision the schema
ahead of the first deploy or against a fresh database.

Usage:
    python -m scripts.setup_db
"""

import asyncio

from sqlalchemy.engine import make_url

from core.config import get_settings
from core.storage import StoreUnavailableError, create_record_store


async def setup_database() -> None:
    """Create the records table."""
    settings = get_settings()

    print("Connecting to database...")
    print(f"Database URL: {make_url(settings.database_url).render_as_string(hide_password=True)}")

    store = create_record_store(settings)
    try:
        await store.setup()
        print("Database setup complete!")
    except StoreUnavailableError as e:
        print(f"Error setting up database: {e}")
        raise
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(setup_database())
