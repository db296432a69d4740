"""
Ensure database tables and indexes.

Runs the same schema setup the API performs on startup, so it can be done
ahead of a deploy:

    python scripts/create_indexes.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from parcelx_backend.app.core.config import settings
from parcelx_backend.app.core.observability import configure_logging
from parcelx_backend.app.db.session import Database


async def main():
    configure_logging(settings.log_level)
    database = Database.from_settings(settings)
    try:
        await database.create_all()
        print("✅ Tables and indexes are in place")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
