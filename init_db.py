"""
Initialise the configured database.

Creates the directory and all tables, and upgrades a database written by
the earlier schema revision. Safe to run more than once.

Usage:
    python init_db.py
    DATABASE_PATH=/tmp/tasks.db python init_db.py
"""

import asyncio

from study_studio.core import AppState, settings
from study_studio.core.logging import setup_logging


async def main():
    """Open the store once and close it again."""
    setup_logging(log_level=settings.LOG_LEVEL, log_format="simple")
    print(f"Initialising {settings.DATABASE_PATH} ...")
    state = await AppState.open()
    await state.close()
    print("✓ Database ready")


if __name__ == "__main__":
    asyncio.run(main())
