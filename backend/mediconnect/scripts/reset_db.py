"""Drop and recreate the MediConnect schema.

    python -m mediconnect.scripts.reset_db
"""
import logging

from ..core.config import settings
from ..core.db import reset_db

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(level=logging.INFO)
    logger.info(f"⚙️ Dropping and recreating all tables on {settings.ENVIRONMENT} database...")
    reset_db()
    logger.info("✅ Database schema refreshed successfully.")


if __name__ == "__main__":
    main()
