"""
Database connectivity check.

    arthavidhi-check-db            # uses DATABASE_URL from env / .env
    arthavidhi-check-db --url sqlite:///./other.db
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from arthavidhi.core.config import settings
from arthavidhi.core.db import Database
from arthavidhi.core.logging_config import configure_logging

logger = logging.getLogger("arthavidhi.check_db")


def check_database(url: str) -> bool:
    database = Database(url)
    try:
        logger.info("Attempting to connect to the database...")
        database.ping()
        logger.info("Database connection successful")
        return True
    except SQLAlchemyError as e:
        logger.error("Database connection failed: %s", e)
        return False
    finally:
        database.dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Check that the billing database is reachable.")
    parser.add_argument("--url", default=None, help="Database URL (default: DATABASE_URL)")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)
    return 0 if check_database(args.url or settings.DATABASE_URL) else 1


if __name__ == "__main__":
    sys.exit(main())
