"""
Initialize the module once after deployment: create the administrative user.
Run from project root after migrations:
  python -m relay.scripts.publish
For a fresh dev database without Alembic:
  python -m relay.scripts.publish --create-tables
"""
import argparse
import logging
import sys

from relay.core.config import get_settings
from relay.core.database import SessionLocal, engine
from relay.models import Base
from relay.services.errors import BootstrapError
from relay.services.presence import bootstrap

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Publish the Relay module (run once).")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from ORM metadata first (dev only; use alembic in production)",
    )
    args = parser.parse_args(argv)

    if args.create_tables:
        Base.metadata.create_all(engine)

    db = SessionLocal()
    try:
        admin = bootstrap(db, get_settings())
        logger.info("Module published; administrator is %s", admin.identity)
        return 0
    except BootstrapError as e:
        logger.error("Publish failed: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
