# create_tables.py — run once to create missing tables (development helper; use alembic elsewhere)
from finance_api.core.config import settings
from finance_api.db.session import Database
import logging, sys

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

logger.info("Creating tables in the database (if not exist)...")
database = Database(settings.DATABASE_URL)
try:
    database.create_all()
    logger.info("Done.")
except Exception:
    logger.exception("Error creating tables:")
    sys.exit(1)
finally:
    database.close()
