# purge_sessions.py — delete expired rows from user_sessions (run from cron)
import logging
import sys

from finance_api.core.config import settings
from finance_api.core.errors import PersistenceError
from finance_api.db.session import Database
from finance_api.services.sessions import SessionStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def purge() -> int:
    database = Database(settings.DATABASE_URL)
    database.open()
    db = database.session()
    try:
        removed = SessionStore(db).purge_expired()
        logger.info("Removed %s expired sessions", removed)
        return 0
    except PersistenceError:
        return 1
    finally:
        db.close()
        database.close()


if __name__ == "__main__":
    sys.exit(purge())
