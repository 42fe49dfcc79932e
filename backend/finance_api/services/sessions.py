# finance_api/services/sessions.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from finance_api.db.models import User, UserSession
from finance_api.db.session import persistence_guard
from finance_api.services.security import new_session_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(days=30)


def utcnow() -> datetime:
    # columns are naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionStore:
    """Server-side sessions in the user_sessions table.

    Expiry is absolute: ``expires_at`` is fixed at creation and never extended.
    """

    def __init__(self, db: Session, max_age: timedelta = DEFAULT_MAX_AGE):
        self.db = db
        self.max_age = max_age

    def create(self, user_id: int) -> UserSession:
        now = utcnow()
        row = UserSession(sid=new_session_id(), user_id=user_id, created_at=now, expires_at=now + self.max_age)
        with persistence_guard(self.db, "Erro ao criar sessão."):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def resolve(self, sid: Optional[str]) -> Optional[User]:
        """Account behind a live session, or None (missing, expired, or orphaned)."""
        if not sid:
            return None
        stmt = (
            select(User)
            .join(UserSession, UserSession.user_id == User.id)
            .where(UserSession.sid == sid, UserSession.expires_at > utcnow())
        )
        return self.db.execute(stmt).scalars().first()

    def destroy(self, sid: Optional[str]) -> None:
        """Remove a session. Unknown or empty sids are ignored."""
        if not sid:
            return
        with persistence_guard(self.db, "Erro ao encerrar sessão."):
            self.db.execute(delete(UserSession).where(UserSession.sid == sid))
            self.db.commit()

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        with persistence_guard(self.db, "Erro ao remover sessões expiradas."):
            result = self.db.execute(delete(UserSession).where(UserSession.expires_at <= now))
            self.db.commit()
        if result.rowcount:
            logger.info("Purged %s expired sessions", result.rowcount)
        return result.rowcount
