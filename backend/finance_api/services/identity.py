# finance_api/services/identity.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from finance_api.core.errors import AuthenticationError
from finance_api.db.models import User
from finance_api.services.google_oauth import GoogleProfile

logger = logging.getLogger(__name__)


class IdentityService:
    """Maps a verified Google profile to an internal account (lookup or provision)."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_external_id(self, external_id: str) -> Optional[User]:
        return self.db.execute(select(User).where(User.google_id == external_id)).scalars().first()

    def link(self, profile: GoogleProfile) -> User:
        """Return the account for profile.external_id, creating it on first login.

        A returning account is returned as stored; profile fields are not synced.
        Raises AuthenticationError on any store failure, leaving nothing behind.
        """
        try:
            user = self.find_by_external_id(profile.external_id)
            if user is not None:
                logger.info("Returning account %s logged in", user.id)
                return user

            user = User(
                google_id=profile.external_id,
                nome=profile.display_name,
                email=profile.email,
                foto_url=profile.avatar_url,
            )
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError:
                # a concurrent first login inserted the same google_id; use that row
                self.db.rollback()
                user = self.find_by_external_id(profile.external_id)
                if user is None:
                    raise
                logger.info("Account %s provisioned concurrently, reusing it", user.id)
                return user
            self.db.refresh(user)
            logger.info("Provisioned account %s", user.id)
            return user
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Could not link Google profile to an account")
            raise AuthenticationError("account linking failed") from exc
