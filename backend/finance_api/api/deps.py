# finance_api/api/deps.py
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_api.core.config import Settings
from finance_api.core.errors import NOT_AUTHORIZED
from finance_api.db import models
from finance_api.db.session import get_db
from finance_api.services.categories import CategoryService
from finance_api.services.google_oauth import IdentityProvider
from finance_api.services.sessions import SessionStore
from finance_api.services.transactions import TransactionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Identity resolved for one request; passed to handlers as a parameter."""
    session_id: Optional[str] = None
    user: Optional[models.User] = None

    @property
    def authenticated(self) -> bool:
        return self.user is not None


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_session_store(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> SessionStore:
    return SessionStore(db, timedelta(days=settings.SESSION_MAX_AGE_DAYS))


def get_request_context(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> RequestContext:
    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not sid:
        return RequestContext()
    try:
        user = store.resolve(sid)
    except SQLAlchemyError:
        # lookup failure leaves the request anonymous
        store.db.rollback()
        logger.warning("Session lookup failed", exc_info=True)
        return RequestContext(session_id=sid)
    return RequestContext(session_id=sid, user=user)


def require_user(ctx: RequestContext = Depends(get_request_context)) -> models.User:
    if not ctx.authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_AUTHORIZED)
    return ctx.user


def get_category_service(
    current_user: models.User = Depends(require_user), db: Session = Depends(get_db)
) -> CategoryService:
    return CategoryService(db, current_user.id)


def get_transaction_service(
    current_user: models.User = Depends(require_user), db: Session = Depends(get_db)
) -> TransactionService:
    return TransactionService(db, current_user.id)
