# storefront/api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.services.auth_service import AuthService
from storefront.services.payment_client import PaymentClient
from storefront.services.session_store import SessionStore
from storefront.utils.settings import SESSION_COOKIE_NAME

_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def get_payment_client() -> PaymentClient:
    return PaymentClient()


def get_auth_service(
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> AuthService:
    return AuthService(db, sessions)


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE_NAME)


def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[UserModel]:
    return auth.current_user(token)


def require_user(user: Optional[UserModel] = Depends(get_current_user)) -> UserModel:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized - Please log in")
    return user
