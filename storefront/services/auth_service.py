# storefront/services/auth_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthenticationError
from storefront.repos.user_repo import UserRepo
from storefront.services.passwords import verify_password
from storefront.services.session_store import SessionStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Username/password login backed by server-side sessions.

    verify_credentials and current_user are the two primitives the rest
    of the API relies on; login/logout wrap them with session bookkeeping.
    """

    def __init__(self, db: Session, sessions: SessionStore):
        self.repo = UserRepo(db)
        self.sessions = sessions

    def verify_credentials(self, username: str, password: str) -> UserModel | None:
        user = self.repo.get_by_username(username)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def current_user(self, token: str | None) -> UserModel | None:
        if not token:
            return None
        user_id = self.sessions.get_user_id(token)
        if user_id is None:
            return None

        user = self.repo.get_user(user_id)
        if not user or not user.is_active:
            return None
        return user

    def login(self, username: str, password: str) -> tuple[UserModel, str]:
        user = self.verify_credentials(username, password)
        if not user:
            logger.info(f"Failed login for {username!r}")
            raise AuthenticationError("Invalid username or password")

        token = self.sessions.create(user.id)

        user.last_login_at = datetime.now(timezone.utc)
        try:
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            self.sessions.delete(token)
            raise

        self.repo.refresh(user)
        logger.info(f"User {user.id} logged in")
        return user, token

    def logout(self, token: str | None) -> bool:
        removed = self.sessions.delete(token) if token else False
        if removed:
            logger.info("Session closed")
        return removed
