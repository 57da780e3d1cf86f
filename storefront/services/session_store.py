# storefront/services/session_store.py
import secrets

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, SESSION_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SessionStore:
    """
    Server-side login sessions kept in Redis.

    key session:<token> -> user id, expiring after SESSION_TTL_SECONDS.
    The token is the only thing the client ever sees (cookie value).
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None, ttl: int | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl or SESSION_TTL_SECONDS

    @staticmethod
    def _key(token: str) -> str:
        return f"session:{token}"

    @redis_retry()
    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        # NX so a (practically impossible) token collision never hijacks a session
        created = self.redis.set(name=self._key(token), value=str(user_id), nx=True, ex=self.ttl)
        if not created:
            raise RuntimeError("Session token collision")
        logger.info(f"Session created for user {user_id}")
        return token

    @redis_retry()
    def get_user_id(self, token: str) -> int | None:
        if not token:
            return None
        value = self.redis.get(self._key(token))
        return int(value) if value is not None else None

    @redis_retry()
    def delete(self, token: str) -> bool:
        if not token:
            return False
        return bool(self.redis.delete(self._key(token)))
