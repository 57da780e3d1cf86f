import fakeredis

from storefront.services.session_store import SessionStore


def test_create_and_resolve(session_store):
    token = session_store.create(42)

    assert len(token) >= 32
    assert session_store.get_user_id(token) == 42
    assert session_store.get_user_id("nope") is None
    assert session_store.get_user_id("") is None


def test_tokens_are_unique(session_store):
    assert session_store.create(1) != session_store.create(1)


def test_delete(session_store):
    token = session_store.create(7)

    assert session_store.delete(token) is True
    assert session_store.get_user_id(token) is None
    assert session_store.delete(token) is False


def test_sessions_expire():
    redis = fakeredis.FakeRedis(decode_responses=True)
    store = SessionStore(client=redis, ttl=120)

    token = store.create(3)

    assert 0 < redis.ttl(f"session:{token}") <= 120
