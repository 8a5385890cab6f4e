"""
Unit tests for the token store adapters.
"""

import json

import pytest

from dashboard_client.adapters.file_token_store import FileTokenStore
from dashboard_client.adapters.memory_token_store import MemoryTokenStore
from dashboard_client.adapters.redis_token_store import RedisTokenStore
from dashboard_client.domain.session import Session


class DictRedis:
    """The three redis.Redis calls the store uses, over a dict."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value.encode("utf-8")

    def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


@pytest.fixture(params=["memory", "file", "redis"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryTokenStore()
    if request.param == "file":
        return FileTokenStore(tmp_path / "tokens.json")
    return RedisTokenStore(redis_client=DictRedis())


def test_empty_store(store):
    assert store.get_access_token() is None
    assert store.get_refresh_token() is None
    assert not store.has_session()
    assert store.get_session() is None


def test_save_and_read_session(store):
    store.save_session(Session.from_tokens("access-1", "refresh-1"))

    assert store.get_access_token() == "access-1"
    assert store.get_refresh_token() == "refresh-1"
    assert store.get_session().refresh_token == "refresh-1"


def test_save_without_refresh_keeps_old_refresh(store):
    store.save_session(Session.from_tokens("access-1", "refresh-1"))
    store.save_session(Session.from_tokens("access-2"))

    assert store.get_access_token() == "access-2"
    assert store.get_refresh_token() == "refresh-1"


def test_clear_all_removes_both(store):
    store.save_session(Session.from_tokens("access-1", "refresh-1"))

    store.clear_all()

    assert not store.has_session()


def test_refresh_token_alone_is_a_session(store):
    """A lone refresh token still counts as something to log out of."""
    store.set_refresh_token("refresh-1")

    assert store.has_session()
    assert store.get_session() is None


def test_file_store_layout(tmp_path):
    """Keys match the dashboard's storage keys; clear removes the file."""
    path = tmp_path / "nested" / "tokens.json"
    store = FileTokenStore(path)

    store.set_access_token("access-1")
    store.set_refresh_token("refresh-1")

    assert json.loads(path.read_text()) == {"auth_token": "access-1", "refresh_token": "refresh-1"}
    store.clear_all()
    assert not path.exists()


def test_file_store_shared_between_instances(tmp_path):
    path = tmp_path / "tokens.json"
    FileTokenStore(path).set_access_token("access-1")

    assert FileTokenStore(path).get_access_token() == "access-1"


def test_file_store_unreadable_file_is_empty(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text("{not json")

    assert FileTokenStore(path).get_access_token() is None


def test_redis_store_keys():
    client = DictRedis()
    store = RedisTokenStore(redis_client=client, prefix="admin:")

    store.set_access_token("access-1")

    assert client.data == {"admin:auth_token": b"access-1"}
    assert store.get_access_token() == "access-1"
