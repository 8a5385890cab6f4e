"""
Redis Token Store - Redis-backed token storage.
"""

from typing import Optional

from dashboard_client.ports.token_store_port import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    TokenStorePort,
)


class RedisTokenStore(TokenStorePort):
    """
    Redis-backed token storage.

    Tokens live under ``<prefix>auth_token`` and ``<prefix>refresh_token``.
    Useful when several worker processes act as the same dashboard user.
    """

    def __init__(
        self,
        redis_client=None,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "dashboard:session:",
    ):
        """
        Initialize Redis token store.

        Args:
            redis_client: Redis client instance (redis.Redis), created lazily if None
            redis_url: URL used when no client is given
            prefix: Key prefix for the token pair
        """
        self._redis = redis_client
        self._redis_url = redis_url
        self._prefix = prefix

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            try:
                import redis
            except ImportError:
                raise ImportError("redis package required: pip install redis")
            self._redis = redis.Redis.from_url(self._redis_url, decode_responses=True)
        return self._redis

    def _key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    def _get(self, name: str) -> Optional[str]:
        value = self._get_redis().get(self._key(name))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value or None

    def get_access_token(self) -> Optional[str]:
        return self._get(ACCESS_TOKEN_KEY)

    def set_access_token(self, token: str) -> None:
        self._get_redis().set(self._key(ACCESS_TOKEN_KEY), token)

    def get_refresh_token(self) -> Optional[str]:
        return self._get(REFRESH_TOKEN_KEY)

    def set_refresh_token(self, token: str) -> None:
        self._get_redis().set(self._key(REFRESH_TOKEN_KEY), token)

    def clear_all(self) -> None:
        self._get_redis().delete(self._key(ACCESS_TOKEN_KEY), self._key(REFRESH_TOKEN_KEY))
