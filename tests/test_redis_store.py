"""Tests for the Redis backend against a mocked client."""

from unittest.mock import MagicMock, patch

import pytest
from redis import exceptions as redis_exceptions

from bastion.config import Settings
from bastion.errors import ConfigurationError, StoreError, StoreUnavailable
from bastion.store import NO_EXPIRY, MemoryStore, RedisStore, open_store


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def redis_store(client: MagicMock) -> RedisStore:
    return RedisStore(client)


class TestCommands:
    def test_incr_runs_script_with_ttl_and_ceiling(
        self, client: MagicMock, redis_store: RedisStore
    ) -> None:
        script = client.register_script.return_value
        script.return_value = 3

        assert redis_store.incr("login_attempts:a@b.com", 3600, ceiling=5) == 3
        script.assert_called_once_with(keys=["login_attempts:a@b.com"], args=[3600, 5])

    def test_incr_without_ceiling_passes_zero(
        self, client: MagicMock, redis_store: RedisStore
    ) -> None:
        script = client.register_script.return_value
        script.return_value = 1

        redis_store.incr("k", 60)
        script.assert_called_once_with(keys=["k"], args=[60, 0])

    def test_script_registered_once(self, client: MagicMock) -> None:
        RedisStore(client)
        client.register_script.assert_called_once()
        lua = client.register_script.call_args.args[0]
        assert "INCR" in lua
        assert "EXPIRE" in lua

    def test_set_with_ttl_and_nx(self, client: MagicMock, redis_store: RedisStore) -> None:
        client.set.return_value = True
        assert redis_store.set("k", "v", 1800, only_if_absent=True) is True
        client.set.assert_called_once_with("k", "v", ex=1800, nx=True)

    def test_set_nx_blocked_returns_false(self, client: MagicMock, redis_store: RedisStore) -> None:
        client.set.return_value = None
        assert redis_store.set("k", "v", 10, only_if_absent=True) is False

    def test_set_without_expiry(self, client: MagicMock, redis_store: RedisStore) -> None:
        client.set.return_value = True
        redis_store.set("k", "v", 0)
        client.set.assert_called_once_with("k", "v", ex=None, nx=False)

    def test_delete_reports_existence(self, client: MagicMock, redis_store: RedisStore) -> None:
        client.delete.return_value = 0
        assert redis_store.delete("k") is False
        client.delete.return_value = 1
        assert redis_store.delete("k") is True

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(-2, None), (-1, NO_EXPIRY), (0, 0), (1799, 1799)],
    )
    def test_ttl_mapping(
        self, client: MagicMock, redis_store: RedisStore, raw: int, expected: int | None
    ) -> None:
        client.ttl.return_value = raw
        assert redis_store.ttl("k") == expected


class TestErrorTranslation:
    @pytest.mark.parametrize(
        "error",
        [redis_exceptions.ConnectionError("refused"), redis_exceptions.TimeoutError("slow")],
    )
    def test_connection_problems_are_unavailable(
        self, client: MagicMock, redis_store: RedisStore, error: Exception
    ) -> None:
        client.get.side_effect = error
        with pytest.raises(StoreUnavailable) as exc_info:
            redis_store.get("k")
        assert exc_info.value.__cause__ is error

    def test_other_redis_errors_are_store_errors(
        self, client: MagicMock, redis_store: RedisStore
    ) -> None:
        client.ttl.side_effect = redis_exceptions.ResponseError("WRONGTYPE")
        with pytest.raises(StoreError) as exc_info:
            redis_store.ttl("k")
        assert not isinstance(exc_info.value, StoreUnavailable)

    def test_ping_failure(self, client: MagicMock, redis_store: RedisStore) -> None:
        client.ping.side_effect = redis_exceptions.ConnectionError("refused")
        with pytest.raises(StoreUnavailable):
            redis_store.ping()


class TestOpenStore:
    def test_memory_url(self) -> None:
        assert isinstance(open_store(Settings(store_url="memory://")), MemoryStore)

    def test_redis_url_uses_decoded_client_with_timeouts(self) -> None:
        with patch("bastion.store.redis_store.redis.from_url") as from_url:
            store = open_store(Settings(store_url="redis://cache:6379/0", socket_timeout=2.0))

        assert isinstance(store, RedisStore)
        from_url.assert_called_once_with(
            "redis://cache:6379/0",
            decode_responses=True,
            socket_connect_timeout=2.0,
            socket_timeout=2.0,
        )

    def test_unsupported_url(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported store URL"):
            open_store(Settings(store_url="memcached://localhost"))
