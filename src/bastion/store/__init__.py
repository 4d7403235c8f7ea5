"""Backing stores for lockout state.

Two backends share the ``LockoutStore`` contract::

    from bastion.store import open_store

    store = open_store(Settings(store_url="redis://localhost:6379/0"))
    store = open_store(Settings(store_url="memory://"))
"""

from urllib.parse import urlsplit

from bastion.config import Settings
from bastion.errors import ConfigurationError
from bastion.store.memory import MemoryStore
from bastion.store.protocol import NO_EXPIRY, LockoutStore
from bastion.store.redis_store import RedisStore

__all__ = [
    "NO_EXPIRY",
    "LockoutStore",
    "MemoryStore",
    "RedisStore",
    "open_store",
]


def open_store(settings: Settings) -> LockoutStore:
    """Create the store named by ``settings.store_url``."""
    scheme = urlsplit(settings.store_url).scheme.lower()
    if scheme == "memory":
        return MemoryStore()
    if scheme in ("redis", "rediss", "unix"):
        return RedisStore.from_url(settings.store_url, socket_timeout=settings.socket_timeout)
    raise ConfigurationError(
        f"Unsupported store URL {settings.store_url!r}. Use memory:// or redis://host:port/db"
    )
