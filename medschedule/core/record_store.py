"""Record store backends and JSON collection access."""

import asyncio
from collections.abc import Sequence
from typing import Generic, Protocol, TypeVar
from weakref import WeakKeyDictionary

import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from medschedule.config import Settings, settings as default_settings
from medschedule.core.exceptions import StoreError

logger = structlog.get_logger(__name__)

# Logical collection keys
APPOINTMENTS_KEY = "appointments"
NOTIFICATIONS_KEY = "notifications"
USERS_KEY = "users"

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordStore(Protocol):
    """Key-value persistence contract consumed by the core."""

    async def get(self, key: str) -> str | None:
        """Return the stored string for key, or None when absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key, doing nothing when absent."""
        ...


class InMemoryRecordStore:
    """Dict-backed record store."""

    def __init__(self, initial: dict[str, str] | None = None):
        """Initialize store with optional pre-seeded values."""
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        """Get value for key."""
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        """Set value for key."""
        self._data[key] = value

    async def delete(self, key: str) -> None:
        """Delete key."""
        self._data.pop(key, None)

    @property
    def backend(self) -> object:
        """Object holding the data, shared by every writer of this store."""
        return self


class RedisRecordStore:
    """Redis-backed record store."""

    def __init__(self, redis_client: aioredis.Redis):
        """Initialize store with Redis client."""
        self.redis = redis_client

    @property
    def backend(self) -> object:
        """Redis client the data lives behind."""
        return self.redis

    async def get(self, key: str) -> str | None:
        """
        Get value from Redis.

        Args:
            key: Storage key

        Returns:
            Stored string or None

        Raises:
            StoreError: If Redis is unavailable
        """
        try:
            return await self.redis.get(key)
        except RedisError as e:
            logger.error("record_store_read_failed", key=key, error=str(e))
            raise StoreError("Failed to read from record store", key=key) from e

    async def set(self, key: str, value: str) -> None:
        """
        Set value in Redis.

        Args:
            key: Storage key
            value: Serialized collection

        Raises:
            StoreError: If Redis is unavailable
        """
        try:
            await self.redis.set(key, value)
        except RedisError as e:
            logger.error("record_store_write_failed", key=key, error=str(e))
            raise StoreError("Failed to write to record store", key=key) from e

    async def delete(self, key: str) -> None:
        """
        Delete key from Redis.

        Raises:
            StoreError: If Redis is unavailable
        """
        try:
            await self.redis.delete(key)
        except RedisError as e:
            logger.error("record_store_delete_failed", key=key, error=str(e))
            raise StoreError("Failed to delete from record store", key=key) from e


# Global Redis client instance
_redis_client: aioredis.Redis | None = None


def get_redis_client(settings: Settings | None = None) -> aioredis.Redis:
    """
    Get or create Redis client instance.

    Returns:
        Redis client instance
    """
    global _redis_client

    settings = settings or default_settings
    if _redis_client is None:
        _redis_client = aioredis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            username=settings.redis_username,
            password=settings.redis_password or None,
            db=settings.redis_db,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )

    return _redis_client


async def close_redis_connection() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


# One lock per (backend, key), shared by every store and collection writing there
_locks: "WeakKeyDictionary[object, dict[str, asyncio.Lock]]" = WeakKeyDictionary()


def get_collection_lock(store: RecordStore, key: str) -> asyncio.Lock:
    """
    Return the mutex serializing writes to one collection key.

    Stores wrapping the same backend, such as two ``RedisRecordStore``
    instances on one client, get the same lock for a key.
    """
    backend = getattr(store, "backend", store)
    locks = _locks.setdefault(backend, {})
    if key not in locks:
        locks[key] = asyncio.Lock()
    return locks[key]


class JsonCollection(Generic[RecordT]):
    """
    Whole-collection JSON access to one record store key.

    Every write replaces the full serialized list. Callers mutating the
    collection hold ``lock`` across load and save.
    """

    def __init__(
        self,
        store: RecordStore,
        name: str,
        model: type[RecordT],
        key_prefix: str | None = None,
    ):
        """Initialize collection for the given logical key and record model."""
        self.store = store
        self.name = name
        prefix = default_settings.storage_key_prefix if key_prefix is None else key_prefix
        self.key = f"{prefix}{name}"
        self._adapter = TypeAdapter(list[model])
        self.lock = get_collection_lock(store, self.key)

    async def raw(self) -> str | None:
        """Return the stored serialized collection."""
        return await self.store.get(self.key)

    def decode(self, raw: str | None) -> list[RecordT]:
        """
        Decode a serialized collection.

        Args:
            raw: Stored string, or None when the key is absent

        Returns:
            Records in storage order, empty when the key is absent

        Raises:
            StoreError: If the stored value cannot be decoded
        """
        if not raw:
            return []

        try:
            return self._adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.error(
                "collection_decode_failed",
                key=self.key,
                error_count=e.error_count(),
            )
            raise StoreError(f"Stored collection '{self.name}' is malformed", key=self.key) from e

    async def load(self) -> list[RecordT]:
        """Read and decode the full collection."""
        return self.decode(await self.raw())

    async def save(self, records: Sequence[RecordT]) -> None:
        """Encode and write back the full collection."""
        try:
            payload = self._adapter.dump_json(list(records), by_alias=True).decode("utf-8")
        except (TypeError, ValueError) as e:
            logger.error("collection_encode_failed", key=self.key, error=str(e))
            raise StoreError(f"Failed to serialize collection '{self.name}'", key=self.key) from e

        await self.store.set(self.key, payload)

    async def restore(self, raw: str | None) -> None:
        """
        Put back a previously read serialized collection.

        Args:
            raw: Value returned by ``raw()``; None removes the key again
        """
        if raw is None:
            await self.store.delete(self.key)
        else:
            await self.store.set(self.key, raw)
        logger.warning("collection_restored", key=self.key)
