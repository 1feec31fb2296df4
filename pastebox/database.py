"""
Storage layer for pastes: Redis with an in-memory fallback for development.
Handles insertion, lookup with lazy expiry and burn-after-reading, deletion
and health checks.
"""
import json
import logging
import secrets
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple
from redis import Redis
from redis.exceptions import ConnectionError, RedisError

from pastebox.errors import IdentifierCollision, NotFound, StorageUnavailable
from pastebox.models import Entry

logger = logging.getLogger(__name__)

MEMORY_URL = "memory://"

# Delete KEYS[1] only while it still holds ARGV[1]; returns the number removed.
DELETE_IF_EQUAL = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


class InMemoryStore:
    """Thread-safe in-memory store for development/testing (when Redis unavailable)."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.store: Dict[str, Tuple[str, Optional[float]]] = {}
        self.clock = clock
        self._lock = threading.Lock()

    def set(self, key: str, value: str, ex: Optional[int] = None, nx: bool = False) -> Optional[bool]:
        """Store a value; with nx=True only if the key is absent (returns None then)."""
        with self._lock:
            if nx and self._live(key) is not None:
                return None
            expire_at = self.clock() + ex if ex else None
            self.store[key] = (value, expire_at)
            return True

    def get(self, key: str) -> Optional[str]:
        """Retrieve a value."""
        with self._lock:
            return self._live(key)

    def delete(self, key: str) -> int:
        """Delete a key, returning how many keys were removed."""
        with self._lock:
            if self._live(key) is None:
                return 0
            del self.store[key]
            return 1

    def delete_if_equal(self, key: str, value: str) -> int:
        """Delete a key only while it still holds `value`."""
        with self._lock:
            if self._live(key) != value:
                return 0
            del self.store[key]
            return 1

    def ping(self):
        """Health check."""
        return True

    def _live(self, key: str) -> Optional[str]:
        # Caller holds the lock.
        item = self.store.get(key)
        if item is None:
            return None
        value, expire_at = item
        if expire_at is not None and self.clock() >= expire_at:
            del self.store[key]
            return None
        return value


class PasteDatabase:
    """
    Owns the paste record set.

    Every mutation, including lazy expiry and burn-after-reading removals,
    goes through this class.
    """

    def __init__(
        self,
        store: Any = None,
        redis_url: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the backing store.

        Args:
            store: Ready-made store (Redis client or InMemoryStore)
            redis_url: Redis URL to connect to when no store is given
            clock: Source of the current time in epoch seconds
        """
        self.clock = clock
        self.using_fallback = False

        if store is not None:
            self.redis = store
            self.using_fallback = isinstance(store, InMemoryStore)
        elif redis_url is None or redis_url == MEMORY_URL:
            self.redis = InMemoryStore(clock=clock)
            self.using_fallback = True
        else:
            self.redis = self._connect(redis_url)

        if isinstance(self.redis, InMemoryStore):
            self._delete_if_equal = self.redis.delete_if_equal
        else:
            script = self.redis.register_script(DELETE_IF_EQUAL)
            self._delete_if_equal = lambda key, value: script(keys=[key], args=[value])

    def _connect(self, redis_url: str):
        try:
            logger.info(f"Attempting to connect to Redis: {redis_url[:30]}...")
            client = Redis.from_url(redis_url, decode_responses=True)
            client.ping()
            logger.info("✓ Redis connected successfully")
            return client
        except ConnectionError as e:
            logger.error(f"❌ ConnectionError connecting to Redis: {type(e).__name__}: {str(e)}")
            logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
            self.using_fallback = True
            return InMemoryStore(clock=self.clock)

    def is_healthy(self) -> bool:
        """Check if database connection is alive."""
        try:
            self.redis.ping()
            return True
        except RedisError as e:
            logger.error(f"Health check failed: {e}")
        return False

    def insert(self, identifier: int, entry: Entry) -> None:
        """
        Save a new paste.

        Args:
            identifier: Numeric paste identifier
            entry: Paste content and metadata

        Raises:
            IdentifierCollision: If the identifier is already in use
            StorageUnavailable: On backend failure
        """
        key = self._key(identifier)
        now = self.clock()
        expires = entry.expires or None

        record = {
            "text": entry.text,
            "extension": entry.extension,
            "expires": expires,
            "burn_after_reading": bool(entry.burn_after_reading),
            "created_at": now,
            "expires_at": now + expires if expires else None,
            # Tells apart a record from a later one reusing the identifier.
            "nonce": secrets.token_hex(8),
        }

        try:
            stored = self.redis.set(key, json.dumps(record), ex=expires, nx=True)
        except RedisError as e:
            logger.error(f"Error saving paste {identifier}: {e}")
            raise StorageUnavailable() from e

        if not stored:
            logger.warning(f"Identifier collision on paste {identifier}")
            raise IdentifierCollision()

        logger.info(f"Paste {identifier} saved successfully")

    def get(self, identifier: int) -> Entry:
        """
        Fetch a paste.

        Expired pastes are removed and reported as missing. A burn-after-reading
        paste is removed by this call; only the caller whose delete actually
        removed the record gets the content. Both removals are conditional on
        the record still being the one that was read, so a paste inserted
        under the same identifier in between is left alone.

        Raises:
            NotFound: If the paste is absent, expired or already burned
            StorageUnavailable: On backend failure
        """
        key = self._key(identifier)
        raw = self._call("fetching", identifier, self.redis.get, key)

        if raw is None:
            logger.warning(f"Paste {identifier} not found")
            raise NotFound()

        record = json.loads(raw)
        now = self.clock()

        expires_at = record.get("expires_at")
        if expires_at is not None and now >= expires_at:
            logger.info(f"Paste {identifier} has expired")
            self._call("deleting", identifier, self._delete_if_equal, key, raw)
            raise NotFound()

        entry = Entry(
            text=record["text"],
            extension=record.get("extension"),
            expires=record.get("expires"),
            burn_after_reading=record.get("burn_after_reading"),
            seconds_since_creation=max(0, int(now - record["created_at"])),
        )

        if entry.burn_after_reading:
            if not self._call("burning", identifier, self._delete_if_equal, key, raw):
                logger.warning(f"Paste {identifier} was burned by a concurrent read")
                raise NotFound()
            logger.info(f"Paste {identifier} burned after reading")

        return entry

    def delete(self, identifier: int) -> None:
        """
        Delete a paste.

        Raises:
            NotFound: If there was nothing to delete
            StorageUnavailable: On backend failure
        """
        removed = self._call("deleting", identifier, self.redis.delete, self._key(identifier))
        if not removed:
            raise NotFound()
        logger.info(f"Paste {identifier} deleted")

    def _call(self, action: str, identifier: int, func: Callable, *args):
        try:
            return func(*args)
        except RedisError as e:
            logger.error(f"Error {action} paste {identifier}: {e}")
            raise StorageUnavailable() from e

    @staticmethod
    def _key(identifier: int) -> str:
        return f"paste:{identifier}"
