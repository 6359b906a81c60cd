"""
Redis client configuration and the named-slot JSON store built on top of it.
"""
import json
import logging
from typing import Any, Optional

import redis

from app.core.config import settings

logger = logging.getLogger(__name__)

# Seconds a slot lock is held at most, and waited for before giving up
SLOT_LOCK_TIMEOUT = 10
SLOT_LOCK_WAIT = 5

# Create Redis client
redis_client = redis.Redis.from_url(
    settings.redis_url,
    db=settings.redis_db,
    decode_responses=True,
    socket_connect_timeout=5,
    socket_timeout=5,
    retry_on_timeout=True
)


def check_redis_connection(client: Optional[redis.Redis] = None) -> bool:
    """Check if Redis connection is working."""
    try:
        (client or redis_client).ping()
        return True
    except redis.RedisError as e:
        logger.error(f"Redis connection check failed: {e}")
        return False


class SlotStore:
    """Saves and loads JSON documents under named slots.

    Writes are fire-and-forget: failures are logged and reported through the
    return value instead of raised. Reads fall back to the caller's default
    whenever the slot is absent, unreadable or not valid JSON.
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client or redis_client

    def save(self, slot: str, value: Any) -> bool:
        """Serialize a value as JSON under the given slot."""
        try:
            self.client.set(slot, json.dumps(value))
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize slot {slot}: {e}")
            return False
        except redis.RedisError as e:
            logger.error(f"Failed to save slot {slot}: {e}")
            return False

    def load(self, slot: str, default: Any = None) -> Any:
        """Load and parse the JSON stored under a slot."""
        try:
            raw = self.client.get(slot)
        except redis.RedisError as e:
            logger.error(f"Failed to load slot {slot}: {e}")
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Malformed data in slot {slot}, using default: {e}")
            return default

    def lock(self, slot: str):
        """Lock guarding read-modify-write updates of a slot across processes."""
        return self.client.lock(
            f"{slot}:lock",
            timeout=SLOT_LOCK_TIMEOUT,
            blocking_timeout=SLOT_LOCK_WAIT
        )
