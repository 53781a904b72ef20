"""Redis caching and session persistence for recommendation results.

Caches RecommendationResult JSON keyed by a hash of the profile and the
catalog fingerprint, and stores the answers/recommendation pair of a
questionnaire session. Falls back gracefully when Redis is unavailable —
the engine works without it, recommendations are just recomputed.

Cache key strategy:
  pcfinder:rec:{sha256(canonical profile + catalog fingerprint + month)}
  pcfinder:session:{session_id}
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from pcfinder.models.profile import BuildProfile

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────
# Configuration
# ──────────────────────────────────────────────

KEY_NAMESPACE = "pcfinder:"
RECOMMENDATION_PREFIX = f"{KEY_NAMESPACE}rec:"
SESSION_PREFIX = f"{KEY_NAMESPACE}session:"
DEFAULT_TTL = int(os.getenv("PCFINDER_CACHE_TTL", "3600"))  # 1 hour
SESSION_TTL = int(os.getenv("PCFINDER_SESSION_TTL", "604800"))  # 7 days
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")


# ──────────────────────────────────────────────
# Cache Key Generation
# ──────────────────────────────────────────────


def build_cache_key(
    profile: BuildProfile, catalog_fingerprint: str, period: str = ""
) -> str:
    """Deterministic cache key for a profile against one catalog version.

    Equal profiles map to the same key whatever order or casing of field
    names they arrived in; a catalog change produces a new key. `period`
    (e.g. "2025-06") scopes the entry to the advice window it was made in.
    """
    canonical = {
        "profile": profile.model_dump(mode="json"),
        "catalog": catalog_fingerprint,
        "period": period,
    }
    raw = json.dumps(canonical, sort_keys=True)
    digest = hashlib.sha256(raw.encode()).hexdigest()[:16]
    return f"{RECOMMENDATION_PREFIX}{digest}"


def session_key(session_id: str) -> str:
    return f"{SESSION_PREFIX}{session_id}"


# ──────────────────────────────────────────────
# Redis Cache Client
# ──────────────────────────────────────────────


class RecommendationCache:
    """Redis-backed cache for recommendations and sessions.

    Gracefully degrades when Redis is unavailable — all methods
    return None / False instead of raising.
    """

    def __init__(
        self,
        redis_url: str = REDIS_URL,
        ttl: int = DEFAULT_TTL,
        session_ttl: int = SESSION_TTL,
    ) -> None:
        self.ttl = ttl
        self.session_ttl = session_ttl
        self._redis: Optional[aioredis.Redis] = None
        self._redis_url = redis_url
        self._available = False

    async def connect(self) -> bool:
        """Connect to Redis. Returns True if successful."""
        try:
            self._redis = aioredis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=3,
                socket_timeout=3,
            )
            await self._redis.ping()
            self._available = True
            logger.info("Redis cache connected: %s", self._redis_url)
            return True
        except (RedisError, OSError) as e:
            logger.warning("Redis unavailable: %s, caching disabled", e)
            self._available = False
            return False

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self._available = False

    @property
    def available(self) -> bool:
        return self._available

    async def get(self, key: str) -> Optional[str]:
        """Get a cached value by key. Returns None on miss or error."""
        if not self._available:
            return None
        try:
            data = await self._redis.get(key)
            logger.debug("Cache %s: %s", "HIT" if data else "MISS", key)
            return data
        except RedisError as e:
            logger.warning("Cache get failed: %s", e)
            return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        if not self._available:
            return False
        try:
            await self._redis.set(key, value, ex=ttl or self.ttl)
            logger.debug("Cache SET: %s (TTL: %ds)", key, ttl or self.ttl)
            return True
        except RedisError as e:
            logger.warning("Cache set failed: %s", e)
            return False

    async def delete(self, key: str) -> bool:
        if not self._available:
            return False
        try:
            await self._redis.delete(key)
            return True
        except RedisError as e:
            logger.warning("Cache delete failed: %s", e)
            return False

    async def clear_all(self) -> int:
        """Clear every pcfinder entry (recommendations and sessions)."""
        if not self._available:
            return 0
        try:
            keys = [key async for key in self._redis.scan_iter(f"{KEY_NAMESPACE}*")]
            if keys:
                await self._redis.delete(*keys)
            logger.info("Cleared %d cache entries", len(keys))
            return len(keys)
        except RedisError as e:
            logger.warning("Cache clear failed: %s", e)
            return 0

    async def stats(self) -> dict:
        if not self._available:
            return {"available": False, "keys": 0}
        try:
            count = 0
            async for _ in self._redis.scan_iter(f"{KEY_NAMESPACE}*"):
                count += 1
            return {"available": True, "keys": count, "ttl": self.ttl}
        except RedisError as e:
            return {"available": False, "error": str(e)}

    # ── Sessions ──

    async def save_session(self, session_id: str, payload: Dict[str, Any]) -> bool:
        """Persist a session's answers and recommendation as JSON."""
        return await self.set(
            session_key(session_id), json.dumps(payload), ttl=self.session_ttl
        )

    async def load_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        raw = await self.get(session_key(session_id))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding corrupt session payload: %s", session_id)
            return None


# ──────────────────────────────────────────────
# In-Memory Fallback Cache (for tests / no Redis)
# ──────────────────────────────────────────────


class InMemoryCache(RecommendationCache):
    """Dict-based cache for tests and local runs.

    No TTL enforcement — entries persist until cleared.
    """

    def __init__(self, ttl: int = DEFAULT_TTL, session_ttl: int = SESSION_TTL) -> None:
        super().__init__(ttl=ttl, session_ttl=session_ttl)
        self._store: Dict[str, str] = {}
        self._available = True

    async def connect(self) -> bool:
        self._available = True
        return True

    async def disconnect(self) -> None:
        self._store.clear()
        self._available = False

    async def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        self._store[key] = value
        return True

    async def delete(self, key: str) -> bool:
        self._store.pop(key, None)
        return True

    async def clear_all(self) -> int:
        count = len(self._store)
        self._store.clear()
        return count

    async def stats(self) -> dict:
        return {"available": True, "keys": len(self._store), "ttl": self.ttl}
