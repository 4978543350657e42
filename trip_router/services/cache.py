from __future__ import annotations

import hashlib
import json
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from trip_router.core.config import settings
from trip_router.models.trip import Leg, RouteSummary

logger = logging.getLogger(__name__)


class LegCache:
    """Optional redis cache of successful leg summaries.

    Only successes are stored. Cache trouble never fails a leg.
    """

    def __init__(self, redis_url: Optional[str] = None, ttl: Optional[int] = None) -> None:
        self.redis_url = redis_url if redis_url is not None else settings.REDIS_URL
        self.ttl = ttl or settings.ROUTING_CACHE_TTL_SECONDS
        self.redis_client: Optional[redis.Redis] = None

    @property
    def enabled(self) -> bool:
        return bool(self.redis_url) or self.redis_client is not None

    def connect_redis(self) -> Optional[redis.Redis]:
        if not self.redis_client and self.redis_url:
            try:
                self.redis_client = redis.from_url(self.redis_url)
            except ValueError as exc:
                logger.warning("Leg cache disabled, bad REDIS_URL: %s", exc)
                self.redis_url = None
                return None
            logger.info("Leg cache: connected to Redis")
        return self.redis_client

    def _cache_key(self, leg: Leg) -> str:
        payload = json.dumps(
            {
                "o": [leg.origin.lat, leg.origin.lon],
                "d": [leg.destination.lat, leg.destination.lon],
                "m": leg.mode.value,
            },
            sort_keys=True,
        )
        return f"legs:{leg.mode.value}:{hashlib.sha256(payload.encode('utf-8')).hexdigest()}"

    async def get(self, leg: Leg) -> Optional[RouteSummary]:
        client = self.connect_redis()
        if client is None:
            return None

        key = self._cache_key(leg)
        try:
            cached = await client.get(key)
        except (RedisError, OSError) as exc:
            logger.warning("Leg cache read failed: %s", exc)
            return None

        if not cached:
            return None
        try:
            data = json.loads(cached)
            return RouteSummary(
                distance_m=float(data["distance_m"]),
                duration_s=float(data["duration_s"]),
            )
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable leg cache entry %s: %s", key, exc)
            return None

    async def set(self, leg: Leg, summary: RouteSummary) -> None:
        client = self.connect_redis()
        if client is None:
            return

        value = json.dumps({"distance_m": summary.distance_m, "duration_s": summary.duration_s})
        try:
            await client.set(self._cache_key(leg), value, ex=self.ttl)
        except (RedisError, OSError) as exc:
            logger.warning("Leg cache write failed: %s", exc)
