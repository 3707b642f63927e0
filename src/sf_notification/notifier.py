"""Notification sinks.

The core only needs `notify(buyer_id, message)`; delivery beyond Redis
pub/sub (email, push, websocket fan-out) belongs to subscribers.
"""

import json
from typing import Protocol

from config.settings import settings
from src.sf_common.datetime_utils import utc_now
from src.sf_common.redis_client import get_redis


class NotifierProtocol(Protocol):
    async def notify(self, buyer_id: str, message: str) -> None: ...


class RedisNotifier:
    """Publishes one JSON message per notification to `<prefix>:<buyer_id>`."""

    def __init__(self, channel_prefix: str | None = None) -> None:
        self._prefix = channel_prefix or settings.NOTIFICATION_CHANNEL_PREFIX

    def channel_for(self, buyer_id: str) -> str:
        return f"{self._prefix}:{buyer_id}"

    async def notify(self, buyer_id: str, message: str) -> None:
        redis = await get_redis()
        payload = json.dumps({
            "buyer_id": buyer_id,
            "message": message,
            "sent_at": utc_now().isoformat(),
        })
        await redis.publish(self.channel_for(buyer_id), payload)
