import logging
import secrets
from datetime import timedelta

import redis

from huehunt.errors import CounterStoreError
from huehunt.models import Color
from .attempts.daykey import local_day_key, local_now

logger = logging.getLogger(__name__)

# Long enough to serve the target history window
COLOR_TTL_SECONDS = 90 * 24 * 60 * 60


def random_color() -> Color:
    return Color(secrets.randbelow(256), secrets.randbelow(256), secrets.randbelow(256))


class DailyColorProvider:
    """Get-or-create the target color for a calendar day.

    The first writer for a day wins (``SET NX``); every later call, from any
    worker, reads the same color back.
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int = COLOR_TTL_SECONDS, generator=random_color):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.generator = generator

    @staticmethod
    def key_for(day_key: str) -> str:
        return f"daily_color:{day_key}"

    def color_for_date(self, day_key: str) -> Color:
        key = self.key_for(day_key)
        try:
            created = self.client.set(key, self.generator().to_hex(), nx=True, ex=self.ttl_seconds)
            value = self.client.get(key)
        except redis.RedisError as exc:
            raise CounterStoreError(f"Daily color lookup failed: {exc}") from exc
        if isinstance(value, bytes):
            value = value.decode('ascii')
        color = Color.from_hex(value)
        if created:
            logger.info(f"[daily-color] day={day_key} color={color.to_hex()} created")
        return color

    def color_for_timezone(self, timezone_offset: float, now=None):
        """Return ``(day_key, color)`` for the caller's local day."""
        day_key = local_day_key(timezone_offset, now)
        return day_key, self.color_for_date(day_key)

    def history(self, days: int = 7, timezone_offset: float = 0, now=None):
        """Colors of the last ``days`` local days, newest first.

        Read-only: days that never had a color are skipped, not created.
        """
        if days <= 0:
            return []
        today = local_now(timezone_offset, now)
        day_keys = [(today - timedelta(days=i)).strftime('%Y-%m-%d') for i in range(days)]
        try:
            values = self.client.mget([self.key_for(day_key) for day_key in day_keys])
        except redis.RedisError as exc:
            raise CounterStoreError(f"Daily color history failed: {exc}") from exc
        colors = []
        for day_key, value in zip(day_keys, values):
            if value is None:
                continue
            if isinstance(value, bytes):
                value = value.decode('ascii')
            colors.append((day_key, Color.from_hex(value)))
        return colors
