"""Daily attempt budget enforced against a shared counter store."""

from .daykey import local_day_key, local_now, parse_timezone_offset
from .quota import AttemptQuotaManager
from .store import CounterStore, RedisCounterStore

__all__ = [
    'AttemptQuotaManager',
    'CounterStore',
    'RedisCounterStore',
    'local_day_key',
    'local_now',
    'parse_timezone_offset',
]
