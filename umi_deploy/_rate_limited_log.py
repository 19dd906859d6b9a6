"""
Thread-safe rate-limited logging utilities.

Used for warnings that can repeat on every poll cycle (e.g. a flapping node)
so they stay visible without flooding the log.
"""
import logging
import threading
import time
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# Last-logged timestamps, bounded in size; entries expire after an hour
_log_cache: TTLCache = TTLCache(maxsize=256, ttl=3600)
_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: float = 60,
    logger_instance: Optional[logging.Logger] = None,
    key: Optional[str] = None,
) -> bool:
    """
    Log a message at most once per ``interval`` seconds per key.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between logs in seconds
        logger_instance: Logger to use (defaults to module logger)
        key: Rate-limit key; defaults to the level plus message

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    cache_key = key or f"{level}:{message}"

    with _log_cache_lock:
        now = time.monotonic()
        last_time = _log_cache.get(cache_key)
        if last_time is not None and now - last_time < interval:
            return False
        log_method(message)
        _log_cache[cache_key] = now
        return True


def reset_rate_limits() -> None:
    """Forget all rate-limit state."""
    with _log_cache_lock:
        _log_cache.clear()
