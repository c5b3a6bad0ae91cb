"""Pricing diagnostics: timing decorator and counters for coerced or missing rates."""
import time
import logging
import threading
import functools
from typing import Any, Callable, Dict

logger = logging.getLogger("quote-engine.diagnostics")


def timed(func: Callable) -> Callable:
    """
    Decorator that measures and logs execution time for synchronous functions.

    Usage::

        @timed
        def compute_price(...):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 3)
            logger.debug(
                "function timed",
                extra={
                    "function": func.__qualname__,
                    "duration_ms": duration_ms,
                },
            )
    return wrapper


class DiagnosticsTracker:
    """
    Thread-safe in-memory tracker for pricing health.

    Tracks:
    - Pricing passes evaluated
    - Values coerced to 0 because they were NaN, None or non-numeric
    - Rate keys a selection asked for that the product table does not carry

    A non-zero coercion or missing-key count is a catalog bug, not a free option.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pricing_passes: int = 0
        self._coerced: Dict[str, int] = {}        # field -> count
        self._missing_keys: Dict[str, int] = {}   # "product:category:key" -> count

    # ------------------------------------------------------------------
    # Public write API
    # ------------------------------------------------------------------

    def record_pricing_pass(self) -> None:
        with self._lock:
            self._pricing_passes += 1

    def record_coercion(self, field_name: str) -> None:
        """Increment the counter for a value that had to be coerced to 0."""
        with self._lock:
            self._coerced[field_name] = self._coerced.get(field_name, 0) + 1

    def record_missing_key(self, product_id: str, category: str, key: str) -> None:
        bucket = f"{product_id}:{category}:{key}"
        with self._lock:
            self._missing_keys[bucket] = self._missing_keys.get(bucket, 0) + 1

    # ------------------------------------------------------------------
    # Public read API
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """
        Return a copy of all collected counters.

        Returns
        -------
        dict with keys:
            pricing_passes      : int
            coerced_total       : int
            coerced_by_field    : dict  {field: count}
            missing_rate_keys   : dict  {"product:category:key": count}
        """
        with self._lock:
            return {
                "pricing_passes": self._pricing_passes,
                "coerced_total": sum(self._coerced.values()),
                "coerced_by_field": dict(self._coerced),
                "missing_rate_keys": dict(self._missing_keys),
            }

    def reset(self) -> None:
        """Reset all counters (useful in tests)."""
        with self._lock:
            self._pricing_passes = 0
            self._coerced.clear()
            self._missing_keys.clear()


# Module-level singleton; import this instance everywhere else.
tracker = DiagnosticsTracker()
