"""
Fallback Policy
===============
Fire a remote call, and on failure either retry, substitute a fallback
result, or re-raise.

The three Gemini calls share this shape with different policies:

- feedback: static canned critique
- forecast: client-side arithmetic projection
- creative: no fallback, the error reaches the caller
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class FallbackPolicy:
    """
    Retry/fallback policy for a single kind of remote call.

    Args:
        name: Label used in log messages
        fallback: Called with the same arguments as the failed call to build
            a substitute result. None means re-raise the last error.
        retries: Extra attempts after the first failure
    """

    def __init__(self, name: str, fallback: Optional[Callable[..., Any]] = None, retries: int = 0):
        self.name = name
        self.fallback = fallback
        self.retries = max(0, int(retries))

    def call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                logger.error("%s failed (attempt %d/%d): %s", self.name, attempt, attempts, e)
                if attempt < attempts:
                    continue
                if self.fallback is None:
                    raise
                logger.warning("%s: using fallback result", self.name)
                return self.fallback(*args, **kwargs)

