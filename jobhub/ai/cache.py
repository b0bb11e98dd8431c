"""
Response cache for generated text.

Entries are keyed by a prompt fingerprint (the first 100 characters of
the prompt) and expire after a fixed time window.  Expired entries are
ignored on read rather than purged.  The mapping is bounded: once it
holds more than ``max_entries`` keys the oldest-inserted key is dropped,
regardless of how recently it was read.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

FINGERPRINT_LENGTH = 100


def fingerprint(prompt: str, length: int = FINGERPRINT_LENGTH) -> str:
    """Return the lossy cache key for ``prompt``."""
    return prompt[:length]


class ResponseCache:
    """Time-bounded FIFO cache of generated responses."""

    def __init__(
        self,
        ttl: float = 300.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at < self.ttl:
            logger.debug("Cache hit: %s...", key[:40])
            return value
        return None

    def set(self, key: str, value: str) -> None:
        # Assigning to an existing key keeps its insertion position.
        self._entries[key] = (value, self._clock())
        if len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full; evicted %s...", evicted[:40])

    def clear(self) -> None:
        self._entries.clear()
