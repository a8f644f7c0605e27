"""Per-process license key allocation.

A ``KeyAllocator`` owns the set of keys already handed out by this process.
With ``serialize=True`` (the default) the scan-and-record step runs under a
lock, so two concurrent claims never return the same key. ``serialize=False``
keeps the historical unlocked behavior, where two claims racing between the
membership check and the insert can both return the same key.

The used set lives in process memory, so the guarantee holds only within one
process. Separate Lambda containers each start with an empty set and will
hand out the same keys; template.yaml pins the verify function to a single
container with ReservedConcurrentExecutions: 1.
"""

import threading
from typing import Callable, Iterable, List, MutableSet, Optional

from keydrop.errors import NoKeyAvailable
from keydrop.logger import get_logger, mask_key
from keydrop.orders import CATEGORY_MARKER, ProductCategory

logger = get_logger("allocator")


def matches_category(key: str, category: ProductCategory) -> bool:
    tagged = CATEGORY_MARKER in key
    return tagged if category is ProductCategory.MASTERCLASS else not tagged


class KeyAllocator:
    def __init__(
        self,
        fetch_keys: Callable[[], Iterable[str]],
        used: Optional[MutableSet[str]] = None,
        serialize: bool = True,
    ):
        self._fetch_keys = fetch_keys
        self._used = used if used is not None else set()
        self._lock = threading.Lock() if serialize else None

    @property
    def serialized(self) -> bool:
        return self._lock is not None

    @property
    def used_count(self) -> int:
        return len(self._used)

    def is_used(self, key: str) -> bool:
        return key in self._used

    def _take_first_unused(self, candidates: List[str]) -> Optional[str]:
        for key in candidates:
            if key not in self._used:
                self._used.add(key)
                return key
        return None

    def claim(self, category: ProductCategory) -> str:
        """
        Return a key for ``category`` that this process has not handed out yet
        and record it as used. Raises NoKeyAvailable when none is left.
        """
        candidates = [k for k in self._fetch_keys() if matches_category(k, category)]

        if self._lock is None:
            key = self._take_first_unused(candidates)
        else:
            with self._lock:
                key = self._take_first_unused(candidates)

        if key is None:
            logger.warning(
                "allocator.pool_exhausted",
                extra={"category": category.value, "candidates": len(candidates)},
            )
            raise NoKeyAvailable(category.label)

        logger.info(
            "allocator.key_claimed",
            extra={"category": category.value, "key": mask_key(key), "used_count": self.used_count},
        )
        return key
