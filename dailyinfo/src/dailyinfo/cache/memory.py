import logging
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

class MemoryCache:
    """
    In-process key-value cache owned by a single provider instance.
    No expiry and no eviction: it lives exactly as long as its owner, so scope
    the owner (one per aggregation run, or one per process) to bound growth.
    """
    def __init__(self, name: str = "memory"):
        self.name = name
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: Any):
        with self._lock:
            self._data[key] = value

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def clear(self):
        with self._lock:
            logger.debug(f"Clearing {self.name} cache ({len(self._data)} entries)")
            self._data.clear()
