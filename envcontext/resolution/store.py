"""
Resolved Store
==============

Accumulates resolved ``key -> value`` pairs across every source of a load
session. Writes only ever carry finished values, and reads are safe while
another thread writes.
"""

import threading
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional


class ResolvedStore:
    """Thread-safe put/overwrite-only mapping with point-in-time snapshots."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._lock = threading.RLock()
        self._values: Dict[str, str] = dict(initial or {})

    def put(self, key: str, value: str):
        """Store a resolved value; the last write for a key wins."""
        with self._lock:
            self._values[key] = value

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            return self._values.get(key, default)

    def snapshot(self) -> Mapping[str, str]:
        """
        Get a read-only copy of the current contents.

        Later writes to the store never show up in a snapshot already
        handed out.

        Returns:
            Read-only mapping of resolved values
        """
        with self._lock:
            return MappingProxyType(dict(self._values))

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._values)

    def clear(self):
        with self._lock:
            self._values.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"ResolvedStore({len(self)} keys)"


__all__ = ["ResolvedStore"]
