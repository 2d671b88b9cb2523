"""A fixed pool of reusable slots, each held exclusively until released."""

from __future__ import annotations

import threading
from typing import Any


class MonopolyData:
    """One slot of a :class:`MonopolyAllocator`; ``data`` holds what the user stores."""

    def __init__(self, manager: "MonopolyAllocator") -> None:
        self._manager = manager
        self._available = True
        self.data: Any = None

    def release(self) -> None:
        """Give the slot back to its allocator so it can be queried again."""
        self._manager._release_one(self)


class MonopolyAllocator:
    """Hands out at most ``size`` slots at a time, blocking callers when all are taken."""

    def __init__(self, size: int) -> None:
        self._capacity = size
        self._num_available = size
        self._datas = [MonopolyData(self) for _ in range(size)]
        self._cond = threading.Condition()
        self._num_waiting = 0
        self._run = True

    def query(self, timeout: int = 10000) -> MonopolyData | None:
        """Take a free slot, waiting up to ``timeout`` milliseconds.

        Returns None on timeout or once the allocator is closed.
        """
        with self._cond:
            if not self._run:
                return None

            if self._num_available == 0:
                self._num_waiting += 1
                state = self._cond.wait_for(
                    lambda: self._num_available > 0 or not self._run,
                    max(timeout, 0) / 1000.0,
                )
                self._num_waiting -= 1
                self._cond.notify_all()
                if not state or self._num_available == 0 or not self._run:
                    return None

            item = next((d for d in self._datas if d._available), None)
            if item is None:
                return None
            item._available = False
            self._num_available -= 1
            return item

    def num_available(self) -> int:
        """Return how many slots are free."""
        return self._num_available

    def capacity(self) -> int:
        """Return the total number of slots."""
        return self._capacity

    def close(self) -> None:
        """Stop handing out slots and wait until no caller is blocked in :meth:`query`."""
        with self._cond:
            self._run = False
            self._cond.notify_all()
            self._cond.wait_for(lambda: self._num_waiting == 0)

    def __enter__(self) -> "MonopolyAllocator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _release_one(self, item: MonopolyData) -> None:
        with self._cond:
            if not item._available:
                item._available = True
                self._num_available += 1
                self._cond.notify_all()