"""Background recording tasks fed through a queue on a worker thread."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class RecordType(IntEnum):
    """What a task records."""

    IMAGE_RECORD = 0
    VIDEO_RECORD = 1


class RecordStatus(IntEnum):
    """Lifecycle of a recording task."""

    NO_START = 0
    STARTING = 1
    COMPLETED = 2


@dataclass
class RecordConfig:
    """Where and how a recording is written."""

    save_path: str
    file_name: str
    record_type: RecordType
    duration: int
    src_width: int
    src_height: int
    dst_width: int
    dst_height: int
    fps: int = 25
    bitrate: int = 2 * 1024 * 1024


RecordEventCallback = Callable[[str, int, RecordConfig], None]


class RecordTask(ABC):
    """Runs :meth:`record_handler` on a worker thread for every pushed item.

    A handler ends the task by setting ``record_status`` to ``COMPLETED``.
    """

    def __init__(self, config: RecordConfig) -> None:
        self.config = config
        self.record_status = RecordStatus.NO_START
        self.record_complete_cb: RecordEventCallback | None = None
        self.create_time = int(time.time())
        self._queue: deque[Any] = deque()
        self._cond = threading.Condition()
        self._thread: threading.Thread | None = None

    @abstractmethod
    def record_handler(self, data: Any) -> None:
        """Handle one queued item."""

    def start(self) -> None:
        """Start the worker thread; does nothing unless the task is new."""
        if self.record_status != RecordStatus.NO_START:
            return
        self.record_status = RecordStatus.STARTING
        self._thread = threading.Thread(target=self._worker, daemon=True)
        self._thread.start()

    def _worker(self) -> None:
        try:
            while True:
                with self._cond:
                    self._cond.wait_for(
                        lambda: self._queue or self.record_status != RecordStatus.STARTING
                    )
                    if self.record_status != RecordStatus.STARTING:
                        break
                    data = self._queue.popleft()
                self.record_handler(data)
        except BaseException:
            self.record_status = RecordStatus.COMPLETED
            raise

    def stop(self) -> None:
        """Mark the task completed and wait for the worker to finish."""
        with self._cond:
            self.record_status = RecordStatus.COMPLETED
            self._cond.notify_all()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        print("RecordTask Stop")

    def set_record_complete_cb(self, cb: RecordEventCallback | None) -> None:
        """Set the callback a handler calls as ``cb(message, code, config)``."""
        self.record_complete_cb = cb

    def get_record_status(self) -> RecordStatus:
        """Return the current status."""
        return self.record_status

    def push(self, data: Any) -> None:
        """Queue one item for the worker."""
        with self._cond:
            self._queue.append(data)
            self._cond.notify_all()

    def __enter__(self) -> "RecordTask":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()