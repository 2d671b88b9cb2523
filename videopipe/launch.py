"""Launch-size helpers for data-parallel jobs and a millisecond timer."""

from __future__ import annotations

import time

GPU_BLOCK_THREADS = 512


def block_dims(num_jobs: int) -> int:
    """Return the number of threads per block for ``num_jobs`` jobs."""
    return num_jobs if num_jobs < GPU_BLOCK_THREADS else GPU_BLOCK_THREADS


def grid_dims(num_jobs: int) -> int:
    """Return the number of blocks needed to cover ``num_jobs`` jobs."""
    if num_jobs <= 0:
        raise ValueError(f"number of jobs must be positive, got {num_jobs}")
    threads = block_dims(num_jobs)
    return int((num_jobs + threads - 1) / float(threads))


class Timer:
    """Measures the time between :meth:`start` and :meth:`stop` in milliseconds."""

    def __init__(self) -> None:
        self._started: float | None = None

    def start(self) -> None:
        """Record the start point."""
        self._started = time.perf_counter()

    def stop(self, prefix: str = "Timer", print_result: bool = True) -> float:
        """Return milliseconds since :meth:`start`, printing ``[prefix]: N ms`` if asked."""
        if self._started is None:
            raise RuntimeError("timer was stopped before it was started")
        latency = (time.perf_counter() - self._started) * 1000.0
        if print_result:
            print(f"[{prefix}]: {latency:.5f} ms")
        return latency