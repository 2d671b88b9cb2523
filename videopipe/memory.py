"""Paired host and device byte buffers that grow on demand."""

from __future__ import annotations

CURRENT_DEVICE_ID = -1

_current_device = 0


def _resolve_device(device_id: int) -> int:
    if device_id == CURRENT_DEVICE_ID:
        return _current_device
    if device_id < 0:
        raise ValueError(f"Invalid device id: {device_id}")
    return device_id


def _as_view(buffer) -> memoryview | None:
    if buffer is None:
        return None
    view = memoryview(buffer)
    if view.nbytes == 0:
        return None
    return view.cast("B") if view.format != "B" or view.ndim != 1 else view


class MixMemory:
    """A host buffer and a device buffer, each allocated, grown or referenced separately.

    Buffers are exposed as byte memoryviews. Freshly allocated buffers are zeroed.
    """

    def __init__(self, device_id: int = CURRENT_DEVICE_ID, *, cpu=None, gpu=None) -> None:
        self._cpu: memoryview | None = None
        self._cpu_size = 0
        self._owner_cpu = True
        self._gpu: memoryview | None = None
        self._gpu_size = 0
        self._owner_gpu = True
        self._device_id = _resolve_device(device_id)
        if cpu is not None or gpu is not None:
            self.reference_data(cpu, gpu)

    @property
    def owner_cpu(self) -> bool:
        """Whether the host buffer was allocated here rather than referenced."""
        return self._owner_cpu

    @property
    def owner_gpu(self) -> bool:
        """Whether the device buffer was allocated here rather than referenced."""
        return self._owner_gpu

    @property
    def cpu_size(self) -> int:
        """Size of the host buffer in bytes."""
        return self._cpu_size

    @property
    def gpu_size(self) -> int:
        """Size of the device buffer in bytes."""
        return self._gpu_size

    @property
    def device_id(self) -> int:
        """Device the buffers belong to."""
        return self._device_id

    def gpu(self, size: int | None = None) -> memoryview | None:
        """Return the device buffer, first reallocating it if it is smaller than ``size``."""
        if size is not None and self._gpu_size < size:
            self.release_gpu()
            self._gpu_size = size
            self._gpu = memoryview(bytearray(size))
        return self._gpu

    def cpu(self, size: int | None = None) -> memoryview | None:
        """Return the host buffer, first reallocating it if it is smaller than ``size``."""
        if size is not None and self._cpu_size < size:
            self.release_cpu()
            self._cpu_size = size
            self._cpu = memoryview(bytearray(size))
        return self._cpu

    def release_cpu(self) -> None:
        """Drop the host buffer."""
        self._cpu = None
        self._cpu_size = 0

    def release_gpu(self) -> None:
        """Drop the device buffer."""
        self._gpu = None
        self._gpu_size = 0

    def release_all(self) -> None:
        """Drop both buffers."""
        self.release_cpu()
        self.release_gpu()

    def reference_data(self, cpu=None, gpu=None) -> None:
        """Use existing buffers instead of owning memory.

        Writes through the returned views reach the given buffers. An empty or
        missing buffer leaves that side unset and owned.
        """
        self.release_all()
        cpu_view = _as_view(cpu)
        gpu_view = _as_view(gpu)

        self._cpu = cpu_view
        self._cpu_size = cpu_view.nbytes if cpu_view is not None else 0
        self._gpu = gpu_view
        self._gpu_size = gpu_view.nbytes if gpu_view is not None else 0

        self._owner_cpu = cpu_view is None
        self._owner_gpu = gpu_view is None
        self._device_id = _current_device

    def __enter__(self) -> "MixMemory":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release_all()