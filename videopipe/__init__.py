"""Building blocks for video pipelines: tensors, host/device buffers, a slot allocator, recording tasks, logging and utilities."""

__version__ = "0.1.0"