# videopipe

Building blocks for video processing pipelines, in plain Python with NumPy
and Pillow.

## What is inside

- `videopipe.tensor.Tensor` — an N-dimensional tensor kept in a host and a
  device buffer. It tracks shape and byte strides, moves data between the two
  buffers on demand (`to_cpu`, `to_gpu`, `cpu`, `gpu`), converts between FP32
  and FP16 (`to_half`, `to_float`), fills values (`set_to`), loads images as
  planar channels (`set_mat`, `set_norm_mat`, resizing bilinearly when the
  size differs) and reads and writes a simple binary file format
  (`save_to_file` / `load_from_file`: a magic number, the number of
  dimensions, the type code, the dimensions as little-endian int64 and the
  raw data).
- `videopipe.memory.MixMemory` — paired host and device byte buffers that are
  zeroed when allocated, grow on demand and can reference existing buffers
  (`reference_data`).
- `videopipe.dtypes` — the `DataType` and `DataHead` enums, `type_to_string`,
  `string_to_type`, `data_type_size`, `data_nums` and half-precision bit
  conversions (`float16_to_float`, `float_to_float16`).
- `videopipe.affine.AffineMatrix` — the letterbox affine transform that fits
  an image into a network input while keeping its aspect ratio, plus its
  inverse (`compute`, `i2d_mat`, `d2i_mat`).
- `videopipe.allocator.MonopolyAllocator` — a fixed pool of reusable slots.
  `query(timeout)` waits up to `timeout` milliseconds for a free slot and
  returns `None` on timeout or after `close()`; a slot's `release()` hands it
  back.
- `videopipe.launch` — `grid_dims` and `block_dims` for splitting a number of
  jobs into blocks of at most 512, and a `Timer` that measures elapsed
  milliseconds between `start()` and `stop()`.
- `videopipe.record` — `RecordTask`, an abstract worker that runs
  `record_handler` on a background thread for each item given to `push`, with
  `RecordConfig`, `RecordType` and `RecordStatus`.
- `videopipe.logger` — `log(level, message)` prints a time-stamped, coloured
  line to the console and, once `set_logger_save_directory` has been called,
  queues it for a daily `<date>.txt` file that is flushed once a second. A
  `FATAL` message raises `FatalError` after it has been written.
- `videopipe.textutil` — prefix and suffix checks, `split_string`,
  `replace_string` (returns the new text and the number of replacements),
  `align_blank`, `pattern_match` with `*`/`?` wildcards and `;`-separated
  patterns, `upbound`, `join_dims`.
- `videopipe.fsutil` — path pieces (`file_name`, `directory`), `mkdirs`,
  `open_mkdirs`, `find_files`, `rmtree`, `load_file`, `save_file` and more.
- `videopipe.timeutil` — `date_now`, `time_now`, HTTP-style date strings
  (`gmtime`, `gmtime2ctime`), millisecond timestamps and `while_loop`, which
  blocks until SIGINT arrives.
- `videopipe.b64` — `base64_encode` and a lenient `base64_decode` that stops
  at the first invalid quartet.
- `videopipe.colors` — `hsv2bgr` and `random_color`, a stable BGR colour per
  integer id.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from videopipe.tensor import Tensor
from videopipe.allocator import MonopolyAllocator
from videopipe.affine import AffineMatrix

t = Tensor(1, 3, 4, 4)
t.set_to(1.0)
t.save_to_file("sample.tensor")

loaded = Tensor()
loaded.load_from_file("sample.tensor")
print(loaded.descriptor())

pool = MonopolyAllocator(2)
item = pool.query(timeout=100)
item.release()

m = AffineMatrix()
m.compute((1920, 1080), (640, 640))
print(m.i2d_mat())
```

A recording task is written by subclassing `RecordTask`:

```python
from videopipe.record import RecordConfig, RecordStatus, RecordTask, RecordType

class CountingTask(RecordTask):
    def record_handler(self, data):
        if data is None:
            self.record_status = RecordStatus.COMPLETED

config = RecordConfig("out", "clip.mp4", RecordType.VIDEO_RECORD,
                      duration=10, src_width=640, src_height=480,
                      dst_width=640, dst_height=480)
with CountingTask(config) as task:
    task.push("frame")
    task.push(None)
```

## What this package does not do

- It does not read, decode, encode or write video or image files. There are
  no stream readers, encoders or muxers, and no ready-made recording tasks:
  `RecordTask` only supplies the queue and worker thread, and its
  `record_handler` is left to subclasses.
- It does not use a GPU. The "device" buffer of `MixMemory` and `Tensor` is
  ordinary host memory, copies between the two buffers finish at once, and
  `Timer` measures wall-clock time.
- It provides no command-line program.