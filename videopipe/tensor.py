"""N-dimensional tensors kept in paired host and device buffers."""

from __future__ import annotations

import struct
from typing import Any

import numpy as np
from PIL import Image

from .dtypes import DataHead, DataType, data_type_size, type_to_string
from .memory import CURRENT_DEVICE_ID, MixMemory
from .textutil import join_dims

TENSOR_MAGIC = 0xFCCFE2E2
_HEADER = struct.Struct("<IIi")
_TEXT_LIMIT = 99

_NUMPY_TYPES = {
    DataType.INT8: np.int8,
    DataType.INT16: np.int16,
    DataType.INT32: np.int32,
    DataType.INT64: np.int64,
    DataType.UINT8: np.uint8,
    DataType.UINT16: np.uint16,
    DataType.UINT32: np.uint32,
    DataType.UINT64: np.uint64,
    DataType.FP16: np.float16,
    DataType.FP32: np.float32,
    DataType.FP64: np.float64,
}


def _numpy_dtype(dtype: DataType) -> np.dtype:
    try:
        return np.dtype(_NUMPY_TYPES[dtype])
    except KeyError:
        raise TypeError(f"Unsupport type: {type_to_string(dtype)}") from None


def _parse_dims(args: tuple) -> list[int]:
    if len(args) == 1 and not isinstance(args[0], (int, np.integer)):
        return [int(d) for d in args[0]]
    return [int(d) for d in args]


def _raw_bytes(src: Any) -> memoryview:
    if isinstance(src, np.ndarray):
        src = np.ascontiguousarray(src)
    view = memoryview(src)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _resize(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Bilinearly resize an HxW or HxWxC image to ``width`` x ``height``."""
    if image.shape[0] == height and image.shape[1] == width:
        return image
    planes = image[:, :, None] if image.ndim == 2 else image
    resized = []
    for c in range(planes.shape[2]):
        plane = planes[:, :, c]
        if plane.dtype == np.uint8:
            picture = Image.fromarray(np.ascontiguousarray(plane))
        else:
            picture = Image.fromarray(np.ascontiguousarray(plane, dtype=np.float32))
        resized.append(np.asarray(picture.resize((width, height), Image.Resampling.BILINEAR)))
    result = np.stack(resized, axis=2)
    if np.issubdtype(image.dtype, np.integer):
        result = np.rint(result).astype(image.dtype)
    else:
        result = result.astype(image.dtype)
    return result if image.ndim == 3 else result[:, :, 0]


class Tensor:
    """A tensor whose data lives on the host, the device, or nowhere yet.

    Shapes may be given as separate integers or as one sequence. Data is
    moved between the two buffers on demand by :meth:`cpu` and :meth:`gpu`.
    """

    def __init__(self, *dims, dtype: DataType = DataType.FP32, data: MixMemory | None = None,
                 device_id: int = CURRENT_DEVICE_ID) -> None:
        self._dtype = DataType(dtype)
        self._shape: list[int] = []
        self._strides: list[int] = []
        self._bytes = 0
        self._head = DataHead.INIT
        self._stream: Any = None
        self._stream_owner = False
        self._shape_string = ""
        self.workspace: MixMemory | None = None
        if data is None:
            data = MixMemory(device_id)
        self._setup_data(data)
        if dims:
            self.resize(*dims)

    # ----- descriptive properties -------------------------------------------------

    @property
    def shape(self) -> tuple[int, ...]:
        """Dimensions of the tensor."""
        return tuple(self._shape)

    @property
    def ndims(self) -> int:
        """Number of dimensions."""
        return len(self._shape)

    @property
    def batch(self) -> int:
        return self._shape[0]

    @property
    def channel(self) -> int:
        return self._shape[1]

    @property
    def height(self) -> int:
        return self._shape[2]

    @property
    def width(self) -> int:
        return self._shape[3]

    @property
    def dtype(self) -> DataType:
        """Element type."""
        return self._dtype

    @property
    def strides(self) -> tuple[int, ...]:
        """Byte strides of each dimension."""
        return tuple(self._strides)

    @property
    def nbytes(self) -> int:
        """Size of the tensor's data in bytes."""
        return self._bytes

    @property
    def element_size(self) -> int:
        """Size of one element in bytes."""
        return data_type_size(self._dtype)

    @property
    def head(self) -> DataHead:
        """Where the current copy of the data lives."""
        return self._head

    @property
    def device(self) -> int:
        """Device the tensor's memory belongs to."""
        return self._device_id

    @property
    def shape_string(self) -> str:
        """The shape formatted as ``a x b x c``."""
        return self._shape_string

    @property
    def data(self) -> MixMemory:
        """The underlying host/device memory."""
        return self._data

    @property
    def stream(self) -> Any:
        return self._stream

    @property
    def stream_owner(self) -> bool:
        return self._stream_owner

    def set_stream(self, stream: Any, owner: bool = False) -> "Tensor":
        """Attach a stream handle to the tensor."""
        self._stream = stream
        self._stream_owner = owner
        return self

    def synchronize(self) -> "Tensor":
        """Wait for pending copies; copies here complete immediately."""
        return self

    # ----- sizes and shapes --------------------------------------------------------

    def numel(self) -> int:
        """Number of elements; 0 for a tensor without a shape."""
        if not self._shape:
            return 0
        value = 1
        for dim in self._shape:
            value *= dim
        return value

    def count(self, start_axis: int = 0) -> int:
        """Product of the dimensions from ``start_axis`` on, or 0 if it is out of range."""
        if not 0 <= start_axis < len(self._shape):
            return 0
        value = 1
        for dim in self._shape[start_axis:]:
            value *= dim
        return value

    def bytes_from(self, start_axis: int) -> int:
        """Bytes covered by the dimensions from ``start_axis`` on."""
        return self.count(start_axis) * self.element_size

    def offset(self, *args) -> int:
        """Flat element offset of a (possibly partial) index."""
        indices = _parse_dims(args)
        if len(indices) > len(self._shape):
            raise IndexError(
                f"{len(indices)} indices given for a tensor of {len(self._shape)} dimensions")
        value = 0
        for i in range(len(self._shape)):
            if i < len(indices):
                value += indices[i]
            if i + 1 < len(self._shape):
                value *= self._shape[i + 1]
        return value

    def resize(self, *args) -> "Tensor":
        """Set a new shape; a dimension of -1 keeps the current size of that axis."""
        dims = _parse_dims(args)
        setup: list[int] = []
        for i, dim in enumerate(dims):
            if dim == -1:
                if len(dims) != len(self._shape):
                    raise ValueError("-1 needs as many dimensions as the current shape")
                dim = self._shape[i]
            setup.append(dim)
        self._shape = setup

        strides = [0] * len(setup)
        stride = self.element_size
        for i in range(len(setup) - 1, -1, -1):
            strides[i] = stride
            stride *= setup[i]
        self._strides = strides

        self._adjust_memory()
        self._shape_string = join_dims(self._shape)[:_TEXT_LIMIT]
        return self

    def resize_single_dim(self, idim: int, size: int) -> "Tensor":
        """Change the size of one dimension."""
        if not 0 <= idim < len(self._shape):
            raise IndexError(f"dimension {idim} out of range")
        new_shape = list(self._shape)
        new_shape[idim] = size
        return self.resize(new_shape)

    def _adjust_memory(self) -> None:
        needed = self.numel() * self.element_size
        if needed > self._bytes:
            self._head = DataHead.INIT
        self._bytes = needed

    def _setup_data(self, data: MixMemory) -> None:
        self._data = data
        self._device_id = data.device_id
        self._head = DataHead.INIT
        if data.cpu() is not None:
            self._head = DataHead.HOST
        if data.gpu() is not None:
            self._head = DataHead.DEVICE

    # ----- memory movement ----------------------------------------------------------

    def to_gpu(self, copy: bool = True) -> "Tensor":
        """Make the device copy current, copying host data over if asked."""
        if self._head == DataHead.DEVICE:
            return self
        self._head = DataHead.DEVICE
        gpu = self._data.gpu(self._bytes)
        cpu = self._data.cpu()
        if copy and cpu is not None and gpu is not None:
            n = min(self._bytes, len(cpu), len(gpu))
            gpu[:n] = cpu[:n]
        return self

    def to_cpu(self, copy: bool = True) -> "Tensor":
        """Make the host copy current, copying device data over if asked."""
        if self._head == DataHead.HOST:
            return self
        self._head = DataHead.HOST
        cpu = self._data.cpu(self._bytes)
        gpu = self._data.gpu()
        if copy and gpu is not None and cpu is not None:
            n = min(self._bytes, len(cpu), len(gpu))
            cpu[:n] = gpu[:n]
        return self

    def _typed_view(self, buffer: memoryview | None) -> np.ndarray:
        dt = _numpy_dtype(self._dtype)
        if buffer is None or not self._shape:
            return np.empty(0, dtype=dt)
        return np.frombuffer(buffer, dtype=dt, count=self.numel()).reshape(self._shape)

    def cpu(self, *args) -> np.ndarray:
        """Return a writable array over the host data, indexed by ``args`` if given."""
        self.to_cpu()
        array = self._typed_view(self._data.cpu())
        return array[args] if args else array

    def gpu(self, *args) -> np.ndarray:
        """Return a writable array over the device data, indexed by ``args`` if given."""
        self.to_gpu()
        array = self._typed_view(self._data.gpu())
        return array[args] if args else array

    def clone(self) -> "Tensor":
        """Return a new tensor with the same shape, type and data."""
        new_tensor = Tensor(self._shape, dtype=self._dtype)
        if self._head == DataHead.HOST:
            new_tensor.to_cpu(False)
            source = self._data.cpu()
            target = new_tensor.data.cpu()
        elif self._head == DataHead.DEVICE:
            new_tensor.to_gpu(False)
            source = self._data.gpu()
            target = new_tensor.data.gpu()
        else:
            return new_tensor
        if source is not None and target is not None:
            target[:self._bytes] = source[:self._bytes]
        return new_tensor

    def release(self) -> "Tensor":
        """Drop all memory and the shape."""
        self._data.release_all()
        self._shape = []
        self._strides = []
        self._bytes = 0
        self._head = DataHead.INIT
        self._stream_owner = False
        self._stream = None
        return self

    def empty(self) -> bool:
        """True when neither host nor device memory is present."""
        return self._data.cpu() is None and self._data.gpu() is None

    # ----- value manipulation ------------------------------------------------------

    def set_to(self, value: float) -> "Tensor":
        """Fill the tensor with ``value`` (FP32, FP16, INT32 and UINT8 only)."""
        c = self.count()
        if self._dtype == DataType.FP32:
            fill: Any = np.float32(value)
        elif self._dtype == DataType.FP16:
            fill = np.float16(value)
        elif self._dtype == DataType.INT32:
            fill = int(value)
        elif self._dtype == DataType.UINT8:
            fill = int(value) & 0xFF
        else:
            raise TypeError(f"Unsupport type: {type_to_string(self._dtype)}")
        self.cpu().reshape(-1)[:c] = fill
        return self

    def _convert(self, source: DataType, target: DataType, np_target: type) -> "Tensor":
        if self._dtype == target:
            return self
        if self._dtype != source:
            raise TypeError(
                f"cannot convert {type_to_string(self._dtype)} to {type_to_string(target)}")
        c = self.count()
        converted = self.cpu().reshape(-1)[:c].astype(np_target)
        self._dtype = target
        self._adjust_memory()
        self.to_cpu(False)
        self._typed_view(self._data.cpu()).reshape(-1)[:c] = converted
        return self

    def to_half(self) -> "Tensor":
        """Convert FP32 data to FP16 in place."""
        return self._convert(DataType.FP32, DataType.FP16, np.float16)

    def to_float(self) -> "Tensor":
        """Convert FP16 data to FP32 in place."""
        return self._convert(DataType.FP16, DataType.FP32, np.float32)

    def _check_image_target(self, n: int) -> None:
        if self._dtype != DataType.FP32:
            raise TypeError("image data needs an FP32 tensor")
        if self.ndims != 4 or not 0 <= n < self._shape[0]:
            raise ValueError(f"batch index {n} does not fit tensor of shape {self.shape}")

    def set_mat(self, n: int, image: np.ndarray) -> "Tensor":
        """Store a float32 HxW or HxWxC image as planar channels of batch item ``n``."""
        image = np.asarray(image)
        if image.size == 0 or image.dtype != np.float32 or image.ndim not in (2, 3):
            raise ValueError("image must be a non-empty float32 HxW or HxWxC array")
        self._check_image_target(n)
        channels = 1 if image.ndim == 2 else image.shape[2]
        if channels != self._shape[1]:
            raise ValueError(f"image has {channels} channels, tensor has {self._shape[1]}")
        self.to_cpu(False)
        height, width = self._shape[2], self._shape[3]
        frame = _resize(image, width, height).reshape(height, width, channels)
        self.cpu(n)[...] = np.moveaxis(frame, 2, 0)
        return self

    def set_norm_mat(self, n: int, image: np.ndarray, mean, std) -> "Tensor":
        """Store a 3-channel image as ``(pixel - mean) / std`` planes of batch item ``n``.

        Images that are not float32 are scaled by 1/255 first.
        """
        image = np.asarray(image)
        if image.size == 0 or image.ndim != 3 or image.shape[2] != 3:
            raise ValueError("image must be a non-empty HxWx3 array")
        self._check_image_target(n)
        self.to_cpu(False)
        height, width = self._shape[2], self._shape[3]
        frame = _resize(image, width, height)
        if frame.dtype != np.float32:
            frame = frame.astype(np.float32) * np.float32(1 / 255.0)
        host = self.cpu(n)
        for c in range(3):
            host[c] = (frame[:, :, c] - np.float32(mean[c])) / np.float32(std[c])
        return self

    def at_mat(self, n: int = 0, c: int = 0) -> np.ndarray:
        """Return the HxW float32 plane of batch item ``n``, channel ``c``."""
        if self._dtype != DataType.FP32:
            raise TypeError("image planes need an FP32 tensor")
        if self.ndims != 4:
            raise ValueError("image planes need a 4-dimensional tensor")
        return self.cpu(n, c)

    def descriptor(self) -> str:
        """Short description: memory identity, type, shape and device."""
        text = (f"Tensor:0x{id(self._data):x}, {type_to_string(self._dtype)}, "
                f"{self._shape_string}, CUDA:{self._device_id}")
        return text[:_TEXT_LIMIT]

    # ----- copying in --------------------------------------------------------------

    def _check_copy(self, offset: int, src: Any, num_element: int) -> tuple[int, memoryview]:
        start = offset * self.element_size
        if start >= self._bytes:
            raise IndexError(f"Offset location[{start}] >= bytes_[{self._bytes}], out of range")
        copied = num_element * self.element_size
        remain = self._bytes - start
        if copied > remain:
            raise IndexError(f"Copyed bytes[{copied}] > remain bytes[{remain}], out of range")
        raw = _raw_bytes(src)
        if len(raw) < copied:
            raise ValueError(f"source holds {len(raw)} bytes, {copied} needed")
        return start, raw[:copied]

    def _copy_into_current(self, start: int, raw: memoryview) -> None:
        if self._head == DataHead.DEVICE:
            buffer = self._data.gpu()
        elif self._head == DataHead.HOST:
            buffer = self._data.cpu()
        else:
            raise RuntimeError(f"Unsupport head type {self._head}")
        buffer[start:start + len(raw)] = raw

    def copy_from_gpu(self, offset: int, src: Any, num_element: int) -> "Tensor":
        """Copy ``num_element`` elements of device data into the tensor at ``offset``."""
        if self._head == DataHead.INIT:
            self.to_gpu(False)
        start, raw = self._check_copy(offset, src, num_element)
        self._copy_into_current(start, raw)
        return self

    def copy_from_cpu(self, offset: int, src: Any, num_element: int) -> "Tensor":
        """Copy ``num_element`` elements of host data into the tensor at ``offset``."""
        if self._head == DataHead.INIT:
            self.to_cpu(False)
        start, raw = self._check_copy(offset, src, num_element)
        self._copy_into_current(start, raw)
        return self

    def reference_data(self, shape, cpu_data=None, gpu_data=None,
                       dtype: DataType = DataType.FP32) -> "Tensor":
        """Use existing buffers as the tensor's memory, with the given shape and type."""
        self._dtype = DataType(dtype)
        self._data.reference_data(cpu_data, gpu_data)
        self._setup_data(self._data)
        self.resize(list(shape))
        return self

    # ----- files -------------------------------------------------------------------

    def save_to_file(self, path: str) -> None:
        """Write the tensor as magic, ndims, dtype, int64 dims and raw data."""
        if self.empty():
            raise ValueError("cannot save an empty tensor")
        self.to_cpu()
        host = self._data.cpu()
        payload = bytes(host[:self._bytes]) if host is not None else b""
        header = _HEADER.pack(TENSOR_MAGIC, self.ndims, int(self._dtype))
        dims = struct.pack(f"<{self.ndims}q", *self._shape)
        with open(path, "wb") as handle:
            handle.write(header)
            handle.write(dims)
            handle.write(payload)

    def load_from_file(self, path: str) -> "Tensor":
        """Read a tensor written by :meth:`save_to_file` into this one."""
        with open(path, "rb") as handle:
            raw = handle.read()
        if len(raw) < _HEADER.size:
            raise ValueError(f"Invalid tensor file {path}, header too short")
        magic, ndims, dtype_code = _HEADER.unpack_from(raw)
        if magic != TENSOR_MAGIC:
            raise ValueError(f"Invalid tensor file {path}, magic number mismatch")
        try:
            dtype = DataType(dtype_code)
        except ValueError:
            raise ValueError(f"Invalid tensor file {path}, unknown dtype {dtype_code}") from None
        dims_end = _HEADER.size + 8 * ndims
        if len(raw) < dims_end:
            raise ValueError(f"Invalid tensor file {path}, dimensions truncated")
        dims = struct.unpack_from(f"<{ndims}q", raw, _HEADER.size)

        self._dtype = dtype
        self.resize(list(dims))
        payload = raw[dims_end:dims_end + self._bytes]
        if len(payload) < self._bytes:
            raise ValueError(f"Invalid tensor file {path}, data truncated")
        self.to_cpu()
        host = self._data.cpu()
        if host is not None:
            host[:self._bytes] = payload
        return self