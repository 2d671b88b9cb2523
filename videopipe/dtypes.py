"""Element types and data locations for tensors, with half-precision conversion."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

import numpy as np


class DataType(IntEnum):
    """Element type of a tensor."""

    UNKNOW = -1
    INT8 = 0
    INT16 = 1
    INT32 = 2
    INT64 = 3
    UINT8 = 4
    UINT16 = 5
    UINT32 = 6
    UINT64 = 7
    FP16 = 8
    FP32 = 9
    FP64 = 10


class DataHead(IntEnum):
    """Where the current copy of a tensor's data lives."""

    INIT = 0
    DEVICE = 1
    HOST = 2


_SIZES = {
    DataType.INT8: 1,
    DataType.INT16: 2,
    DataType.INT32: 4,
    DataType.INT64: 8,
    DataType.UINT8: 1,
    DataType.UINT16: 2,
    DataType.UINT32: 4,
    DataType.UINT64: 8,
    DataType.FP16: 2,
    DataType.FP32: 4,
    DataType.FP64: 8,
}

_HEAD_NAMES = {
    DataHead.INIT: "Init",
    DataHead.DEVICE: "Device",
    DataHead.HOST: "Host",
}


def _as_type(dtype: int) -> DataType | None:
    try:
        return DataType(dtype)
    except ValueError:
        return None


def type_to_string(dtype: DataType) -> str:
    """Return the upper-case name of ``dtype``, or ``"INVALID"``."""
    known = _as_type(dtype)
    if known is None or known not in _SIZES:
        return "INVALID"
    return known.name


def string_to_type(name: str) -> DataType:
    """Return the data type with the given upper-case name.

    Raises ValueError for an unknown name.
    """
    try:
        dtype = DataType[name]
    except KeyError:
        raise ValueError(f"Invalid data type: {name}") from None
    if dtype not in _SIZES:
        raise ValueError(f"Invalid data type: {name}")
    return dtype


def data_type_size(dtype: DataType | str) -> int:
    """Return the size in bytes of one element; 0 for an unknown type.

    A type name is accepted too; an unknown name raises ValueError.
    """
    if isinstance(dtype, str):
        dtype = string_to_type(dtype)
    known = _as_type(dtype)
    return _SIZES.get(known, 0) if known is not None else 0


def data_nums(shape: Iterable[int]) -> int:
    """Return the number of elements of ``shape``; every dimension must be positive."""
    total = 1
    for dim in shape:
        if dim <= 0:
            raise ValueError(f"dimensions must be positive, got {dim}")
        total *= int(dim)
    return total


def float16_to_float(value: int) -> float:
    """Convert the 16-bit pattern of a half-precision number to a float."""
    bits = np.array(int(value) & 0xFFFF, dtype=np.uint16)
    return float(bits.view(np.float16))


def float_to_float16(value: float) -> int:
    """Convert a float to the 16-bit pattern of its half-precision value."""
    half = np.array(value, dtype=np.float32).astype(np.float16)
    return int(half.view(np.uint16))


def data_head_string(head: DataHead) -> str:
    """Return the name of a data location, or ``"Unknow"``."""
    try:
        return _HEAD_NAMES[DataHead(head)]
    except ValueError:
        return "Unknow"