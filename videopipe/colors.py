"""Colour helpers for drawing: HSV to BGR conversion and stable per-id colours."""

from __future__ import annotations

import numpy as np

_F32 = np.float32


def _to_byte(value: np.float32) -> int:
    return int(value * _F32(255)) & 0xFF


def hsv2bgr(h: float, s: float, v: float) -> tuple[int, int, int]:
    """Convert HSV components in [0, 1] to a (blue, green, red) byte triple."""
    h, s, v = _F32(h), _F32(s), _F32(v)
    one = _F32(1)
    h_i = int(h * _F32(6))
    f = h * _F32(6) - _F32(h_i)
    p = v * (one - s)
    q = v * (one - f * s)
    t = v * (one - (one - f) * s)

    choices = {
        0: (v, t, p),
        1: (q, v, p),
        2: (p, v, t),
        3: (p, q, v),
        4: (t, p, v),
        5: (v, p, q),
    }
    r, g, b = choices.get(h_i, (one, one, one))
    return _to_byte(b), _to_byte(g), _to_byte(r)


def random_color(id: int) -> tuple[int, int, int]:
    """Return a fixed, well-spread BGR colour for an integer id."""
    unsigned = id & 0xFFFFFFFF
    h_plane = _F32((((unsigned << 2) & 0xFFFFFFFF) ^ 0x937151) % 100) / _F32(100)
    s_plane = _F32((((unsigned << 3) & 0xFFFFFFFF) ^ 0x315793) % 100) / _F32(100)
    return hsv2bgr(h_plane, s_plane, 1.0)