"""Letterbox affine transform between an image and a network input."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _zeros() -> np.ndarray:
    return np.zeros(6, dtype=np.float32)


def _invert_affine(m: np.ndarray) -> np.ndarray:
    a, b, c, d, e, f = (float(x) for x in m)
    det = a * e - b * d
    inv = 1.0 / det if det != 0.0 else 0.0
    a11, a22 = e * inv, a * inv
    a12, a21 = -b * inv, -d * inv
    b1 = -a11 * c - a12 * f
    b2 = -a21 * c - a22 * f
    return np.array([a11, a12, b1, a21, a22, b2], dtype=np.float32)


@dataclass
class AffineMatrix:
    """A pair of 2x3 affine matrices: image to destination and back.

    Both are stored flat as six float32 values in row-major order.
    """

    i2d: np.ndarray = field(default_factory=_zeros)
    d2i: np.ndarray = field(default_factory=_zeros)

    def compute(self, from_size: tuple[int, int], to_size: tuple[int, int]) -> "AffineMatrix":
        """Fit ``from_size`` into ``to_size`` keeping aspect ratio, centred.

        Sizes are ``(width, height)``. The half-pixel terms align pixel centres.
        """
        from_w, from_h = (int(v) for v in from_size)
        to_w, to_h = (int(v) for v in to_size)
        if from_w <= 0 or from_h <= 0:
            raise ValueError(f"source size must be positive, got {from_size!r}")

        scale_x = np.float32(to_w) / np.float32(from_w)
        scale_y = np.float32(to_h) / np.float32(from_h)
        scale = float(min(scale_x, scale_y))

        self.i2d = np.array(
            [
                scale,
                0.0,
                -scale * from_w * 0.5 + to_w * 0.5 + scale * 0.5 - 0.5,
                0.0,
                scale,
                -scale * from_h * 0.5 + to_h * 0.5 + scale * 0.5 - 0.5,
            ],
            dtype=np.float32,
        )
        self.d2i = _invert_affine(self.i2d)
        return self

    def i2d_mat(self) -> np.ndarray:
        """Return the image-to-destination matrix as a 2x3 view."""
        return self.i2d.reshape(2, 3)

    def d2i_mat(self) -> np.ndarray:
        """Return the destination-to-image matrix as a 2x3 view."""
        return self.d2i.reshape(2, 3)