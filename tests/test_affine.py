import numpy as np
import pytest

from videopipe.affine import AffineMatrix


def _apply(mat, x, y):
    return mat @ np.array([x, y, 1.0], dtype=np.float64)


def test_scale_terms_are_uniform_and_no_shear():
    m = AffineMatrix()
    m.compute((1920, 1080), (640, 640))
    assert m.i2d[1] == 0
    assert m.i2d[3] == 0
    assert m.i2d[0] == m.i2d[4]
    expected = min(np.float32(640) / np.float32(1920), np.float32(640) / np.float32(1080))
    assert m.i2d[0] == expected


def test_identity_when_sizes_match():
    m = AffineMatrix().compute((320, 240), (320, 240))
    np.testing.assert_allclose(m.i2d_mat(), [[1, 0, 0], [0, 1, 0]], atol=1e-6)
    np.testing.assert_allclose(m.d2i_mat(), [[1, 0, 0], [0, 1, 0]], atol=1e-6)


@pytest.mark.parametrize(
    "src,dst",
    [((1920, 1080), (640, 640)), ((100, 400), (320, 320)), ((64, 48), (640, 480))],
)
def test_pixel_centres_map_to_centre(src, dst):
    m = AffineMatrix().compute(src, dst)
    cx, cy = (src[0] - 1) / 2, (src[1] - 1) / 2
    out = _apply(m.i2d_mat().astype(np.float64), cx, cy)
    np.testing.assert_allclose(out, [(dst[0] - 1) / 2, (dst[1] - 1) / 2], atol=1e-3)


@pytest.mark.parametrize(
    "src,dst", [((1920, 1080), (640, 640)), ((300, 700), (416, 416))]
)
def test_round_trip_through_inverse(src, dst):
    m = AffineMatrix().compute(src, dst)
    fwd = m.i2d_mat().astype(np.float64)
    back = m.d2i_mat().astype(np.float64)
    for x, y in [(0, 0), (10, 20), (src[0] - 1, src[1] - 1)]:
        p = _apply(fwd, x, y)
        q = _apply(back, p[0], p[1])
        np.testing.assert_allclose(q, [x, y], atol=1e-2)


def test_mat_views_share_storage():
    m = AffineMatrix().compute((200, 100), (100, 100))
    view = m.i2d_mat()
    assert view.shape == (2, 3)
    assert view[0, 2] == m.i2d[2]
    assert view[1, 2] == m.i2d[5]


def test_zero_source_size_rejected():
    with pytest.raises(ValueError):
        AffineMatrix().compute((0, 100), (640, 640))