from __future__ import annotations

import imageio.v2 as imageio
import numpy as np
import pytest

from mrfmotion.utils import _to_grayscale, changed_fraction, load_frame_pair, load_grayscale_frame, save_mask


def test_to_grayscale():
    gray = np.arange(12, dtype=np.uint8).reshape(3, 4)
    assert _to_grayscale(gray) is gray
    assert np.array_equal(_to_grayscale(gray[..., None]), gray)

    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[0, 0] = (255, 255, 255)
    rgb[1, 1] = (255, 0, 0)
    out = _to_grayscale(rgb)
    assert out.dtype == np.uint8
    assert out[0, 0] == 255
    assert out[1, 1] == 76
    assert out[0, 1] == 0

    with pytest.raises(ValueError):
        _to_grayscale(np.zeros((2, 2, 2), dtype=np.uint8))


def test_save_and_load_roundtrip(tmp_path):
    mask = np.zeros((5, 6), dtype=np.uint8)
    mask[1:3, 2:5] = 255
    p1 = tmp_path / "a.png"
    p2 = tmp_path / "b.png"
    save_mask(mask, str(p1))
    save_mask(255 - mask, str(p2))
    loaded = load_grayscale_frame(str(p1))
    assert loaded.shape == (5, 6)
    assert np.array_equal(loaded, mask)
    a, b = load_frame_pair(str(p1), str(p2))
    assert np.array_equal(b, 255 - mask)

    with pytest.raises(ValueError):
        save_mask(np.zeros((2, 2, 3), dtype=np.uint8), str(tmp_path / "c.png"))


def test_changed_fraction():
    mask = np.zeros((4, 5), dtype=np.uint8)
    mask[0, :] = 255
    assert changed_fraction(mask) == pytest.approx(0.25)
    assert changed_fraction(np.zeros((0, 3), dtype=np.uint8)) == 0.0


def test_sixteen_bit_frame_roundtrip(tmp_path):
    deep = np.full((4, 4), 51200, dtype=np.uint16)
    deep[0, 0] = 65535
    deep[1, 1] = 255
    path = tmp_path / "deep.tif"
    imageio.imwrite(path, deep)
    loaded = load_grayscale_frame(str(path))
    assert loaded.dtype == np.uint8
    assert loaded[2, 2] == 200
    assert loaded[0, 0] == 255
    assert loaded[1, 1] == 0


def test_to_grayscale_scales_other_depths():
    rgb16 = np.zeros((1, 2, 3), dtype=np.uint16)
    rgb16[0, 0] = (65535, 65535, 65535)
    assert _to_grayscale(rgb16).tolist() == [[255, 0]]

    unit = np.array([[0.0, 0.5, 1.0, 1.2]], dtype=np.float32)
    assert _to_grayscale(unit).tolist() == [[0, 128, 255, 255]]

    with pytest.raises(ValueError):
        _to_grayscale(np.zeros((2, 2), dtype=np.int32))
