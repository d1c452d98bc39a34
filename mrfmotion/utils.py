"""Utility functions for loading frames, saving masks and basic mask metrics."""
from __future__ import annotations

import numpy as np
import imageio.v2 as imageio

from .constants import MOVING


def _to_uint8(arr: np.ndarray) -> np.ndarray:
    """Scale 16-bit or [0, 1] float samples to 8 bits; other dtypes are rejected."""
    if arr.dtype == np.uint8:
        return arr
    if arr.dtype == np.uint16:
        return (arr >> 8).astype(np.uint8)
    if np.issubdtype(arr.dtype, np.floating):
        return np.clip(np.rint(arr * 255), 0, 255).astype(np.uint8)
    raise ValueError("Unsupported frame dtype: %s" % (arr.dtype,))


def _to_grayscale(frame: np.ndarray) -> np.ndarray:
    arr = np.asarray(frame)
    if arr.ndim == 2:
        return _to_uint8(arr)
    if arr.ndim == 3 and arr.shape[2] == 1:
        return _to_uint8(arr[..., 0])
    if arr.ndim == 3 and arr.shape[2] >= 3:
        rgb = _to_uint8(arr[..., :3]).astype(np.float32)
        gray = rgb @ np.array([0.299, 0.587, 0.114], dtype=np.float32)
        return np.clip(np.rint(gray), 0, 255).astype(np.uint8)
    raise ValueError("Unsupported frame shape for grayscale conversion: %s" % (arr.shape,))


def load_grayscale_frame(path: str) -> np.ndarray:
    """
    Read an image file and return it as an (H, W) uint8 grayscale frame.
    """
    frame = imageio.imread(path)
    return _to_grayscale(frame)


def load_frame_pair(path1: str, path2: str) -> tuple[np.ndarray, np.ndarray]:
    return load_grayscale_frame(path1), load_grayscale_frame(path2)


def save_mask(mask: np.ndarray, path: str) -> None:
    """
    Save an (H, W) uint8 mask or difference map as an image file.
    """
    if mask.ndim != 2:
        raise ValueError("mask must have shape (H, W)")
    imageio.imwrite(path, mask.astype(np.uint8, copy=False))


def changed_fraction(mask: np.ndarray) -> float:
    """Fraction of pixels marked moving."""
    if mask.size == 0:
        return 0.0
    return float(np.count_nonzero(mask == MOVING)) / mask.size
