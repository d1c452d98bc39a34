"""Timing and memory profile of the four detector operations."""
from __future__ import annotations

import json
import sys
import time
import tracemalloc
from pathlib import Path

import numpy as np

from .constants import DEFAULT_ITERATIONS
from .engine import ThresholdEngine
from .version import __version__


def synthetic_pair(height: int, width: int, seed: int = 0) -> tuple[np.ndarray, np.ndarray]:
    """
    Two noisy frames of the same background; a bright square moves by a few
    pixels between them.
    """
    rng = np.random.default_rng(seed)
    background = rng.integers(60, 140, size=(height, width)).astype(np.int16)
    frames = []
    for shift in (0, max(1, width // 16)):
        frame = background + rng.normal(0.0, 1.0, size=(height, width))
        side = max(1, min(height, width) // 4)
        y0 = (height - side) // 2
        x0 = min(width - side, width // 4 + shift)
        frame[y0 : y0 + side, x0 : x0 + side] = 230
        frames.append(np.clip(np.rint(frame), 0, 255).astype(np.uint8))
    return frames[0], frames[1]


def _measure(fn, *args) -> dict:
    tracemalloc.start()
    t0 = time.perf_counter()
    out = fn(*args)
    elapsed = time.perf_counter() - t0
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return {
        "time_sec": elapsed,
        "tracemalloc_peak_bytes": peak,
        "nonzero": int(np.count_nonzero(out)),
    }


def run_bench(
    engine: ThresholdEngine,
    height: int = 288,
    width: int = 352,
    iterations: int = DEFAULT_ITERATIONS,
    seed: int = 0,
) -> dict:
    img1, img2 = synthetic_pair(height, width, seed)
    result = {
        "size": [height, width],
        "iterations": iterations,
        "params": {"theta": engine.theta, "sigma_s": engine.sigma_s, "T": engine.T},
        "abs_difference": _measure(engine.abs_difference, img1, img2),
        "fixed_threshold": _measure(engine.fixed_threshold, img1, img2),
        "variable_threshold1": _measure(engine.variable_threshold1, img1, img2, iterations),
        "variable_threshold2": _measure(engine.variable_threshold2, img1, img2, iterations),
    }
    result["env"] = {
        "python": sys.version,
        "platform": sys.platform,
        "numpy": np.__version__,
        "mrfmotion": __version__,
    }
    return result


def write_bench(result: dict, out: Path) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2)
