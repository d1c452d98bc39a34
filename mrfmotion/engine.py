"""
Threshold engine for MRF motion detection between two grayscale frames.

Assuming Gaussian intensity differences for both static and moving pixels, the
binary hypothesis test for a pixel with difference psi reduces to

    psi**2  ><  2 * sigma_s**2 * (ln(theta * sigma_m / sigma_s) + (Qs - Qm) / T)

where Qs/Qm count the static/moving pixels in its neighbourhood and
sigma_m = 5 * sigma_s. Letting T -> inf gives the fixed threshold; a first
order MRF counts the 4 axis-aligned neighbours, a second order MRF all 8.
"""
from __future__ import annotations

import logging

import numpy as np

from .constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_SIGMA_S,
    DEFAULT_T,
    DEFAULT_THETA,
    MOVING,
    ORDER_1_NEIGHBOURS,
    ORDER_2_NEIGHBOURS,
    STATIC,
)
from .models import EngineParameters, NeighbourCount, local_threshold, squared_difference

log = logging.getLogger(__name__)

_OFFSETS = {
    ORDER_1_NEIGHBOURS: ((-1, 0), (0, -1), (0, 1), (1, 0)),
    ORDER_2_NEIGHBOURS: (
        (-1, -1), (-1, 0), (-1, 1),
        (0, -1), (0, 1),
        (1, -1), (1, 0), (1, 1),
    ),
}
_LEFT = (0, -1)


class DimensionMismatch(ValueError):
    """Raised when the two input frames differ in width or height."""

    def __init__(self, shape_a: tuple, shape_b: tuple):
        super().__init__(f"Frames should be of same size: {shape_a} vs {shape_b}")
        self.shape_a = shape_a
        self.shape_b = shape_b


def neighbour_offsets(num_neighbours: int) -> tuple[tuple[int, int], ...]:
    try:
        return _OFFSETS[num_neighbours]
    except KeyError:
        raise ValueError(
            f"num_neighbours must be {ORDER_1_NEIGHBOURS} or {ORDER_2_NEIGHBOURS}, got {num_neighbours}"
        ) from None


def _check_pair(img1, img2) -> tuple[np.ndarray, np.ndarray]:
    a = np.asarray(img1)
    b = np.asarray(img2)
    if a.shape != b.shape:
        raise DimensionMismatch(a.shape, b.shape)
    if a.ndim != 2:
        raise ValueError("Frames must be 2-D grayscale, got shape %s" % (a.shape,))
    if a.dtype != np.uint8 or b.dtype != np.uint8:
        raise ValueError("Frames must be uint8, got %s and %s" % (a.dtype, b.dtype))
    return a, b


def _pad(arr: np.ndarray) -> np.ndarray:
    padded = np.zeros((arr.shape[0] + 2, arr.shape[1] + 2), dtype=np.int64)
    padded[1:-1, 1:-1] = arr
    return padded


def _neighbour_sum(padded: np.ndarray, offsets, top: int, height: int) -> np.ndarray:
    """Sum ``padded`` over ``offsets`` for image rows top..top+height-1."""
    W = padded.shape[1] - 2
    total = np.zeros((height, W), dtype=np.int64)
    for di, dj in offsets:
        r0 = top + 1 + di
        c0 = 1 + dj
        total += padded[r0 : r0 + height, c0 : c0 + W]
    return total


class ThresholdEngine:
    """
    Motion detection between two frames with a fixed or MRF-adaptive threshold.

    Example:
        engine = ThresholdEngine(theta=1.0, sigma_s=1.22, T=2.0)
        diff = engine.abs_difference(frame1, frame2)
        fixed = engine.fixed_threshold(frame1, frame2)
        mrf1 = engine.variable_threshold1(frame1, frame2, iterations=5)
        mrf2 = engine.variable_threshold2(frame1, frame2, iterations=5)
    """

    def __init__(self, theta: float = DEFAULT_THETA, sigma_s: float = DEFAULT_SIGMA_S, T: float = DEFAULT_T):
        self.params = EngineParameters(theta=theta, sigma_s=sigma_s, T=T)

    @classmethod
    def from_parameters(cls, params: EngineParameters) -> "ThresholdEngine":
        return cls(theta=params.theta, sigma_s=params.sigma_s, T=params.T)

    def __repr__(self) -> str:
        p = self.params
        return f"ThresholdEngine(theta={p.theta}, sigma_s={p.sigma_s}, T={p.T})"

    @property
    def theta(self) -> float:
        return self.params.theta

    @property
    def sigma_s(self) -> float:
        return self.params.sigma_s

    @property
    def T(self) -> float:
        return self.params.T

    def abs_difference(self, img1, img2) -> np.ndarray:
        """
        Absolute difference between the frame at t_k (img1) and t_k+1 (img2).
        Motion areas are non-zero.
        """
        a, b = _check_pair(img1, img2)
        return np.abs(b.astype(np.int16) - a.astype(np.int16)).astype(np.uint8)

    def fixed_threshold(self, img1, img2) -> np.ndarray:
        """Mask from the T -> inf hypothesis test: one global threshold."""
        diff = self.abs_difference(img1, img2)
        threshold = self.params.fixed_threshold
        log.info("Threshold: %.6f", threshold)
        moving = squared_difference(diff) > threshold
        return np.where(moving, MOVING, STATIC).astype(np.uint8)

    def get_neighbour_count(self, img, row: int, col: int, num_neighbours: int) -> NeighbourCount:
        """
        Count the static (zero) and moving (non-zero) neighbours of (row, col).

        ``num_neighbours`` is 4 (first order) or 8 (second order). Neighbours
        outside the image are skipped, so border pixels see fewer of them.
        """
        offsets = neighbour_offsets(num_neighbours)
        H, W = img.shape[:2]
        qs = qm = 0
        for di, dj in offsets:
            r = row + di
            c = col + dj
            if r < 0 or r >= H or c < 0 or c >= W:
                continue
            if img[r, c] != 0:
                qm += 1
            else:
                qs += 1
        return NeighbourCount(qs=qs, qm=qm)

    def variable_threshold1(self, img1, img2, iterations: int = DEFAULT_ITERATIONS) -> np.ndarray:
        """Adaptive threshold with a first order MRF (4 neighbours)."""
        return self.variable_threshold(img1, img2, ORDER_1_NEIGHBOURS, iterations)

    def variable_threshold2(self, img1, img2, iterations: int = DEFAULT_ITERATIONS) -> np.ndarray:
        """Adaptive threshold with a second order MRF (8 neighbours)."""
        return self.variable_threshold(img1, img2, ORDER_2_NEIGHBOURS, iterations)

    def variable_threshold(
        self,
        img1,
        img2,
        num_neighbours: int,
        iterations: int = DEFAULT_ITERATIONS,
        synchronous: bool = False,
    ) -> np.ndarray:
        """
        Adaptive MRF threshold shared by both neighbourhood orders.

        The working mask is seeded with the raw absolute difference, so the first
        round treats every non-zero difference as a moving neighbour. Each round
        visits pixels in row-major order and overwrites the mask in place: a pixel
        sees this round's decision for neighbours above and to its left and last
        round's for the rest. ``synchronous=True`` instead updates every pixel from
        the previous round's mask; the two modes give different results.

        The local threshold is always compared against the original difference,
        never against the evolving mask. Exactly ``iterations`` rounds run; with
        ``iterations=0`` the seed (a copy of the difference map) is returned.
        """
        if iterations < 0:
            raise ValueError("iterations must be >= 0")
        offsets = neighbour_offsets(num_neighbours)
        diff = self.abs_difference(img1, img2)
        if iterations == 0:
            return diff.copy()

        psi = squared_difference(diff)
        state = _pad(diff != 0)
        inside = _pad(np.ones(diff.shape, dtype=bool))
        for it in range(iterations):
            if synchronous:
                self._round_synchronous(psi, state, inside, offsets)
            else:
                self._round_in_place(psi, state, inside, offsets)
            log.debug(
                "MRF order %d round %d/%d: %d moving pixels",
                1 if num_neighbours == ORDER_1_NEIGHBOURS else 2,
                it + 1,
                iterations,
                int(state.sum()),
            )
        return np.where(state[1:-1, 1:-1] != 0, MOVING, STATIC).astype(np.uint8)

    def _round_synchronous(self, psi, state, inside, offsets) -> None:
        H = psi.shape[0]
        qm = _neighbour_sum(state, offsets, 0, H)
        n = _neighbour_sum(inside, offsets, 0, H)
        state[1:-1, 1:-1] = psi > local_threshold(self.params, n - 2 * qm)

    def _round_in_place(self, psi, state, inside, offsets) -> None:
        # Within row i, only the left neighbour has changed since the row began;
        # rows above already hold this round's decisions, rows below last round's.
        # Everything but the left neighbour is summed per row, and the decision
        # for each left-neighbour state is precomputed, leaving a scan along j.
        others = [o for o in offsets if o != _LEFT]
        H, W = psi.shape
        if W == 0:
            return
        for i in range(H):
            qm = _neighbour_sum(state, others, i, 1)[0]
            n = _neighbour_sum(inside, others, i, 1)[0]
            balance = n - 2 * qm
            row_psi = psi[i]
            first = bool(row_psi[0] > local_threshold(self.params, int(balance[0])))
            if_left_static = (row_psi > local_threshold(self.params, balance + 1)).tolist()
            if_left_moving = (row_psi > local_threshold(self.params, balance - 1)).tolist()

            decided = [first]
            prev = first
            for j in range(1, W):
                prev = if_left_moving[j] if prev else if_left_static[j]
                decided.append(prev)
            state[i + 1, 1:-1] = decided
