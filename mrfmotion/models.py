"""Gaussian hypothesis-test model shared by the threshold classifiers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from .constants import DEFAULT_SIGMA_S, DEFAULT_T, DEFAULT_THETA, SIGMA_RATIO


class NeighbourCount(NamedTuple):
    qs: int  # static neighbours
    qm: int  # moving neighbours


@dataclass(frozen=True)
class EngineParameters:
    """
    theta: prior odds factor, sigma_s: static-pixel noise deviation,
    T: temperature weighting the neighbour term.
    """

    theta: float = DEFAULT_THETA
    sigma_s: float = DEFAULT_SIGMA_S
    T: float = DEFAULT_T

    def __post_init__(self) -> None:
        if self.theta <= 0:
            raise ValueError("theta must be positive")
        if self.sigma_s <= 0:
            raise ValueError("sigma_s must be positive")
        if self.T == 0:
            raise ValueError("T must be non-zero")

    @property
    def sigma_m(self) -> float:
        return SIGMA_RATIO * self.sigma_s

    @property
    def log_prior(self) -> float:
        return math.log(self.theta * self.sigma_m / self.sigma_s)

    @property
    def fixed_threshold(self) -> float:
        """Threshold on diff**2 in the T -> inf limit."""
        return 2.0 * self.sigma_s**2 * self.log_prior


def local_threshold(params: EngineParameters, balance):
    """
    Threshold on diff**2 for a pixel whose neighbourhood has
    ``balance = qs - qm``:

        2 * sigma_s**2 * (ln(theta * sigma_m / sigma_s) + (qs - qm) / T)

    ``balance`` may be an int or an integer ndarray.
    """
    return 2.0 * params.sigma_s**2 * (params.log_prior + balance / params.T)


def squared_difference(diff: np.ndarray) -> np.ndarray:
    """Return diff**2 as int64 so 255**2 does not wrap."""
    d = diff.astype(np.int64)
    return d * d
