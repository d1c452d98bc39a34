"""Motion detection between two grayscale frames under a Markov Random Field model."""
from .constants import (
    STATIC,
    MOVING,
    ORDER_1_NEIGHBOURS,
    ORDER_2_NEIGHBOURS,
    SIGMA_RATIO,
    DEFAULT_THETA,
    DEFAULT_SIGMA_S,
    DEFAULT_T,
    DEFAULT_ITERATIONS,
)
from .models import EngineParameters, NeighbourCount
from .engine import DimensionMismatch, ThresholdEngine
from .version import __version__, get_version_string

__all__ = [
    "STATIC",
    "MOVING",
    "ORDER_1_NEIGHBOURS",
    "ORDER_2_NEIGHBOURS",
    "SIGMA_RATIO",
    "DEFAULT_THETA",
    "DEFAULT_SIGMA_S",
    "DEFAULT_T",
    "DEFAULT_ITERATIONS",
    "EngineParameters",
    "NeighbourCount",
    "DimensionMismatch",
    "ThresholdEngine",
    "get_version_string",
    "__version__",
]
