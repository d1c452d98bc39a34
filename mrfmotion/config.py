"""YAML configuration for the detector parameters."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict

import yaml

from .constants import DEFAULT_ITERATIONS, DEFAULT_SIGMA_S, DEFAULT_T, DEFAULT_THETA
from .models import EngineParameters

log = logging.getLogger(__name__)

_KNOWN_KEYS = {"theta", "sigma_s", "T", "temperature", "iterations"}


def load_config(path: str) -> Dict[str, Any]:
    """Read a YAML mapping of detector settings. An empty file gives {}."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    for key in sorted(set(cfg) - _KNOWN_KEYS):
        log.warning("Ignoring unknown config key %r in %s", key, path)
    log.debug("Loaded config from %s", path)
    return cfg


def resolve_settings(cfg: Dict[str, Any] | None = None, **overrides: Any) -> tuple[EngineParameters, int]:
    """
    Merge defaults, config values and explicit overrides (None means unset).

    ``temperature`` is accepted as an alias of ``T``.
    """
    cfg = dict(cfg or {})
    if "temperature" in cfg and "T" not in cfg:
        cfg["T"] = cfg["temperature"]
    settings = {
        "theta": DEFAULT_THETA,
        "sigma_s": DEFAULT_SIGMA_S,
        "T": DEFAULT_T,
        "iterations": DEFAULT_ITERATIONS,
    }
    for key in settings:
        if cfg.get(key) is not None:
            settings[key] = cfg[key]
        if overrides.get(key) is not None:
            settings[key] = overrides[key]

    params = EngineParameters(
        theta=float(settings["theta"]),
        sigma_s=float(settings["sigma_s"]),
        T=float(settings["T"]),
    )
    iterations = int(settings["iterations"])
    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    return params, iterations
