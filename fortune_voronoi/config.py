"""Configuration helpers for diagram construction."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass


@dataclass
class VoronoiConfig:
    """Numeric constants shared by every construction."""

    tolerance: float = 1e-9
    margin: float = 1.0
    convergence_divisor: float = 10.0

    def __post_init__(self) -> None:
        for name in ("tolerance", "margin", "convergence_divisor"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be a positive finite number (got {value!r})")
            setattr(self, name, value)


_VORONOI_CONFIG = VoronoiConfig()


def get_voronoi_config() -> VoronoiConfig:
    return copy.deepcopy(_VORONOI_CONFIG)


def set_voronoi_config(config: VoronoiConfig) -> None:
    global _VORONOI_CONFIG
    _VORONOI_CONFIG = copy.deepcopy(config)
