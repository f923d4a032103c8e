import math
from typing import List, Sequence

import numpy as np
from scipy.spatial import cKDTree

from .geometry import EPSILON
from .types import Point


class ValidationError(Exception):
    pass


def _ensure_shape(array: np.ndarray) -> None:
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValidationError(f'sites must be an (n, 2) array of coordinates, got shape {array.shape}')
    if array.shape[0] == 0:
        raise ValidationError('at least one site is required')


def _ensure_finite(array: np.ndarray) -> None:
    bad = np.flatnonzero(~np.isfinite(array).all(axis=1))
    if bad.size:
        raise ValidationError(f'site {int(bad[0])} has a non-finite coordinate: {array[bad[0]].tolist()}')


def _ensure_distinct(array: np.ndarray, eps: float) -> None:
    if array.shape[0] < 2:
        return
    # coincidence is judged against the size of the input, so scaled-down
    # layouts keep their distinct sites
    extent = float(np.ptp(array, axis=0).max())
    magnitude = float(np.abs(array).max())
    radius = eps * (max(extent, magnitude) or 1.0)
    pairs = cKDTree(array).query_pairs(radius, output_type='ndarray')
    if len(pairs):
        i, j = sorted(int(k) for k in pairs[0])
        raise ValidationError(
            f'sites {i} and {j} coincide at ({array[i, 0]:.6g}, {array[i, 1]:.6g}); sites must be distinct'
        )


def validate_sites(sites, eps: float = EPSILON) -> List[Point]:
    """Coerce ``sites`` into a list of float pairs, rejecting unusable input."""

    try:
        array = np.asarray(sites, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f'sites must be numeric coordinate pairs: {exc}') from exc
    if array.size == 0:
        raise ValidationError('at least one site is required')
    _ensure_shape(array)
    _ensure_finite(array)
    _ensure_distinct(array, eps)
    return [(float(x), float(y)) for x, y in array]


def validate_bounds(bounds: Sequence[float]) -> None:
    xmin, ymin, xmax, ymax = bounds
    if not all(math.isfinite(v) for v in bounds):
        raise ValidationError(f'bounds must be finite, got {tuple(bounds)}')
    if xmin >= xmax or ymin >= ymax:
        raise ValidationError(f'bounds must satisfy xmin < xmax and ymin < ymax, got {tuple(bounds)}')
