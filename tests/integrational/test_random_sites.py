from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pytest
from scipy.spatial import Voronoi, cKDTree

from fortune_voronoi import build_diagram, compute_voronoi


@dataclass
class RandomCase:
    case_id: str
    seed: int
    count: int
    scale: float = 100.0
    offset: float = 0.0
    grid: Optional[int] = None

    def sites(self) -> np.ndarray:
        rng = np.random.default_rng(self.seed)
        if self.grid is not None:
            # jittered lattice: nearly co-circular quadruples everywhere
            xs, ys = np.meshgrid(np.arange(self.grid), np.arange(self.grid))
            base = np.column_stack([xs.ravel(), ys.ravel()]).astype(float)
            return base * self.scale + rng.uniform(-1e-3, 1e-3, size=base.shape) * self.scale
        return rng.uniform(0.0, self.scale, size=(self.count, 2)) + self.offset


CASES = [
    RandomCase("uniform-small", seed=11, count=12),
    RandomCase("uniform-medium", seed=12, count=150),
    RandomCase("uniform-large", seed=13, count=400),
    RandomCase("unit-square", seed=14, count=200, scale=1.0),
    RandomCase("far-from-origin", seed=15, count=120, scale=50.0, offset=1000.0),
    RandomCase("jittered-grid", seed=16, count=0, scale=10.0, grid=7),
    RandomCase("tiny-scale", seed=17, count=60, scale=1e-4),
]


def _reference_vertices(sites: np.ndarray) -> np.ndarray:
    return Voronoi(sites).vertices


@pytest.mark.parametrize("case", CASES, ids=lambda case: case.case_id)
def test_vertices_match_scipy(case: RandomCase):
    sites = case.sites()
    diagram = build_diagram(sites)

    ours = np.asarray(diagram.voronoi_vertices(), dtype=float).reshape(-1, 2)
    reference = _reference_vertices(sites)
    tol = 1e-6 * max(float(np.ptp(sites, axis=0).max()), float(np.abs(sites).max()))

    assert len(ours) == len(reference)
    distances, _ = cKDTree(ours).query(reference)
    assert float(distances.max()) <= tol
    distances, _ = cKDTree(reference).query(ours)
    assert float(distances.max()) <= tol


@pytest.mark.parametrize("case", CASES, ids=lambda case: case.case_id)
def test_topology_and_area(case: RandomCase):
    sites = case.sites()
    result = compute_voronoi(sites)

    assert result.success, result.error
    diagram = result.diagram
    assert diagram.euler_characteristic() == 2
    assert len(diagram.faces) == len(sites)
    area = sum(diagram.cell_area(idx) for idx in range(len(sites)))
    assert math.isclose(area, diagram.bbox.width * diagram.bbox.height, rel_tol=1e-8)
    for idx in range(len(sites)):
        assert diagram.locate(tuple(sites[idx])) == idx
