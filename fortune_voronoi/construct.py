"""Entry points that turn a list of sites into a clipped Voronoi diagram."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .bbox import BoundingBox
from .clipping import clip_diagram
from .config import get_voronoi_config
from .diagram import VoronoiDiagram, freeze
from .logging_utils import apply_debug_logging
from .sweep import FortuneSweep
from .types import VoronoiError
from .validate import ValidationError, validate_bounds, validate_sites

logger = logging.getLogger(__name__)

Bounds = Union[BoundingBox, Sequence[Sequence[float]]]


@dataclass
class VoronoiResult:
    success: bool
    diagram: Optional[VoronoiDiagram] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def _coerce_bounds(bounds: Optional[Bounds]) -> Optional[BoundingBox]:
    if bounds is None:
        return None
    try:
        box = BoundingBox.coerce(bounds)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    validate_bounds(box.as_tuple())
    return box


def _build(sites, box: Optional[BoundingBox]) -> VoronoiDiagram:
    config = get_voronoi_config()
    points = validate_sites(sites, config.tolerance)
    sweep = FortuneSweep(points, config).run()
    clipped = clip_diagram(sweep, box)
    diagram = freeze(sweep, clipped)
    logger.info(
        "Built Voronoi diagram: %d sites, %d vertices, %d edges",
        len(diagram.sites),
        len(diagram.vertices),
        len(diagram.half_edges) // 2,
    )
    return diagram


def build_diagram(sites, bounds: Optional[Bounds] = None) -> VoronoiDiagram:
    """Compute the Voronoi diagram of ``sites`` clipped to a rectangle.

    ``bounds`` is a lower bound for the rectangle: it is enlarged when needed
    so that every site and every Voronoi vertex lies strictly inside.
    Raises :class:`ValidationError` for unusable input and
    :class:`~fortune_voronoi.types.ClippingError` when the diagram cannot be
    closed.
    """

    return _build(sites, _coerce_bounds(bounds))


def compute_voronoi(sites, bounds: Optional[Bounds] = None) -> VoronoiResult:
    """Like :func:`build_diagram` but reports failures in the returned result."""

    try:
        box = _coerce_bounds(bounds)
        diagram = _build(sites, box)
    except (ValidationError, VoronoiError) as exc:
        logger.warning("Voronoi construction failed: %s", exc)
        return VoronoiResult(success=False, error=f"{type(exc).__name__}: {exc}")

    warnings: List[str] = []
    if diagram.stats.degenerate_triples:
        warnings.append(f"{diagram.stats.degenerate_triples} collinear site triple(s) skipped")
    if box is not None and box != diagram.bbox:
        warnings.append(f"bounds enlarged from {box.as_tuple()} to {diagram.bbox.as_tuple()}")
    return VoronoiResult(success=True, diagram=diagram, warnings=warnings)


apply_debug_logging(globals(), logger=logger)
