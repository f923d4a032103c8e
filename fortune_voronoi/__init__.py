from .types import OPEN, OUTER_FACE, ClippingError, Point, Segment, VoronoiError
from .config import VoronoiConfig, get_voronoi_config, set_voronoi_config
from .validate import ValidationError, validate_sites
from .bbox import BoundingBox, Side
from .events import CircleEvent, EventQueue, SiteEvent
from .dcel import DCEL
from .beachline import Arc, Beachline, Breakpoint
from .sweep import FortuneSweep, SweepStats
from .clipping import clip_diagram
from .diagram import VoronoiDiagram, freeze
from .construct import VoronoiResult, build_diagram, compute_voronoi

__all__ = [
    'OPEN',
    'OUTER_FACE',
    'Point',
    'Segment',
    'VoronoiError',
    'ClippingError',
    'ValidationError',
    'validate_sites',
    'VoronoiConfig',
    'get_voronoi_config',
    'set_voronoi_config',
    'BoundingBox',
    'Side',
    'CircleEvent',
    'EventQueue',
    'SiteEvent',
    'DCEL',
    'Arc',
    'Beachline',
    'Breakpoint',
    'FortuneSweep',
    'SweepStats',
    'clip_diagram',
    'VoronoiDiagram',
    'freeze',
    'VoronoiResult',
    'build_diagram',
    'compute_voronoi',
]
