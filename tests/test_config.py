import math

import pytest

from fortune_voronoi import VoronoiConfig, build_diagram, get_voronoi_config, set_voronoi_config


@pytest.fixture
def restore_config():
    saved = get_voronoi_config()
    yield
    set_voronoi_config(saved)


def test_defaults():
    config = VoronoiConfig()
    assert config.tolerance == 1e-9
    assert config.margin == 1.0
    assert config.convergence_divisor == 10.0


@pytest.mark.parametrize("field", ["tolerance", "margin", "convergence_divisor"])
@pytest.mark.parametrize("value", [0.0, -1.0, math.nan, math.inf])
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValueError, match=field):
        VoronoiConfig(**{field: value})


def test_getter_returns_a_copy(restore_config):
    config = get_voronoi_config()
    config.margin = 50.0
    assert get_voronoi_config().margin == 1.0


def test_margin_controls_the_box(restore_config):
    set_voronoi_config(VoronoiConfig(margin=3.0))
    diagram = build_diagram([(0.0, 0.0), (10.0, 0.0), (5.0, 10.0)])
    assert diagram.bbox.as_tuple() == (-3.0, -5.5, 13.0, 13.0)
