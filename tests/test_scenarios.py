import math

import pytest

from fortune_voronoi import BoundingBox, build_diagram


def _rounded(point, digits=9):
    return (round(point[0], digits) + 0.0, round(point[1], digits) + 0.0)


def _segment_set(segments):
    return {tuple(sorted((_rounded(a), _rounded(b)))) for a, b in segments}


def _degree(diagram, point):
    target = _rounded(point)
    return sum(1 for a, b in diagram.voronoi_segments() if target in (_rounded(a), _rounded(b)))


def test_two_sites_split_the_box_along_the_bisector():
    diagram = build_diagram([(0.0, 0.0), (10.0, 0.0)], bounds=((-5.0, -5.0), (15.0, 5.0)))

    assert diagram.bbox == BoundingBox(-5.0, -5.0, 15.0, 5.0)
    assert _segment_set(diagram.voronoi_segments()) == {((5.0, -5.0), (5.0, 5.0))}
    assert len(diagram.vertices) == 6
    assert len(diagram.half_edges) // 2 == 7
    assert len(diagram.faces) == 2
    assert diagram.euler_characteristic() == 2
    assert math.isclose(diagram.cell_area(0), 100.0)
    assert math.isclose(diagram.cell_area(1), 100.0)
    assert diagram.stats.circle_events_scheduled == 0


def test_triangle_has_one_vertex_at_the_circumcenter():
    diagram = build_diagram([(0.0, 0.0), (10.0, 0.0), (5.0, 10.0)])

    assert [_rounded(v) for v in diagram.voronoi_vertices()] == [(5.0, 3.75)]
    assert diagram.stats.circle_events_processed == 1
    assert diagram.stats.circle_events_scheduled == 1
    assert math.isclose(diagram.stats.lowest_event_y, -2.5)
    assert _degree(diagram, (5.0, 3.75)) == 3
    assert diagram.euler_characteristic() == 2


def test_square_corners_share_a_single_degree_four_vertex():
    sites = [(0.0, 10.0), (10.0, 10.0), (0.0, 0.0), (10.0, 0.0)]
    diagram = build_diagram(sites)

    assert [_rounded(v) for v in diagram.voronoi_vertices()] == [(5.0, 5.0)]
    assert _degree(diagram, (5.0, 5.0)) == 4
    assert sorted(diagram.adjacent_sites(0)) == [1, 2]
    assert sorted(diagram.adjacent_sites(3)) == [1, 2]
    assert diagram.stats.circle_events_processed == 2
    assert diagram.euler_characteristic() == 2


def test_collinear_sites_produce_parallel_bisectors():
    sites = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
    diagram = build_diagram(sites)

    assert diagram.stats.circle_events_scheduled == 0
    assert diagram.stats.degenerate_triples == 2
    assert diagram.voronoi_vertices() == []
    xs = sorted({round(a[0], 9) for a, b in diagram.voronoi_segments()})
    assert xs == [0.5, 1.5, 2.5]
    for a, b in diagram.voronoi_segments():
        assert a[0] == pytest.approx(b[0])
    assert diagram.euler_characteristic() == 2


def test_vertical_collinear_sites_produce_horizontal_bisectors():
    sites = [(0.0, 3.0), (0.0, 2.0), (0.0, 1.0), (0.0, 0.0)]
    diagram = build_diagram(sites)

    assert diagram.stats.circle_events_scheduled == 0
    ys = sorted({round(a[1], 9) for a, b in diagram.voronoi_segments()})
    assert ys == [0.5, 1.5, 2.5]
    for a, b in diagram.voronoi_segments():
        assert a[1] == pytest.approx(b[1])
    assert all(kind != "birth" for kind in diagram.vertex_kinds)


def test_single_site_owns_the_whole_box():
    diagram = build_diagram([(2.0, 3.0)], bounds=((0.0, 0.0), (4.0, 4.0)))

    assert diagram.voronoi_segments() == []
    assert len(diagram.face_half_edges(0)) == 4
    assert math.isclose(diagram.cell_area(0), diagram.bbox.width * diagram.bbox.height)
    assert diagram.euler_characteristic() == 2


def test_integer_grid_vertices_are_cell_centres():
    sites = [(float(x), float(y)) for y in range(3) for x in range(3)]
    diagram = build_diagram(sites)

    expected = sorted([(0.5, 0.5), (1.5, 0.5), (0.5, 1.5), (1.5, 1.5)])
    assert sorted(_rounded(v) for v in diagram.voronoi_vertices()) == expected
    for vertex in expected:
        assert _degree(diagram, vertex) == 4
    assert diagram.euler_characteristic() == 2
    total = sum(diagram.cell_area(i) for i in range(len(sites)))
    assert math.isclose(total, diagram.bbox.width * diagram.bbox.height)


def test_requested_bounds_are_enlarged_to_fit_the_diagram():
    diagram = build_diagram([(0.0, 0.0), (10.0, 0.0), (5.0, 10.0)], bounds=((1.0, 1.0), (2.0, 2.0)))
    box = diagram.bbox
    assert box.xmin < 0.0 and box.xmax > 10.0
    assert box.ymin < -2.5 and box.ymax > 10.0


def test_site_below_the_midpoint_of_a_top_pair():
    diagram = build_diagram([(0.0, 10.0), (10.0, 10.0), (5.0, 0.0)])

    assert [_rounded(v) for v in diagram.voronoi_vertices()] == [(5.0, 6.25)]
    assert _degree(diagram, (5.0, 6.25)) == 3
    assert diagram.stats.circle_events_scheduled == 0
    assert diagram.euler_characteristic() == 2
    assert sorted(diagram.adjacent_sites(2)) == [0, 1]


def test_diamond_corners_meet_at_the_center():
    sites = [(0.0, 5.0), (5.0, 0.0), (10.0, 5.0), (5.0, 10.0)]
    diagram = build_diagram(sites)

    assert [_rounded(v) for v in diagram.voronoi_vertices()] == [(5.0, 5.0)]
    assert _degree(diagram, (5.0, 5.0)) == 4
    assert sorted(diagram.adjacent_sites(1)) == [0, 2]
    assert sorted(diagram.adjacent_sites(3)) == [0, 2]
    assert diagram.euler_characteristic() == 2
    total = sum(diagram.cell_area(i) for i in range(len(sites)))
    assert math.isclose(total, diagram.bbox.width * diagram.bbox.height)


def test_square_with_its_center_has_a_diamond_cell():
    sites = [(0.0, 0.0), (10.0, 0.0), (0.0, 10.0), (10.0, 10.0), (5.0, 5.0)]
    diagram = build_diagram(sites)

    expected = sorted([(5.0, 0.0), (0.0, 5.0), (10.0, 5.0), (5.0, 10.0)])
    assert sorted(_rounded(v) for v in diagram.voronoi_vertices()) == expected
    for vertex in expected:
        assert _degree(diagram, vertex) == 3
    assert sorted(_rounded(p) for p in diagram.cell_polygon(4)) == expected
    assert math.isclose(diagram.cell_area(4), 50.0)
    assert sorted(diagram.adjacent_sites(4)) == [0, 1, 2, 3]
    assert diagram.euler_characteristic() == 2


def test_regular_octagon_has_eight_spokes_from_the_center():
    sites = [(10.0 * math.cos(k * math.pi / 4), 10.0 * math.sin(k * math.pi / 4)) for k in range(8)]
    diagram = build_diagram(sites)

    assert {_rounded(v, 6) for v in diagram.voronoi_vertices()} == {(0.0, 0.0)}
    segments = {tuple(sorted((_rounded(a, 6), _rounded(b, 6)))) for a, b in diagram.voronoi_segments()}
    spokes = {segment for segment in segments if (0.0, 0.0) in segment and segment[0] != segment[1]}
    assert len(spokes) == 8
    assert diagram.euler_characteristic() == 2
    total = sum(diagram.cell_area(i) for i in range(len(sites)))
    assert math.isclose(total, diagram.bbox.width * diagram.bbox.height)


def test_tiny_triangle_keeps_its_vertex():
    sites = [(0.0, 0.0), (1e-5, 1e-6), (4e-6, 9e-6)]
    diagram = build_diagram(sites)

    vertices = diagram.voronoi_vertices()
    assert len(vertices) == 1
    radii = [math.dist(vertices[0], site) for site in sites]
    assert max(radii) - min(radii) <= 1e-9 * max(radii)
    assert diagram.stats.degenerate_triples == 0
    assert diagram.euler_characteristic() == 2
    assert len(diagram.faces) == 3
