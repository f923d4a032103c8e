import pytest

from fortune_voronoi.dcel import DCEL
from fortune_voronoi.types import OPEN, OUTER_FACE


def _two_faces():
    return DCEL([(0.0, 0.0), (10.0, 0.0)])


def _birth_pair(dcel):
    birth = dcel.add_vertex((5.0, 1.0), "birth")
    left = dcel.make_dangling_edge(birth, face=0, twin_face=1)
    right = dcel.make_dangling_edge(birth, face=1, twin_face=0)
    dcel.link(dcel.twin(right), left)
    dcel.link(dcel.twin(left), right)
    return birth, left, right


def test_dangling_edge_has_open_target():
    dcel = _two_faces()
    v = dcel.add_vertex((5.0, 0.0), "circle")
    h = dcel.make_dangling_edge(v, face=0, twin_face=1)

    assert dcel.origin(h) == v
    assert dcel.target(h) == OPEN
    assert dcel.twin(dcel.twin(h)) == h
    assert dcel.face(h) == 0 and dcel.face(dcel.twin(h)) == 1
    assert dcel.faces[0].edge == h
    assert dcel.faces[1].edge == dcel.twin(h)
    assert dcel.unbounded_half_edges() == [dcel.twin(h)]


def test_open_edge_is_unbounded_at_both_ends():
    dcel = _two_faces()
    h = dcel.make_open_edge(face=0, twin_face=1)
    assert sorted(dcel.unbounded_half_edges()) == sorted([h, dcel.twin(h)])


def test_close_edge_sets_target_and_registers_outgoing():
    dcel = _two_faces()
    h = dcel.make_open_edge(face=0, twin_face=1)
    v = dcel.add_vertex((5.0, 0.0), "circle")
    dcel.close_edge(h, v)

    assert dcel.target(h) == v
    assert dcel.vertices[v].outgoing == [dcel.twin(h)]
    assert not dcel.is_shared_vertex(v)
    with pytest.raises(AssertionError):
        dcel.close_edge(h, v)


def test_link_requires_same_face():
    dcel = _two_faces()
    h = dcel.make_open_edge(face=0, twin_face=1)
    g = dcel.make_open_edge(face=0, twin_face=1)
    dcel.link(h, g)
    assert dcel.next(h) == g and dcel.prev(g) == h
    with pytest.raises(AssertionError):
        dcel.link(h, dcel.twin(g))


def test_birth_vertex_is_shared():
    dcel = _two_faces()
    birth, _, _ = _birth_pair(dcel)
    assert dcel.is_shared_vertex(birth)


def test_dissolve_vertex_fuses_collinear_edges():
    dcel = _two_faces()
    birth, left, right = _birth_pair(dcel)
    x, y = dcel.twin(right), dcel.twin(left)

    dcel.dissolve_vertex(birth)

    assert not dcel.vertices[birth].alive
    assert not dcel.half_edges[left].alive and not dcel.half_edges[right].alive
    assert dcel.twin(x) == y and dcel.twin(y) == x
    assert dcel.face(x) == 0 and dcel.face(y) == 1
    assert dcel.next(x) is None and dcel.next(y) is None
    assert sorted(dcel.unbounded_half_edges()) == sorted([x, y])
    assert dcel.faces[0].edge == x
    assert dcel.faces[1].edge == y


def test_dissolve_rejects_vertices_of_other_degree():
    dcel = _two_faces()
    v = dcel.add_vertex((5.0, 0.0), "circle")
    dcel.make_dangling_edge(v, face=0, twin_face=1)
    with pytest.raises(AssertionError):
        dcel.dissolve_vertex(v)


def test_contract_zero_length_edge_splices_neighbours():
    dcel = DCEL([(0.0, 0.0), (10.0, 0.0), (5.0, 10.0)])
    u = dcel.add_vertex((5.0, 5.0), "circle")
    before = dcel.make_open_edge(face=0, twin_face=2)
    dcel.close_edge(before, u)
    zero = dcel.make_dangling_edge(u, face=0, twin_face=1)
    dcel.close_edge(zero, u)
    after = dcel.make_dangling_edge(u, face=0, twin_face=1)
    dcel.link(before, zero)
    dcel.link(zero, after)

    dcel.contract_edge(zero)

    assert dcel.next(before) == after
    assert dcel.prev(after) == before
    assert not dcel.half_edges[zero].alive
    assert zero not in dcel.vertices[u].outgoing
    assert dcel.twin(zero) not in dcel.vertices[u].outgoing


def test_contract_rejects_edges_with_length():
    dcel = _two_faces()
    u = dcel.add_vertex((0.0, 5.0), "circle")
    v = dcel.add_vertex((0.0, -5.0), "circle")
    h = dcel.make_dangling_edge(u, face=0, twin_face=1)
    dcel.close_edge(h, v)
    with pytest.raises(AssertionError):
        dcel.contract_edge(h)


def test_merge_vertex_moves_outgoing_edges():
    dcel = _two_faces()
    u = dcel.add_vertex((5.0, 5.0), "circle")
    v = dcel.add_vertex((5.0, 5.0), "birth")
    h = dcel.make_dangling_edge(v, face=0, twin_face=1)
    dcel.merge_vertex(v, u)
    assert dcel.origin(h) == u
    assert dcel.vertices[u].outgoing == [h]
    assert not dcel.vertices[v].alive


def test_boundary_edge_twin_is_on_outer_face():
    dcel = _two_faces()
    a = dcel.add_vertex((0.0, 1.0), "corner")
    b = dcel.add_vertex((1.0, 1.0), "corner")
    h = dcel.make_boundary_edge(a, b, 0)
    assert dcel.origin(h) == a and dcel.target(h) == b
    assert dcel.face(dcel.twin(h)) == OUTER_FACE
