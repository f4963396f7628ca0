import numpy as np
import pytest

from meshcull import (TriMesh, ContractViolation, DELETED, build_remap_table,
                      faces_materialized, remap_vertices)
from meshcull.core.strips import stripify


def make_square():
    verts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    faces = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
    return verts, faces


def test_build_remap_table_numbers_survivors_in_order():
    table = build_remap_table([False, True, False, True, False])
    assert table.tolist() == [0, DELETED, 1, DELETED, 2]
    assert build_remap_table([]).shape == (0,)


def test_remap_places_vertices_at_table_targets():
    verts, faces = make_square()
    colors = np.eye(4)[:, :3]
    mesh = TriMesh(verts, faces, colors=colors)

    dropped = remap_vertices(mesh, [2, DELETED, 0, 1])

    assert dropped == 1
    assert np.array_equal(mesh.vertices, verts[[2, 3, 0]])
    assert np.array_equal(mesh.colors, colors[[2, 3, 0]])
    # face [0,2,3] -> [2,0,1]; face [0,1,2] lost vertex 1
    assert mesh.faces.tolist() == [[2, 0, 1]]


def test_remap_table_length_is_checked():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    with pytest.raises(ContractViolation):
        remap_vertices(mesh, [0, 1, 2])
    assert len(mesh.vertices) == 4


def test_remap_invalidates_bounds_even_without_deletions():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    mesh.need_bsphere()
    remap_vertices(mesh, [3, 2, 1, 0])
    assert not mesh.bbox.valid
    assert not mesh.bsphere.valid
    assert mesh.faces.tolist() == [[3, 2, 1], [3, 1, 0]]


def test_faces_materialized_restores_absence():
    verts, faces = make_square()
    mesh = TriMesh(verts, tstrips=stripify(faces))
    with faces_materialized(mesh) as m:
        assert m.has_faces()
    assert not mesh.has_faces()

    with_faces = TriMesh(verts, faces)
    with faces_materialized(with_faces):
        pass
    assert with_faces.has_faces()
