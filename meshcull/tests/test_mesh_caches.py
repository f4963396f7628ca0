import numpy as np
import pytest

from meshcull import TriMesh
from meshcull.core.geometry import corner_areas, face_areas


def make_square():
    verts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    faces = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
    return verts, faces


def test_storage_is_canonical():
    verts, faces = make_square()
    mesh = TriMesh(verts.tolist(), faces.tolist())
    assert mesh.vertices.dtype == np.float64 and mesh.vertices.flags.c_contiguous
    assert mesh.faces.dtype == np.int32 and mesh.faces.shape == (2, 3)
    assert mesh.tstrips.dtype == np.int32 and mesh.tstrips.shape == (0,)


def test_bad_shapes_raise():
    verts, faces = make_square()
    with pytest.raises(ValueError):
        TriMesh(verts[:, :2], faces)
    with pytest.raises(ValueError):
        TriMesh(verts, faces[:, :2])
    with pytest.raises(ValueError):
        TriMesh(verts, faces, colors=np.zeros((3, 3)))


def test_corner_areas_split_face_area():
    h = np.sqrt(3.0) / 2.0
    verts = np.array([[0, 0, 0], [1, 0, 0], [0.5, h, 0], [0, 1, 0], [5, 0, 0]], dtype=float)
    faces = np.array([[0, 1, 2], [0, 1, 3], [0, 4, 3]])
    ca = corner_areas(verts, faces)
    assert np.allclose(ca.sum(axis=1), face_areas(verts, faces))
    # equilateral: thirds
    assert np.allclose(ca[0], face_areas(verts, faces)[0] / 3.0)
    # right angle at corner 0: half the area there, a quarter at the others
    assert np.allclose(ca[1], [0.25, 0.125, 0.125])


def test_pointareas_sum_to_surface_area():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    mesh.need_pointareas()
    assert mesh.cornerareas.shape == (2, 3)
    assert np.isclose(mesh.pointareas.sum(), 1.0)


def test_adjacency_caches_on_square():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    mesh.need_adjacentfaces()
    mesh.need_neighbors()
    mesh.need_across_edge()
    assert [a.tolist() for a in mesh.adjacentfaces] == [[0, 1], [0], [0, 1], [1]]
    assert [n.tolist() for n in mesh.neighbors] == [[1, 2, 3], [0, 2], [0, 1, 3], [0, 2]]
    assert mesh.across_edge.tolist() == [[-1, 1, -1], [-1, -1, 0]]


def test_normals_point_up_for_ccw_square():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    mesh.need_normals()
    assert np.allclose(mesh.normals, [[0, 0, 1]] * 4)


def test_bounding_volumes():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    mesh.need_bsphere()
    assert mesh.bbox.valid and mesh.bsphere.valid
    assert np.allclose(mesh.bbox.min, [0, 0, 0])
    assert np.allclose(mesh.bbox.max, [1, 1, 0])
    assert np.allclose(mesh.bsphere.center, [0.5, 0.5, 0])
    assert np.isclose(mesh.bsphere.r, np.sqrt(0.5))


def test_feature_size_of_square_and_sampling_is_reproducible():
    verts, faces = make_square()
    assert TriMesh(verts, faces).feature_size() == pytest.approx(1.0)
    assert TriMesh(verts).feature_size() == 0.0

    rng = np.random.RandomState(3)
    big_v = rng.rand(400, 3)
    big_f = rng.randint(0, 400, size=(1000, 3))
    mesh = TriMesh(big_v, big_f)
    assert mesh.feature_size(max_samples=50) == mesh.feature_size(max_samples=50)
    assert mesh.feature_size(max_samples=50, seed=1) > 0.0


def test_need_faces_unpacks_strips_once():
    verts, faces = make_square()
    mesh = TriMesh(verts, faces)
    mesh.need_tstrips()
    strips = mesh.tstrips
    mesh.need_tstrips()
    assert mesh.tstrips is strips

    strip_only = TriMesh(verts, tstrips=strips)
    assert not strip_only.has_faces()
    strip_only.need_faces()
    assert strip_only.has_faces()
    assert len(strip_only.faces) == 2
