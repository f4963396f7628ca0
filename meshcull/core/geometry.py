"""Vectorized geometry kernels over (N,3) vertex and (M,3) face arrays.

All functions take plain numpy arrays and never touch a TriMesh; the mesh
class calls them from its lazy rebuilders.
"""
from __future__ import annotations
import numpy as np
from .constants import FEATURE_SIZE_SAMPLES, FEATURE_SIZE_SEED

__all__ = [
    'squared_edge_lengths', 'face_areas', 'corner_areas', 'vertex_normals',
    'feature_size', 'sliver_face_mask'
]


def squared_edge_lengths(vertices, faces):
    """Squared edge lengths per face.

    vertices: (N,3) float array
    faces:    (M,3) int array
    Returns: (M,3) float64 array with columns d01, d12, d20.
    """
    V = np.asarray(vertices, dtype=np.float64)
    F = np.asarray(faces, dtype=np.int64)
    if F.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    p0 = V[F[:, 0]]; p1 = V[F[:, 1]]; p2 = V[F[:, 2]]
    d01 = np.einsum('ij,ij->i', p1 - p0, p1 - p0)
    d12 = np.einsum('ij,ij->i', p2 - p1, p2 - p1)
    d20 = np.einsum('ij,ij->i', p0 - p2, p0 - p2)
    return np.stack((d01, d12, d20), axis=1)


def face_areas(vertices, faces):
    """Unsigned area of each face, shape (M,)."""
    V = np.asarray(vertices, dtype=np.float64)
    F = np.asarray(faces, dtype=np.int64)
    if F.size == 0:
        return np.empty((0,), dtype=np.float64)
    p0 = V[F[:, 0]]; p1 = V[F[:, 1]]; p2 = V[F[:, 2]]
    return 0.5 * np.linalg.norm(np.cross(p1 - p0, p2 - p0), axis=1)


def corner_areas(vertices, faces):
    """Mixed Voronoi area of each face corner (Meyer et al. 2003).

    Acute faces split their area by circumcentric Voronoi regions; a face
    with an obtuse corner gives that corner half the area and the other two
    a quarter each. The three corners of a face always sum to its area.

    Returns
    -------
    np.ndarray
        (M,3) float64, column j belongs to corner ``faces[:, j]``.
    """
    V = np.asarray(vertices, dtype=np.float64)
    F = np.asarray(faces, dtype=np.int64)
    if F.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    p0 = V[F[:, 0]]; p1 = V[F[:, 1]]; p2 = V[F[:, 2]]
    # edge j is opposite corner j
    e0 = p2 - p1
    e1 = p0 - p2
    e2 = p1 - p0
    area = face_areas(V, F)
    l0 = np.einsum('ij,ij->i', e0, e0)
    l1 = np.einsum('ij,ij->i', e1, e1)
    l2 = np.einsum('ij,ij->i', e2, e2)
    ew0 = l0 * (l1 + l2 - l0)
    ew1 = l1 * (l2 + l0 - l1)
    ew2 = l2 * (l0 + l1 - l2)
    d01 = np.einsum('ij,ij->i', e0, e1)
    d12 = np.einsum('ij,ij->i', e1, e2)
    d20 = np.einsum('ij,ij->i', e2, e0)

    with np.errstate(divide='ignore', invalid='ignore'):
        # obtuse at corner 0
        o0_c1 = -0.25 * l2 * area / d20
        o0_c2 = -0.25 * l1 * area / d01
        o0_c0 = area - o0_c1 - o0_c2
        # obtuse at corner 1
        o1_c2 = -0.25 * l0 * area / d01
        o1_c0 = -0.25 * l2 * area / d12
        o1_c1 = area - o1_c2 - o1_c0
        # obtuse at corner 2
        o2_c0 = -0.25 * l1 * area / d12
        o2_c1 = -0.25 * l0 * area / d20
        o2_c2 = area - o2_c0 - o2_c1
        # acute
        scale = 0.5 * area / (ew0 + ew1 + ew2)
        a_c0 = scale * (ew1 + ew2)
        a_c1 = scale * (ew2 + ew0)
        a_c2 = scale * (ew0 + ew1)

    conds = [ew0 <= 0.0, ew1 <= 0.0, ew2 <= 0.0]
    c0 = np.select(conds, [o0_c0, o1_c0, o2_c0], default=a_c0)
    c1 = np.select(conds, [o0_c1, o1_c1, o2_c1], default=a_c1)
    c2 = np.select(conds, [o0_c2, o1_c2, o2_c2], default=a_c2)
    return np.stack((c0, c1, c2), axis=1)


def vertex_normals(vertices, faces):
    """Area-weighted unit vertex normals; vertices without faces get zeros."""
    V = np.asarray(vertices, dtype=np.float64)
    F = np.asarray(faces, dtype=np.int64)
    normals = np.zeros_like(V)
    if F.size == 0:
        return normals
    p0 = V[F[:, 0]]; p1 = V[F[:, 1]]; p2 = V[F[:, 2]]
    fn = np.cross(p1 - p0, p2 - p0)
    for j in range(3):
        np.add.at(normals, F[:, j], fn)
    lengths = np.linalg.norm(normals, axis=1)
    nz = lengths > 0.0
    normals[nz] /= lengths[nz, None]
    return normals


def feature_size(vertices, faces, max_samples=FEATURE_SIZE_SAMPLES, seed=FEATURE_SIZE_SEED):
    """Characteristic length of a mesh: the median edge length.

    At most ``max_samples`` faces are looked at; larger meshes are sampled
    with a seeded RandomState so the estimate is reproducible. Returns 0.0
    when there are no faces.
    """
    F = np.asarray(faces, dtype=np.int64)
    nf = len(F)
    if nf == 0:
        return 0.0
    if nf > max_samples:
        rng = np.random.RandomState(seed)
        F = F[rng.randint(0, nf, size=max_samples)]
    d2 = squared_edge_lengths(vertices, F).ravel()
    mid = len(d2) // 2
    return float(np.sqrt(np.partition(d2, mid)[mid]))


def sliver_face_mask(vertices, faces, l2thresh, cos2thresh):
    """Boolean mask of long, skinny faces.

    A face is skipped when all three squared edge lengths are below
    ``l2thresh``. Otherwise it is flagged when the squared cosine of its
    smallest interior angle (the one opposite the shortest edge) is at least
    ``cos2thresh``. Faces with a zero-length edge evaluate to NaN and are
    always flagged.

    Parameters
    ----------
    vertices : (N,3) array-like
    faces : (M,3) array-like of int
    l2thresh : float
        Squared edge length threshold.
    cos2thresh : float
        Squared cosine threshold.

    Returns
    -------
    np.ndarray
        (M,) bool, True for faces to remove.
    """
    d = squared_edge_lengths(vertices, faces)
    if d.shape[0] == 0:
        return np.zeros((0,), dtype=bool)
    small = np.all(d < l2thresh, axis=1)
    m = d.min(axis=1)
    total = d.sum(axis=1)
    with np.errstate(divide='ignore', invalid='ignore'):
        c2 = (total - 2.0 * m) ** 2 * m / (4.0 * d[:, 0] * d[:, 1] * d[:, 2])
    # NaN (zero-length edge) is flagged
    return ~small & ~(c2 < cos2thresh)
