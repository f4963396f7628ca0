"""Vertex index remapping, the primitive every vertex removal goes through.

A remap table holds, for every current vertex, either its new index or the
``DELETED`` sentinel. Applying it compacts the vertices, rewrites the faces,
drops faces that lost a vertex and brings every declared cache either along
(compacted) or down (invalidated).
"""
from __future__ import annotations

from contextlib import contextmanager

import numpy as np

from .attributes import DERIVED_ATTRIBUTES, VERTICES, FACES
from .constants import DELETED
from .errors import ContractViolation
from .logging_utils import get_logger

__all__ = ['DELETED', 'faces_materialized', 'build_remap_table', 'remap_vertices']

logger = get_logger('meshcull.remap')


@contextmanager
def faces_materialized(mesh):
    """Make ``mesh.faces`` available for the duration of a block.

    If the mesh carried only triangle strips on entry, the unpacked faces are
    cleared again on exit, provided strips are still there to describe the
    topology. Nested use is harmless: inner guards see faces already present.
    """
    had_faces = mesh.has_faces()
    mesh.need_faces()
    try:
        yield mesh
    finally:
        if not had_faces and mesh.has_tstrips():
            mesh.clear_faces()


def build_remap_table(toremove):
    """Old-to-new vertex index table for a deletion mask.

    Survivors are numbered in their original order; removed entries hold
    ``DELETED``.

    Parameters
    ----------
    toremove : (N,) bool array-like

    Returns
    -------
    np.ndarray
        (N,) int32 table.
    """
    mask = np.asarray(toremove, dtype=bool).ravel()
    keep = ~mask
    table = np.full(mask.shape[0], DELETED, dtype=np.int32)
    table[keep] = np.arange(int(keep.sum()), dtype=np.int32)
    return table


def _take(value, idx):
    if isinstance(value, list):
        return [value[int(i)] for i in idx]
    return np.ascontiguousarray(value[idx])


def remap_vertices(mesh, remap_table):
    """Apply an old-to-new vertex table to every vertex-indexed array of ``mesh``.

    Precondition: the non-``DELETED`` entries of ``remap_table`` are exactly
    ``0..K-1`` (each once). Only the table length is checked; a table that
    breaks the precondition yields an undefined result.

    The vertex formerly at ``i`` ends up at ``remap_table[i]``. A face with any
    corner mapped to ``DELETED`` is dropped. Declared caches are compacted or
    invalidated according to ``DerivedAttribute.remap_action``; strips are
    rebuilt if they existed; bounding volumes are marked invalid.

    Returns
    -------
    int
        Number of faces dropped because they referenced a removed vertex.

    Raises
    ------
    ContractViolation
        If the table length differs from the vertex count.
    """
    table = np.asarray(remap_table).ravel()
    nv = len(mesh.vertices)
    if table.shape[0] != nv:
        raise ContractViolation(f"remap table has length {table.shape[0]}, mesh has {nv} vertices")
    keep = table >= 0
    src = np.nonzero(keep)[0]
    # new slot -> old vertex
    order = np.empty(src.shape[0], dtype=np.int64)
    order[table[keep].astype(np.int64)] = src

    had_tstrips = mesh.has_tstrips()
    with faces_materialized(mesh):
        F = mesh.faces
        if len(F):
            mapped = table[F]
            face_keep = np.all(mapped >= 0, axis=1)
            new_faces = mapped[face_keep]
        else:
            face_keep = np.ones((0,), dtype=bool)
            new_faces = F
        dropped = int(face_keep.shape[0] - np.count_nonzero(face_keep))
        changed = {VERTICES, FACES} if dropped else {VERTICES}
        face_idx = np.nonzero(face_keep)[0]

        for attr in DERIVED_ATTRIBUTES:
            value = getattr(mesh, attr.name, None)
            if value is None:
                continue
            action = attr.remap_action(changed)
            if action == 'invalidate':
                mesh.invalidate(attr.name)
            elif action == 'compact':
                setattr(mesh, attr.name, _take(value, order if attr.aligned_to == VERTICES else face_idx))

        mesh.vertices = mesh.vertices[order]
        mesh.faces = new_faces
        mesh.clear_tstrips()
        if had_tstrips:
            mesh.need_tstrips()
        mesh.invalidate_bounds()

    logger.debug("Remapped %d -> %d vertices, %d faces dropped", nv, len(mesh.vertices), dropped)
    return dropped
