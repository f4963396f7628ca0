"""Removing sets of vertices or faces from a TriMesh.

Face removal never purges the vertices it orphans; follow it with
``remove_unused_vertices`` when that is wanted.
"""
from __future__ import annotations

import time
from contextlib import contextmanager

import numpy as np

from .attributes import attribute_names
from .config import RemovalConfig
from .errors import ContractViolation
from .geometry import sliver_face_mask
from .logging_utils import get_logger
from .remap import build_remap_table, faces_materialized, remap_vertices

__all__ = ['remove_vertices', 'remove_unused_vertices', 'remove_faces', 'remove_sliver_faces']

logger = get_logger('meshcull.remove')


@contextmanager
def _timed(mesh, op_name):
    stats = mesh.get_op_stats(op_name)
    stats.attempts += 1
    t0 = time.perf_counter()
    try:
        yield stats
    finally:
        stats.record_time(time.perf_counter() - t0)


def _as_mask(toremove, n, what):
    mask = np.asarray(toremove, dtype=bool)
    if mask.ndim != 1 or mask.shape[0] != n:
        raise ContractViolation(f"{what} mask has shape {mask.shape}, expected ({n},)")
    return mask


def remove_vertices(mesh, toremove):
    """Remove the vertices flagged in ``toremove``.

    Faces that use a removed vertex disappear with it. A mask that removes
    nothing leaves the mesh untouched, caches and validity flags included.

    Parameters
    ----------
    mesh : TriMesh
    toremove : (N,) bool array-like
        True for each vertex to delete.

    Raises
    ------
    ContractViolation
        If the mask length differs from the vertex count.
    """
    nv = len(mesh.vertices)
    if not nv:
        return
    mask = _as_mask(toremove, nv, 'vertex')
    with _timed(mesh, 'remove_vertices') as stats:
        logger.debug("Removing vertices...")
        remap_table = build_remap_table(mask)
        removed = int(np.count_nonzero(mask))
        if not removed:
            logger.debug("None removed.")
            stats.noops += 1
            return
        dropped = remap_vertices(mesh, remap_table)
        stats.removed += removed
        stats.cascaded += dropped
        logger.info("%d vertices removed (%d faces dropped with them)", removed, dropped)


def remove_unused_vertices(mesh):
    """Remove vertices that aren't referenced by any face."""
    nv = len(mesh.vertices)
    if not nv:
        return
    with faces_materialized(mesh):
        unused = np.ones(nv, dtype=bool)
        unused[mesh.faces.ravel()] = False
        remove_vertices(mesh, unused)


def remove_faces(mesh, toremove):
    """Remove the faces flagged in ``toremove``, keeping survivors in order.

    Every face-derived cache (strips, adjacency, neighbors, corner and point
    areas, across-edge table) is invalidated before the mask is scanned, so
    they are gone afterwards even if nothing was removed. Strips that existed
    are rebuilt when faces were actually removed; bounding volumes are then
    marked invalid.

    Raises
    ------
    ContractViolation
        If the mask length differs from the face count.
    """
    with faces_materialized(mesh):
        had_tstrips = mesh.has_tstrips()
        nf = len(mesh.faces)
        if not nf:
            return
        mask = _as_mask(toremove, nf, 'face')
        with _timed(mesh, 'remove_faces') as stats:
            mesh.clear_tstrips()
            for name in attribute_names(from_faces=True):
                mesh.invalidate(name)

            logger.debug("Removing faces...")
            keep = ~mask
            n_keep = int(np.count_nonzero(keep))
            if n_keep == nf:
                logger.debug("None removed.")
                stats.noops += 1
                return

            mesh.faces = mesh.faces[keep]
            stats.removed += nf - n_keep
            logger.info("%d faces removed", nf - n_keep)

            if had_tstrips:
                mesh.need_tstrips()
            mesh.invalidate_bounds()


def remove_sliver_faces(mesh, config=None):
    """Remove long, skinny faces.

    A face is a sliver when at least one edge reaches
    ``sliver_length_factor * feature_size`` and the squared cosine of its
    smallest angle reaches ``sliver_cos2_threshold``. Faces with a
    zero-length edge count as slivers. Orphaned vertices are left in place.

    Parameters
    ----------
    mesh : TriMesh
    config : RemovalConfig, optional
    """
    cfg = config or RemovalConfig()
    with faces_materialized(mesh):
        with _timed(mesh, 'remove_sliver_faces') as stats:
            fsize = mesh.feature_size(max_samples=cfg.feature_size_samples, seed=cfg.feature_size_seed)
            l2thresh = (cfg.sliver_length_factor * fsize) ** 2
            toremove = sliver_face_mask(mesh.vertices, mesh.faces, l2thresh, cfg.sliver_cos2_threshold)
            flagged = int(np.count_nonzero(toremove))
            logger.debug("%d sliver faces found (feature size %.6g)", flagged, fsize)
            if not flagged:
                stats.noops += 1
        # removed faces are counted by remove_faces
        remove_faces(mesh, toremove)
