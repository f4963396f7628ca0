"""Structural checks: index ranges, cache alignment and bounding volume validity."""
from __future__ import annotations
import numpy as np
from .attributes import DERIVED_ATTRIBUTES

__all__ = [
    'build_edge_to_face_map', 'canonical_faces', 'check_mesh_consistency'
]


def build_edge_to_face_map(faces):
    edge_map = {}
    for f_idx, tri in enumerate(np.asarray(faces).tolist()):
        for i in range(3):
            a = int(tri[i]); b = int(tri[(i+1) % 3])
            key = (a, b) if a < b else (b, a)
            edge_map.setdefault(key, set()).add(f_idx)
    return edge_map


def canonical_faces(faces):
    """Rotate each face so its smallest index comes first (winding kept), then sort rows.

    Two face arrays describe the same oriented faces iff their canonical forms
    are equal.
    """
    F = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if F.size == 0:
        return F
    shift = np.argmin(F, axis=1)
    idx = (shift[:, None] + np.arange(3)[None, :]) % 3
    rot = np.take_along_axis(F, idx, axis=1)
    order = np.lexsort((rot[:, 2], rot[:, 1], rot[:, 0]))
    return rot[order]


def _strip_vertices(tstrips, msgs):
    ts = np.asarray(tstrips, dtype=np.int64).ravel()
    verts = []
    i = 0
    while i < len(ts):
        length = int(ts[i])
        if length < 3 or i + 1 + length > len(ts):
            msgs.append(f"Malformed triangle strip header {length} at offset {i}.")
            return None
        verts.append(ts[i + 1:i + 1 + length])
        i += 1 + length
    return np.concatenate(verts) if verts else np.empty((0,), dtype=np.int64)


def _rows_in_range(rows, upper, lower=0):
    for r in rows:
        r = np.asarray(r)
        if r.size and (r.min() < lower or r.max() >= upper):
            return False
    return True


def check_mesh_consistency(mesh, verbose=False, atol=1e-9):
    """Check the structural invariants of a TriMesh.

    Every stored index must be in range, every present cache must have the
    length of the array it is aligned to, strips (when present alongside
    faces) must encode the same faces, and a bounding volume flagged valid
    must actually bound the current vertices.

    Returns
    -------
    (bool, list of str)
        ok flag and human readable messages for each violation.
    """
    msgs = []
    nv = len(mesh.vertices)
    nf = len(mesh.faces)
    F = mesh.faces
    if nf and (F.min() < 0 or F.max() >= nv):
        msgs.append("Face indices out of range.")

    if mesh.has_tstrips():
        sv = _strip_vertices(mesh.tstrips, msgs)
        if sv is not None:
            if sv.size and (sv.min() < 0 or sv.max() >= nv):
                msgs.append("Triangle strip indices out of range.")
            elif nf:
                from .strips import unpack_strips
                if not np.array_equal(canonical_faces(unpack_strips(mesh.tstrips)), canonical_faces(F)):
                    msgs.append("Triangle strips and faces disagree.")

    lengths = {'vertices': nv, 'faces': nf}
    for attr in DERIVED_ATTRIBUTES:
        value = getattr(mesh, attr.name, None)
        if value is None:
            continue
        expected = lengths[attr.aligned_to]
        if len(value) != expected:
            msgs.append(f"{attr.name} has length {len(value)}, expected {expected} ({attr.aligned_to}).")
            continue
        if attr.name == 'neighbors' and not _rows_in_range(value, nv):
            msgs.append("neighbors references a vertex out of range.")
        elif attr.name == 'adjacentfaces' and not _rows_in_range(value, nf):
            msgs.append("adjacentfaces references a face out of range.")
        elif attr.name == 'across_edge' and not _rows_in_range(value, nf, lower=-1):
            msgs.append("across_edge references a face out of range.")

    if mesh.bbox.valid and nv:
        if not (np.allclose(mesh.bbox.min, mesh.vertices.min(axis=0), atol=atol)
                and np.allclose(mesh.bbox.max, mesh.vertices.max(axis=0), atol=atol)):
            msgs.append("Bounding box flagged valid but does not match vertices.")
    if mesh.bsphere.valid and nv:
        d = np.sqrt(np.max(np.sum((mesh.vertices - mesh.bsphere.center) ** 2, axis=1)))
        if d > mesh.bsphere.r + atol:
            msgs.append("Bounding sphere flagged valid but does not contain all vertices.")

    if verbose:
        from .logging_utils import get_logger
        logger = get_logger('meshcull.conformity')
        for m in msgs:
            logger.info("Consistency: %s", m)
    return not msgs, msgs
