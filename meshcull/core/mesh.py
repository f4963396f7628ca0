"""Indexed triangle mesh with lazily rebuilt caches."""

import copy
from collections import defaultdict

import numpy as np
from scipy import sparse

from .attributes import DERIVED_ATTRIBUTES, BBox, BSphere
from .conformity import build_edge_to_face_map
from .constants import FEATURE_SIZE_SAMPLES, FEATURE_SIZE_SEED
from .geometry import corner_areas, vertex_normals, feature_size as _feature_size
from .logging_utils import get_logger
from .stats import OpStats, print_stats as _print_stats
from .strips import strip_count, stripify, unpack_strips


class TriMesh:
    def __init__(self, vertices=None, faces=None, tstrips=None,
                 normals=None, colors=None, confidences=None, flags=None):
        """Triangle mesh: vertex positions, faces and cached derived data.

        Parameters
        ----------
        vertices : (N,3) float array-like
        faces : (M,3) int array-like, optional
            Vertex index triples. May be omitted when ``tstrips`` is given.
        tstrips : (K,) int array-like, optional
            Length-prefixed triangle strips (see ``strips``).
        normals, colors : (N,3) float array-like, optional
        confidences : (N,) float array-like, optional
        flags : (N,) unsigned int array-like, optional
            Per-vertex data; kept aligned with ``vertices`` by every removal.

        Notes
        -----
        The storage setters only canonicalize dtype and layout. They do not
        invalidate caches: code that swaps arrays wholesale is responsible for
        walking ``DERIVED_ATTRIBUTES`` (the remap primitive does).
        """
        self.logger = get_logger(f'meshcull.mesh.{self.__class__.__name__}')
        self._vertices = None
        self._faces = None
        self._tstrips = None
        self.vertices = np.empty((0, 3)) if vertices is None else vertices
        self.faces = np.empty((0, 3)) if faces is None else faces
        self.tstrips = np.empty((0,)) if tstrips is None else tstrips
        nv = len(self._vertices)
        self.normals = self._aligned('normals', normals, nv, (3,), np.float64)
        self.colors = self._aligned('colors', colors, nv, (3,), np.float64)
        self.confidences = self._aligned('confidences', confidences, nv, (), np.float64)
        self.flags = self._aligned('flags', flags, nv, (), np.uint32)
        # Face-topology caches, rebuilt on demand by need_*()
        self.pointareas = None
        self.cornerareas = None
        self.adjacentfaces = None
        self.neighbors = None
        self.across_edge = None
        self.bbox = BBox()
        self.bsphere = BSphere()
        self._op_stats = defaultdict(OpStats)
        self._assert_canonical()

    @staticmethod
    def _aligned(name, value, n, tail, dtype):
        if value is None:
            return None
        arr = np.ascontiguousarray(np.asarray(value, dtype=dtype))
        if arr.shape != (n,) + tail:
            raise ValueError(f"{name} must have shape {(n,) + tail}, got {arr.shape}")
        return arr

    # Canonical storage properties
    @property
    def vertices(self):
        return self._vertices

    @vertices.setter
    def vertices(self, value):
        arr = np.asarray(value, dtype=np.float64)
        if arr.size == 0:
            arr = arr.reshape(0, 3)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError("vertices must have shape (N,3)")
        self._vertices = np.ascontiguousarray(arr)

    @property
    def faces(self):
        return self._faces

    @faces.setter
    def faces(self, value):
        arr = np.asarray(value, dtype=np.int32)
        if arr.size == 0:
            arr = arr.reshape(0, 3)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError("faces must have shape (M,3)")
        self._faces = np.ascontiguousarray(arr)

    @property
    def tstrips(self):
        return self._tstrips

    @tstrips.setter
    def tstrips(self, value):
        arr = np.asarray(value, dtype=np.int32)
        if arr.ndim != 1:
            raise ValueError("tstrips must be a flat (K,) array")
        self._tstrips = np.ascontiguousarray(arr)

    def _assert_canonical(self):
        """Validate canonical storage:
        - vertices: float64, shape (N,3), C-contiguous
        - faces: int32, shape (M,3), C-contiguous
        - tstrips: int32, shape (K,)
        """
        v, f, t = self._vertices, self._faces, self._tstrips
        if v.dtype != np.float64 or v.ndim != 2 or v.shape[1] != 3 or not v.flags.c_contiguous:
            raise ValueError("vertices must be float64 (N,3) and C-contiguous")
        if f.dtype != np.int32 or f.ndim != 2 or f.shape[1] != 3 or not f.flags.c_contiguous:
            raise ValueError("faces must be int32 (M,3) and C-contiguous")
        if t.dtype != np.int32 or t.ndim != 1:
            raise ValueError("tstrips must be int32 (K,)")

    def __repr__(self):
        return (f"{self.__class__.__name__}(vertices={len(self._vertices)}, faces={len(self._faces)}, "
                f"tstrips={len(self._tstrips)})")

    def copy(self):
        return copy.deepcopy(self)

    # --- Representation presence ---
    def has_faces(self) -> bool:
        return len(self._faces) > 0

    def has_tstrips(self) -> bool:
        return len(self._tstrips) > 0

    def clear_faces(self):
        self.faces = np.empty((0, 3), dtype=np.int32)

    def clear_tstrips(self):
        self.tstrips = np.empty((0,), dtype=np.int32)

    # --- Cache bookkeeping ---
    def invalidate(self, name):
        """Drop one declared cache (sets it to None)."""
        setattr(self, name, None)

    def invalidate_bounds(self):
        self.bbox.valid = False
        self.bsphere.valid = False

    def present_attributes(self):
        """Names of declared attributes currently populated."""
        return [a.name for a in DERIVED_ATTRIBUTES if getattr(self, a.name, None) is not None]

    # --- Lazy rebuilders ---
    def need_faces(self):
        """Materialize ``faces`` from ``tstrips`` when only strips are present."""
        if self.has_faces() or not self.has_tstrips():
            return
        self.logger.debug("Unpacking triangle strips...")
        self.faces = unpack_strips(self._tstrips)
        self.logger.debug("%d faces unpacked", len(self._faces))

    def need_tstrips(self):
        if self.has_tstrips():
            return
        self.need_faces()
        if not self.has_faces():
            return
        self.logger.debug("Triangle stripping...")
        self.tstrips = stripify(self._faces)
        self.logger.debug("%d faces in %d strips", len(self._faces), strip_count(self._tstrips))

    def need_normals(self):
        if self.normals is not None:
            return
        self.need_faces()
        self.normals = vertex_normals(self._vertices, self._faces)

    def need_pointareas(self):
        if self.pointareas is not None and self.cornerareas is not None:
            return
        self.need_faces()
        ca = corner_areas(self._vertices, self._faces)
        pa = np.zeros(len(self._vertices), dtype=np.float64)
        for j in range(3):
            np.add.at(pa, self._faces[:, j], ca[:, j])
        self.cornerareas = ca
        self.pointareas = pa

    def _vertex_face_incidence(self):
        nv, nf = len(self._vertices), len(self._faces)
        rows = self._faces.ravel().astype(np.int64)
        cols = np.repeat(np.arange(nf, dtype=np.int64), 3)
        inc = sparse.coo_matrix((np.ones(len(rows), dtype=np.int8), (rows, cols)), shape=(nv, nf)).tocsr()
        inc.sum_duplicates()
        return inc

    @staticmethod
    def _csr_rows(mat):
        return [mat.indices[mat.indptr[i]:mat.indptr[i + 1]].astype(np.int32) for i in range(mat.shape[0])]

    def need_adjacentfaces(self):
        """Per-vertex sorted arrays of incident face indices."""
        if self.adjacentfaces is not None:
            return
        self.need_faces()
        self.adjacentfaces = self._csr_rows(self._vertex_face_incidence())

    def need_neighbors(self):
        """Per-vertex sorted arrays of vertices sharing an edge."""
        if self.neighbors is not None:
            return
        self.need_faces()
        nv = len(self._vertices)
        F = self._faces.astype(np.int64)
        a = np.concatenate((F[:, 0], F[:, 1], F[:, 2]))
        b = np.concatenate((F[:, 1], F[:, 2], F[:, 0]))
        keep = a != b
        a, b = a[keep], b[keep]
        ones = np.ones(2 * len(a), dtype=np.int8)
        adj = sparse.coo_matrix((ones, (np.concatenate((a, b)), np.concatenate((b, a)))), shape=(nv, nv)).tocsr()
        adj.sum_duplicates()
        self.neighbors = self._csr_rows(adj)

    def need_across_edge(self):
        """(M,3) face index across the edge opposite each corner, -1 on boundaries."""
        if self.across_edge is not None:
            return
        self.need_faces()
        edge_map = build_edge_to_face_map(self._faces)
        across = np.full(self._faces.shape, -1, dtype=np.int32)
        for fi, tri in enumerate(self._faces.tolist()):
            for j in range(3):
                a, b = tri[(j + 1) % 3], tri[(j + 2) % 3]
                others = [g for g in edge_map.get((min(a, b), max(a, b)), ()) if g != fi]
                if others:
                    across[fi, j] = min(others)
        self.across_edge = across

    def need_bbox(self):
        if self.bbox.valid or len(self._vertices) == 0:
            return
        self.bbox.min = self._vertices.min(axis=0)
        self.bbox.max = self._vertices.max(axis=0)
        self.bbox.valid = True

    def need_bsphere(self):
        """Bounding sphere centered on the bounding box (not the minimal sphere)."""
        if self.bsphere.valid or len(self._vertices) == 0:
            return
        self.need_bbox()
        center = self.bbox.center()
        self.bsphere.center = center
        self.bsphere.r = float(np.sqrt(np.max(np.sum((self._vertices - center) ** 2, axis=1))))
        self.bsphere.valid = True

    def feature_size(self, max_samples=FEATURE_SIZE_SAMPLES, seed=FEATURE_SIZE_SEED):
        """Median edge length over (a reproducible sample of) the faces."""
        self.need_faces()
        return _feature_size(self._vertices, self._faces, max_samples=max_samples, seed=seed)

    # --- Stats helpers ---
    def get_op_stats(self, name: str) -> OpStats:
        return self._op_stats[name]

    def stats_summary(self):
        return {k: v.to_dict() for k, v in self._op_stats.items()}

    def print_stats(self, pretty: bool = True, file=None):
        _print_stats(self.stats_summary(), file=file, pretty=pretty)

    def reset_stats(self, drop_ops: bool = False):
        """Zero all counters, or forget every op entry when ``drop_ops``."""
        if drop_ops:
            self._op_stats.clear()
        else:
            for s in self._op_stats.values():
                s.reset()

    # --- Removal entry points (thin wrappers over ``remove``) ---
    def remove_vertices(self, toremove):
        from .remove import remove_vertices
        return remove_vertices(self, toremove)

    def remove_unused_vertices(self):
        from .remove import remove_unused_vertices
        return remove_unused_vertices(self)

    def remove_faces(self, toremove):
        from .remove import remove_faces
        return remove_faces(self, toremove)

    def remove_sliver_faces(self, config=None):
        from .remove import remove_sliver_faces
        return remove_sliver_faces(self, config=config)
