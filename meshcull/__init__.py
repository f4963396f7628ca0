"""Public package API for meshcull.

Deletion and compaction of indexed triangle meshes: removing vertices,
faces, unreferenced vertices and sliver triangles while keeping every cached
array on the mesh either consistent or invalidated.

Example
-------
    from meshcull import TriMesh, remove_sliver_faces, remove_unused_vertices

    mesh = TriMesh(vertices, faces)
    remove_sliver_faces(mesh)
    remove_unused_vertices(mesh)

The deeper modules (``meshcull.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
import logging as _logging

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("meshcull")  # populated when installed
except Exception:  # pragma: no cover - editable / unknown state
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

from .core import attributes, conformity, constants, geometry, remap, remove, strips  # noqa: E402
from .core.attributes import DERIVED_ATTRIBUTES, DerivedAttribute, BBox, BSphere  # noqa: E402
from .core.config import RemovalConfig  # noqa: E402
from .core.conformity import check_mesh_consistency  # noqa: E402
from .core.constants import DELETED  # noqa: E402
from .core.errors import ContractViolation  # noqa: E402
from .core.geometry import sliver_face_mask  # noqa: E402
from .core.logging_utils import get_logger, configure_logging  # noqa: E402
from .core.mesh import TriMesh  # noqa: E402
from .core.remap import build_remap_table, faces_materialized, remap_vertices  # noqa: E402
from .core.remove import (remove_vertices, remove_unused_vertices,  # noqa: E402
                          remove_faces, remove_sliver_faces)
from .core.stats import OpStats, format_stats_table  # noqa: E402

__all__ = [
    '__version__',
    # mesh
    'TriMesh', 'BBox', 'BSphere', 'DerivedAttribute', 'DERIVED_ATTRIBUTES',
    # removal
    'remove_vertices', 'remove_unused_vertices', 'remove_faces', 'remove_sliver_faces',
    'remap_vertices', 'build_remap_table', 'faces_materialized', 'DELETED',
    'sliver_face_mask',
    # ambient
    'RemovalConfig', 'ContractViolation', 'check_mesh_consistency',
    'get_logger', 'configure_logging', 'OpStats', 'format_stats_table',
    # submodules
    'attributes', 'conformity', 'constants', 'geometry', 'remap', 'remove', 'strips',
]
