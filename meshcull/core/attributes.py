"""Declared dependencies of every cached array a TriMesh can carry.

Removal routines never clear mesh fields one by one; they walk
``DERIVED_ATTRIBUTES`` and let each record say what it is aligned to, which
primary arrays it stores indices into and whether it was derived from face
topology. Adding a new cached attribute means adding one record here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

__all__ = ['DerivedAttribute', 'DERIVED_ATTRIBUTES', 'BBox', 'BSphere', 'attribute_names']

VERTICES = 'vertices'
FACES = 'faces'


@dataclass(frozen=True)
class DerivedAttribute:
    """One cached array on a TriMesh.

    Attributes
    ----------
    name : str
        Attribute name on the mesh.
    aligned_to : str
        ``'vertices'`` or ``'faces'``: row i belongs to vertex/face i.
    references : tuple of str
        Primary arrays whose indices are stored in the rows.
    from_faces : bool
        Computed from face connectivity; any face edit invalidates it.
    row_local : bool
        Each row depends only on its own aligned element, so filtering rows
        keeps it consistent even when other elements disappear.
    """
    name: str
    aligned_to: str
    references: Tuple[str, ...] = ()
    from_faces: bool = False
    row_local: bool = False

    def remap_action(self, changed) -> Optional[str]:
        """What a vertex remap must do with this attribute.

        ``changed`` is the set of primary arrays the remap altered. Returns
        ``'invalidate'``, ``'compact'`` or None (untouched).
        """
        if any(r in changed for r in self.references):
            return 'invalidate'
        if self.from_faces and FACES in changed and not (self.row_local and self.aligned_to == FACES):
            return 'invalidate'
        if self.aligned_to in changed:
            return 'compact'
        return None


DERIVED_ATTRIBUTES: Tuple[DerivedAttribute, ...] = (
    # per-vertex data, carried along with the vertices
    DerivedAttribute('normals', VERTICES),
    DerivedAttribute('colors', VERTICES),
    DerivedAttribute('confidences', VERTICES),
    DerivedAttribute('flags', VERTICES),
    # face-topology caches
    DerivedAttribute('pointareas', VERTICES, from_faces=True),
    DerivedAttribute('adjacentfaces', VERTICES, references=(FACES,), from_faces=True),
    DerivedAttribute('neighbors', VERTICES, references=(VERTICES,), from_faces=True),
    DerivedAttribute('cornerareas', FACES, from_faces=True, row_local=True),
    DerivedAttribute('across_edge', FACES, references=(FACES,), from_faces=True),
)


def attribute_names(aligned_to=None, from_faces=None):
    """Names of declared attributes, optionally filtered."""
    out = []
    for attr in DERIVED_ATTRIBUTES:
        if aligned_to is not None and attr.aligned_to != aligned_to:
            continue
        if from_faces is not None and attr.from_faces != from_faces:
            continue
        out.append(attr.name)
    return out


@dataclass
class BBox:
    min: np.ndarray = field(default_factory=lambda: np.zeros(3))
    max: np.ndarray = field(default_factory=lambda: np.zeros(3))
    valid: bool = False

    def center(self) -> np.ndarray:
        return 0.5 * (self.min + self.max)

    def size(self) -> np.ndarray:
        return self.max - self.min


@dataclass
class BSphere:
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    r: float = 0.0
    valid: bool = False
