#!/usr/bin/env python3
"""
meshcull Example: Sliver Cleanup Workflow

Builds a fine grid with a few stray triangles attached far away, removes the
long skinny ones, purges the vertices they leave behind and checks the result.

What this example shows:
1. Building a TriMesh and warming a few caches
2. Removing sliver faces with the default and a custom RemovalConfig
3. Purging unreferenced vertices
4. Validating consistency and printing per-operation stats
"""

import numpy as np

from meshcull import (TriMesh, RemovalConfig, check_mesh_consistency, configure_logging,
                      remove_sliver_faces, remove_unused_vertices)


def build_grid(n, spacing):
    xs = np.arange(n + 1) * spacing
    verts = [(x, y, 0.0) for y in xs for x in xs]
    faces = []
    for j in range(n):
        for i in range(n):
            a = j * (n + 1) + i
            b, c = a + 1, a + n + 1
            faces.append((a, b, c + 1))
            faces.append((a, c + 1, c))
    return verts, faces


def add_triangle(verts, faces, p0, p1, p2):
    base = len(verts)
    verts.extend([p0, p1, p2])
    faces.append((base, base + 1, base + 2))


def main():
    configure_logging('INFO')
    verts, faces = build_grid(8, 0.1)
    add_triangle(verts, faces, (5, 0, 0), (7, 0, 0), (6, 0.05, 0))          # long sliver
    add_triangle(verts, faces, (10, 0, 0), (10.9, 0, 0), (10.45, 0.002, 0))  # another one
    add_triangle(verts, faces, (20, 0, 0), (20.3, 0, 0), (20.15, 0.26, 0))   # well shaped
    mesh = TriMesh(np.array(verts, dtype=float), np.array(faces, dtype=int))
    mesh.need_tstrips()
    mesh.need_bsphere()
    print(f"Initial: {len(mesh.vertices)} vertices, {len(mesh.faces)} faces, "
          f"feature size {mesh.feature_size():.4f}")

    remove_sliver_faces(mesh)
    print(f"After sliver removal: {len(mesh.faces)} faces")

    remove_sliver_faces(mesh, config=RemovalConfig(sliver_length_factor=2.0))
    remove_unused_vertices(mesh)
    print(f"After purge: {len(mesh.vertices)} vertices, {len(mesh.faces)} faces")

    ok, msgs = check_mesh_consistency(mesh, verbose=True)
    print("Consistent:", ok)
    mesh.print_stats()


if __name__ == "__main__":
    main()
