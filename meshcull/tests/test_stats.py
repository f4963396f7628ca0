import io

import numpy as np

from meshcull import TriMesh, format_stats_table


def make_mesh():
    verts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0], [4, 4, 4]], dtype=float)
    faces = np.array([[0, 1, 2], [0, 2, 3]], dtype=int)
    return TriMesh(verts, faces)


def test_stats_track_removed_and_cascaded():
    mesh = make_mesh()
    mesh.remove_vertices([False, True, False, False, False])
    mesh.remove_unused_vertices()
    s = mesh.stats_summary()['remove_vertices']
    assert s['attempts'] == 2
    assert s['removed'] == 2
    assert s['cascaded'] == 1
    assert s['time_total'] >= s['time_max'] >= s['time_min'] >= 0.0


def test_reset_stats():
    mesh = make_mesh()
    mesh.remove_faces([True, False])
    mesh.reset_stats()
    s = mesh.stats_summary()['remove_faces']
    assert s['attempts'] == 0 and s['removed'] == 0 and s['time_total'] == 0.0
    mesh.reset_stats(drop_ops=True)
    assert mesh.stats_summary() == {}


def test_stats_table_formatting():
    mesh = make_mesh()
    assert format_stats_table(mesh.stats_summary()) == "<no stats>"
    mesh.remove_faces([False, True])
    table = format_stats_table(mesh.stats_summary())
    assert 'remove_faces' in table
    buf = io.StringIO()
    mesh.print_stats(file=buf)
    assert 'remove_faces' in buf.getvalue()


def test_sliver_faces_are_counted_once():
    h = np.sqrt(3.0) / 2.0
    verts = [(0, 0, 0), (0.1, 0, 0), (0.05, 0.1 * h, 0),
             (0.2, 0, 0), (0.3, 0, 0), (0.25, 0.1 * h, 0),
             (5, 0, 0), (7, 0, 0), (6, 0.05, 0)]
    faces = [(0, 1, 2), (3, 4, 5), (6, 7, 8)]
    mesh = TriMesh(np.array(verts, dtype=float), faces)
    mesh.remove_sliver_faces()
    summary = mesh.stats_summary()
    total = sum(s['removed'] for s in summary.values())
    assert total == 1
    assert len(mesh.faces) == 2
