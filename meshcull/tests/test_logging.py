import logging

import numpy as np

from meshcull import TriMesh, configure_logging, get_logger, remove_faces


def test_loggers_live_under_package_namespace():
    log = get_logger('custom')
    assert log.name == 'meshcull.custom'
    assert get_logger('meshcull.remove').name == 'meshcull.remove'
    assert logging.getLogger('meshcull').propagate is False


def test_configure_logging_sets_family_level():
    pkg = logging.getLogger('meshcull')
    prev = pkg.level
    try:
        configure_logging('WARNING')
        assert pkg.level == logging.WARNING
        configure_logging('not-a-level')
        assert pkg.level == logging.INFO
    finally:
        pkg.setLevel(prev)


def test_removal_progress_is_logged(capture_test_logs):
    verts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    mesh = TriMesh(verts, [[0, 1, 2], [0, 2, 3]])
    remove_faces(mesh, [False, False])
    remove_faces(mesh, [True, False])
    out = capture_test_logs.getvalue()
    assert 'Removing faces...' in out
    assert 'None removed.' in out
    assert '1 faces removed' in out


def test_strip_building_logs_strip_count(capture_test_logs):
    verts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0], [0, 2, 0]], dtype=float)
    mesh = TriMesh(verts, [[0, 1, 2], [2, 1, 3], [2, 3, 4]])
    mesh.need_tstrips()
    assert '3 faces in 1 strips' in capture_test_logs.getvalue()
