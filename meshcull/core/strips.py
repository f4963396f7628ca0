"""Triangle strip encoding.

Strips are stored flat as ``[len0, v, v, v, ..., len1, v, v, v, ...]``, each
strip preceded by its vertex count. Vertex k >= 2 of a strip closes the face
``(s[k-2], s[k-1], s[k])`` when ``k - 2`` is even and ``(s[k-1], s[k-2], s[k])``
when it is odd, so every face keeps the winding it had before stripification.
"""
from __future__ import annotations
import numpy as np

__all__ = ['stripify', 'unpack_strips', 'strip_count']


def stripify(faces):
    """Greedily pack faces into strips.

    Each strip starts at the lowest-index unused face and grows while the
    next consistently oriented neighbor across the last edge is unused.

    Parameters
    ----------
    faces : (M,3) array-like of int

    Returns
    -------
    np.ndarray
        (K,) int32 length-prefixed strip array; empty when there are no faces.
    """
    F = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    nf = len(F)
    if nf == 0:
        return np.empty((0,), dtype=np.int32)
    rows = F.tolist()
    # directed edge -> (face, third vertex)
    directed = {}
    for fi, (a, b, c) in enumerate(rows):
        directed.setdefault((a, b), (fi, c))
        directed.setdefault((b, c), (fi, a))
        directed.setdefault((c, a), (fi, b))
    used = [False] * nf
    out = []
    for fi in range(nf):
        if used[fi]:
            continue
        used[fi] = True
        strip = list(rows[fi])
        while True:
            p, q = strip[-2], strip[-1]
            key = (q, p) if (len(strip) - 2) % 2 else (p, q)
            hit = directed.get(key)
            if hit is None or used[hit[0]]:
                break
            used[hit[0]] = True
            strip.append(hit[1])
        out.append(len(strip))
        out.extend(strip)
    return np.asarray(out, dtype=np.int32)


def unpack_strips(tstrips):
    """Expand a length-prefixed strip array back into an (M,3) int32 face array."""
    ts = np.asarray(tstrips, dtype=np.int64).ravel().tolist()
    faces = []
    i = 0
    n = len(ts)
    while i < n:
        length = int(ts[i])
        strip = ts[i + 1:i + 1 + length]
        if len(strip) != length:
            raise ValueError(f"truncated triangle strip at offset {i}: expected {length} vertices, got {len(strip)}")
        i += 1 + length
        for k in range(2, length):
            a, b, c = strip[k - 2], strip[k - 1], strip[k]
            if (k - 2) % 2:
                faces.append((b, a, c))
            else:
                faces.append((a, b, c))
    return np.asarray(faces, dtype=np.int32).reshape(-1, 3)


def strip_count(tstrips) -> int:
    """Number of strips in a length-prefixed strip array."""
    ts = np.asarray(tstrips, dtype=np.int64).ravel()
    count = 0
    i = 0
    while i < len(ts):
        i += 1 + int(ts[i])
        count += 1
    return count
