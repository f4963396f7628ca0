"""Central thresholds and small numeric constants.

Removal heuristics reference these names instead of scattering literals so
they can be tuned consistently.
"""
from __future__ import annotations

# Sliver classification
SLIVER_LENGTH_FACTOR: float = 4.0     # edges shorter than factor*feature_size never flag a face
SLIVER_COS2_THRESHOLD: float = 0.85   # squared cosine of the smallest interior angle

# Feature size sampling
FEATURE_SIZE_SAMPLES: int = 333       # max faces sampled for the median edge length
FEATURE_SIZE_SEED: int = 0

# Remap table sentinel for removed vertices
DELETED: int = -1

__all__ = [
    'SLIVER_LENGTH_FACTOR',
    'SLIVER_COS2_THRESHOLD',
    'FEATURE_SIZE_SAMPLES',
    'FEATURE_SIZE_SEED',
    'DELETED',
]
