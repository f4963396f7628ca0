"""Configuration objects for meshcull removal heuristics."""
from __future__ import annotations

from dataclasses import dataclass

from .constants import (SLIVER_LENGTH_FACTOR, SLIVER_COS2_THRESHOLD,
                        FEATURE_SIZE_SAMPLES, FEATURE_SIZE_SEED)


@dataclass
class RemovalConfig:
    """Tunables for sliver detection.

    Attributes
    ----------
    sliver_length_factor : float
        Faces whose three edges are all shorter than
        ``sliver_length_factor * mesh.feature_size()`` are never slivers.
    sliver_cos2_threshold : float
        A face is a sliver when the squared cosine of its smallest interior
        angle reaches this value (0.85 ~ angles below 22.8 degrees).
    feature_size_samples : int
        Max faces sampled when estimating the mesh feature size.
    feature_size_seed : int
        Seed for that sample, so repeated calls agree.
    """
    sliver_length_factor: float = SLIVER_LENGTH_FACTOR
    sliver_cos2_threshold: float = SLIVER_COS2_THRESHOLD
    feature_size_samples: int = FEATURE_SIZE_SAMPLES
    feature_size_seed: int = FEATURE_SIZE_SEED


__all__ = ['RemovalConfig']
