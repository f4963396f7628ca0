"""Exceptions raised by meshcull operations."""
from __future__ import annotations

__all__ = ['ContractViolation']


class ContractViolation(ValueError):
    """A caller broke an operation precondition (e.g. a mask of the wrong length).

    Raised before the mesh is mutated; there is no partial recovery.
    """
