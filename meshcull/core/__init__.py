"""Implementation modules of meshcull; import public names from ``meshcull``."""
