"""Logging utilities for meshcull.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All meshcull code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_meshcull_root() -> logging.Logger:
    """Ensure the 'meshcull' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'meshcull' logger.
    """
    root = logging.getLogger('meshcull')
    # NullHandlers installed by the package __init__ would swallow output
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = getattr(logging, str(level).upper(), None)
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> None:
    """Configure the 'meshcull' logger family level.

    This does NOT modify the process root logger.
    """
    root = _ensure_meshcull_root()
    root.setLevel(_to_level(level))


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'meshcull' namespace.

    If a level is provided, it sets the logger's level; otherwise the logger
    is set to NOTSET so it inherits from the 'meshcull' parent configured via
    configure_logging().
    """
    _ensure_meshcull_root()
    if not name.startswith('meshcull'):
        name = f'meshcull.{name}'
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
