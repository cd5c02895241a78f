"""Logging setup for symtree.

Every module logs through logging.getLogger(__name__), so all output hangs
off the "symtree" logger. A host tool either configures logging itself or
calls configure_logging() once.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO, Union

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_HANDLER_NAME = "symtree-stream"


def configure_logging(level: Union[int, str] = logging.WARNING,
                      stream: TextIO | None = None) -> logging.Logger:
    """Install a single stream handler on the "symtree" logger.

    Calling it again replaces the handler instead of stacking a second one.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level {level!r}")
        level = resolved

    root = logging.getLogger("symtree")
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(level)
    return root
