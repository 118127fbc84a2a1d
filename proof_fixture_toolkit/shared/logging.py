"""
Logging helpers for the proof fixture toolkit.

Every toolkit logger hangs below the ``proof_fixture_toolkit`` root logger,
which carries a single console handler. The level comes from PF_LOG_LEVEL
unless a caller passes one explicitly.
"""

import logging
import os
from typing import Optional, Union

ROOT_LOGGER_NAME = "proof_fixture_toolkit"
_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _resolve_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    level_str = (level or os.getenv("PF_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, level_str, logging.INFO)


def _configure_root(level: Union[int, str, None]) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        root.addHandler(handler)
        root.setLevel(_resolve_level(level))
    elif level is not None:
        root.setLevel(_resolve_level(level))
    return root


def get_logger(
    name: Optional[str] = None, level: Union[int, str, None] = None
) -> logging.Logger:
    """Get a toolkit logger.

    Names outside the toolkit namespace are nested under it, so
    ``get_logger("tests")`` returns ``proof_fixture_toolkit.tests``.
    The console handler is attached once, on the root toolkit logger.
    """
    root = _configure_root(level)
    if not name or name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
