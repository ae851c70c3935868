"""
Process-wide default precision.

Every evaluation snapshots a precision once, at its start, and uses it for
all literals, constants and operations of that evaluation. The value here is
only the fallback used when the evaluation context does not override it.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)

# Significant decimal digits used when nothing else is configured
DEFAULT_PRECISION = 64

_lock = threading.Lock()
_default_precision = DEFAULT_PRECISION


def get_default_precision() -> int:
    """Returns the process-wide default precision in significant digits."""
    with _lock:
        return _default_precision


def set_default_precision(precision: int) -> None:
    """
    Sets the process-wide default precision.

    Non-positive values are ignored and the previous setting is retained.
    """
    global _default_precision

    if precision <= 0:
        logger.warning("precision_ignored", extra={"precision": precision})
        return

    with _lock:
        previous = _default_precision
        _default_precision = precision

    logger.info(
        "default_precision_changed",
        extra={"previous": previous, "precision": precision},
    )


def resolve_precision(precision: Optional[int]) -> int:
    """Returns the given precision, or the process-wide default when unset."""
    if precision is None or precision <= 0:
        return get_default_precision()
    return precision
