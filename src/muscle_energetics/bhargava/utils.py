"""
utils.py

Small validation and logging helpers shared by the parameter, binding and
engine modules.

The public helpers:
- `safe_log_exception(msg, exc, **ctx)` : logs exceptions robustly
- `require_positive(value, name, error_cls)` : finite, strictly positive scalar
- `as_finite_array(values, name)` : 1-D float array with no NaN/inf entries
"""

from typing import Any, Type
import sys
import logging
import math

import numpy as np

from muscle_energetics.bhargava.errors import ComputationError

logger = logging.getLogger(__name__)


def safe_log_exception(msg: str, exc: Exception, **ctx: Any) -> None:
    """Log `exc` at ERROR with traceback, tagged with `key=value` context.

    If the logging call itself raises, the record is written to stderr as
    a `LOGGING FAILURE` line; the caller still raises its own error.
    """
    context = ' '.join(f"{k}={v}" for k, v in ctx.items())
    try:
        logger.exception('%s: %s [%s]', msg, exc, context)
    except Exception as log_exc:
        sys.stderr.write(f'LOGGING FAILURE ({type(log_exc).__name__}): {msg}: {exc} [{context}]\n')


def is_finite_number(value: Any) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def require_positive(value: Any, name: str, error_cls: Type[Exception]) -> float:
    """Return `value` as float, raising `error_cls` unless finite and > 0."""
    if not is_finite_number(value) or float(value) <= 0.0:
        raise error_cls(f"{name} must be a finite positive number, got {value!r}")
    return float(value)


def as_finite_array(values: Any, name: str) -> np.ndarray:
    """Convert `values` to a 1-D float array and reject NaN/inf entries."""
    try:
        arr = np.atleast_1d(np.asarray(values, dtype=float))
    except (TypeError, ValueError) as e:
        raise ComputationError(f"{name} is not numeric: {e}") from e
    if arr.ndim != 1:
        raise ComputationError(f"{name} must be 1-D, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        bad = np.flatnonzero(~np.isfinite(arr))
        raise ComputationError(f"{name} has non-finite entries at rows {bad.tolist()}")
    return arr
