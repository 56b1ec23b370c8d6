"""Storage Manager.

Allocates and releases the value pool of a matrix and derives its row
index. The row index is never stored as independent data: it is a
``range`` of row-start offsets computed from ``(rows, cols)``, so it can
always be rebuilt after the pool layout changes.
"""

import logging
import operator
from typing import Any, Optional, Tuple, Union

from ._array import Array
from ._config import config
from ._dtypes import DType, validate_dtype
from .error import InvalidDimension

__all__ = ['allocate', 'free', 'build_row_index', 'as_dimension']

logger = logging.getLogger("malg.storage")


def as_dimension(value: Any, name: str) -> int:
    """Validate a row or column count.

    Raises:
        InvalidDimension: If value is not an integer >= 1.
    """
    if isinstance(value, bool):
        raise InvalidDimension(f"{name} must be an integer, got {value!r}")
    try:
        n = operator.index(value)
    except TypeError:
        raise InvalidDimension(f"{name} must be an integer, got {type(value).__name__}") from None
    if n < 1:
        raise InvalidDimension(f"number of {name} is {n}")
    return n


def build_row_index(rows: int, cols: int) -> range:
    """Row-start offsets into a row-major pool: ``row_index[i] == i * cols``."""
    return range(0, rows * cols, cols)


def allocate(
    rows: int,
    cols: int,
    fill: Any = None,
    dtype: Optional[Union[str, DType]] = None,
) -> Tuple[Array, range]:
    """Allocate a contiguous pool and its row index.

    Args:
        rows: Number of rows (>= 1).
        cols: Number of columns (>= 1).
        fill: Initial value of every element. ``None`` leaves the pool at
            the additive identity of ``dtype``.
        dtype: Element type; defaults to ``config.default_dtype``.

    Returns:
        ``(pool, row_index)``

    Raises:
        InvalidDimension: If rows or cols is not an integer >= 1.
        AllocationFailure: If the pool cannot be allocated.
    """
    rows = as_dimension(rows, "rows")
    cols = as_dimension(cols, "cols")
    dtype = validate_dtype(dtype if dtype is not None else config.default_dtype)

    pool = Array(rows * cols, dtype, config.alignment)
    if fill is not None:
        pool.fill(fill)
    return pool, build_row_index(rows, cols)


def free(pool: Optional[Array], row_index: Optional[range] = None) -> None:
    """Release a pool and its row index.

    The pool's buffer is dropped immediately, so views still holding it
    raise IndexOutOfRange instead of reaching freed storage. Safe to call
    with ``None``; the caller drops its references afterwards.
    """
    if pool is None:
        return
    logger.debug("released pool: %d x %s", pool.size, pool.dtype.value)
    pool.release()
