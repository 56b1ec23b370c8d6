"""Matrix Arithmetic.

Functional forms of the matrix operators. Every operation allocates a new
matrix for its result and leaves its operands untouched; validation runs
before any allocation.

Example:
    >>> from malg import Matrix, add, matmul, scale
    >>> a = Matrix.from_rows([[0, 1], [3, 4]])
    >>> scale(a, 2).tolist()
    [[0, 2], [6, 8]]
    >>> matmul(a, a).tolist()
    [[3, 4], [12, 19]]
"""

import numbers
from typing import Any

import numpy as np

from ._array import Array
from ._config import config
from ._dtypes import coerce, zero_of
from ._matrix import Matrix
from .error import DimensionMismatch, TypeMismatch, check_shape_match

__all__ = [
    'add',
    'matmul',
    'scale',
    'multiply',
    'transposed',
    'is_scalar',
]


# =============================================================================
# Validation
# =============================================================================

def is_scalar(value: Any) -> bool:
    """True for Python and numpy numeric scalars (bool included)."""
    return isinstance(value, (numbers.Number, np.bool_)) and not isinstance(value, Matrix)


def _require_matrix(value: Any, op: str) -> None:
    if not isinstance(value, Matrix):
        raise TypeMismatch(f"{op}: expected Matrix, got {type(value).__name__}")


def _require_same_dtype(a: Matrix, b: Matrix, op: str) -> None:
    if a.dtype is not b.dtype:
        raise TypeMismatch(f"{op}: dtypes {a.dtype.value} and {b.dtype.value} differ")


def _pool_of(values, like: Matrix) -> Array:
    return Array.from_list(values, like.dtype, config.alignment)


# =============================================================================
# Operations
# =============================================================================

def add(a: Matrix, b: Matrix) -> Matrix:
    """Elementwise sum ``C[i][j] = A[i][j] + B[i][j]``.

    Raises:
        DimensionMismatch: If the shapes differ.
        TypeMismatch: If the dtypes differ.
    """
    _require_matrix(a, "add")
    _require_matrix(b, "add")
    check_shape_match(a.shape, b.shape, "add")
    if a.is_empty:
        return Matrix(dtype=a.dtype)
    _require_same_dtype(a, b, "add")

    pool = _pool_of([x + y for x, y in zip(a._pool, b._pool)], a)
    return Matrix._from_pool(pool, a.rows, a.cols)


def matmul(a: Matrix, b: Matrix) -> Matrix:
    """Matrix product of shape ``(a.rows, b.cols)``.

    Each cell is ``sum(a[i][k] * b[k][j] for k in range(a.cols))``,
    accumulated from the additive identity of the element type.

    Raises:
        DimensionMismatch: If ``a.cols != b.rows``.
        TypeMismatch: If the dtypes differ.
    """
    _require_matrix(a, "matmul")
    _require_matrix(b, "matmul")
    if a.cols != b.rows:
        raise DimensionMismatch(
            f"matmul: inner dimensions differ ({a.rows}x{a.cols} * {b.rows}x{b.cols})"
        )
    if a.is_empty or b.is_empty:
        return Matrix(dtype=a.dtype)
    _require_same_dtype(a, b, "matmul")

    n, inner, p = a.rows, a.cols, b.cols
    lhs = a._pool.tolist()
    rhs = b._pool.tolist()
    zero = zero_of(a.dtype)

    out = []
    for i in range(n):
        row = i * inner
        for j in range(p):
            acc = zero
            for k in range(inner):
                acc += lhs[row + k] * rhs[k * p + j]
            out.append(acc)

    pool = _pool_of(out, a)
    return Matrix._from_pool(pool, n, p)


def scale(a: Matrix, s: Any) -> Matrix:
    """Elementwise product ``C[i][j] = A[i][j] * s``.

    ``s`` is first converted to the element type of ``a``, so
    ``scale(a, s)`` and ``s * a`` always agree.

    Raises:
        TypeMismatch: If ``s`` is not a numeric scalar.
    """
    _require_matrix(a, "scale")
    if not is_scalar(s):
        raise TypeMismatch(f"scale: expected numeric scalar, got {type(s).__name__}")
    if a.is_empty:
        return Matrix(dtype=a.dtype)

    s = coerce(s, a.dtype)
    pool = _pool_of([x * s for x in a._pool], a)
    return Matrix._from_pool(pool, a.rows, a.cols)


def multiply(a: Matrix, b: Matrix, s: Any = 1) -> Matrix:
    """Matrix product followed by a scalar factor: ``(a * b) * s``."""
    product = matmul(a, b)
    if s == 1:
        return product
    return scale(product, s)


def transposed(m: Matrix) -> Matrix:
    """Return a transposed deep copy of ``m``; ``m`` itself is unchanged."""
    _require_matrix(m, "transposed")
    out = m.copy()
    out.transpose()
    return out
