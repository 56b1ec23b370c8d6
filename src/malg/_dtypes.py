"""
Data Type Definitions

Provides type-safe dtype constants, ctypes mapping and value coercion.
"""

import ctypes
from typing import Any, Union
from enum import Enum

from .error import TypeMismatch

__all__ = [
    'DType', 'bool_', 'uint8', 'int32', 'int64', 'uint32', 'uint64',
    'float32', 'float64',
    'normalize_dtype', 'validate_dtype',
    'dtype_itemsize', 'ctype_of', 'coerce', 'zero_of', 'infer_dtype',
    'from_numpy_dtype', 'to_numpy_dtype',
]


class DType(Enum):
    """
    Matrix Element Type Enumeration.

    Each member names the element type ``T`` stored in a matrix pool.

    Example:
        >>> from malg import DType, Matrix
        >>> m = Matrix(3, 3, dtype=DType.int32)
        >>>
        >>> # Or use module-level constants
        >>> import malg
        >>> m = Matrix(3, 3, dtype=malg.int32)
    """

    bool = 'bool'
    uint8 = 'uint8'
    int32 = 'int32'
    int64 = 'int64'
    uint32 = 'uint32'
    uint64 = 'uint64'
    float32 = 'float32'
    float64 = 'float64'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

bool_ = DType.bool
uint8 = DType.uint8
int32 = DType.int32
int64 = DType.int64
uint32 = DType.uint32
uint64 = DType.uint64
float32 = DType.float32
float64 = DType.float64


# =============================================================================
# Type Mapping
# =============================================================================

# dtype -> (ctypes type, python kind, itemsize)
_TYPE_MAP = {
    'bool': (ctypes.c_bool, bool, 1),
    'uint8': (ctypes.c_uint8, int, 1),
    'int32': (ctypes.c_int32, int, 4),
    'int64': (ctypes.c_int64, int, 8),
    'uint32': (ctypes.c_uint32, int, 4),
    'uint64': (ctypes.c_uint64, int, 8),
    'float32': (ctypes.c_float, float, 4),
    'float64': (ctypes.c_double, float, 8),
}

_NUMPY_NAMES = {
    'bool': 'bool_',
    'uint8': 'uint8',
    'int32': 'int32',
    'int64': 'int64',
    'uint32': 'uint32',
    'uint64': 'uint64',
    'float32': 'float32',
    'float64': 'float64',
}


# =============================================================================
# Type Utilities
# =============================================================================

def normalize_dtype(dtype: Union[str, DType]) -> str:
    """
    Normalize dtype to string.

    Args:
        dtype: String or DType enum

    Returns:
        String dtype

    Example:
        >>> normalize_dtype(DType.float32)
        'float32'
        >>> normalize_dtype('float64')
        'float64'
    """
    if isinstance(dtype, DType):
        return dtype.value
    elif isinstance(dtype, str):
        return dtype
    else:
        raise TypeMismatch(f"dtype must be str or DType, got {type(dtype)}")


def validate_dtype(dtype: Union[str, DType]) -> DType:
    """
    Validate dtype and return the DType member.

    Raises:
        TypeMismatch: If dtype is not supported
    """
    dtype_str = normalize_dtype(dtype)
    if dtype_str not in _TYPE_MAP:
        raise TypeMismatch(f"Invalid dtype: {dtype_str}. Valid: {sorted(_TYPE_MAP)}")
    return DType(dtype_str)


def dtype_itemsize(dtype: Union[str, DType]) -> int:
    """Get size in bytes for dtype."""
    return _TYPE_MAP[validate_dtype(dtype).value][2]


def ctype_of(dtype: Union[str, DType]):
    """Get the ctypes scalar type backing dtype."""
    return _TYPE_MAP[validate_dtype(dtype).value][0]


def coerce(value: Any, dtype: Union[str, DType]):
    """
    Convert value to the Python kind of dtype.

    Mirrors implicit conversion to the element type: floats written into an
    integer pool are truncated, anything written into a bool pool becomes
    True or False.

    Raises:
        TypeMismatch: If value cannot be converted, or is text
    """
    kind = _TYPE_MAP[validate_dtype(dtype).value][1]
    if isinstance(value, (str, bytes, bytearray)):
        raise TypeMismatch(f"Cannot convert {value!r} to {normalize_dtype(dtype)}: text is not numeric")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise TypeMismatch(f"Cannot convert {value!r} to {normalize_dtype(dtype)}: {e}")


def zero_of(dtype: Union[str, DType]):
    """Additive identity of dtype."""
    return coerce(0, dtype)


def infer_dtype(values) -> DType:
    """
    Infer dtype from a flat iterable of Python scalars.

    All bool -> bool, all integral -> int64, anything else -> float64.
    """
    all_bool = True
    all_int = True
    for v in values:
        if not isinstance(v, bool):
            all_bool = False
            if not isinstance(v, int):
                all_int = False
                break
    if all_bool:
        return DType.bool
    if all_int:
        return DType.int64
    return DType.float64


def to_numpy_dtype(dtype: Union[str, DType]):
    """Get numpy dtype equivalent."""
    import numpy as np
    return np.dtype(getattr(np, _NUMPY_NAMES[validate_dtype(dtype).value]))


def from_numpy_dtype(np_dtype) -> DType:
    """
    Map a numpy dtype onto DType.

    Raises:
        TypeMismatch: If numpy dtype has no counterpart
    """
    import numpy as np
    name = np.dtype(np_dtype).name
    if name not in _TYPE_MAP:
        raise TypeMismatch(f"Unsupported numpy dtype: {name}")
    return DType(name)
