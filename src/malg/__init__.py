"""
malg - Matrix Algebra

Dense, dynamically sized 2-D numeric matrices over one contiguous pool:
- Bounds-checked row/cell access through non-owning row views
- Deep copy and move (pool transfer) semantics
- Addition, matrix product and scalar product (both operand orders)
- In-place transpose, including the permutation-cycle algorithm for
  non-square matrices (the pool is reused, never reallocated)

Architecture:
    ┌──────────────────────────────────────────────┐
    │                   Matrix                     │
    ├──────────────────────────────────────────────┤
    │  Storage: Array pool + derived row index     │
    │  Access:  RowView                            │
    │  Ops:     add | matmul | scale               │
    │  Transpose: square swap | cycle permutation  │
    └──────────────────────────────────────────────┘

Example:
    >>> import malg
    >>> from malg import Matrix
    >>>
    >>> a = Matrix.from_rows([[0, 1], [3, 4]])
    >>> (2 * a).tolist()
    [[0, 2], [6, 8]]
    >>>
    >>> b = Matrix.from_rows([[11, 12, 13, 14], [21, 22, 23, 24]])
    >>> b.transpose()
    >>> b.shape
    (4, 2)
"""

__version__ = '0.3.0'

from ._dtypes import (
    DType,
    bool_,
    uint8,
    int32,
    int64,
    uint32,
    uint64,
    float32,
    float64,
    normalize_dtype,
    validate_dtype,
)

from .error import (
    MalgError,
    InvalidDimension,
    AllocationFailure,
    DimensionMismatch,
    IndexOutOfRange,
    TypeMismatch,
)

from ._config import (
    config,
    get_config,
    StorageConfig,
    AccessConfig,
    MalgConfig,
)

from ._array import Array
from ._storage import allocate, free
from ._view import RowView
from ._transpose import transpose_square, transpose_cycles
from ._matrix import Matrix
from ._ops import add, matmul, scale, multiply, transposed

__all__ = [
    # Version
    '__version__',

    # Core classes
    'Matrix',
    'RowView',
    'Array',

    # Type constants
    'DType',
    'bool_',
    'uint8',
    'int32',
    'int64',
    'uint32',
    'uint64',
    'float32',
    'float64',
    'normalize_dtype',
    'validate_dtype',

    # Errors
    'MalgError',
    'InvalidDimension',
    'AllocationFailure',
    'DimensionMismatch',
    'IndexOutOfRange',
    'TypeMismatch',

    # Configuration
    'config',
    'get_config',
    'StorageConfig',
    'AccessConfig',
    'MalgConfig',

    # Storage
    'allocate',
    'free',

    # Operations
    'add',
    'matmul',
    'scale',
    'multiply',
    'transposed',
    'transpose_square',
    'transpose_cycles',
]
