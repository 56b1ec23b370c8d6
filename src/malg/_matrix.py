"""Dense Matrix Container.

A ``Matrix`` owns exactly one contiguous pool of ``rows * cols`` elements
in row-major order. Rows are addressed through a derived row index
(``row_index[i] == i * cols``) that is rebuilt whenever the layout
changes, never through separately allocated rows.

Ownership:
    - Copying (``copy()``, ``Matrix.copy_of``, ``copy.copy``,
      ``copy.deepcopy``) allocates a new pool.
    - Moving (``Matrix.move``, ``assign_move``) transfers the pool and
      leaves the source empty (``rows == cols == 0``, no pool).
    - No two matrices ever share a pool.

Thread safety:
    None. Concurrent mutation of one instance must be serialised by the
    caller.

Example:
    >>> from malg import Matrix
    >>> m = Matrix.from_rows([[11, 12, 13, 14], [21, 22, 23, 24]])
    >>> m.transpose()
    >>> m.shape
    (4, 2)
    >>> m[0][1], m[3, 1]
    (21, 24)
"""

import logging
import operator
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ._array import Array
from ._config import config
from ._dtypes import (
    DType,
    from_numpy_dtype,
    infer_dtype,
    to_numpy_dtype,
    validate_dtype,
)
from ._storage import allocate, build_row_index, free
from ._transpose import transpose_cycles, transpose_square
from ._view import RowView
from .error import (
    DimensionMismatch,
    IndexOutOfRange,
    InvalidDimension,
    TypeMismatch,
    check_shape_match,
)

__all__ = ['Matrix']

logger = logging.getLogger("malg.matrix")


class Matrix:
    """Dynamically sized 2-D numeric matrix over one contiguous pool.

    Args:
        rows: Number of rows (>= 1), or a nested row-major sequence when
            ``cols`` is omitted.
        cols: Number of columns (>= 1).
        fill: Initial value of every element; defaults to the additive
            identity of ``dtype``.
        dtype: Element type; defaults to ``config.default_dtype``.

    ``Matrix()`` with no dimensions is the empty state.

    Raises:
        InvalidDimension: If rows or cols is 0, negative or not an integer.
        AllocationFailure: If the pool cannot be allocated.
    """

    __slots__ = ('_pool', '_row_index', '_rows', '_cols', '_dtype', '__weakref__')

    # numpy scalars and arrays defer to our reflected operators
    __array_ufunc__ = None

    def __init__(
        self,
        rows: Union[int, Sequence[Sequence[Any]], None] = None,
        cols: Optional[int] = None,
        fill: Any = None,
        dtype: Optional[Union[str, DType]] = None,
    ):
        if rows is None and cols is None:
            if fill is not None:
                raise InvalidDimension("fill value given without dimensions")
            self._set_empty(validate_dtype(dtype if dtype is not None else config.default_dtype))
            return

        if cols is None and not isinstance(rows, int) and hasattr(rows, '__iter__'):
            if fill is not None:
                raise InvalidDimension("fill value given with a nested literal")
            self._set_empty(DType.float64)
            self._take_state(Matrix.from_rows(rows, dtype=dtype))
            return

        if rows is None or cols is None:
            raise InvalidDimension("both rows and cols are required")

        pool, row_index = allocate(rows, cols, fill, dtype)
        self._pool = pool
        self._row_index = row_index
        self._rows = len(row_index)
        self._cols = pool.size // self._rows
        self._dtype = pool.dtype

    # -------------------------------------------------------------------------
    # Internal State
    # -------------------------------------------------------------------------

    def _set_empty(self, dtype: DType) -> None:
        self._pool = None
        self._row_index = range(0)
        self._rows = 0
        self._cols = 0
        self._dtype = dtype

    def _take_state(self, other: 'Matrix') -> None:
        """Steal other's pool and leave other empty."""
        self._pool = other._pool
        self._row_index = other._row_index
        self._rows = other._rows
        self._cols = other._cols
        self._dtype = other._dtype
        other._set_empty(other._dtype)

    @classmethod
    def _from_pool(cls, pool: Array, rows: int, cols: int) -> 'Matrix':
        """Wrap an already allocated pool; the new matrix takes ownership."""
        mat = cls.__new__(cls)
        mat._pool = pool
        mat._row_index = build_row_index(rows, cols)
        mat._rows = rows
        mat._cols = cols
        mat._dtype = pool.dtype
        return mat

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_rows(
        cls,
        data: Sequence[Sequence[Any]],
        dtype: Optional[Union[str, DType]] = None,
    ) -> 'Matrix':
        """Build a matrix from a nested row-major literal, copying row by row.

        Without ``dtype`` the element type is inferred: all ``bool`` gives
        ``bool``, all integral gives ``int64``, anything else ``float64``.

        Raises:
            InvalidDimension: If there are no rows or the first row is empty.
            DimensionMismatch: If rows have different lengths.
        """
        if isinstance(data, np.ndarray):
            return cls.from_numpy(data, dtype=dtype)

        try:
            rows = [list(r) for r in data]
        except TypeError:
            raise InvalidDimension("literal must be a sequence of row sequences") from None
        if not rows:
            raise InvalidDimension("literal has no rows")
        ncols = len(rows[0])
        if ncols == 0:
            raise InvalidDimension("literal rows are empty")
        for i, r in enumerate(rows):
            if len(r) != ncols:
                raise DimensionMismatch(f"row {i} has {len(r)} values, expected {ncols}")

        flat = [v for r in rows for v in r]
        if dtype is None:
            dtype = infer_dtype(flat)
        pool, _ = allocate(len(rows), ncols, None, dtype)
        pool[:] = flat
        return cls._from_pool(pool, len(rows), ncols)

    @classmethod
    def from_numpy(cls, arr, dtype: Optional[Union[str, DType]] = None) -> 'Matrix':
        """Copy a 2-D numpy array into a new matrix.

        Raises:
            InvalidDimension: If ``arr`` is not 2-D or has a zero extent.
            TypeMismatch: If the numpy dtype has no matrix counterpart.
        """
        arr = np.asarray(arr)
        if arr.ndim != 2:
            raise InvalidDimension(f"expected 2-D array, got {arr.ndim}-D")
        rows, cols = arr.shape
        dtype = validate_dtype(dtype) if dtype is not None else from_numpy_dtype(arr.dtype)
        pool, _ = allocate(rows, cols, None, dtype)
        pool[:] = arr.astype(to_numpy_dtype(dtype)).ravel().tolist()
        return cls._from_pool(pool, rows, cols)

    @classmethod
    def copy_of(cls, src: 'Matrix') -> 'Matrix':
        """Deep copy: a new matrix with its own pool and src's shape and values."""
        if not isinstance(src, Matrix):
            raise TypeMismatch(f"expected Matrix, got {type(src).__name__}")
        if src.is_empty:
            return cls(dtype=src._dtype)
        return cls._from_pool(src._pool.copy(), src._rows, src._cols)

    @classmethod
    def move(cls, src: 'Matrix') -> 'Matrix':
        """Move construction: take src's pool without copying; src becomes empty."""
        if not isinstance(src, Matrix):
            raise TypeMismatch(f"expected Matrix, got {type(src).__name__}")
        mat = cls.__new__(cls)
        mat._set_empty(src._dtype)
        mat._take_state(src)
        logger.debug("moved %dx%d pool", mat._rows, mat._cols)
        return mat

    def copy(self) -> 'Matrix':
        """Return a deep copy."""
        return Matrix.copy_of(self)

    def __copy__(self) -> 'Matrix':
        return Matrix.copy_of(self)

    def __deepcopy__(self, memo) -> 'Matrix':
        return Matrix.copy_of(self)

    # -------------------------------------------------------------------------
    # Assignment & Release
    # -------------------------------------------------------------------------

    def assign(self, src: 'Matrix') -> 'Matrix':
        """Copy-assign src's values into this matrix's existing pool.

        Assignment never resizes: the shapes must already match.

        Raises:
            DimensionMismatch: If the shapes differ.
            TypeMismatch: If the dtypes differ.
        """
        if src is self:
            return self
        if not isinstance(src, Matrix):
            raise TypeMismatch(f"expected Matrix, got {type(src).__name__}")
        check_shape_match(self.shape, src.shape, "assign")
        if self.is_empty:
            return self
        if self._dtype is not src._dtype:
            raise TypeMismatch(f"assign: dtypes {self._dtype.value} and {src._dtype.value} differ")
        self._pool.copy_from(src._pool)
        return self

    def assign_move(self, src: 'Matrix') -> 'Matrix':
        """Move-assign: swap state with src, then release what src now holds.

        The net effect is that this matrix holds src's former data and src
        is empty.
        """
        if src is self:
            return self
        if not isinstance(src, Matrix):
            raise TypeMismatch(f"expected Matrix, got {type(src).__name__}")
        self.swap(src)
        src.release()
        return self

    def swap(self, other: 'Matrix') -> None:
        """Exchange the entire internal state of two matrices."""
        if not isinstance(other, Matrix):
            raise TypeMismatch(f"expected Matrix, got {type(other).__name__}")
        self._pool, other._pool = other._pool, self._pool
        self._row_index, other._row_index = other._row_index, self._row_index
        self._rows, other._rows = other._rows, self._rows
        self._cols, other._cols = other._cols, self._cols
        self._dtype, other._dtype = other._dtype, self._dtype

    def release(self) -> None:
        """Free pool and row index, leaving the empty state. Idempotent."""
        free(self._pool, self._row_index)
        self._set_empty(self._dtype)

    def __enter__(self) -> 'Matrix':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    nrows = rows
    ncols = cols

    def row_count(self) -> int:
        """Number of rows (0 for the empty state)."""
        return self._rows

    def col_count(self) -> int:
        """Number of columns (0 for the empty state)."""
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def is_empty(self) -> bool:
        return self._pool is None

    @property
    def pool(self) -> Optional[Array]:
        """The owned value pool (``None`` when empty)."""
        return self._pool

    @property
    def row_index(self) -> range:
        """Row-start offsets into the pool."""
        return self._row_index

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def row(self, i: int) -> RowView:
        """Non-owning view of row ``i``.

        Raises:
            IndexOutOfRange: Unless ``0 <= i < rows``.
        """
        try:
            i = operator.index(i)
        except TypeError:
            raise IndexOutOfRange(f"row index must be an integer, got {type(i).__name__}") from None
        if not 0 <= i < self._rows:
            raise IndexOutOfRange(f"row {i} out of range [0, {self._rows})")
        return RowView(self._pool, self._row_index[i], self._cols)

    @staticmethod
    def _cell_key(key: tuple) -> Tuple[Any, Any]:
        if len(key) != 2:
            raise IndexOutOfRange(f"cell index needs (row, col), got {len(key)} indices")
        return key

    def __getitem__(self, key):
        if isinstance(key, tuple):
            i, j = self._cell_key(key)
            return self.row(i)[j]
        return self.row(key)

    def __setitem__(self, key, value):
        if isinstance(key, tuple):
            i, j = self._cell_key(key)
            self.row(i)[j] = value
            return
        view = self.row(key)
        try:
            values = list(value)
        except TypeError:
            raise DimensionMismatch(
                f"row assignment needs {self._cols} values, got {type(value).__name__}"
            ) from None
        if len(values) != self._cols:
            raise DimensionMismatch(f"row assignment needs {self._cols} values, got {len(values)}")
        start = view.offset
        self._pool[start:start + self._cols] = values

    def __len__(self) -> int:
        return self._rows

    def __iter__(self) -> Iterator[RowView]:
        for i in range(self._rows):
            yield self.row(i)

    # -------------------------------------------------------------------------
    # Transpose
    # -------------------------------------------------------------------------

    def transpose(self) -> None:
        """Transpose in place.

        Square matrices swap across the diagonal. Non-square matrices are
        permuted cycle by cycle inside the same pool, after which the shape
        is swapped and the row index rebuilt with the new stride.
        """
        if self.is_empty:
            return
        if self._rows == self._cols:
            transpose_square(self._pool, self._rows)
            return
        transpose_cycles(self._pool, self._rows, self._cols)
        self._rows, self._cols = self._cols, self._rows
        self._row_index = build_row_index(self._rows, self._cols)

    @property
    def T(self) -> 'Matrix':
        """Transposed copy."""
        from ._ops import transposed
        return transposed(self)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        from ._ops import add
        return add(self, other)

    def __mul__(self, other):
        from ._ops import is_scalar, matmul, scale
        if isinstance(other, Matrix):
            return matmul(self, other)
        if is_scalar(other):
            return scale(self, other)
        return NotImplemented

    def __rmul__(self, other):
        from ._ops import is_scalar, scale
        if is_scalar(other):
            return scale(self, other)
        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        from ._ops import matmul
        return matmul(self, other)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self.tolist() == other.tolist()

    __hash__ = None

    # -------------------------------------------------------------------------
    # Conversion & Representation
    # -------------------------------------------------------------------------

    def tolist(self) -> List[List[Any]]:
        """Nested row-major lists."""
        cols = self._cols
        return [self._pool[start:start + cols] for start in self._row_index]

    def to_numpy(self):
        """Copy into a ``(rows, cols)`` numpy array."""
        if self.is_empty:
            return np.empty((0, 0), dtype=to_numpy_dtype(self._dtype))
        return self._pool.to_numpy().reshape(self._rows, self._cols)

    def __repr__(self) -> str:
        if self.is_empty:
            return "Matrix(empty)"
        rows = self.tolist()
        if len(rows) > 6:
            body = ", ".join(str(r) for r in rows[:3]) + ", ..., " + ", ".join(str(r) for r in rows[-3:])
        else:
            body = ", ".join(str(r) for r in rows)
        return f"Matrix({self._rows}x{self._cols}, dtype={self._dtype.value}, [{body}])"
