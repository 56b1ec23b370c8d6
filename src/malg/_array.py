"""
Contiguous Typed Buffer

Pure Python/ctypes array used as the value pool of a matrix. One Array is
one aligned allocation; matrices never split it into per-row allocations.
"""

import ctypes
import logging
from typing import Union, List

from ._config import check_alignment
from ._dtypes import DType, ctype_of, coerce, dtype_itemsize, to_numpy_dtype, validate_dtype
from .error import AllocationFailure, IndexOutOfRange, TypeMismatch

__all__ = ['Array']

logger = logging.getLogger("malg.storage")


class Array:
    """
    Lightweight contiguous array with C-compatible memory layout.

    Features:
    - Memory-aligned allocation
    - Zero-initialised storage
    - Bounds-checked element access
    - In-place element swap for permutation algorithms

    Attributes:
        dtype (DType): Element type
        size (int): Number of elements
        nbytes (int): Total bytes
        ptr (int): C pointer address (read-only)

    Example:
        >>> arr = Array(1000, dtype='float32')
        >>> arr[0] = 3.14
        >>> arr.swap(0, 999)
        >>> arr.release()
    """

    __slots__ = ('_size', '_dtype', '_align', '_ctype', '_itemsize', '_nbytes', '_data', '_owner')

    def __init__(
        self,
        size: int,
        dtype: Union[str, DType] = DType.float64,
        align: int = 64
    ):
        """
        Allocate a zero-initialised array.

        Args:
            size: Number of elements
            dtype: Data type (string or DType enum)
            align: Memory alignment in bytes

        Raises:
            ValueError: If size is negative or align is not a power of two
            AllocationFailure: If the allocator cannot satisfy the request
        """
        if size < 0:
            raise ValueError(f"Array size must be non-negative, got {size}")
        check_alignment(align)

        self._size = size
        self._dtype = validate_dtype(dtype)
        self._align = align
        self._ctype = ctype_of(self._dtype)
        self._itemsize = dtype_itemsize(self._dtype)
        self._nbytes = size * self._itemsize

        if size == 0:
            self._data = None
            self._owner = None
            return

        # Allocate extra space so the typed view can start on an aligned address
        try:
            buffer = (ctypes.c_uint8 * (align + self._nbytes))()
        except (MemoryError, OverflowError, ValueError) as e:
            raise AllocationFailure(
                f"cannot allocate {size} x {self._dtype.value} ({self._nbytes} bytes): {e}"
            ) from e

        addr = ctypes.addressof(buffer)
        aligned_addr = (addr + align - 1) & ~(align - 1)

        self._data = (self._ctype * size).from_address(aligned_addr)
        self._owner = buffer  # Keep reference to prevent GC
        logger.debug("allocated pool: %d x %s (%d bytes)", size, self._dtype.value, self._nbytes)

    @property
    def size(self) -> int:
        """Number of elements."""
        return self._size

    @property
    def dtype(self) -> DType:
        """Element type."""
        return self._dtype

    @property
    def nbytes(self) -> int:
        """Total bytes."""
        return self._nbytes

    @property
    def itemsize(self) -> int:
        """Bytes per element."""
        return self._itemsize

    @property
    def alignment(self) -> int:
        return self._align

    @property
    def ptr(self) -> int:
        """C pointer address (read-only)."""
        if self._data is None:
            return 0
        return ctypes.addressof(self._data)

    # -------------------------------------------------------------------------
    # Initialization Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_list(cls, data: List, dtype: Union[str, DType] = DType.float64, align: int = 64) -> 'Array':
        """Create array from Python list."""
        arr = cls(len(data), dtype, align)
        if arr._data is not None:
            arr._data[:] = [coerce(v, arr._dtype) for v in data]
        return arr

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def _check_index(self, idx: int) -> int:
        if self._data is None:
            raise IndexOutOfRange("Empty array")
        if idx < 0:
            idx += self._size
        if idx < 0 or idx >= self._size:
            raise IndexOutOfRange(f"Index {idx} out of bounds [0, {self._size})")
        return idx

    def __getitem__(self, idx: Union[int, slice]):
        """Get element(s) by index."""
        if isinstance(idx, slice):
            if self._data is None:
                return []
            return self._data[idx]
        return self._data[self._check_index(idx)]

    def __setitem__(self, idx: Union[int, slice], value):
        """Set element(s) by index."""
        if isinstance(idx, slice):
            indices = range(*idx.indices(self._size))
            if hasattr(value, '__iter__'):
                values = [coerce(v, self._dtype) for v in value]
                if len(values) != len(indices):
                    raise ValueError(
                        f"cannot assign {len(values)} values to {len(indices)} elements"
                    )
                for i, v in zip(indices, values):
                    self._data[i] = v
            else:
                v = coerce(value, self._dtype)
                for i in indices:
                    self._data[i] = v
            return
        self._data[self._check_index(idx)] = coerce(value, self._dtype)

    def __len__(self) -> int:
        return self._size

    def __iter__(self):
        if self._data is None:
            return iter(())
        return iter(self._data)

    def swap(self, i: int, j: int) -> None:
        """Exchange elements i and j in place."""
        data = self._data
        data[i], data[j] = data[j], data[i]

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def tobytes(self) -> bytes:
        """Convert to bytes."""
        if self._data is None:
            return b''
        return bytes(self._data)

    def tolist(self) -> List:
        """Convert to Python list."""
        if self._data is None:
            return []
        return list(self._data)

    def to_numpy(self):
        """
        Convert to a 1-D numpy array (copy).

        Returns:
            numpy.ndarray
        """
        import numpy as np

        np_dtype = to_numpy_dtype(self._dtype)
        if self._data is None:
            return np.array([], dtype=np_dtype)
        return np.frombuffer(self.tobytes(), dtype=np_dtype).copy()

    # -------------------------------------------------------------------------
    # Copy Operations
    # -------------------------------------------------------------------------

    def copy(self) -> 'Array':
        """Create a deep copy."""
        new = Array(self._size, self._dtype, self._align)
        if self._data is not None:
            ctypes.memmove(new.ptr, self.ptr, self.nbytes)
        return new

    def copy_from(self, other: 'Array') -> None:
        """Overwrite every element with the contents of an equally sized array."""
        if other._dtype is not self._dtype:
            raise TypeMismatch(f"cannot copy {other._dtype.value} into {self._dtype.value}")
        if other._size != self._size:
            raise ValueError(f"size mismatch: {other._size} != {self._size}")
        if self._data is not None:
            ctypes.memmove(self.ptr, other.ptr, self.nbytes)

    def fill(self, value) -> None:
        """Fill array with a constant value."""
        if self._data is not None:
            v = coerce(value, self._dtype)
            self._data[:] = [v] * self._size

    def release(self) -> None:
        """Drop the buffer. Later element access raises IndexOutOfRange. Idempotent."""
        self._data = None
        self._owner = None
        self._size = 0
        self._nbytes = 0

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        if self._size == 0:
            return f"Array([], dtype={self._dtype.value})"
        elif self._size <= 6:
            data_str = str(self.tolist())
        else:
            head = self._data[:3]
            tail = self._data[self._size - 3:]
            data_str = str(head + ['...'] + tail)
        return f"Array({data_str}, dtype={self._dtype.value})"

    def __str__(self) -> str:
        return self.__repr__()
