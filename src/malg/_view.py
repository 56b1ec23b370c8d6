"""Row views over a matrix pool.

A RowView is a window of ``cols`` elements starting at a row offset of
the owning matrix's pool. It never copies and never owns the pool.
"""

import operator
from typing import Iterator, List

from ._array import Array
from ._config import config
from .error import IndexOutOfRange

__all__ = ['RowView']


class RowView:
    """Non-owning view over one row of a pool.

    Cell access is ``view[j]``. The column index is bounds-checked unless
    ``config.check_col_bounds`` is disabled, in which case the only check
    is the pool's own.

    A view taken before a non-square transpose refers to the old layout
    and must not be reused.
    """

    __slots__ = ('_pool', '_offset', '_length')

    def __init__(self, pool: Array, offset: int, length: int):
        self._pool = pool
        self._offset = offset
        self._length = length

    def _position(self, j) -> int:
        try:
            j = operator.index(j)
        except TypeError:
            raise IndexOutOfRange(f"column index must be an integer, got {type(j).__name__}") from None
        if config.check_col_bounds and not 0 <= j < self._length:
            raise IndexOutOfRange(f"column {j} out of range [0, {self._length})")
        return self._offset + j

    def __getitem__(self, j):
        return self._pool[self._position(j)]

    def __setitem__(self, j, value):
        self._pool[self._position(j)] = value

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator:
        pool = self._pool
        for k in range(self._offset, self._offset + self._length):
            yield pool[k]

    def __eq__(self, other):
        if isinstance(other, RowView):
            other = other.tolist()
        if isinstance(other, (list, tuple)):
            return self.tolist() == list(other)
        return NotImplemented

    __hash__ = None

    @property
    def offset(self) -> int:
        """Offset of the first element of the row inside the pool."""
        return self._offset

    def tolist(self) -> List:
        return self._pool[self._offset:self._offset + self._length]

    def __repr__(self) -> str:
        return f"RowView({self.tolist()})"
