"""In-place Transpose Kernels.

Both kernels work on any flat, mutable, row-major sequence (an ``Array``
pool, a Python list, a 1-D numpy array) and never allocate a second
buffer for the elements.

Square:
    swap ``(i, j)`` with ``(j, i)`` above the diagonal.

Non-square (permutation cycles):
    For an ``R x C`` matrix flattened to ``N = R*C`` elements, the element
    at linear index ``a`` belongs at ``(R*a) mod (N-1)`` after transposing.
    Index ``0`` and ``N-1`` are fixed points. Every other index lies on
    exactly one cycle of this map; walking a cycle while carrying one
    value moves every member into place. A visited marker per index stops
    a cycle from being walked twice.

Example:
    >>> data = [11, 12, 13, 14, 21, 22, 23, 24]   # 2 x 4
    >>> transpose_cycles(data, 2, 4)
    2
    >>> data                                      # 4 x 2
    [11, 21, 12, 22, 13, 23, 14, 24]
"""

import logging
from typing import MutableSequence

__all__ = ['transpose_square', 'transpose_cycles', 'transposed_position']

logger = logging.getLogger("malg.transpose")


def transposed_position(a: int, rows: int, size: int) -> int:
    """Destination of linear index ``a`` when a ``rows x (size/rows)`` pool is transposed."""
    last = size - 1
    if a == last:
        return last
    return (rows * a) % last


def transpose_square(pool: MutableSequence, n: int) -> None:
    """Transpose an ``n x n`` row-major pool in place."""
    for i in range(n):
        row = i * n
        for j in range(i + 1, n):
            a = row + j
            b = j * n + i
            pool[a], pool[b] = pool[b], pool[a]


def transpose_cycles(pool: MutableSequence, rows: int, cols: int) -> int:
    """Transpose a ``rows x cols`` row-major pool in place by following cycles.

    Afterwards the pool holds the ``cols x rows`` transpose in row-major
    order. The caller is responsible for swapping its own shape and
    rebuilding its row index.

    Returns:
        Number of cycles followed (fixed points excluded).
    """
    size = rows * cols
    last = size - 1
    if last < 2:
        # 1 or 2 elements: every index is a fixed point
        return 0

    visited = bytearray(size)
    cycles = 0
    for cycle in range(1, last):
        if visited[cycle]:
            continue
        cycles += 1
        carried = pool[cycle]
        a = cycle
        while True:
            a = (rows * a) % last
            pool[a], carried = carried, pool[a]
            visited[a] = 1
            if a == cycle:
                break

    logger.debug("transposed %dx%d pool in place (%d cycles)", rows, cols, cycles)
    return cycles
