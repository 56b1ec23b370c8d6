"""
Tests for the in-place transpose kernels and Matrix.transpose().
"""

import pytest
import numpy as np
from malg import Matrix, Array, transpose_square, transpose_cycles, transposed
from malg._transpose import transposed_position


def _flat(rows, cols):
    return list(range(rows * cols))


def _expected(rows, cols):
    return np.arange(rows * cols).reshape(rows, cols).T.ravel().tolist()


class TestTransposeCycles:
    """Permutation-cycle kernel on plain sequences."""

    @pytest.mark.parametrize("rows,cols", [
        (2, 4), (4, 2), (3, 5), (5, 3), (2, 3), (3, 2), (7, 11), (6, 4),
    ])
    def test_general_shapes(self, rows, cols):
        data = _flat(rows, cols)
        transpose_cycles(data, rows, cols)
        assert data == _expected(rows, cols)

    @pytest.mark.parametrize("n", [1, 2, 3, 9])
    def test_single_row(self, n):
        data = _flat(1, n)
        transpose_cycles(data, 1, n)
        assert data == _expected(1, n)

    @pytest.mark.parametrize("n", [1, 2, 3, 9])
    def test_single_column(self, n):
        data = _flat(n, 1)
        transpose_cycles(data, n, 1)
        assert data == _expected(n, 1)

    def test_tiny_pools_have_no_cycles(self):
        for rows, cols in [(1, 1), (1, 2), (2, 1)]:
            data = _flat(rows, cols)
            assert transpose_cycles(data, rows, cols) == 0
            assert data == _flat(rows, cols)

    def test_cycle_count_2x4(self):
        # 1 -> 2 -> 4 -> 1 and 3 -> 6 -> 5 -> 3
        data = _flat(2, 4)
        assert transpose_cycles(data, 2, 4) == 2

    def test_cycle_count_2x3(self):
        # 1 -> 2 -> 4 -> 3 -> 1
        data = _flat(2, 3)
        assert transpose_cycles(data, 2, 3) == 1

    def test_each_cycle_followed_once(self):
        # Every non-fixed index lies on exactly one cycle, so the number of
        # cycles equals the number of distinct orbits of the position map.
        rows, cols = 3, 5
        size = rows * cols
        seen = set()
        orbits = 0
        for start in range(1, size - 1):
            if start in seen:
                continue
            orbits += 1
            a = start
            while True:
                a = transposed_position(a, rows, size)
                seen.add(a)
                if a == start:
                    break
        data = _flat(rows, cols)
        assert transpose_cycles(data, rows, cols) == orbits

    def test_fixed_points(self):
        assert transposed_position(0, 3, 15) == 0
        assert transposed_position(14, 3, 15) == 14

    def test_twice_restores(self):
        data = _flat(3, 7)
        transpose_cycles(data, 3, 7)
        transpose_cycles(data, 7, 3)
        assert data == _flat(3, 7)

    def test_on_array_pool(self):
        pool = Array.from_list(_flat(3, 4), dtype='int64')
        transpose_cycles(pool, 3, 4)
        assert pool.tolist() == _expected(3, 4)

    def test_on_numpy_buffer(self, rng):
        ref = rng.integers(0, 100, size=(5, 8))
        flat = ref.ravel().copy()
        transpose_cycles(flat, 5, 8)
        np.testing.assert_array_equal(flat.reshape(8, 5), ref.T)


class TestTransposeSquare:
    """Diagonal swap kernel."""

    @pytest.mark.parametrize("n", [1, 2, 3, 6])
    def test_square(self, n):
        data = _flat(n, n)
        transpose_square(data, n)
        assert data == _expected(n, n)


class TestMatrixTranspose:
    """Matrix.transpose() in place."""

    def test_square_boolean(self):
        m = Matrix.from_rows([
            [1, 0, 1, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 1],
            [0, 1, 0, 0],
        ], dtype='bool')
        m.transpose()
        assert m.tolist() == [
            [True, True, False, False],
            [False, False, False, True],
            [True, False, False, False],
            [False, False, True, False],
        ]

    def test_non_square(self, matrix_2x4):
        pool = matrix_2x4.pool
        matrix_2x4.transpose()
        assert matrix_2x4.shape == (4, 2)
        assert matrix_2x4.tolist() == [[11, 21], [12, 22], [13, 23], [14, 24]]
        # pool reused, not reallocated
        assert matrix_2x4.pool is pool

    def test_row_index_rebuilt(self, matrix_2x4):
        matrix_2x4.transpose()
        assert list(matrix_2x4.row_index) == [0, 2, 4, 6]
        assert matrix_2x4.row(3).tolist() == [14, 24]

    def test_square_keeps_row_index(self, permutation_4x4):
        before = permutation_4x4.row_index
        permutation_4x4.transpose()
        assert permutation_4x4.row_index == before

    @pytest.mark.parametrize("rows,cols", [(1, 1), (1, 6), (6, 1), (3, 3), (4, 7), (7, 4)])
    def test_involution(self, random_matrix, rows, cols):
        m, ref = random_matrix(rows, cols)
        m.transpose()
        assert m.shape == (cols, rows)
        np.testing.assert_array_equal(m.to_numpy(), ref.T)
        m.transpose()
        assert m.shape == (rows, cols)
        np.testing.assert_array_equal(m.to_numpy(), ref)

    def test_empty_is_noop(self):
        m = Matrix()
        m.transpose()
        assert m.shape == (0, 0)

    def test_transposed_copy(self, matrix_2x4):
        t = transposed(matrix_2x4)
        assert t.shape == (4, 2)
        assert matrix_2x4.shape == (2, 4)
        assert matrix_2x4.T == t
