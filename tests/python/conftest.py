"""
Pytest configuration and shared fixtures for malg tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import malg
from malg import Matrix


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts and ends with default configuration."""
    malg.config.reset()
    yield
    malg.config.reset()


@pytest.fixture
def permutation_4x4():
    """4x4 permutation matrix.

    Matrix:
    [[0, 0, 1, 0],
     [1, 0, 0, 0],
     [0, 0, 0, 1],
     [0, 1, 0, 0]]
    """
    return Matrix.from_rows([
        [0, 0, 1, 0],
        [1, 0, 0, 0],
        [0, 0, 0, 1],
        [0, 1, 0, 0],
    ])


@pytest.fixture
def matrix_4x2():
    """4x2 integer matrix."""
    return Matrix.from_rows([
        [0, 1],
        [2, 3],
        [4, 5],
        [6, 7],
    ])


@pytest.fixture
def matrix_2x4():
    """2x4 matrix whose values encode their (row, col) position."""
    return Matrix.from_rows([
        [11, 12, 13, 14],
        [21, 22, 23, 24],
    ])


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def random_matrix(rng):
    """Factory: random integer Matrix plus its numpy reference."""
    def make(rows, cols, dtype='int64'):
        ref = rng.integers(-9, 10, size=(rows, cols)).astype(dtype)
        return Matrix.from_numpy(ref), ref
    return make
