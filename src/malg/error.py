"""
Error handling for malg.

Every failure is a MalgError carrying a numeric code. Each concrete error
also derives from the matching builtin exception so callers can catch
either form.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# General errors (1-9)
MALG_ERROR_UNKNOWN = 1
MALG_ERROR_OUT_OF_MEMORY = 3

# Argument errors (10-19)
MALG_ERROR_INVALID_DIMENSION = 10
MALG_ERROR_DIMENSION_MISMATCH = 11
MALG_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Type errors (20-29)
MALG_ERROR_TYPE_MISMATCH = 21


# Error code to message mapping
_ERROR_MESSAGES = {
    MALG_ERROR_UNKNOWN: "Unknown error",
    MALG_ERROR_OUT_OF_MEMORY: "Out of memory",
    MALG_ERROR_INVALID_DIMENSION: "Invalid dimension",
    MALG_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    MALG_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    MALG_ERROR_TYPE_MISMATCH: "Type mismatch",
}


# =============================================================================
# Exception Classes
# =============================================================================

class MalgError(Exception):
    """
    Base exception for all malg errors.

    Attributes:
        code: Numeric error code (MALG_ERROR_*)
        message: Human readable detail
    """

    code = MALG_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(f"malg error {self.code}: {message}")


class InvalidDimension(MalgError, ValueError):
    """Construction requested with a zero, negative or non-integral dimension."""

    code = MALG_ERROR_INVALID_DIMENSION


class AllocationFailure(MalgError, MemoryError):
    """The allocator could not provide the requested pool."""

    code = MALG_ERROR_OUT_OF_MEMORY


class DimensionMismatch(MalgError, ValueError):
    """Operand shapes are incompatible for the requested operation."""

    code = MALG_ERROR_DIMENSION_MISMATCH


class IndexOutOfRange(MalgError, IndexError):
    """Row or column index outside the matrix."""

    code = MALG_ERROR_INDEX_OUT_OF_BOUNDS


class TypeMismatch(MalgError, TypeError):
    """Element types are incompatible or unsupported."""

    code = MALG_ERROR_TYPE_MISMATCH


# =============================================================================
# Error Checking Functions
# =============================================================================

def check_shape_match(left, right, op: str) -> None:
    """Raise DimensionMismatch unless both (rows, cols) pairs are equal."""
    if tuple(left) != tuple(right):
        raise DimensionMismatch(
            f"{op}: shapes {tuple(left)} and {tuple(right)} differ"
        )
