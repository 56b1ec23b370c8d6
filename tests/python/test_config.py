"""
Tests for configuration and error handling.
"""

import logging
import threading

import pytest
import malg
from malg import Matrix, AccessConfig, StorageConfig, int64, float32
from malg import error as err


class TestConfig:
    """Test global and local configuration."""

    def test_defaults(self):
        assert malg.config.default_dtype is malg.float64
        assert malg.config.alignment == 64
        assert malg.config.check_col_bounds is True

    def test_default_dtype_applies(self):
        malg.config.default_dtype = 'int64'
        assert Matrix(2, 2).dtype is int64

    def test_alignment_must_be_power_of_two(self):
        with pytest.raises(ValueError):
            malg.config.alignment = 48
        malg.config.alignment = 128
        assert Matrix(2, 2).pool.ptr % 128 == 0

    def test_local_override(self):
        with malg.config.local(storage=StorageConfig(default_dtype=float32)):
            assert Matrix(1, 1).dtype is float32
        assert Matrix(1, 1).dtype is malg.float64

    def test_local_override_is_thread_local(self):
        seen = []
        with malg.config.local(storage=StorageConfig(default_dtype=float32)):
            t = threading.Thread(target=lambda: seen.append(malg.config.default_dtype))
            t.start()
            t.join()
        assert seen == [malg.float64]

    def test_unchecked_columns(self):
        m = Matrix.from_rows([[1, 2], [3, 4]])
        with malg.config.local(access=AccessConfig(check_col_bounds=False)):
            # reads through into the next row of the pool
            assert m[0][2] == 3
        with pytest.raises(malg.IndexOutOfRange):
            m[0][2]

    def test_local_unknown_section(self):
        with pytest.raises(ValueError):
            malg.config.local(parallel=None)

    def test_local_wrong_section_type(self):
        with pytest.raises(TypeError):
            malg.config.local(storage={"alignment": 0})

    @pytest.mark.parametrize("alignment", [0, -64, 48])
    def test_storage_config_rejects_bad_alignment(self, alignment):
        with pytest.raises(ValueError, match="power of two"):
            StorageConfig(alignment=alignment)

    def test_local_alignment(self):
        with malg.config.local(storage=StorageConfig(alignment=256)):
            m = Matrix(2, 2, fill=5)
        assert m.pool.ptr % 256 == 0
        assert m.tolist() == [[5.0, 5.0], [5.0, 5.0]]

    def test_mutated_alignment_rejected_at_allocation(self):
        malg.config.storage.alignment = 0
        with pytest.raises(ValueError, match="power of two"):
            Matrix(2, 2, fill=5)

    def test_env_default_dtype(self, monkeypatch):
        monkeypatch.setenv("MALG_DEFAULT_DTYPE", "int32")
        assert StorageConfig().default_dtype is malg.int32

    def test_env_default_dtype_invalid_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("MALG_DEFAULT_DTYPE", "complex64")
        with caplog.at_level(logging.WARNING, logger="malg.config"):
            cfg = malg.MalgConfig()
        assert cfg.default_dtype is malg.float64
        assert "MALG_DEFAULT_DTYPE" in caplog.text

    def test_to_dict(self):
        assert malg.config.to_dict() == {
            "storage": {"alignment": 64, "default_dtype": "float64"},
            "access": {"check_col_bounds": True},
        }


class TestErrors:
    """Test error codes and exception hierarchy."""

    def test_codes(self):
        assert malg.InvalidDimension().code == err.MALG_ERROR_INVALID_DIMENSION
        assert malg.AllocationFailure().code == err.MALG_ERROR_OUT_OF_MEMORY
        assert malg.DimensionMismatch().code == err.MALG_ERROR_DIMENSION_MISMATCH
        assert malg.IndexOutOfRange().code == err.MALG_ERROR_INDEX_OUT_OF_BOUNDS
        assert malg.TypeMismatch().code == err.MALG_ERROR_TYPE_MISMATCH

    def test_builtin_bases(self):
        assert issubclass(malg.InvalidDimension, ValueError)
        assert issubclass(malg.AllocationFailure, MemoryError)
        assert issubclass(malg.DimensionMismatch, ValueError)
        assert issubclass(malg.IndexOutOfRange, IndexError)
        assert issubclass(malg.TypeMismatch, TypeError)

    def test_message(self):
        e = malg.DimensionMismatch("add: shapes differ")
        assert e.message == "add: shapes differ"
        assert "add: shapes differ" in str(e)

    def test_default_message(self):
        assert malg.IndexOutOfRange().message == "Index out of bounds"

    def test_check_shape_match(self):
        err.check_shape_match((2, 3), (2, 3), "add")
        with pytest.raises(malg.DimensionMismatch):
            err.check_shape_match((2, 3), (3, 2), "add")
