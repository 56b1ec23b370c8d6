"""
malg Config - Global Configuration

Provides dataclass-based configuration for matrix storage and element
access, with thread-local overrides through a context manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import logging
import os
import threading

from ._dtypes import DType, validate_dtype
from .error import TypeMismatch

logger = logging.getLogger("malg.config")


def _env_default_dtype() -> DType:
    value = os.environ.get('MALG_DEFAULT_DTYPE', 'float64')
    try:
        return validate_dtype(value)
    except TypeMismatch:
        logger.warning("ignoring MALG_DEFAULT_DTYPE=%r: unsupported dtype, using float64", value)
        return DType.float64


def check_alignment(value: int) -> int:
    """Return value if it is a positive power of two, else raise ValueError."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1 or value & (value - 1):
        raise ValueError(f"alignment must be a power of two, got {value!r}")
    return value


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class StorageConfig:
    """Configuration for pool allocation."""
    alignment: int = 64                     # Pool alignment in bytes
    default_dtype: DType = field(default_factory=_env_default_dtype)

    def __post_init__(self):
        check_alignment(self.alignment)
        self.default_dtype = validate_dtype(self.default_dtype)


@dataclass
class AccessConfig:
    """Configuration for element access."""
    check_col_bounds: bool = True           # Bounds-check column index in RowView


_SECTION_TYPES = {
    "storage": StorageConfig,
    "access": AccessConfig,
}


# =============================================================================
# Global Configuration Manager
# =============================================================================

class MalgConfig:
    """
    Global configuration manager for malg.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        malg.config.default_dtype = malg.int64

        # Local configuration (context manager)
        with malg.config.local(access=AccessConfig(check_col_bounds=False)):
            value = m[0][5]
        # Back to global config
    """

    def __init__(self):
        self._global_storage = StorageConfig()
        self._global_access = AccessConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def storage(self) -> StorageConfig:
        """Get storage configuration."""
        if getattr(self._local, "storage", None) is not None:
            return self._local.storage
        return self._global_storage

    @storage.setter
    def storage(self, value: StorageConfig):
        if not isinstance(value, StorageConfig):
            raise TypeError(f"expected StorageConfig, got {type(value).__name__}")
        self._global_storage = value

    @property
    def access(self) -> AccessConfig:
        """Get access configuration."""
        if getattr(self._local, "access", None) is not None:
            return self._local.access
        return self._global_access

    @access.setter
    def access(self, value: AccessConfig):
        if not isinstance(value, AccessConfig):
            raise TypeError(f"expected AccessConfig, got {type(value).__name__}")
        self._global_access = value

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def default_dtype(self) -> DType:
        """Element type used when none is given or inferred."""
        return self.storage.default_dtype

    @default_dtype.setter
    def default_dtype(self, value):
        self._global_storage.default_dtype = validate_dtype(value)

    @property
    def alignment(self) -> int:
        """Pool alignment in bytes."""
        return self.storage.alignment

    @alignment.setter
    def alignment(self, value: int):
        self._global_storage.alignment = check_alignment(value)

    @property
    def check_col_bounds(self) -> bool:
        """Whether RowView bounds-checks the column index."""
        return self.access.check_col_bounds

    @check_col_bounds.setter
    def check_col_bounds(self, value: bool):
        self._global_access.check_col_bounds = bool(value)

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (storage, access)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(_SECTION_TYPES)
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")
        for key, value in kwargs.items():
            expected = _SECTION_TYPES[key]
            if value is not None and not isinstance(value, expected):
                raise TypeError(f"{key} override must be {expected.__name__}, got {type(value).__name__}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs) -> Dict[str, Any]:
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            if value is not None:
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset / Serialization
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_storage = StorageConfig()
        self._global_access = AccessConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "storage": {
                "alignment": self.storage.alignment,
                "default_dtype": self.storage.default_dtype.value,
            },
            "access": {
                "check_col_bounds": self.access.check_col_bounds,
            },
        }

    def __repr__(self) -> str:
        return f"MalgConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: MalgConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Optional[Dict[str, Any]] = None

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = MalgConfig()


def get_config() -> MalgConfig:
    """Get the global configuration instance."""
    return config


__all__ = [
    "StorageConfig",
    "AccessConfig",
    "MalgConfig",
    "config",
    "get_config",
    "check_alignment",
]
