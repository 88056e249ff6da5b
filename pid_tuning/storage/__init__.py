"""Persistence of named tuning configurations."""

from pid_tuning.storage.config_store import (
    ConfigurationStore,
    ConfigurationNotFoundError,
    SavedConfiguration,
    StorageError,
)

__all__ = [
    "ConfigurationStore",
    "ConfigurationNotFoundError",
    "SavedConfiguration",
    "StorageError",
]
