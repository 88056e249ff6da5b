"""
Named tuning configurations.

Stores ``(Ku, Tu, rule)`` sets under operator-chosen names in a JSON file,
so a loop's tuning can be recalled later.
"""

from typing import Dict, List, NamedTuple, Optional, Union
from pathlib import Path
import json
import logging
import os
import tempfile
import threading

from pid_tuning.core.tuning_rules import TuningInputs
from pid_tuning.utils.validators import ValidationError


logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class StorageError(RuntimeError):
    """The backing file could not be read or written."""
    pass


class ConfigurationNotFoundError(KeyError):
    """No configuration is stored under the requested name."""
    pass


class SavedConfiguration(NamedTuple):
    name: str
    inputs: TuningInputs


class ConfigurationStore:
    """
    Keyed store of tuning inputs backed by a JSON file.

    Saving under an existing name overwrites it in place. With
    ``file_path=None`` entries live in memory only.

    Example:
        >>> store = ConfigurationStore("pid-configs.json")
        >>> store.save("Pump 1", TuningInputs(2.2, 20.0, TuningRule.PID))
        True
        >>> store.load("Pump 1").ultimate_gain
        2.2
    """

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        """
        Initialize store, reading existing entries from ``file_path``.

        Args:
            file_path: JSON file (created on first save); None for memory only

        Raises:
            StorageError: If the file exists but cannot be parsed
        """
        self._path = Path(file_path) if file_path is not None else None
        self._lock = threading.Lock()
        self._entries: Dict[str, TuningInputs] = {}

        if self._path is not None and self._path.exists():
            self._entries = self._read()

    def save(self, name: str, inputs: TuningInputs) -> bool:
        """
        Store ``inputs`` under ``name``.

        Args:
            name: Non-empty configuration name
            inputs: Tuning inputs to store

        Returns:
            False if the name was rejected, True once stored
        """
        key = self._normalize(name)
        if key is None:
            logger.warning("Rejected configuration with empty name")
            return False

        with self._lock:
            previous = dict(self._entries)
            replaced = key in self._entries
            self._entries[key] = inputs
            try:
                self._write()
            except StorageError:
                self._entries = previous
                raise

        logger.info("%s configuration %r", "Updated" if replaced else "Saved", key)
        return True

    def list(self) -> List[SavedConfiguration]:
        """All stored configurations in insertion order."""
        with self._lock:
            return [SavedConfiguration(name, inputs) for name, inputs in self._entries.items()]

    def load(self, name: str) -> TuningInputs:
        """
        Get the inputs stored under ``name``.

        Raises:
            ConfigurationNotFoundError: If nothing is stored under the name
        """
        key = self._normalize(name)
        with self._lock:
            if key is None or key not in self._entries:
                raise ConfigurationNotFoundError(name)
            return self._entries[key]

    def delete(self, name: str) -> bool:
        """
        Remove ``name``; unknown names are ignored.

        Returns:
            True if a configuration was removed
        """
        key = self._normalize(name)
        with self._lock:
            if key is None or key not in self._entries:
                return False
            previous = dict(self._entries)
            del self._entries[key]
            try:
                self._write()
            except StorageError:
                self._entries = previous
                raise

        logger.info("Deleted configuration %r", key)
        return True

    def __contains__(self, name: str) -> bool:
        key = self._normalize(name)
        with self._lock:
            return key is not None and key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def _normalize(name) -> Optional[str]:
        if not isinstance(name, str):
            return None
        name = name.strip()
        return name or None

    def _read(self) -> Dict[str, TuningInputs]:
        try:
            with open(self._path, encoding='utf-8') as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read configurations from {self._path}: {e}") from e

        if not isinstance(payload, dict) or payload.get('version') != FORMAT_VERSION:
            raise StorageError(f"Unsupported configuration file format in {self._path}")

        entries: Dict[str, TuningInputs] = {}
        for item in payload.get('configurations', []):
            try:
                key = self._normalize(item['name'])
                inputs = TuningInputs.from_dict(item)
            except (KeyError, TypeError, ValidationError) as e:
                raise StorageError(f"Invalid configuration entry in {self._path}: {e}") from e
            if key is not None:
                entries[key] = inputs

        logger.debug("Loaded %d configurations from %s", len(entries), self._path)
        return entries

    def _write(self) -> None:
        """Persist all entries atomically; caller holds the lock."""
        if self._path is None:
            return

        payload = {
            'version': FORMAT_VERSION,
            'configurations': [
                {'name': name, **inputs.to_dict()}
                for name, inputs in self._entries.items()
            ],
        }

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=self._path.name, suffix='.tmp'
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, indent=2)
                os.replace(tmp_path, self._path)
            except BaseException:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write configurations to {self._path}: {e}") from e
