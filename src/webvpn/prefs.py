"""Persisted key-value preferences.

The only key in use is ``baseURL``. The codec never touches this store; it
belongs to the glue that picks the gateway origin.
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from webvpn.errors import InvalidInputError
from webvpn.links import STORAGE_KEY, normalize_base_url


class PreferenceError(Exception):
    """The preference file exists but cannot be read or written."""


class PreferenceStore(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFilePreferenceStore(PreferenceStore):
    """Flat JSON object on disk. A missing file reads as empty."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PreferenceError(f"cannot read preferences from {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PreferenceError(f"preferences in {self.path} are not a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".prefs-", suffix=".json")
        except OSError as exc:
            raise PreferenceError(f"cannot write preferences to {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as exc:
            Path(tmp).unlink(missing_ok=True)
            raise PreferenceError(f"cannot write preferences to {self.path}: {exc}") from exc


def get_saved_base_url(store: PreferenceStore) -> str | None:
    return store.get(STORAGE_KEY) or None


def save_base_url(store: PreferenceStore, value: str) -> str:
    """Normalize and persist ``value``; returns what was stored."""
    normalized = normalize_base_url(value)
    if not normalized:
        raise InvalidInputError("enter a valid base url")
    store.set(STORAGE_KEY, normalized)
    return normalized
