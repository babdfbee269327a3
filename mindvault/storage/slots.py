from __future__ import annotations

import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueSlots(Protocol):
    """Named string slots with whole-value replace semantics."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def copy(self, key: str, new_key: str) -> None:
        ...


class MemorySlots:
    """Dictionary backed slots, used in tests and for throwaway sessions."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def copy(self, key: str, new_key: str) -> None:
        if key in self._data:
            self._data[new_key] = self._data[key]


class FileSlots:
    """File system slots: one ``<key>.json`` document per key."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    # ------------------------------------------------------------------
    # public API
    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        """Replace the whole value of ``key``.

        The new content goes to a temporary file in the same directory first
        and is then moved over the old one, so readers never see a partial
        document.
        """

        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def copy(self, key: str, new_key: str) -> None:
        """Duplicate the raw bytes of ``key`` under ``new_key``, if present."""

        src = self._path(key)
        if src.exists():
            shutil.copyfile(src, self._path(new_key))

    # ------------------------------------------------------------------
    # helpers
    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid slot key: {key!r}")
        return self.directory / f"{key}.json"


__all__ = ["KeyValueSlots", "MemorySlots", "FileSlots"]
