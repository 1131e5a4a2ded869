"""
Customer state storage.
Plain key -> text store; the engines own the encoding of what goes in.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

logger = logging.getLogger(__name__)


class CustomerStore(ABC):
    """Abstract base for customer state persistence."""

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def keys(self) -> List[str]:
        ...


class InMemoryCustomerStore(CustomerStore):
    """Dict-backed store for tests and throwaway simulations."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)


class JsonFileCustomerStore(CustomerStore):
    """One JSON file per key under a directory.

    Keys are percent-encoded into file names, so distinct keys never share a file.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def load(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    def save(self, key: str, value: str) -> None:
        path = self._path(key)
        # One temp file per write
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False
        ) as tmp:
            tmp.write(value)
        os.replace(tmp.name, path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        return sorted(unquote(p.stem) for p in self.directory.glob("*.json"))
