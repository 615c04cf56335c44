"""Repository base: Interface shared by file-backed stores.

A repository owns one file, reads it in full on first access and keeps
the parsed result until clear_cache() is called. Every I/O or format
failure surfaces as RepositoryError carrying the offending path.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TypeVar, Generic

T = TypeVar("T")


class RepositoryError(Exception):
    """Loading or saving a repository file failed.

    Attributes:
        path: File involved, when known
    """

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (path: {path})" if path else ""))


class Repository(ABC, Generic[T]):
    """File-backed store with a cached full read."""

    @property
    @abstractmethod
    def path(self) -> Path:
        """File this repository reads and writes."""

    @abstractmethod
    def get_all(self) -> T:
        """Load (or return the cached) full contents.

        Raises:
            RepositoryError: If the file cannot be read or parsed
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Drop cached contents so the next read hits the file."""

    def exists(self) -> bool:
        return self.path.exists()

    def require_file(self, what: str = "File") -> Path:
        """Return the path, raising RepositoryError if it does not exist."""
        if not self.exists():
            raise RepositoryError(f"{what} not found", str(self.path))
        return self.path
