"""Image host abstraction layer for profile photos."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO


class AbstractStorage(ABC):
    """Interface for profile photo hosts."""

    @abstractmethod
    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Persist a file and return the stored (relative) path."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether the given relative path exists in storage."""

    @abstractmethod
    def url_for(self, path: str) -> str:
        """Return the public URL under which a stored file is served."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a stored file; missing files are ignored."""
