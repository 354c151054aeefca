"""Local filesystem image host."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from .abstract_storage import AbstractStorage


class LocalStorage(AbstractStorage):
    """Persist profile photos under the upload directory and serve them from ``url_prefix``."""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.base_directory = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        os.makedirs(self.base_directory, exist_ok=True)

    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Save a file and return the relative path within the upload directory."""

        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")

        destination = self.base_directory / safe_name
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        return str(destination.relative_to(self.base_directory))

    def exists(self, path: str) -> bool:
        return (self.base_directory / path).is_file()

    def url_for(self, path: str) -> str:
        return f"{self.url_prefix}/{path}"

    def delete(self, path: str) -> None:
        (self.base_directory / path).unlink(missing_ok=True)
