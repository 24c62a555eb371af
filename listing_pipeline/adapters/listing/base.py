# listing_pipeline/adapters/listing/base.py
from __future__ import annotations

import re
from typing import Protocol

from ...domain.types import DriveFile

_FOLDER_ID = re.compile(r"folders/([a-zA-Z0-9_-]+)")


class InvalidFolderUrlError(ValueError):
    pass


class FileListingError(RuntimeError):
    pass


def extract_folder_id(url: str) -> str:
    """
    "https://drive.google.com/drive/folders/1AbC-xyz_9?usp=sharing" -> "1AbC-xyz_9"
    """
    m = _FOLDER_ID.search(url or "")
    if not m:
        raise InvalidFolderUrlError(f"Invalid drive folder URL: {url!r} (expected .../folders/<id>)")
    return m.group(1)


class FileLister(Protocol):
    async def list_files(self, folder_id: str) -> list[DriveFile]:
        raise NotImplementedError
