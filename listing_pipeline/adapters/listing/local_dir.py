# listing_pipeline/adapters/listing/local_dir.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ...config import settings
from ...domain.types import DriveFile
from .base import FileLister, FileListingError

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png"}


@dataclass
class LocalFolderLister(FileLister):
    """
    Offline lister for development/testing.

    A drive folder id maps to a local directory:
      <root>/<folder_id>/*.jpg|jpeg|png

    File urls are file:// URIs, so the rest of the pipeline runs unchanged.
    """

    root: Path

    @classmethod
    def from_settings(cls) -> "LocalFolderLister":
        return cls(root=Path(settings.LOCAL_DRIVE_ROOT))

    async def list_files(self, folder_id: str) -> list[DriveFile]:
        folder = self.root / folder_id
        if not folder.is_dir():
            raise FileListingError(f"Local drive folder not found: {folder}")

        out: list[DriveFile] = []
        for path in sorted(folder.iterdir()):
            if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            out.append(DriveFile(id=path.name, name=path.name, url=path.resolve().as_uri()))
        return out
