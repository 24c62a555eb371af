# listing_pipeline/adapters/listing/factory.py
from __future__ import annotations

from ...config import settings
from .base import FileLister
from .google_drive import GoogleDriveLister
from .local_dir import LocalFolderLister


def build_file_lister() -> FileLister:
    """
    Lister builder that will NOT brick local dev.

    - google_drive without an API key in dev/local/test -> local_dir
    - Unknown sources -> local_dir in dev/local/test, error in prod-like
    """
    src = (settings.FILE_LISTING_SOURCE or "").strip()
    dev_like = settings.ENV.lower() in ("dev", "local", "test")

    if src == "google_drive":
        if not settings.GOOGLE_DRIVE_API_KEY and dev_like:
            return LocalFolderLister.from_settings()
        return GoogleDriveLister.from_settings()
    if src == "local_dir":
        return LocalFolderLister.from_settings()

    if dev_like:
        return LocalFolderLister.from_settings()

    raise ValueError(f"Unknown FILE_LISTING_SOURCE={src!r}. Use google_drive or local_dir.")
