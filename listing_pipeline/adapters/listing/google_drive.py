# listing_pipeline/adapters/listing/google_drive.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ...config import settings
from ...domain.types import DriveFile
from ..clients.http_resilience import resilient_request
from .base import FileLister, FileListingError

log = logging.getLogger(__name__)


def direct_view_url(file_id: str) -> str:
    return f"https://drive.google.com/uc?export=view&id={file_id}"


@dataclass
class GoogleDriveLister(FileLister):
    """
    Lists a shared Drive folder through the Drive v3 `files.list` endpoint.
    The folder must be shared "anyone with the link" for an API-key call to see it.
    """

    api_key: str
    base_url: str = "https://www.googleapis.com/drive/v3/files"
    page_size: int = 1000
    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def from_settings(cls) -> "GoogleDriveLister":
        if not settings.GOOGLE_DRIVE_API_KEY:
            raise FileListingError("GOOGLE_DRIVE_API_KEY is not set")
        return cls(
            api_key=settings.GOOGLE_DRIVE_API_KEY,
            base_url=settings.GOOGLE_DRIVE_API_URL,
            page_size=settings.GOOGLE_DRIVE_PAGE_SIZE,
        )

    async def list_files(self, folder_id: str) -> list[DriveFile]:
        out: list[DriveFile] = []
        page_token: str | None = None

        while True:
            params: dict[str, Any] = {
                "q": f"'{folder_id}' in parents and trashed = false",
                "fields": "nextPageToken, files(id, name, mimeType, thumbnailLink)",
                "pageSize": self.page_size,
                "key": self.api_key,
            }
            if page_token:
                params["pageToken"] = page_token

            try:
                resp = await resilient_request("GET", self.base_url, params=params, transport=self.transport)
                data = resp.json()
            except (httpx.HTTPError, ValueError) as e:
                raise FileListingError(f"Drive listing failed for folder {folder_id}: {e}") from e

            for it in data.get("files") or []:
                fid = it.get("id")
                name = it.get("name")
                if not fid or not name:
                    continue
                out.append(
                    DriveFile(
                        id=str(fid),
                        name=str(name),
                        url=direct_view_url(str(fid)),
                        thumbnail_url=it.get("thumbnailLink"),
                    )
                )

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        log.info("Drive folder %s: %s files", folder_id, len(out))
        return out
