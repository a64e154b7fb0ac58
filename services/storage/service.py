"""Background video storage boundary."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

import aiohttp

from shared.config import config
from shared.media_utils import measure_media_duration, remove_media_file
from shared.models import UploadedVideo
from shared.utils import ensure_directory, sanitize_filename, setup_logging

logger = setup_logging("media-storage")


class MediaUploadError(Exception):
    """Raised when an uploaded video cannot be stored."""


class MediaStorageService:
    """Store uploaded background videos and report their natural duration.

    Files are always kept under the media root so they can be probed. When a
    remote upload endpoint is configured the file is also posted there and the
    durable URL it returns is used instead of the local one.
    """

    def __init__(
        self,
        media_root: str | Path | None = None,
        upload_url: str | None = None,
        media_base_url: str | None = None,
        timeout: int = 120,
    ) -> None:
        self.media_root = Path(media_root or config.get("media_root", "./media"))
        self.upload_url = upload_url if upload_url is not None else config.get("storage_upload_url")
        self.media_base_url = (media_base_url or config.get("media_base_url", "/media")).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def store_video(self, data: bytes, filename: str, content_type: str | None) -> UploadedVideo:
        if not content_type or not content_type.startswith("video/"):
            raise MediaUploadError(f"Unsupported content type {content_type!r}")
        if not data:
            raise MediaUploadError("Uploaded video is empty")

        safe_name = sanitize_filename(Path(filename or "video.mp4").name)
        stored_name = f"{uuid4().hex}_{safe_name}"
        upload_dir = self.media_root / "uploads"

        try:
            ensure_directory(str(upload_dir))
            file_path = upload_dir / stored_name
            file_path.write_bytes(data)
        except OSError as e:
            raise MediaUploadError(f"Failed to store video: {e!s}") from e

        url = f"{self.media_base_url}/uploads/{stored_name}"
        if self.upload_url:
            try:
                url = await self._upload_remote(data, safe_name, content_type)
            except MediaUploadError:
                remove_media_file(file_path)
                raise

        duration = await measure_media_duration(str(file_path))
        if duration is None:
            logger.warning(f"Could not determine duration of uploaded video {safe_name}")

        logger.info(f"Stored video {safe_name} at {url} (duration={duration})")
        return UploadedVideo(url=url, filename=safe_name, duration=duration, file_path=str(file_path))

    async def _upload_remote(self, data: bytes, filename: str, content_type: str) -> str:
        form = aiohttp.FormData()
        form.add_field("file", data, filename=filename, content_type=content_type)

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.upload_url, data=form) as response:
                    if response.status not in (200, 201):
                        raise MediaUploadError(f"Storage upload failed with status {response.status}")
                    result = await response.json()
        except aiohttp.ClientError as e:
            raise MediaUploadError(f"Storage upload failed: {e!s}") from e

        url = result.get("url") or result.get("public_url")
        if not url:
            raise MediaUploadError("Storage response did not include a URL")
        return url
