"""
Image upload service.

Listing images are handed to an external image host and only the
returned URL and identifier are stored with the listing.  Two backends
exist:

* ``CloudinaryStorage`` uploads to Cloudinary with the ``cloudinary``
  SDK.  Used whenever ``CLOUD_NAME``, ``CLOUD_API_KEY`` and
  ``CLOUD_API_SECRET`` are configured.
* ``LocalImageStorage`` writes files below ``UPLOAD_DIR``; they are
  served by the application under ``/uploads``.  Used in development
  and tests.
"""

import io
import logging
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import cloudinary.exceptions
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from ..core.config import settings
from ..schemas.listing import ImageRef


ALLOWED_EXTENSIONS = {"jpeg", "jpg", "png"}
LOCAL_URL_PREFIX = "/uploads"


class ImageUploadError(Exception):
    """Raised when the image service rejects or fails an upload."""


@dataclass
class UploadedImage:
    url: str
    filename: str


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def is_allowed_image(filename: str) -> bool:
    return file_extension(filename) in ALLOWED_EXTENSIONS


def preview_url(url: str, width: int = 250) -> str:
    """Return a reduced-size variant of a Cloudinary image URL.

    Cloudinary applies transformations given right after ``/upload``;
    other URLs are returned unchanged.
    """
    if "/upload/" not in url or "res.cloudinary.com" not in url:
        return url
    return url.replace("/upload/", f"/upload/w_{width}/", 1)


class CloudinaryStorage:
    """Upload images to Cloudinary through its SDK."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    def _upload(self, filename: str, content: bytes) -> dict:
        file = io.BytesIO(content)
        file.name = filename
        return cloudinary.uploader.upload(
            file,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            folder=self.folder,
            allowed_formats=sorted(ALLOWED_EXTENSIONS),
            resource_type="image",
        )

    async def save(self, filename: str, content: bytes, content_type: Optional[str] = None) -> UploadedImage:
        logger = logging.getLogger(__name__)
        try:
            # The SDK is blocking.
            result = await run_in_threadpool(self._upload, filename, content)
        except cloudinary.exceptions.Error as e:
            logger.error("Cloudinary upload of %s failed: %s", filename, e)
            raise ImageUploadError(f"Image upload failed: {e}") from e
        url = result.get("secure_url")
        public_id = result.get("public_id")
        if not url or not public_id:
            logger.error("Cloudinary returned no image reference for %s: %s", filename, result)
            raise ImageUploadError("Image upload failed: no image URL returned")
        logger.info("Uploaded %s to Cloudinary as %s", filename, public_id)
        return UploadedImage(url=url, filename=public_id)


class LocalImageStorage:
    """Store images on the local disk."""

    def __init__(self, directory: str) -> None:
        self.directory = Path(directory)

    async def save(self, filename: str, content: bytes, content_type: Optional[str] = None) -> UploadedImage:
        self.directory.mkdir(parents=True, exist_ok=True)
        stored_name = f"{secrets.token_hex(12)}.{file_extension(filename)}"
        (self.directory / stored_name).write_bytes(content)
        logging.getLogger(__name__).info("Stored %s locally as %s", filename, stored_name)
        return UploadedImage(url=f"{LOCAL_URL_PREFIX}/{stored_name}", filename=stored_name)


def get_image_storage():
    """Pick the configured image backend."""
    if settings.cloud_configured:
        return CloudinaryStorage(
            settings.cloud_name,
            settings.cloud_api_key,
            settings.cloud_api_secret,
            settings.cloud_folder,
        )
    return LocalImageStorage(settings.upload_dir)


async def store_upload(upload) -> ImageRef:
    """Send an uploaded form file to the image service."""
    content = await upload.read()
    stored = await get_image_storage().save(upload.filename, content, upload.content_type)
    return ImageRef(url=stored.url, filename=stored.filename)
