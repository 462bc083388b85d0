"""
Media host client (Cloudinary) for note and memory images
"""
import io
import logging
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from . import config
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class MediaHost:
    """Uploads and deletes images; every failure surfaces as UpstreamError."""

    def __init__(self, folder: str = config.MEDIA_FOLDER):
        self.folder = folder

    @staticmethod
    def _image(result: Dict[str, Any]) -> Dict[str, Optional[str]]:
        return {"url": result.get("secure_url") or result.get("url"), "externalId": result.get("public_id")}

    async def _upload(self, file: Any, folder: Optional[str]) -> Dict[str, Optional[str]]:
        target = folder or self.folder
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload, file, folder=target, resource_type="image"
            )
        except Exception as e:
            logger.error(f"Image upload to '{target}' failed: {e}")
            raise UpstreamError("Failed to upload image 😿", detail=str(e)) from e
        image = self._image(result)
        logger.info(f"📸 Uploaded image {image['externalId']} to '{target}'")
        return image

    async def upload_raw(self, data: bytes, folder: Optional[str] = None) -> Dict[str, Optional[str]]:
        return await self._upload(io.BytesIO(data), folder)

    async def upload_data_uri(self, data_uri: str, folder: Optional[str] = None) -> Dict[str, Optional[str]]:
        return await self._upload(data_uri, folder)

    async def delete(self, external_id: str) -> Dict[str, Any]:
        try:
            result = await run_in_threadpool(cloudinary.uploader.destroy, external_id)
        except Exception as e:
            logger.error(f"Image delete of {external_id} failed: {e}")
            raise UpstreamError("Failed to delete image 😿", detail=str(e)) from e
        logger.info(f"🗑️ Deleted image {external_id}: {result.get('result')}")
        return result


class MediaHostClient:
    _instance: Optional[MediaHost] = None

    @classmethod
    def get_client(cls) -> MediaHost:
        """Get media host instance (singleton pattern)"""
        if cls._instance is None:
            # CLOUDINARY_URL, when set, is read by the SDK itself
            if not config.CLOUDINARY_URL:
                cloudinary.config(
                    cloud_name=config.CLOUDINARY_CLOUD_NAME,
                    api_key=config.CLOUDINARY_API_KEY,
                    api_secret=config.CLOUDINARY_API_SECRET,
                    secure=True,
                )
            cls._instance = MediaHost()
        return cls._instance


def get_media() -> MediaHost:
    """FastAPI dependency for the media host; overridden in tests."""
    return MediaHostClient.get_client()
