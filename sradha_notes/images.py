"""
Normalizes incoming images to {url, externalId} and releases them on delete
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .errors import UpstreamError, ValidationError
from .media import MediaHost
from .models import ImageRef

logger = logging.getLogger(__name__)


def classify(images: Optional[Sequence[Any]]) -> List[Any]:
    """Check every image before anything is uploaded.

    Returns data URIs as strings (still to upload) and everything else as ImageRef.
    """
    pending = []
    for image in images or []:
        if isinstance(image, ImageRef):
            pending.append(image)
        elif isinstance(image, dict) and image.get("url"):
            pending.append(ImageRef.model_validate(image))
        elif isinstance(image, str) and image.startswith("data:"):
            pending.append(image)
        elif isinstance(image, str) and image.startswith(("http://", "https://")):
            pending.append(ImageRef(url=image))
        else:
            raise ValidationError(
                "images", "Images must be data URIs, http(s) URLs or {url, externalId} objects"
            )
    return pending


async def normalize_images(images: Optional[Sequence[Any]], media: MediaHost,
                           folder: str) -> List[Dict[str, Optional[str]]]:
    """Upload data URIs one at a time; an upload failure aborts the whole write."""
    normalized = []
    for item in classify(images):
        if isinstance(item, str):
            normalized.append(await media.upload_data_uri(item, folder))
        else:
            normalized.append(item.model_dump(by_alias=True))
    return normalized


async def release_images(images: Iterable[Dict[str, Any]], media: MediaHost) -> int:
    """Best effort: failures are logged and the caller carries on."""
    released = 0
    for image in images or []:
        external_id = image.get("externalId")
        if not external_id:
            continue
        try:
            await media.delete(external_id)
            released += 1
        except UpstreamError as e:
            logger.warning(f"Could not release image {external_id}, leaving it orphaned: {e.message}")
    return released
