"""
Direct image uploads to the media host
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..auth import require_user
from ..errors import ValidationError
from ..media import MediaHost, get_media
from ..models import Base64Upload, MultipleUpload
from ..responses import ok

router = APIRouter(dependencies=[Depends(require_user)])


@router.post("/image")
async def upload_image(
    image: Optional[UploadFile] = File(None),
    folder: Optional[str] = Form(None),
    media: MediaHost = Depends(get_media),
):
    """Upload a single multipart image file"""
    if image is None:
        raise ValidationError("image", "No image file provided 📷")
    data = await image.read()
    if not data:
        raise ValidationError("image", "No image file provided 📷")
    result = await media.upload_raw(data, folder)
    return ok(result, message="Image uploaded successfully! 📸")


@router.post("/base64")
async def upload_base64(payload: Base64Upload, media: MediaHost = Depends(get_media)):
    if not payload.image:
        raise ValidationError("image", "No image data provided 📷")
    result = await media.upload_data_uri(payload.image, payload.folder)
    return ok(result, message="Image uploaded successfully! 📸")


@router.post("/multiple")
async def upload_multiple(payload: MultipleUpload, media: MediaHost = Depends(get_media)):
    """Upload several base64 images one after another"""
    if not payload.images:
        raise ValidationError("images", "No images provided 📷")
    uploaded = []
    for image in payload.images:
        uploaded.append(await media.upload_data_uri(image, payload.folder))
    return ok(uploaded, message=f"{len(uploaded)} images uploaded successfully! 📸", count=len(uploaded))


@router.delete("/{external_id:path}")
async def delete_image(external_id: str, media: MediaHost = Depends(get_media)):
    result = await media.delete(external_id)
    return ok(result, message="Image deleted successfully! 🗑️")
