"""
Listing image storage on Google Cloud Storage.

Google Cloud client libraries use Application Default Credentials, e.g.
    export GOOGLE_APPLICATION_CREDENTIALS="/home/me/service-account.json"
"""

import asyncio
import io
import logging
import uuid
from datetime import datetime

from fastapi import UploadFile
from google.cloud import storage  # type: ignore
from google.cloud.exceptions import GoogleCloudError
from PIL import Image

from urbanswap import config

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "webp")


class ImageUploadError(Exception):
    pass


def optimize_image(image_file, max_width=1200, quality=85):
    """
    Shrink to max_width and re-encode.
    PNG keeps transparency, WebP stays WebP, everything else becomes JPEG.
    """
    img = Image.open(image_file)
    original_format = img.format

    if img.width > max_width:
        new_height = int(img.height * max_width / img.width)
        img = img.resize((max_width, new_height), Image.LANCZOS)

    output = io.BytesIO()
    has_alpha = img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)

    if original_format == "PNG" and has_alpha:
        img.convert("RGBA").save(output, format="PNG", optimize=True)
        content_type = "image/png"
    elif original_format == "WEBP":
        img.save(output, format="WEBP", quality=quality)
        content_type = "image/webp"
    else:
        if has_alpha:
            # Flatten onto white
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")
        img.save(output, format="JPEG", quality=quality, optimize=True)
        content_type = "image/jpeg"

    output.seek(0)
    return output, content_type


def validate_image(photo: UploadFile) -> None:
    if not photo.content_type or not photo.content_type.startswith("image/"):
        raise ImageUploadError("Only image files are allowed")
    if photo.size and photo.size > config.MAX_IMAGE_BYTES:
        raise ImageUploadError(f"File too large. Maximum size is {config.MAX_IMAGE_BYTES // 1_000_000}MB.")


def _blob_name_from_url(public_url: str, bucket_name: str) -> str | None:
    marker = f"storage.googleapis.com/{bucket_name}/"
    if marker not in public_url:
        return None
    return public_url.split(marker, 1)[1]


async def upload_listing_image(photo: UploadFile, listing_key: str) -> str:
    """
    Optimise and upload a listing photo, returning its public URL.

    PIL and the GCS client are blocking, so both run in the default executor.
    """
    validate_image(photo)

    extension = photo.filename.rsplit(".", 1)[-1].lower() if photo.filename and "." in photo.filename else "jpg"
    if extension not in ALLOWED_EXTENSIONS:
        extension = "jpg"

    timestamp = datetime.now().strftime("%Y%m%d")
    blob_name = f"listings/{listing_key}_{timestamp}_{uuid.uuid4().hex[:12]}.{extension}"
    bucket_name = config.GOOGLE_CLOUD_STORAGE_BUCKET

    await photo.seek(0)
    file_content = await photo.read()
    if len(file_content) > config.MAX_IMAGE_BYTES:
        raise ImageUploadError(f"File too large. Maximum size is {config.MAX_IMAGE_BYTES // 1_000_000}MB.")

    def _blocking_upload():
        optimized_image, content_type = optimize_image(io.BytesIO(file_content))
        client = storage.Client()
        blob = client.bucket(bucket_name).blob(blob_name)
        blob.upload_from_file(optimized_image, content_type=content_type, timeout=30)

    try:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _blocking_upload)
    except GoogleCloudError as e:
        logger.error(f"Google Cloud Storage error: {e}", exc_info=True)
        raise ImageUploadError("Failed to upload photo: Storage service error")
    except OSError as e:
        # PIL could not read the file
        logger.warning(f"Rejected unreadable image {photo.filename}: {e}")
        raise ImageUploadError("Uploaded file is not a valid image")

    logger.info(f"Successfully uploaded photo: {blob_name}")
    return f"https://storage.googleapis.com/{bucket_name}/{blob_name}"


async def delete_image_from_storage(public_url: str) -> bool:
    """
    Delete a listing photo by its public URL.

    Failures are logged and reported as False; a stale object in the bucket
    must not block deleting or editing the listing.
    """
    bucket_name = config.GOOGLE_CLOUD_STORAGE_BUCKET
    blob_name = _blob_name_from_url(public_url, bucket_name)
    if blob_name is None:
        logger.warning(f"Not a bucket URL, skipping delete: {public_url}")
        return False

    def _blocking_delete():
        storage.Client().bucket(bucket_name).blob(blob_name).delete()

    try:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _blocking_delete)
    except Exception as e:
        logger.error(f"Failed to delete image from storage: {e}")
        return False

    logger.info(f"Successfully deleted image: {blob_name}")
    return True
