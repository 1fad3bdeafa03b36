import io
from unittest.mock import MagicMock, patch

import pytest
from fastapi import UploadFile
from PIL import Image
from starlette.datastructures import Headers

from urbanswap.services.image_storage import (
    ImageUploadError,
    delete_image_from_storage,
    optimize_image,
    upload_listing_image,
)


def make_image(fmt="PNG", size=(1600, 800), mode="RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, (200, 100, 50) if mode == "RGB" else (200, 100, 50, 128)).save(buffer, format=fmt)
    return buffer.getvalue()


def make_upload(content: bytes, filename="photo.png", content_type="image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        size=len(content),
        headers=Headers({"content-type": content_type}),
    )


def test_optimize_image_resizes_and_converts_to_jpeg():
    output, content_type = optimize_image(io.BytesIO(make_image("PNG")))

    assert content_type == "image/jpeg"
    image = Image.open(output)
    assert image.format == "JPEG"
    assert image.size == (1200, 600)


def test_optimize_image_keeps_png_transparency():
    output, content_type = optimize_image(io.BytesIO(make_image("PNG", size=(100, 100), mode="RGBA")))

    assert content_type == "image/png"
    assert Image.open(output).mode == "RGBA"


async def test_upload_listing_image_returns_public_url():
    with patch("urbanswap.services.image_storage.storage.Client") as mock_client:
        url = await upload_listing_image(make_upload(make_image()), listing_key="user-1")

    assert url.startswith("https://storage.googleapis.com/urbanswap-listing-images/listings/user-1_")
    assert url.endswith(".png")
    blob = mock_client.return_value.bucket.return_value.blob.return_value
    blob.upload_from_file.assert_called_once()


async def test_upload_rejects_non_image_content_type():
    with pytest.raises(ImageUploadError, match="Only image files"):
        await upload_listing_image(make_upload(b"hello", "notes.txt", "text/plain"), listing_key="user-1")


async def test_upload_rejects_unreadable_image():
    with patch("urbanswap.services.image_storage.storage.Client"):
        with pytest.raises(ImageUploadError, match="not a valid image"):
            await upload_listing_image(make_upload(b"definitely not a png"), listing_key="user-1")


async def test_upload_rejects_large_file(monkeypatch):
    monkeypatch.setattr("urbanswap.services.image_storage.config.MAX_IMAGE_BYTES", 10)

    with pytest.raises(ImageUploadError, match="File too large"):
        await upload_listing_image(make_upload(make_image()), listing_key="user-1")


async def test_delete_image_from_storage():
    url = "https://storage.googleapis.com/urbanswap-listing-images/listings/user-1_x.jpg"
    with patch("urbanswap.services.image_storage.storage.Client") as mock_client:
        assert await delete_image_from_storage(url) is True

    mock_client.return_value.bucket.assert_called_once_with("urbanswap-listing-images")
    mock_client.return_value.bucket.return_value.blob.assert_called_once_with("listings/user-1_x.jpg")


async def test_delete_image_failure_is_reported_not_raised():
    url = "https://storage.googleapis.com/urbanswap-listing-images/listings/user-1_x.jpg"
    with patch("urbanswap.services.image_storage.storage.Client") as mock_client:
        mock_client.return_value.bucket.return_value.blob.return_value.delete.side_effect = RuntimeError("boom")
        assert await delete_image_from_storage(url) is False


async def test_delete_ignores_foreign_urls():
    with patch("urbanswap.services.image_storage.storage.Client", MagicMock()) as mock_client:
        assert await delete_image_from_storage("https://example.com/pic.jpg") is False
    mock_client.assert_not_called()
