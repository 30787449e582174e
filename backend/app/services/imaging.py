"""
Palette Service Imaging Utilities
Handles remote image fetch, upload reading, format validation and decoding.
"""
import io
from typing import Optional
from urllib.parse import urlparse

import numpy as np
import requests
from fastapi import UploadFile
from PIL import Image

from app.config import config
from app.services.colors.errors import DecodeError, FetchError, InvalidInput
from app.services.colors.raster import Raster

CHUNK_SIZE = 64 * 1024

WIDE_INTEGER_MODES = ("I;16", "I;16B", "I;16L", "I;16N", "I")


def scale_to_8bit(samples: np.ndarray, mode: str) -> np.ndarray:
    """Map 16-bit grayscale samples (mode ``I`` clipped to 16 bits) onto 0..255."""
    wide = samples.astype(np.int64)
    if mode == "I":
        wide = np.clip(wide, 0, 0xFFFF)
    return (wide >> 8).astype(np.uint8)


def file_name_from_url(image_url: str) -> str:
    """Last path segment of an image URL (used for logging only)."""
    path = urlparse(image_url).path
    return path.rstrip("/").split("/")[-1]


def fetch_image_bytes(image_url: str,
                      timeout: Optional[float] = None,
                      user_agent: Optional[str] = None,
                      max_bytes: Optional[int] = None) -> bytes:
    """
    Download an image over HTTP(S).

    A single attempt is made; there is no retry.

    Args:
        image_url: Absolute http(s) URL
        timeout: Connect/read timeout in seconds (default from config)
        user_agent: User-Agent header (default from config)
        max_bytes: Maximum body size (default from config)

    Returns:
        Raw response body

    Raises:
        FetchError: For bad URLs, transport errors, non-2xx responses
            or oversize bodies
    """
    if timeout is None:
        timeout = config.FETCH_TIMEOUT_S
    if user_agent is None:
        user_agent = config.USER_AGENT
    if max_bytes is None:
        max_bytes = config.max_file_bytes

    parsed = urlparse(image_url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FetchError(f"Unsupported image URL: {image_url!r}")

    try:
        with requests.get(image_url, headers={"User-Agent": user_agent},
                          timeout=timeout, stream=True) as response:
            response.raise_for_status()

            buffer = io.BytesIO()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                buffer.write(chunk)
                if buffer.tell() > max_bytes:
                    raise FetchError(
                        f"Image too large. Maximum size: {max_bytes // (1024 * 1024)}MB"
                    )
            return buffer.getvalue()

    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch image: {str(e)}") from e


async def read_upload(file: UploadFile, max_bytes: Optional[int] = None) -> bytes:
    """
    Read an uploaded image file with size and content-type checks.

    Raises:
        InvalidInput: For oversize uploads
        DecodeError: For unsupported content types
    """
    if max_bytes is None:
        max_bytes = config.max_file_bytes

    if file.content_type and file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise DecodeError(
            f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    file_bytes = await file.read()
    if len(file_bytes) > max_bytes:
        raise InvalidInput(f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB")

    return file_bytes


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Returns:
        Detected MIME type

    Raises:
        DecodeError: For truncated or unsupported files
    """
    if len(file_bytes) < 8:
        raise DecodeError("File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    elif file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    elif file_bytes.startswith((b'GIF87a', b'GIF89a')):
        return "image/gif"
    else:
        raise DecodeError("Invalid image file. Magic bytes don't match supported formats.")


def decode_raster(file_bytes: bytes) -> Raster:
    """
    Decode image bytes into an RGB raster.

    Only the first frame of animated formats is used; alpha is dropped.

    Raises:
        DecodeError: For unsupported, corrupt or empty images
    """
    validate_magic_bytes(file_bytes)

    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        pil_image.seek(0)

        # convert() clamps 16/32-bit integer samples at 255, so rescale first
        if pil_image.mode in WIDE_INTEGER_MODES:
            pil_image = Image.fromarray(scale_to_8bit(np.asarray(pil_image), pil_image.mode))

        # Convert to RGB if necessary
        if pil_image.mode != 'RGB':
            pil_image = pil_image.convert('RGB')

        rgb_array = np.array(pil_image, dtype=np.uint8)

    # Pillow plugins report some truncated streams as SyntaxError
    except (OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image: {str(e)}") from e

    try:
        return Raster.from_array(rgb_array)
    except InvalidInput as e:
        raise DecodeError(f"Decoded image is empty: {e.message}") from e
