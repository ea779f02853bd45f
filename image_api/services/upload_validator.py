"""Validation of image upload requests.

Field rules for creating an image record:

- ``title``: required, trimmed, at most 255 characters
- ``image``: required, decodable by Pillow in an accepted format, at most
  ``MAX_UPLOAD_KB`` kilobytes

Both fields are checked before raising, so a client sees every problem with
its request at once.
"""

import io
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from ..exceptions import ValidationError

TITLE_MAX_LENGTH = 255

# Pillow format name -> stored file extension
IMAGE_EXTENSIONS: dict[str, str] = {
    "JPEG": ".jpg",
    "PNG": ".png",
    "GIF": ".gif",
    "BMP": ".bmp",
    "WEBP": ".webp",
}


@dataclass
class ValidatedUpload:
    """A create request that passed validation."""

    title: str
    content: bytes
    extension: str


def detect_image_format(content: bytes) -> Optional[str]:
    """Return the Pillow format name of content, or None if it is not an accepted image."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, Image.DecompressionBombError):
        return None

    if image_format not in IMAGE_EXTENSIONS:
        return None
    return image_format


def validate_title(title: Optional[str]) -> tuple[Optional[str], list[str]]:
    """Trim and check the title; returns the cleaned value and its error messages."""
    cleaned = title.strip() if title is not None else ""
    if not cleaned:
        return None, ["The title field is required."]
    if len(cleaned) > TITLE_MAX_LENGTH:
        return None, [f"The title field must not be greater than {TITLE_MAX_LENGTH} characters."]
    return cleaned, []


def validate_image_content(content: Optional[bytes], max_bytes: int) -> tuple[Optional[str], list[str]]:
    """Check the uploaded bytes; returns the detected extension and the error messages."""
    if not content:
        return None, ["The image field is required."]

    # Oversized uploads are only read up to the limit, so their format is not checked
    if len(content) > max_bytes:
        return None, [f"The image field must not be greater than {max_bytes // 1024} kilobytes."]

    image_format = detect_image_format(content)
    if image_format is None:
        return None, ["The image field must be an image."]
    return IMAGE_EXTENSIONS[image_format], []


async def validate_image_upload(
    title: Optional[str],
    image: Optional[UploadFile],
    max_bytes: int,
) -> ValidatedUpload:
    """Validate a create request.

    Args:
        title: Raw ``title`` form value
        image: Uploaded ``image`` file, if any
        max_bytes: Upper bound on the file size

    Returns:
        The cleaned title, file bytes and extension

    Raises:
        ValidationError: With a field -> messages mapping if any rule fails
    """
    content: Optional[bytes] = None
    if image is not None:
        # One byte past the limit is enough to know the file is too large
        content = await image.read(max_bytes + 1)

    cleaned_title, title_errors = validate_title(title)
    extension, image_errors = validate_image_content(content, max_bytes)

    errors: dict[str, list[str]] = {}
    if title_errors:
        errors["title"] = title_errors
    if image_errors:
        errors["image"] = image_errors
    if errors:
        raise ValidationError(errors)

    return ValidatedUpload(title=cleaned_title, content=content, extension=extension)
