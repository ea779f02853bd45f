from image_api.schemas.image import (
    ImageResponse,
    MessageResponse,
    ErrorResponse,
)

__all__ = [
    "ImageResponse",
    "MessageResponse",
    "ErrorResponse",
]
