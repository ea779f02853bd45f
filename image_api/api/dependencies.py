"""Shared dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from image_api.core.config import settings
from image_api.database import get_db
from image_api.exceptions import NotFoundError
from image_api.models import Image
from image_api.services.image_service import ImageService
from image_api.storage import FileStorage


def get_storage() -> FileStorage:
    """Blob storage rooted at the configured public directory."""
    return FileStorage(settings.STORAGE_ROOT)


def get_image_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[FileStorage, Depends(get_storage)],
) -> ImageService:
    return ImageService(db, storage, image_directory=settings.IMAGE_DIRECTORY)


ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]


async def find_by_id(image_id: int, service: ImageServiceDep) -> Image:
    """Resolve the ``image_id`` path parameter to a record, or fail with 404."""
    image = await service.get_image_by_id(image_id)
    if image is None:
        raise NotFoundError()
    return image


ImageDep = Annotated[Image, Depends(find_by_id)]
