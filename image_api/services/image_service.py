from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional

import structlog

from image_api.exceptions import StorageError
from image_api.models import Image
from image_api.services.upload_validator import ValidatedUpload
from image_api.storage import BlobStoreProtocol

logger = structlog.get_logger(__name__)


class ImageService:
    """Reads and writes image records together with their stored files."""

    def __init__(
        self,
        db: AsyncSession,
        storage: BlobStoreProtocol,
        image_directory: str = "images",
    ):
        self.db = db
        self.storage = storage
        self.image_directory = image_directory

    async def get_images(self, search: Optional[str] = None) -> list[Image]:
        """List images newest first, optionally filtered by a title substring."""
        query = select(Image)

        if search is not None:
            query = query.where(Image.title.contains(search, autoescape=True))

        query = query.order_by(Image.created_at.desc(), Image.id.desc())

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("image_query_failed", search=search, error=str(e))
            raise StorageError("Failed to read image records.") from e
        return list(result.scalars().all())

    async def get_image_by_id(self, image_id: int) -> Optional[Image]:
        try:
            return await self.db.get(Image, image_id)
        except SQLAlchemyError as e:
            logger.error("image_lookup_failed", image_id=image_id, error=str(e))
            raise StorageError("Failed to read image record.") from e

    async def create_image(self, upload: ValidatedUpload) -> Image:
        """Store the file, then insert its record.

        A failed insert removes the file again so no blob is left without a
        record. A failed file write raises before anything is inserted.
        """
        file_path = self.storage.put(self.image_directory, upload.content, upload.extension)

        image = Image(title=upload.title, file_path=file_path)
        self.db.add(image)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("image_insert_failed", file_path=file_path, error=str(e))
            self._discard_blob(file_path)
            raise StorageError("Failed to save image record.") from e

        logger.info("image_created", image_id=image.id, file_path=file_path, size=len(upload.content))
        return image

    async def delete_image(self, image: Image) -> None:
        """Delete the stored file, then the record.

        If the file cannot be deleted the record is kept, so the file stays
        tracked. A file that is already gone does not block the deletion.
        """
        try:
            removed = self.storage.delete(image.file_path)
        except StorageError:
            logger.error("blob_delete_failed", image_id=image.id, file_path=image.file_path)
            raise

        if not removed:
            logger.warning("blob_missing_on_delete", image_id=image.id, file_path=image.file_path)

        image_id = image.id
        try:
            await self.db.delete(image)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("image_delete_failed", image_id=image_id, error=str(e))
            raise StorageError("Failed to delete image record.") from e

        logger.info("image_deleted", image_id=image_id)

    def _discard_blob(self, file_path: str) -> None:
        try:
            self.storage.delete(file_path)
        except StorageError:
            logger.error("orphaned_blob", file_path=file_path)
