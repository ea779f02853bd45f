from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from image_api.api.dependencies import ImageDep, ImageServiceDep
from image_api.core.config import settings
from image_api.schemas import ErrorResponse, ImageResponse, MessageResponse
from image_api.services.upload_validator import validate_image_upload

router = APIRouter(prefix="/products", tags=["images"])


@router.get("", response_model=list[ImageResponse])
async def list_images(
    service: ImageServiceDep,
    search: Optional[str] = Query(None, description="Title substring to search for"),
):
    """List images, newest first"""
    return await service.get_images(search=search)


@router.post(
    "",
    response_model=ImageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_image(
    service: ImageServiceDep,
    title: Optional[str] = Form(None, description="Image title"),
    image: Optional[UploadFile] = File(None, description="Image file"),
):
    """Upload an image"""
    upload = await validate_image_upload(title, image, settings.max_upload_bytes)
    return await service.create_image(upload)


@router.get(
    "/{image_id}",
    response_model=ImageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_image(image: ImageDep):
    """Get a single image"""
    return image


@router.delete(
    "/{image_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def delete_image(image: ImageDep, service: ImageServiceDep):
    """Delete an image and its stored file"""
    await service.delete_image(image)
    return MessageResponse(message="Image deleted successfully.")
