from fastapi import APIRouter
from image_api.api import images

api_router = APIRouter()
api_router.include_router(images.router)
