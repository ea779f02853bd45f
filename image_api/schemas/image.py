from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


# Image response
class ImageResponse(BaseModel):
    id: int
    title: str = Field(..., max_length=255, description="Image title")
    file_path: str = Field(..., description="Storage-relative path of the image file")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str


# Error body shared by every failure status
class ErrorResponse(BaseModel):
    message: str = Field(..., description="Error description")
    errors: Optional[dict[str, list[str]]] = Field(
        None, description="Field name to validation messages (422 only)"
    )
