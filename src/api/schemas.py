"""Wire models. JSON is camelCase; snake_case is also accepted on input."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from leadbook.domain import ContactType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---
# Fields are loosely typed so leadbook.application.validation reports every problem at once.


class ContactCreateBody(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    type: str | int | None = None


class ContactUpdateBody(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class ImageUploadBody(CamelModel):
    image_data: str | None = None
    file_name: str | None = None
    content_type: str | None = None


# --- Responses ---


class ImageOut(CamelModel):
    id: int
    contact_id: int
    image_data: str
    file_name: str | None = None
    content_type: str | None = None
    uploaded_at: datetime


class ContactOut(CamelModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    type: ContactType
    image_count: int = 0


class ContactDetailOut(ContactOut):
    images: list[ImageOut] = []


class ApiResponse(CamelModel):
    success: bool
    message: str
    data: Any = None
    errors: list[str] = []
    timestamp: datetime


class HealthOut(CamelModel):
    status: str
    timestamp: datetime
    message: str
    version: str
