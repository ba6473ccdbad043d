"""Application DTOs: service inputs, read views, and entity -> view mapping."""

from dataclasses import dataclass, field
from datetime import datetime

from leadbook.domain import Contact, ContactImage, ContactType


# --- Inputs ---


@dataclass(frozen=True)
class ContactInput:
    """Create-contact input. type is the raw wire value until validated."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    type: ContactType | str | int | None = None


@dataclass(frozen=True)
class ContactUpdate:
    """Update-contact input. Only name, email, and phone are mutable."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class ImageUpload:
    image_data: str | None = None
    file_name: str | None = None
    content_type: str | None = None


# --- Views ---


@dataclass(frozen=True)
class ContactView:
    id: int
    name: str
    email: str | None
    phone: str | None
    type: ContactType
    image_count: int


@dataclass(frozen=True)
class ImageView:
    id: int
    contact_id: int
    image_data: str
    file_name: str | None
    content_type: str | None
    uploaded_at: datetime


@dataclass(frozen=True)
class ContactDetail(ContactView):
    """A contact together with its images, ordered by upload time."""

    images: list[ImageView] = field(default_factory=list)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalized_contact_fields(data: ContactInput | ContactUpdate) -> dict:
    """Trimmed name/email/phone as stored; empty optional fields become None."""
    return {
        "name": (data.name or "").strip(),
        "email": _blank_to_none(data.email),
        "phone": _blank_to_none(data.phone),
    }


def normalized_image_fields(upload: ImageUpload) -> dict:
    return {
        "image_data": (upload.image_data or "").strip(),
        "file_name": _blank_to_none(upload.file_name),
        "content_type": _blank_to_none(upload.content_type),
    }


def contact_to_view(contact: Contact) -> ContactView:
    return ContactView(
        id=contact.id,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        type=contact.type,
        image_count=contact.image_count,
    )


def image_to_view(image: ContactImage) -> ImageView:
    return ImageView(
        id=image.id,
        contact_id=image.contact_id,
        image_data=image.image_data,
        file_name=image.file_name,
        content_type=image.content_type,
        uploaded_at=image.uploaded_at,
    )


def contact_to_detail(contact: Contact, images: list[ContactImage]) -> ContactDetail:
    return ContactDetail(
        id=contact.id,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        type=contact.type,
        image_count=len(images),
        images=[image_to_view(image) for image in images],
    )
