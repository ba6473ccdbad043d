"""Domain entities: Contact, ContactImage, and ContactType."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Field limits shared by validation and the persistence schema.
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
FILE_NAME_MAX_LENGTH = 100
CONTENT_TYPE_MAX_LENGTH = 50

MAX_IMAGES_PER_CONTACT = 10

ALLOWED_IMAGE_CONTENT_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)


class ContactType(str, Enum):
    CUSTOMER = "Customer"
    LEAD = "Lead"

    @classmethod
    def parse(cls, value: "ContactType | str | int | None") -> "ContactType | None":
        """Resolve a wire value (name, case-insensitive, or ordinal 0/1). None if unknown."""
        if isinstance(value, ContactType):
            return value
        if isinstance(value, bool) or value is None:
            return None
        members = list(cls)
        if isinstance(value, int):
            return members[value] if 0 <= value < len(members) else None
        text = str(value).strip().lower()
        for member in members:
            if member.value.lower() == text:
                return member
        return None


@dataclass(frozen=True)
class Contact:
    """
    A customer or lead. Owns zero or more ContactImage records.
    type is fixed at creation; image_count is derived from the owned images.
    """

    id: int
    name: str
    type: ContactType
    email: str | None = None
    phone: str | None = None
    image_count: int = 0

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")


@dataclass(frozen=True)
class ContactImage:
    """A base64-encoded image owned by exactly one Contact."""

    id: int
    contact_id: int
    image_data: str
    uploaded_at: datetime
    file_name: str | None = None
    content_type: str | None = None

    def __post_init__(self):
        if not self.image_data:
            raise ValueError("ContactImage image_data must be non-empty.")
