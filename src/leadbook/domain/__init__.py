"""Domain layer: entities, constants, and errors. No dependencies on outer layers."""

from leadbook.domain.entities import (
    ALLOWED_IMAGE_CONTENT_TYPES,
    MAX_IMAGES_PER_CONTACT,
    Contact,
    ContactImage,
    ContactType,
)
from leadbook.domain.errors import ImageLimitExceeded

__all__ = [
    "ALLOWED_IMAGE_CONTENT_TYPES",
    "MAX_IMAGES_PER_CONTACT",
    "Contact",
    "ContactImage",
    "ContactType",
    "ImageLimitExceeded",
]
