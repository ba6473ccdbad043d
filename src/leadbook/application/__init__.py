"""Application layer: use cases, ports, DTOs, validation, and the result envelope. Depends only on domain."""

from leadbook.application.contact_service import ContactService
from leadbook.application.dto import (
    ContactDetail,
    ContactInput,
    ContactUpdate,
    ContactView,
    ImageUpload,
    ImageView,
)
from leadbook.application.image_service import ContactImageService
from leadbook.application.ports import ContactStore, StorageError
from leadbook.application.results import ErrorKind, Result

__all__ = [
    "ContactDetail",
    "ContactImageService",
    "ContactInput",
    "ContactService",
    "ContactStore",
    "ContactUpdate",
    "ContactView",
    "ErrorKind",
    "ImageUpload",
    "ImageView",
    "Result",
    "StorageError",
]
