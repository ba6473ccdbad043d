"""
Leadbook core: clean-architecture layout.

- domain: entities (Contact, ContactImage, ContactType) and the image cap. No outer dependencies.
- application: use cases (ContactService, ContactImageService), ports (ContactStore),
  DTOs, validation, and the Result envelope.
- infrastructure: adapters (InMemoryContactStore, SqlAlchemyContactStore, Neo4jContactStore).
"""

from leadbook.application import (
    ContactImageService,
    ContactInput,
    ContactService,
    ContactStore,
    ContactUpdate,
    ErrorKind,
    ImageUpload,
    Result,
    StorageError,
)
from leadbook.domain import (
    MAX_IMAGES_PER_CONTACT,
    Contact,
    ContactImage,
    ContactType,
    ImageLimitExceeded,
)
from leadbook.infrastructure import (
    InMemoryContactStore,
    Neo4jContactStore,
    SqlAlchemyContactStore,
)

__all__ = [
    "MAX_IMAGES_PER_CONTACT",
    "Contact",
    "ContactImage",
    "ContactImageService",
    "ContactInput",
    "ContactService",
    "ContactStore",
    "ContactType",
    "ContactUpdate",
    "ErrorKind",
    "ImageLimitExceeded",
    "ImageUpload",
    "InMemoryContactStore",
    "Neo4jContactStore",
    "Result",
    "SqlAlchemyContactStore",
    "StorageError",
]
