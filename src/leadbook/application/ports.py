"""Application ports (interfaces). Implemented by infrastructure adapters."""

from datetime import datetime
from typing import Protocol

from leadbook.application.dto import ContactInput, ContactUpdate, ImageUpload
from leadbook.domain import Contact, ContactImage


class StorageError(Exception):
    """Unexpected persistence failure. Adapters wrap their driver exceptions in this."""


class ContactStore(Protocol):
    """Persists contacts and their images. Every write method is one transaction."""

    def list_contacts(self) -> list[Contact]:
        """Return all contacts ordered by id, each with its current image_count."""
        ...

    def get_contact(self, contact_id: int) -> Contact | None:
        """Return the contact with its image_count, or None."""
        ...

    def add_contact(self, data: ContactInput) -> Contact:
        """Insert a validated contact and return it with its generated id."""
        ...

    def update_contact(self, contact_id: int, data: ContactUpdate) -> Contact | None:
        """Overwrite name, email, and phone. Returns None if the contact does not exist."""
        ...

    def delete_contact(self, contact_id: int) -> bool:
        """Delete the contact and all of its images. Returns False if not found."""
        ...

    def count_images(self, contact_id: int) -> int:
        ...

    def list_images(self, contact_id: int) -> list[ContactImage]:
        """Return the contact's images ordered by uploaded_at, then id."""
        ...

    def get_image(self, contact_id: int, image_id: int) -> ContactImage | None:
        ...

    def add_images(
        self,
        contact_id: int,
        uploads: list[ImageUpload],
        *,
        uploaded_at: datetime,
        max_images: int,
    ) -> list[ContactImage] | None:
        """Insert all uploads or none.

        Returns None if the contact does not exist. Raises ImageLimitExceeded
        if current count + len(uploads) > max_images; the count and the insert
        happen in the same transaction.
        """
        ...

    def delete_image(self, contact_id: int, image_id: int) -> bool:
        """Delete the image if it belongs to the contact. Returns False otherwise."""
        ...
