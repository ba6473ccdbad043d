"""Contact list, detail, create, update, delete, and image-capacity check."""

import logging

from leadbook.application.dto import (
    ContactDetail,
    ContactInput,
    ContactUpdate,
    ContactView,
    contact_to_detail,
    contact_to_view,
    normalized_contact_fields,
)
from leadbook.application.ports import ContactStore, StorageError
from leadbook.application.results import ErrorKind, Result
from leadbook.application.validation import (
    validate_contact_input,
    validate_contact_update,
)
from leadbook.domain import MAX_IMAGES_PER_CONTACT, ContactType


def _not_found(contact_id: int) -> Result:
    return Result.fail(ErrorKind.NOT_FOUND, f"Contact with ID {contact_id} not found")


class ContactService:
    """Contact use cases over a ContactStore. Every method returns a Result envelope."""

    def __init__(
        self,
        store: ContactStore,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._log = logger or logging.getLogger(__name__)

    def list_contacts(self) -> Result[list[ContactView]]:
        self._log.info("Getting all contacts")
        try:
            contacts = self._store.list_contacts()
        except StorageError as exc:
            self._log.exception("Error occurred while getting all contacts")
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to retrieve contacts", [str(exc)]
            )
        return Result.ok(
            [contact_to_view(c) for c in contacts], "Contacts retrieved successfully"
        )

    def get_contact(self, contact_id: int) -> Result[ContactDetail]:
        """Return the contact with its images."""
        self._log.info("Getting contact with ID: %s", contact_id)
        try:
            contact = self._store.get_contact(contact_id)
            if contact is None:
                self._log.warning("Contact with ID %s not found", contact_id)
                return _not_found(contact_id)
            images = self._store.list_images(contact_id)
        except StorageError as exc:
            self._log.exception("Error occurred while getting contact with ID: %s", contact_id)
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to retrieve contact", [str(exc)]
            )
        return Result.ok(
            contact_to_detail(contact, images), "Contact retrieved successfully"
        )

    def create_contact(self, data: ContactInput) -> Result[ContactView]:
        errors = validate_contact_input(data)
        if errors:
            self._log.warning("Rejected contact create: %s", "; ".join(errors))
            return Result.fail(ErrorKind.VALIDATION, "Validation failed", errors)

        clean = ContactInput(
            **normalized_contact_fields(data), type=ContactType.parse(data.type)
        )
        self._log.info("Creating new contact: %s", clean.name)
        try:
            contact = self._store.add_contact(clean)
        except StorageError as exc:
            self._log.exception("Error occurred while creating contact: %s", clean.name)
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to create contact", [str(exc)]
            )
        self._log.info("Contact created successfully with ID: %s", contact.id)
        return Result.ok(contact_to_view(contact), "Contact created successfully")

    def update_contact(self, contact_id: int, data: ContactUpdate) -> Result[ContactView]:
        """Overwrite name, email, and phone. Type and images are untouched."""
        errors = validate_contact_update(data)
        if errors:
            self._log.warning(
                "Rejected update for contact %s: %s", contact_id, "; ".join(errors)
            )
            return Result.fail(ErrorKind.VALIDATION, "Validation failed", errors)

        self._log.info("Updating contact with ID: %s", contact_id)
        try:
            contact = self._store.update_contact(
                contact_id, ContactUpdate(**normalized_contact_fields(data))
            )
        except StorageError as exc:
            self._log.exception("Error occurred while updating contact with ID: %s", contact_id)
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to update contact", [str(exc)]
            )
        if contact is None:
            self._log.warning("Contact with ID %s not found for update", contact_id)
            return _not_found(contact_id)
        self._log.info("Contact updated successfully with ID: %s", contact_id)
        return Result.ok(contact_to_view(contact), "Contact updated successfully")

    def delete_contact(self, contact_id: int) -> Result[None]:
        """Delete the contact; its images go with it."""
        self._log.info("Deleting contact with ID: %s", contact_id)
        try:
            deleted = self._store.delete_contact(contact_id)
        except StorageError as exc:
            self._log.exception("Error occurred while deleting contact with ID: %s", contact_id)
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to delete contact", [str(exc)]
            )
        if not deleted:
            self._log.warning("Contact with ID %s not found for deletion", contact_id)
            return _not_found(contact_id)
        self._log.info("Contact deleted successfully with ID: %s", contact_id)
        return Result.ok(None, "Contact deleted successfully")

    def can_add_more_images(
        self, contact_id: int, additional_count: int = 1
    ) -> Result[bool]:
        """True when current image count + additional_count stays within the cap.

        A missing contact is NOT_FOUND rather than False.
        """
        try:
            contact = self._store.get_contact(contact_id)
        except StorageError as exc:
            self._log.exception(
                "Error occurred while checking image limit for contact ID: %s", contact_id
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to check image limit", [str(exc)]
            )
        if contact is None:
            return _not_found(contact_id)
        can_add = contact.image_count + additional_count <= MAX_IMAGES_PER_CONTACT
        return Result.ok(can_add, "Can add more images" if can_add else "Image limit reached")
