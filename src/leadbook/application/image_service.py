"""Contact image list, get, upload (single and batch), delete, and limit check."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from leadbook.application.dto import (
    ImageUpload,
    ImageView,
    image_to_view,
    normalized_image_fields,
)
from leadbook.application.ports import ContactStore, StorageError
from leadbook.application.results import ErrorKind, Result
from leadbook.application.validation import (
    validate_image_batch,
    validate_image_upload,
)
from leadbook.domain import MAX_IMAGES_PER_CONTACT, ImageLimitExceeded


def _contact_not_found(contact_id: int) -> Result:
    return Result.fail(ErrorKind.NOT_FOUND, f"Contact with ID {contact_id} not found")


def _image_not_found(contact_id: int, image_id: int) -> Result:
    return Result.fail(
        ErrorKind.NOT_FOUND,
        f"Image with ID {image_id} not found for contact {contact_id}",
    )


class ContactImageService:
    """Image use cases over a ContactStore. Enforces the per-contact image cap."""

    def __init__(
        self,
        store: ContactStore,
        *,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._log = logger or logging.getLogger(__name__)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def list_images(self, contact_id: int) -> Result[list[ImageView]]:
        self._log.info("Getting images for contact ID: %s", contact_id)
        try:
            if self._store.get_contact(contact_id) is None:
                self._log.warning("Contact with ID %s not found", contact_id)
                return _contact_not_found(contact_id)
            images = self._store.list_images(contact_id)
        except StorageError as exc:
            self._log.exception(
                "Error occurred while getting images for contact ID: %s", contact_id
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to retrieve images", [str(exc)]
            )
        return Result.ok(
            [image_to_view(i) for i in images], "Images retrieved successfully"
        )

    def get_image(self, contact_id: int, image_id: int) -> Result[ImageView]:
        self._log.info("Getting image %s for contact ID: %s", image_id, contact_id)
        try:
            image = self._store.get_image(contact_id, image_id)
        except StorageError as exc:
            self._log.exception(
                "Error occurred while getting image %s for contact ID: %s",
                image_id,
                contact_id,
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to retrieve image", [str(exc)]
            )
        if image is None:
            self._log.warning("Image %s not found for contact ID: %s", image_id, contact_id)
            return _image_not_found(contact_id, image_id)
        return Result.ok(image_to_view(image), "Image retrieved successfully")

    def upload_image(self, contact_id: int, upload: ImageUpload) -> Result[ImageView]:
        errors = validate_image_upload(upload)
        if errors:
            self._log.warning(
                "Rejected image upload for contact %s: %s", contact_id, "; ".join(errors)
            )
            return Result.fail(ErrorKind.VALIDATION, "Validation failed", errors)

        self._log.info("Uploading image for contact ID: %s", contact_id)
        try:
            created = self._store.add_images(
                contact_id,
                [ImageUpload(**normalized_image_fields(upload))],
                uploaded_at=self._clock(),
                max_images=MAX_IMAGES_PER_CONTACT,
            )
        except ImageLimitExceeded:
            self._log.warning("Image limit reached for contact ID: %s", contact_id)
            return Result.fail(
                ErrorKind.LIMIT_EXCEEDED,
                f"Maximum number of images ({MAX_IMAGES_PER_CONTACT}) reached for this contact",
            )
        except StorageError as exc:
            self._log.exception(
                "Error occurred while uploading image for contact ID: %s", contact_id
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to upload image", [str(exc)]
            )
        if created is None:
            self._log.warning("Contact with ID %s not found for image upload", contact_id)
            return _contact_not_found(contact_id)

        image = created[0]
        self._log.info(
            "Image uploaded successfully with ID: %s for contact ID: %s", image.id, contact_id
        )
        return Result.ok(image_to_view(image), "Image uploaded successfully")

    def upload_batch(
        self, contact_id: int, uploads: list[ImageUpload]
    ) -> Result[list[ImageView]]:
        """Upload all images in one commit, or none of them."""
        errors = validate_image_batch(uploads)
        if errors:
            self._log.warning(
                "Rejected batch upload for contact %s: %s", contact_id, "; ".join(errors)
            )
            message = "No images provided" if not uploads else "Validation failed"
            return Result.fail(ErrorKind.VALIDATION, message, errors)

        self._log.info("Uploading %s images for contact ID: %s", len(uploads), contact_id)
        try:
            created = self._store.add_images(
                contact_id,
                [ImageUpload(**normalized_image_fields(u)) for u in uploads],
                uploaded_at=self._clock(),
                max_images=MAX_IMAGES_PER_CONTACT,
            )
        except ImageLimitExceeded as exc:
            self._log.warning(
                "Batch of %s images exceeds limit for contact ID: %s (current %s)",
                len(uploads),
                contact_id,
                exc.current,
            )
            return Result.fail(
                ErrorKind.LIMIT_EXCEEDED,
                f"Cannot upload {len(uploads)} images. "
                f"Maximum allowed is {exc.remaining} more images",
            )
        except StorageError as exc:
            self._log.exception(
                "Error occurred while uploading multiple images for contact ID: %s",
                contact_id,
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to upload images", [str(exc)]
            )
        if created is None:
            self._log.warning("Contact with ID %s not found for batch upload", contact_id)
            return _contact_not_found(contact_id)

        self._log.info("Multiple images uploaded successfully for contact ID: %s", contact_id)
        return Result.ok([image_to_view(i) for i in created], "Images uploaded successfully")

    def delete_image(self, contact_id: int, image_id: int) -> Result[None]:
        self._log.info("Deleting image %s for contact ID: %s", image_id, contact_id)
        try:
            deleted = self._store.delete_image(contact_id, image_id)
        except StorageError as exc:
            self._log.exception(
                "Error occurred while deleting image %s for contact ID: %s",
                image_id,
                contact_id,
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to delete image", [str(exc)]
            )
        if not deleted:
            self._log.warning("Image %s not found for contact ID: %s", image_id, contact_id)
            return _image_not_found(contact_id, image_id)
        self._log.info(
            "Image deleted successfully with ID: %s for contact ID: %s", image_id, contact_id
        )
        return Result.ok(None, "Image deleted successfully")

    def validate_image_limit(
        self, contact_id: int, additional_images: int = 1
    ) -> Result[bool]:
        """Read-only: True when count + additional_images <= cap. Missing contact is NOT_FOUND."""
        try:
            if self._store.get_contact(contact_id) is None:
                return _contact_not_found(contact_id)
            current = self._store.count_images(contact_id)
        except StorageError as exc:
            self._log.exception(
                "Error occurred while validating image limit for contact ID: %s", contact_id
            )
            return Result.fail(
                ErrorKind.STORAGE_FAULT, "Failed to validate image limit", [str(exc)]
            )
        can_add = current + additional_images <= MAX_IMAGES_PER_CONTACT
        return Result.ok(can_add, "Can add more images" if can_add else "Image limit reached")
