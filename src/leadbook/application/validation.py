"""Input validation. Each function returns the aggregated list of error messages; empty means valid."""

import base64
import binascii
import re

from email_validator import EmailNotValidError, validate_email

from leadbook.application.dto import ContactInput, ContactUpdate, ImageUpload
from leadbook.domain import ALLOWED_IMAGE_CONTENT_TYPES, ContactType
from leadbook.domain.entities import (
    EMAIL_MAX_LENGTH,
    FILE_NAME_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
)

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def is_valid_email(value: str) -> bool:
    """Syntax-only check; no DNS lookup."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _contact_field_errors(data: ContactInput | ContactUpdate) -> list[str]:
    errors = []
    name = (data.name or "").strip()
    if not name:
        errors.append("Name is required")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"Name cannot exceed {NAME_MAX_LENGTH} characters")

    if _present(data.email):
        email = data.email.strip()
        if not is_valid_email(email):
            errors.append("Invalid email format")
        if len(email) > EMAIL_MAX_LENGTH:
            errors.append(f"Email cannot exceed {EMAIL_MAX_LENGTH} characters")

    if _present(data.phone):
        phone = data.phone.strip()
        if len(phone) > PHONE_MAX_LENGTH:
            errors.append(f"Phone cannot exceed {PHONE_MAX_LENGTH} characters")
        if not PHONE_PATTERN.match(phone):
            errors.append("Invalid phone number format")
    return errors


def validate_contact_input(data: ContactInput) -> list[str]:
    errors = _contact_field_errors(data)
    if ContactType.parse(data.type) is None:
        errors.append("Invalid contact type")
    return errors


def validate_contact_update(data: ContactUpdate) -> list[str]:
    return _contact_field_errors(data)


def is_valid_base64(value: str) -> bool:
    """Strict base64: standard alphabet, correct padding. Surrounding whitespace ignored."""
    try:
        base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def validate_image_upload(upload: ImageUpload) -> list[str]:
    errors = []
    if not _present(upload.image_data):
        errors.append("Image data is required")
    elif not is_valid_base64(upload.image_data):
        errors.append("Invalid base64 image data")

    if _present(upload.file_name) and len(upload.file_name.strip()) > FILE_NAME_MAX_LENGTH:
        errors.append(f"File name cannot exceed {FILE_NAME_MAX_LENGTH} characters")

    if _present(upload.content_type):
        if upload.content_type.strip().lower() not in ALLOWED_IMAGE_CONTENT_TYPES:
            errors.append("Invalid image type")
    return errors


def validate_image_batch(uploads: list[ImageUpload]) -> list[str]:
    """Validate every upload; messages are prefixed with the 1-based position."""
    if not uploads:
        return ["No images provided"]
    errors = []
    for position, upload in enumerate(uploads, start=1):
        errors.extend(f"Image {position}: {msg}" for msg in validate_image_upload(upload))
    return errors
