"""In-memory implementation of ContactStore (no DB)."""

import threading
from dataclasses import replace
from datetime import datetime

from leadbook.application.dto import ContactInput, ContactUpdate, ImageUpload
from leadbook.domain import Contact, ContactImage, ContactType, ImageLimitExceeded


class InMemoryContactStore:
    """Stores contacts and images in dicts. Ids are sequential from 1.
    One lock guards every write, so the image-cap check and insert are atomic.
    """

    def __init__(self) -> None:
        self._contacts: dict[int, Contact] = {}
        self._images: dict[int, ContactImage] = {}
        self._next_contact_id = 1
        self._next_image_id = 1
        self._lock = threading.Lock()

    def _with_count(self, contact: Contact) -> Contact:
        return replace(contact, image_count=self.count_images(contact.id))

    def list_contacts(self) -> list[Contact]:
        return [self._with_count(self._contacts[cid]) for cid in sorted(self._contacts)]

    def get_contact(self, contact_id: int) -> Contact | None:
        contact = self._contacts.get(contact_id)
        if contact is None:
            return None
        return self._with_count(contact)

    def add_contact(self, data: ContactInput) -> Contact:
        with self._lock:
            contact = Contact(
                id=self._next_contact_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
                type=ContactType.parse(data.type),
            )
            self._contacts[contact.id] = contact
            self._next_contact_id += 1
        return contact

    def update_contact(self, contact_id: int, data: ContactUpdate) -> Contact | None:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None:
                return None
            updated = replace(contact, name=data.name, email=data.email, phone=data.phone)
            self._contacts[contact_id] = updated
        return self._with_count(updated)

    def delete_contact(self, contact_id: int) -> bool:
        with self._lock:
            if self._contacts.pop(contact_id, None) is None:
                return False
            for image_id in [i.id for i in self._images.values() if i.contact_id == contact_id]:
                del self._images[image_id]
        return True

    def count_images(self, contact_id: int) -> int:
        return sum(1 for i in self._images.values() if i.contact_id == contact_id)

    def list_images(self, contact_id: int) -> list[ContactImage]:
        owned = [i for i in self._images.values() if i.contact_id == contact_id]
        return sorted(owned, key=lambda i: (i.uploaded_at, i.id))

    def get_image(self, contact_id: int, image_id: int) -> ContactImage | None:
        image = self._images.get(image_id)
        if image is None or image.contact_id != contact_id:
            return None
        return image

    def add_images(
        self,
        contact_id: int,
        uploads: list[ImageUpload],
        *,
        uploaded_at: datetime,
        max_images: int,
    ) -> list[ContactImage] | None:
        with self._lock:
            if contact_id not in self._contacts:
                return None
            current = self.count_images(contact_id)
            if current + len(uploads) > max_images:
                raise ImageLimitExceeded(current, len(uploads), max_images)
            created = []
            for upload in uploads:
                image = ContactImage(
                    id=self._next_image_id,
                    contact_id=contact_id,
                    image_data=upload.image_data,
                    file_name=upload.file_name,
                    content_type=upload.content_type,
                    uploaded_at=uploaded_at,
                )
                self._images[image.id] = image
                self._next_image_id += 1
                created.append(image)
        return created

    def delete_image(self, contact_id: int, image_id: int) -> bool:
        with self._lock:
            if self.get_image(contact_id, image_id) is None:
                return False
            del self._images[image_id]
        return True
