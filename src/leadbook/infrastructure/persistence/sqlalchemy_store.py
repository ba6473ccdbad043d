"""SQLAlchemy implementation of ContactStore.
Tables: contacts and contact_images (see sql_models). One session transaction per call.
"""

from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from leadbook.application.dto import ContactInput, ContactUpdate, ImageUpload
from leadbook.application.ports import StorageError
from leadbook.domain import Contact, ContactImage, ContactType, ImageLimitExceeded
from leadbook.infrastructure.persistence.sql_models import ContactImageRow, ContactRow


def _as_utc(dt: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _row_to_contact(row: ContactRow, image_count: int) -> Contact:
    return Contact(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        type=ContactType(row.type),
        image_count=image_count,
    )


def _row_to_image(row: ContactImageRow) -> ContactImage:
    return ContactImage(
        id=row.id,
        contact_id=row.contact_id,
        image_data=row.image_data,
        file_name=row.file_name,
        content_type=row.content_type,
        uploaded_at=_as_utc(row.uploaded_at),
    )


def _count_images(session: Session, contact_id: int) -> int:
    return session.execute(
        select(func.count(ContactImageRow.id)).where(
            ContactImageRow.contact_id == contact_id
        )
    ).scalar_one()


class SqlAlchemyContactStore:
    """Stores contacts in a relational database through a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._sessions = session_factory

    @contextmanager
    def _transaction(self):
        try:
            with self._sessions.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def list_contacts(self) -> list[Contact]:
        stmt = (
            select(ContactRow, func.count(ContactImageRow.id))
            .outerjoin(ContactImageRow, ContactImageRow.contact_id == ContactRow.id)
            .group_by(ContactRow.id)
            .order_by(ContactRow.id)
        )
        with self._transaction() as session:
            return [_row_to_contact(row, count) for row, count in session.execute(stmt).all()]

    def get_contact(self, contact_id: int) -> Contact | None:
        with self._transaction() as session:
            row = session.get(ContactRow, contact_id)
            if row is None:
                return None
            return _row_to_contact(row, _count_images(session, contact_id))

    def add_contact(self, data: ContactInput) -> Contact:
        with self._transaction() as session:
            row = ContactRow(
                name=data.name,
                email=data.email,
                phone=data.phone,
                type=ContactType.parse(data.type).value,
            )
            session.add(row)
            session.flush()
            return _row_to_contact(row, 0)

    def update_contact(self, contact_id: int, data: ContactUpdate) -> Contact | None:
        with self._transaction() as session:
            row = session.get(ContactRow, contact_id)
            if row is None:
                return None
            row.name = data.name
            row.email = data.email
            row.phone = data.phone
            session.flush()
            return _row_to_contact(row, _count_images(session, contact_id))

    def delete_contact(self, contact_id: int) -> bool:
        with self._transaction() as session:
            row = session.get(ContactRow, contact_id)
            if row is None:
                return False
            session.delete(row)
        return True

    def count_images(self, contact_id: int) -> int:
        with self._transaction() as session:
            return _count_images(session, contact_id)

    def list_images(self, contact_id: int) -> list[ContactImage]:
        stmt = (
            select(ContactImageRow)
            .where(ContactImageRow.contact_id == contact_id)
            .order_by(ContactImageRow.uploaded_at, ContactImageRow.id)
        )
        with self._transaction() as session:
            return [_row_to_image(row) for row in session.execute(stmt).scalars()]

    def get_image(self, contact_id: int, image_id: int) -> ContactImage | None:
        stmt = select(ContactImageRow).where(
            ContactImageRow.id == image_id,
            ContactImageRow.contact_id == contact_id,
        )
        with self._transaction() as session:
            row = session.execute(stmt).scalar_one_or_none()
            return _row_to_image(row) if row is not None else None

    def add_images(
        self,
        contact_id: int,
        uploads: list[ImageUpload],
        *,
        uploaded_at: datetime,
        max_images: int,
    ) -> list[ContactImage] | None:
        with self._transaction() as session:
            # Row lock on the parent serialises concurrent uploads for one contact.
            contact = session.get(ContactRow, contact_id, with_for_update=True)
            if contact is None:
                return None
            current = _count_images(session, contact_id)
            if current + len(uploads) > max_images:
                raise ImageLimitExceeded(current, len(uploads), max_images)
            rows = [
                ContactImageRow(
                    contact_id=contact_id,
                    image_data=upload.image_data,
                    file_name=upload.file_name,
                    content_type=upload.content_type,
                    uploaded_at=uploaded_at,
                )
                for upload in uploads
            ]
            session.add_all(rows)
            session.flush()
            return [_row_to_image(row) for row in rows]

    def delete_image(self, contact_id: int, image_id: int) -> bool:
        stmt = select(ContactImageRow).where(
            ContactImageRow.id == image_id,
            ContactImageRow.contact_id == contact_id,
        )
        with self._transaction() as session:
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                return False
            session.delete(row)
        return True
