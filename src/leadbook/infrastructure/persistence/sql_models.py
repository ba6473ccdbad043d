"""Relational schema: contacts 1 -> N contact_images, ON DELETE CASCADE."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

from leadbook.domain.entities import (
    CONTENT_TYPE_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    FILE_NAME_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
)

Base = declarative_base()


class ContactRow(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH))
    phone = Column(String(PHONE_MAX_LENGTH))
    type = Column(String(20), nullable=False)

    images = relationship(
        "ContactImageRow",
        back_populates="contact",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContactImageRow(Base):
    __tablename__ = "contact_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contact_id = Column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_data = Column(Text, nullable=False)
    file_name = Column(String(FILE_NAME_MAX_LENGTH))
    content_type = Column(String(CONTENT_TYPE_MAX_LENGTH))
    uploaded_at = Column(DateTime(timezone=True), nullable=False)

    contact = relationship("ContactRow", back_populates="images")
