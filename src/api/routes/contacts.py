"""Contact endpoints under /api/contacts."""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_contact_service
from api.responses import envelope_response
from api.schemas import ContactCreateBody, ContactUpdateBody
from leadbook.application import ContactInput, ContactService, ContactUpdate

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


@router.get("")
def list_contacts(service: ContactService = Depends(get_contact_service)):
    """All contacts with their image counts."""
    return envelope_response(service.list_contacts())


@router.get("/{contact_id}")
def get_contact(contact_id: int, service: ContactService = Depends(get_contact_service)):
    """One contact with its images."""
    return envelope_response(service.get_contact(contact_id))


@router.post("")
def create_contact(
    body: ContactCreateBody,
    service: ContactService = Depends(get_contact_service),
):
    data = ContactInput(name=body.name, email=body.email, phone=body.phone, type=body.type)
    result = service.create_contact(data)
    location = f"{router.prefix}/{result.data.id}" if result.success else None
    return envelope_response(result, success_status=201, location=location)


@router.put("/{contact_id}")
def update_contact(
    contact_id: int,
    body: ContactUpdateBody,
    service: ContactService = Depends(get_contact_service),
):
    data = ContactUpdate(name=body.name, email=body.email, phone=body.phone)
    return envelope_response(service.update_contact(contact_id, data))


@router.delete("/{contact_id}")
def delete_contact(contact_id: int, service: ContactService = Depends(get_contact_service)):
    return envelope_response(service.delete_contact(contact_id))


@router.get("/{contact_id}/can-add-images")
def can_add_images(
    contact_id: int,
    additional_images: int = Query(1, alias="additionalImages", ge=1),
    service: ContactService = Depends(get_contact_service),
):
    return envelope_response(service.can_add_more_images(contact_id, additional_images))
