"""Contact image endpoints under /api/contacts/{contact_id}/images."""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_image_service
from api.responses import envelope_response
from api.schemas import ImageUploadBody
from leadbook.application import ContactImageService, ImageUpload

router = APIRouter(prefix="/api/contacts/{contact_id}/images", tags=["images"])


def _to_upload(body: ImageUploadBody) -> ImageUpload:
    return ImageUpload(
        image_data=body.image_data,
        file_name=body.file_name,
        content_type=body.content_type,
    )


@router.get("")
def list_images(contact_id: int, service: ContactImageService = Depends(get_image_service)):
    return envelope_response(service.list_images(contact_id))


# Declared before /{image_id} so the literal path is not parsed as an id.
@router.get("/validate-limit")
def validate_limit(
    contact_id: int,
    additional_images: int = Query(1, alias="additionalImages", ge=1),
    service: ContactImageService = Depends(get_image_service),
):
    return envelope_response(service.validate_image_limit(contact_id, additional_images))


@router.get("/{image_id}")
def get_image(
    contact_id: int,
    image_id: int,
    service: ContactImageService = Depends(get_image_service),
):
    return envelope_response(service.get_image(contact_id, image_id))


@router.post("")
def upload_image(
    contact_id: int,
    body: ImageUploadBody,
    service: ContactImageService = Depends(get_image_service),
):
    result = service.upload_image(contact_id, _to_upload(body))
    location = (
        f"/api/contacts/{contact_id}/images/{result.data.id}" if result.success else None
    )
    return envelope_response(result, success_status=201, location=location)


@router.post("/batch")
def upload_batch(
    contact_id: int,
    body: list[ImageUploadBody],
    service: ContactImageService = Depends(get_image_service),
):
    """All-or-nothing upload of several images."""
    uploads = [_to_upload(item) for item in body]
    return envelope_response(service.upload_batch(contact_id, uploads))


@router.delete("/{image_id}")
def delete_image(
    contact_id: int,
    image_id: int,
    service: ContactImageService = Depends(get_image_service),
):
    return envelope_response(service.delete_image(contact_id, image_id))
