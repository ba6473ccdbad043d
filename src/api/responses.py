"""Result envelope -> JSONResponse. The status code comes from the result's ErrorKind."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, assert_never

from fastapi.responses import JSONResponse

from api.schemas import ApiResponse, ContactDetailOut, ContactOut, ImageOut
from leadbook.application import (
    ContactDetail,
    ContactView,
    ErrorKind,
    ImageView,
    Result,
)


def status_for(kind: ErrorKind) -> int:
    match kind:
        case ErrorKind.VALIDATION | ErrorKind.LIMIT_EXCEEDED:
            return 400
        case ErrorKind.NOT_FOUND:
            return 404
        case ErrorKind.STORAGE_FAULT:
            return 500
        case _:
            assert_never(kind)


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def to_wire(data: Any) -> Any:
    """Convert application views into camelCase JSON-ready values; scalars pass through."""
    if isinstance(data, list):
        return [to_wire(item) for item in data]
    if isinstance(data, ContactDetail):
        return _dump(ContactDetailOut(**asdict(data)))
    if isinstance(data, ContactView):
        return _dump(ContactOut(**asdict(data)))
    if isinstance(data, ImageView):
        return _dump(ImageOut(**asdict(data)))
    return data


def _render(
    envelope: ApiResponse, status_code: int, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        content=envelope.model_dump(mode="json", by_alias=True),
        status_code=status_code,
        headers=headers,
    )


def envelope_response(
    result: Result, success_status: int = 200, location: str | None = None
) -> JSONResponse:
    """Render a service result. location is sent as the Location header on success only."""
    envelope = ApiResponse(
        success=result.success,
        message=result.message,
        data=to_wire(result.data),
        errors=result.errors,
        timestamp=result.timestamp,
    )
    if result.success:
        headers = {"Location": location} if location else None
        return _render(envelope, success_status, headers)
    return _render(envelope, status_for(result.error_kind))


def error_response(status_code: int, message: str, errors: list[str] | None = None) -> JSONResponse:
    """Failure envelope for errors raised outside a service (request parsing, routing, crashes)."""
    envelope = ApiResponse(
        success=False,
        message=message,
        errors=list(errors or []),
        timestamp=datetime.now(timezone.utc),
    )
    return _render(envelope, status_code)
