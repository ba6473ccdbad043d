"""Uniform result envelope returned by every service operation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    LIMIT_EXCEEDED = "limit_exceeded"
    STORAGE_FAULT = "storage_fault"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    success/message/data/errors/timestamp go over the wire.
    error_kind stays internal and selects the HTTP status.
    """

    success: bool
    message: str
    data: T | None = None
    errors: list[str] = field(default_factory=list)
    error_kind: ErrorKind | None = None
    timestamp: datetime = field(default_factory=_utcnow)

    @classmethod
    def ok(cls, data: T | None = None, message: str = "") -> "Result[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        message: str,
        errors: list[str] | None = None,
    ) -> "Result[T]":
        return cls(
            success=False,
            message=message,
            errors=list(errors or []),
            error_kind=kind,
        )
