"""Shared error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


class FormatError(ServiceError):
    """Malformed TLV payload."""


class CollaboratorError(ServiceError):
    """QR image codec failure."""


class DecodeError(CollaboratorError):
    pass


class EncodeError(CollaboratorError):
    pass


def err_format(message: str | None = None) -> FormatError:
    return FormatError(code="ERR_FORMAT", message=message or "Invalid TLV payload", status_code=422)


def err_decode(message: str | None = None) -> DecodeError:
    return DecodeError(code="ERR_IMAGE_DECODE", message=message or "No QR code found in image", status_code=422)


def err_encode(message: str | None = None) -> EncodeError:
    return EncodeError(code="ERR_IMAGE_ENCODE", message=message or "Failed to render QR image", status_code=500)


def err_bad_payload(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_BAD_PAYLOAD", message=message or "Invalid request payload", status_code=400)
