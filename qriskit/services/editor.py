"""QRIS inspection and editing services."""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass

from ..document import QRISDocument
from ..errors import err_bad_payload
from ..models import AmountOptions, FeeType, QRISData
from ..renderer import render_qr_payload
from ..tags import describe_tag

logger = logging.getLogger("qriskit.services.editor")


@dataclass(slots=True)
class FieldView:
    tag: str
    length: int
    value: str
    description: str
    subfields: list[FieldView]


@dataclass(slots=True)
class InspectResult:
    document: QRISDocument
    data: QRISData
    fields: list[FieldView]
    is_static: bool
    is_dynamic: bool
    crc_valid: bool


@dataclass(slots=True)
class EditResult:
    document: QRISDocument
    payload: str
    crc: str
    is_dynamic: bool
    qr_png_base64: str | None = None


def _field_views(document: QRISDocument) -> list[FieldView]:
    return [
        FieldView(
            tag=item.tag,
            length=item.length,
            value=item.value,
            description=describe_tag(item.tag),
            subfields=[
                FieldView(tag=sub.tag, length=sub.length, value=sub.value, description="", subfields=[])
                for sub in item.subitems
            ],
        )
        for item in document.fields
    ]


class QRISEditor:
    def __init__(self, strict: bool | None = None):
        self.strict = strict

    def inspect(self, payload: str) -> InspectResult:
        document = QRISDocument.from_string(payload, strict=self.strict)
        return self._inspect_document(document)

    def inspect_image(self, image_b64: str) -> InspectResult:
        try:
            image_bytes = base64.b64decode(image_b64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise err_bad_payload("image_base64 is not valid base64") from exc
        document = QRISDocument.from_image(image_bytes, strict=self.strict)
        return self._inspect_document(document)

    def _inspect_document(self, document: QRISDocument) -> InspectResult:
        return InspectResult(
            document=document,
            data=document.to_data(),
            fields=_field_views(document),
            is_static=document.is_static(),
            is_dynamic=document.is_dynamic(),
            crc_valid=document.crc_valid(),
        )

    def edit(
        self,
        payload: str,
        *,
        merchant_name: str | None = None,
        merchant_city: str | None = None,
        postal_code: str | None = None,
        amount: int | None = None,
        fee_type: FeeType = FeeType.NONE,
        fee_value: float = 0,
        render: bool = False,
        size: int | None = None,
    ) -> EditResult:
        if (merchant_city is None) != (postal_code is None):
            raise err_bad_payload("merchant_city and postal_code must be provided together")

        document = QRISDocument.from_string(payload, strict=self.strict)
        if merchant_name is not None:
            document.set_merchant_name(merchant_name)
        if merchant_city is not None and postal_code is not None:
            document.set_merchant_city_and_postal_code(merchant_city, postal_code)
        if amount is not None:
            document.set_amount_with_options(AmountOptions(amount=amount, fee_type=fee_type, fee_value=fee_value))

        # Untouched input may carry a stale checksum.
        document.update_crc()
        encoded = document.encode()

        logger.info(
            "qris edited",
            extra={"crc": encoded.crc, "dynamic": document.is_dynamic(), "fields": len(document)},
        )
        png_b64 = render_qr_payload(encoded.payload, size=size)["png_base64"] if render else None
        return EditResult(
            document=document,
            payload=encoded.payload,
            crc=encoded.crc,
            is_dynamic=document.is_dynamic(),
            qr_png_base64=png_b64,
        )
