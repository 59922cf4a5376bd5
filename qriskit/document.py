"""QRIS document model."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, TextIO

from .config import settings
from .errors import FormatError, err_format
from .models import AmountOptions, FeeType, QRISData
from .qris_encoder import EncodedPayload, compute_crc, encode, replace_tlv_value, set_amount_with_options, update_crc
from .tags import POIM, QRISTag, is_merchant_account_tag
from .tlv import MAX_VALUE_LENGTH, TLVItem, build_tlv, parse_tlv, remove_tlv, remove_tlv_prefix

if TYPE_CHECKING:
    from .scanner import ImageSource

logger = logging.getLogger("qriskit.document")


class QRISDocument:
    """An ordered sequence of TLV items owned by a single caller.

    Lookups resolve to the first matching item in document order. Every
    mutation swaps in a new list, so tuples returned by :attr:`fields`
    are never affected by later edits.
    """

    def __init__(self, items: Iterable[TLVItem] = (), raw: str | None = None):
        self._items: list[TLVItem] = list(items)
        self.raw = raw

    @classmethod
    def from_string(cls, raw: str, strict: bool | None = None) -> QRISDocument:
        payload = raw.strip()
        use_strict = settings.strict_parsing if strict is None else strict
        items = parse_tlv(payload, strict=use_strict)
        logger.debug("payload parsed", extra={"items": len(items), "strict": use_strict})
        return cls(items, raw=payload)

    @classmethod
    def from_image(cls, source: ImageSource, strict: bool | None = None) -> QRISDocument:
        from .scanner import decode_image_to_text

        return cls.from_string(decode_image_to_text(source), strict=strict)

    @property
    def fields(self) -> tuple[TLVItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"QRISDocument({self.serialize()!r})"

    def serialize(self) -> str:
        return build_tlv(self._items)

    def encode(self) -> EncodedPayload:
        """Serialize with a freshly computed checksum without mutating."""

        return encode(self._items)

    def get(self, tag: str) -> str:
        for item in self._items:
            if item.tag == tag:
                return item.value
        return ""

    def replace(self, tag: str, value: str) -> None:
        """Overwrite the first ``tag`` item and recompute the checksum."""

        self._items = replace_tlv_value(self._items, tag, value)

    def remove_tag(self, tag: str) -> None:
        self._items = remove_tlv(self._items, tag)

    def remove_prefix(self, prefix: str) -> None:
        self._items = remove_tlv_prefix(self._items, prefix)

    def update_crc(self) -> str:
        self._items = update_crc(self._items)
        return self._items[-1].value

    def crc_valid(self) -> bool:
        if not self._items or self._items[-1].tag != QRISTag.CRC.value:
            return False
        return self._items[-1].value.upper() == compute_crc(self._items)

    def is_static(self) -> bool:
        return self.get(QRISTag.POINT_OF_INITIATION.value) == POIM.STATIC.value

    def is_dynamic(self) -> bool:
        return self.get(QRISTag.POINT_OF_INITIATION.value) == POIM.DYNAMIC.value

    def set_amount_with_options(self, options: AmountOptions) -> None:
        self._items = set_amount_with_options(self._items, options)

    def set_amount(self, amount: int, fee_type: FeeType = FeeType.NONE, fee_value: float = 0) -> None:
        self.set_amount_with_options(AmountOptions(amount=amount, fee_type=fee_type, fee_value=fee_value))

    def set_merchant_name(self, name: str) -> None:
        self.replace(QRISTag.MERCHANT_NAME.value, name)

    def set_merchant_city_and_postal_code(self, city: str, postal_code: str) -> None:
        if max(len(city), len(postal_code)) > MAX_VALUE_LENGTH:
            raise err_format(f"city and postal code are limited to {MAX_VALUE_LENGTH} characters")
        self.replace(QRISTag.MERCHANT_CITY.value, city)
        self.replace(QRISTag.POSTAL_CODE.value, postal_code)

    def to_data(self) -> QRISData:
        data = QRISData()
        for item in self._items:
            tag, value = item.tag, item.value
            if tag == QRISTag.PAYLOAD_FORMAT:
                data.payload_format = value
            elif tag == QRISTag.POINT_OF_INITIATION:
                data.point_of_initiation = value
            elif is_merchant_account_tag(tag):
                data.merchant_accounts[tag] = value
            elif tag == QRISTag.MERCHANT_CATEGORY:
                data.merchant_category_code = value
            elif tag == QRISTag.TRANSACTION_CURRENCY:
                data.transaction_currency = value
            elif tag == QRISTag.TRANSACTION_AMOUNT:
                data.transaction_amount = value
            elif tag.startswith(QRISTag.CONVENIENCE_FEE.value):
                data.tip_or_convenience = value
                if tag == QRISTag.FEE_RUPIAH:
                    data.fee_type, data.fee_value = FeeType.RUPIAH, value
                elif tag == QRISTag.FEE_PERCENT:
                    data.fee_type, data.fee_value = FeeType.PERCENT, value
            elif tag == QRISTag.FEE_FIXED_VALUE:
                data.fee_type, data.fee_value = FeeType.RUPIAH, value
            elif tag == QRISTag.FEE_PERCENT_VALUE:
                data.fee_type, data.fee_value = FeeType.PERCENT, value
            elif tag == QRISTag.COUNTRY_CODE:
                data.country_code = value
            elif tag == QRISTag.MERCHANT_NAME:
                data.merchant_name = value
            elif tag == QRISTag.MERCHANT_CITY:
                data.merchant_city = value
            elif tag == QRISTag.POSTAL_CODE:
                data.postal_code = value
            elif tag == QRISTag.ADDITIONAL_DATA:
                data.additional_data.update(_additional_data(value))
            elif tag == QRISTag.CRC:
                data.crc = value
            else:
                data.unmapped[tag] = value
        return data

    def generate_image(self, size: int | None = None) -> bytes:
        from .renderer import encode_text_to_image

        return encode_text_to_image(self.serialize(), size=size)

    def save_image(self, path: str | Path, size: int | None = None) -> Path:
        from .renderer import save_qr_image

        return save_qr_image(self.serialize(), path, size=size)

    def print_to_terminal(self, stream: TextIO | None = None) -> None:
        from .renderer import render_terminal

        out = stream or sys.stdout
        out.write(render_terminal(self.serialize()))
        out.flush()


def _additional_data(value: str) -> dict[str, str]:
    try:
        return {sub.tag: sub.value for sub in parse_tlv(value)}
    except FormatError as exc:
        logger.debug("additional data is not TLV", extra={"reason": exc.message})
        return {}
