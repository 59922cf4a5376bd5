"""QRIS payload editing rules with CRC maintenance."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .crc import crc16_ccitt
from .errors import err_format
from .models import AmountOptions, FeeType
from .tags import CRC_LENGTH, POIM, QRISTag
from .tlv import MAX_VALUE_LENGTH, TLVItem, build_tlv, remove_tlv, remove_tlv_prefix

logger = logging.getLogger("qriskit.encoder")

# Standard EMV fee value tags that accompany a tag 55 indicator.
_FEE_VALUE_TAGS = (QRISTag.FEE_FIXED_VALUE.value, QRISTag.FEE_PERCENT_VALUE.value)


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str


def strip_crc(items: Iterable[TLVItem]) -> list[TLVItem]:
    """Remove Tag 63 (CRC) items."""

    return remove_tlv(items, QRISTag.CRC.value)


def compute_crc(items: Iterable[TLVItem]) -> str:
    """Checksum over the serialized items followed by the ``6304`` header."""

    payload_no_crc = build_tlv(strip_crc(items))
    return crc16_ccitt(f"{payload_no_crc}{QRISTag.CRC.value}{CRC_LENGTH}")


def update_crc(items: Iterable[TLVItem]) -> list[TLVItem]:
    """Drop any Tag 63 and append a freshly computed one as the last item."""

    filtered = strip_crc(items)
    crc = compute_crc(filtered)
    filtered.append(TLVItem(tag=QRISTag.CRC.value, value=crc))
    return filtered


def encode(items: Iterable[TLVItem]) -> EncodedPayload:
    updated = update_crc(items)
    return EncodedPayload(payload=build_tlv(updated), crc=updated[-1].value)


def replace_tlv_value(items: Iterable[TLVItem], tag: str, value: str) -> list[TLVItem]:
    """Replace the first item carrying ``tag`` and recompute the CRC.

    The checksum is recomputed even when ``tag`` is absent. Values longer
    than :data:`MAX_VALUE_LENGTH` raise ``FormatError`` and leave ``items``
    untouched, since their length cannot be written in two digits.
    """

    if len(value) > MAX_VALUE_LENGTH:
        raise err_format(f"value for tag {tag} exceeds {MAX_VALUE_LENGTH} characters")

    result = list(items)
    for pos, item in enumerate(result):
        if item.tag == tag:
            result[pos] = item.with_value(value)
            break
    else:
        logger.debug("replace target not found", extra={"tag": tag})
    return update_crc(result)


def build_fee_item(fee_type: FeeType, fee_value: float) -> TLVItem | None:
    if fee_type == FeeType.RUPIAH:
        return TLVItem(tag=QRISTag.FEE_RUPIAH.value, value=str(int(fee_value)))
    if fee_type == FeeType.PERCENT:
        return TLVItem(tag=QRISTag.FEE_PERCENT.value, value=f"{fee_value:.2f}")
    return None


def insert_before(items: Iterable[TLVItem], anchor_tag: str, new_items: list[TLVItem]) -> list[TLVItem]:
    """Insert ``new_items`` ahead of the first ``anchor_tag`` item.

    Nothing is inserted when the anchor is missing.
    """

    result: list[TLVItem] = []
    inserted = False
    for item in items:
        if item.tag == anchor_tag and not inserted:
            result.extend(new_items)
            inserted = True
        result.append(item)
    if not inserted:
        logger.warning(
            "anchor tag missing, items not inserted",
            extra={"anchor_tag": anchor_tag, "skipped_tags": [item.tag for item in new_items]},
        )
    return result


def set_amount_with_options(items: Iterable[TLVItem], options: AmountOptions) -> list[TLVItem]:
    """Embed an amount (and optional fee) turning the payload dynamic.

    Amounts of zero or less leave ``items`` untouched. Besides the tag 55
    prefix (plain and composite fee tags), the standard fee value tags 56
    and 57 are removed too: a composite fee re-parses as ``55`` plus ``56``
    or ``57``, and those must not survive a second edit.
    """

    current = list(items)
    if options.amount <= 0:
        return current

    current = replace_tlv_value(current, QRISTag.POINT_OF_INITIATION.value, POIM.DYNAMIC.value)
    current = remove_tlv(current, QRISTag.TRANSACTION_AMOUNT.value)
    current = remove_tlv_prefix(current, QRISTag.CONVENIENCE_FEE.value)
    current = [item for item in current if item.tag not in _FEE_VALUE_TAGS]

    new_items = [TLVItem(tag=QRISTag.TRANSACTION_AMOUNT.value, value=str(options.amount))]
    fee_item = build_fee_item(options.fee_type, options.fee_value)
    if fee_item is not None:
        new_items.append(fee_item)

    current = insert_before(current, QRISTag.COUNTRY_CODE.value, new_items)
    logger.debug(
        "amount applied",
        extra={"amount": options.amount, "fee_type": options.fee_type.value},
    )
    return update_crc(current)
