"""Utility helpers to build and parse EMV-style TLV payloads."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from .errors import FormatError, err_format
from .tags import is_merchant_account_tag

logger = logging.getLogger("qriskit.tlv")

# Two decimal digits carry the length on the wire.
MAX_VALUE_LENGTH = 99


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str
    subitems: tuple[TLVItem, ...] = ()

    @property
    def length(self) -> int:
        return len(self.value)

    def serialize(self) -> str:
        length = f"{len(self.value):02d}"
        return f"{self.tag}{length}{self.value}"

    def with_value(self, value: str) -> TLVItem:
        """Return a copy carrying ``value``; nested items are dropped as stale."""

        return replace(self, value=value, subitems=())


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def parse_tlv(payload: str, *, strict: bool = False) -> list[TLVItem]:
    """Parse TLV payload string into TLV items.

    Parsing stops once fewer than four characters remain; the leftover is
    dropped unless ``strict`` is set. Values of merchant account tags
    (26-51) are parsed into ``subitems``; a malformed nested value leaves
    ``subitems`` empty unless ``strict`` is set.
    """

    total = len(payload)
    if total < 4:
        raise err_format("payload shorter than one TLV header")

    items: list[TLVItem] = []
    idx = 0
    while idx + 4 <= total:
        tag = payload[idx : idx + 2]
        raw_length = payload[idx + 2 : idx + 4]
        if not (raw_length.isascii() and raw_length.isdigit()):
            raise err_format(f"invalid TLV segment at {idx}")
        length = int(raw_length)
        value_start = idx + 4
        value_end = value_start + length
        if value_end > total:
            raise err_format(f"invalid TLV segment at {idx}: length {length} exceeds payload")
        value = payload[value_start:value_end]
        subitems: tuple[TLVItem, ...] = ()
        if is_merchant_account_tag(tag):
            subitems = _parse_nested(tag, value, strict=strict)
        items.append(TLVItem(tag=tag, value=value, subitems=subitems))
        idx = value_end
    if idx != total:
        if strict:
            raise err_format(f"dangling TLV data at {idx}")
        logger.debug("dropping trailing TLV data", extra={"offset": idx, "dropped": total - idx})
    return items


def _parse_nested(tag: str, value: str, *, strict: bool) -> tuple[TLVItem, ...]:
    try:
        return tuple(parse_tlv(value, strict=strict))
    except FormatError as exc:
        if strict:
            raise
        logger.debug("merchant account value is not TLV", extra={"tag": tag, "reason": exc.message})
        return ()


def remove_tlv(items: Iterable[TLVItem], tag: str) -> list[TLVItem]:
    return [item for item in items if item.tag != tag]


def remove_tlv_prefix(items: Iterable[TLVItem], prefix: str) -> list[TLVItem]:
    return [item for item in items if not item.tag.startswith(prefix)]
