"""QRIS tag registry (EMVCo merchant-presented mode)."""
from __future__ import annotations

import enum
from typing import Final


class QRISTag(str, enum.Enum):
    PAYLOAD_FORMAT = "00"
    POINT_OF_INITIATION = "01"

    # Merchant account information spans 26-51; only a few are named.
    MERCHANT_ACCOUNT_26 = "26"
    MERCHANT_ACCOUNT_27 = "27"
    MERCHANT_ACCOUNT_28 = "28"
    MERCHANT_ACCOUNT_29 = "29"
    MERCHANT_ACCOUNT_30 = "30"
    MERCHANT_ACCOUNT_51 = "51"

    MERCHANT_CATEGORY = "52"
    TRANSACTION_CURRENCY = "53"
    TRANSACTION_AMOUNT = "54"
    CONVENIENCE_FEE = "55"
    FEE_FIXED_VALUE = "56"
    FEE_PERCENT_VALUE = "57"

    COUNTRY_CODE = "58"
    MERCHANT_NAME = "59"
    MERCHANT_CITY = "60"
    POSTAL_CODE = "61"

    ADDITIONAL_DATA = "62"
    CRC = "63"

    # Composite fee tags: tag 55 followed by its indicator sub-template.
    FEE_RUPIAH = "55020256"
    FEE_PERCENT = "55020357"


class POIM(str, enum.Enum):
    """Point of Initiation Method values (tag 01)."""

    STATIC = "11"
    DYNAMIC = "12"


MERCHANT_ACCOUNT_RANGE: Final = ("26", "51")
CRC_LENGTH: Final = "04"

TAG_DESCRIPTIONS: Final[dict[str, str]] = {
    QRISTag.PAYLOAD_FORMAT.value: "Payload Format Indicator",
    QRISTag.POINT_OF_INITIATION.value: "Point of Initiation Method",
    QRISTag.MERCHANT_ACCOUNT_26.value: "Merchant Account Info (26)",
    QRISTag.MERCHANT_ACCOUNT_27.value: "Merchant Account Info (27)",
    QRISTag.MERCHANT_ACCOUNT_28.value: "Merchant Account Info (28)",
    QRISTag.MERCHANT_ACCOUNT_29.value: "Merchant Account Info (29)",
    QRISTag.MERCHANT_ACCOUNT_30.value: "Merchant Account Info (30)",
    QRISTag.MERCHANT_ACCOUNT_51.value: "Merchant Account Info (51, QRIS)",
    QRISTag.MERCHANT_CATEGORY.value: "Merchant Category Code (MCC)",
    QRISTag.TRANSACTION_CURRENCY.value: "Transaction Currency (ISO 4217)",
    QRISTag.TRANSACTION_AMOUNT.value: "Transaction Amount",
    QRISTag.CONVENIENCE_FEE.value: "Convenience Fee Indicator",
    QRISTag.FEE_FIXED_VALUE.value: "Value of Convenience Fee Fixed",
    QRISTag.FEE_PERCENT_VALUE.value: "Value of Convenience Fee Percentage",
    QRISTag.COUNTRY_CODE.value: "Country Code (ISO 3166)",
    QRISTag.MERCHANT_NAME.value: "Merchant Name",
    QRISTag.MERCHANT_CITY.value: "Merchant City",
    QRISTag.POSTAL_CODE.value: "Postal Code",
    QRISTag.ADDITIONAL_DATA.value: "Additional Data Field Template",
    QRISTag.CRC.value: "CRC-16 Checksum",
    QRISTag.FEE_RUPIAH.value: "Service Fee (Rupiah)",
    QRISTag.FEE_PERCENT.value: "Service Fee (Percent)",
}

POIM_DESCRIPTIONS: Final[dict[str, str]] = {
    POIM.STATIC.value: "Static QRIS",
    POIM.DYNAMIC.value: "Dynamic QRIS",
}


def is_merchant_account_tag(tag: str) -> bool:
    """Two-character string comparison against the 26-51 range."""

    low, high = MERCHANT_ACCOUNT_RANGE
    return len(tag) == 2 and low <= tag <= high


def describe_tag(tag: str) -> str:
    if is_merchant_account_tag(tag) and tag not in TAG_DESCRIPTIONS:
        return f"Merchant Account Info ({tag})"
    return TAG_DESCRIPTIONS.get(tag, "Unknown Tag")
