"""Domain models for QRIS editing."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from pydantic import BaseModel, Field


class FeeType(str, enum.Enum):
    NONE = "none"
    RUPIAH = "rupiah"
    PERCENT = "percent"


@dataclass(frozen=True, slots=True)
class AmountOptions:
    amount: int
    fee_type: FeeType = FeeType.NONE
    fee_value: float = 0


class QRISData(BaseModel):
    """Read-only projection of a QRIS document."""

    payload_format: str = ""
    point_of_initiation: str = ""
    merchant_accounts: dict[str, str] = Field(default_factory=dict, description="Tags 26-51")
    merchant_category_code: str = ""
    transaction_currency: str = ""
    transaction_amount: str = ""
    tip_or_convenience: str = Field(default="", description="Tag 55 or 55020256/55020357")
    country_code: str = ""
    merchant_name: str = ""
    merchant_city: str = ""
    postal_code: str = ""
    additional_data: dict[str, str] = Field(default_factory=dict, description="Tag 62 sub-tags")
    unmapped: dict[str, str] = Field(default_factory=dict)
    crc: str = ""
    fee_type: FeeType | None = None
    fee_value: str | None = None
