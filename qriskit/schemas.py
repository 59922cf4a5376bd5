"""Pydantic schemas for API contracts."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .models import FeeType, QRISData


class ParseRequest(BaseModel):
    payload: str = Field(min_length=4, description="Raw QRIS payload string")


class DecodeImageRequest(BaseModel):
    image_base64: str = Field(min_length=1, description="PNG/JPEG bytes, base64 encoded")


class FieldSchema(BaseModel):
    tag: str
    length: int
    value: str
    description: str = ""
    subfields: list[FieldSchema] = Field(default_factory=list)


class ParseResponse(BaseModel):
    data: QRISData
    fields: list[FieldSchema]
    is_static: bool
    is_dynamic: bool
    crc_valid: bool


class EditRequest(BaseModel):
    payload: str = Field(min_length=4, description="Base QRIS payload string")
    merchant_name: str | None = Field(default=None, min_length=1, max_length=25)
    merchant_city: str | None = Field(default=None, min_length=1, max_length=15)
    postal_code: str | None = Field(default=None, min_length=1, max_length=10)
    amount: int | None = Field(default=None, ge=0)
    fee_type: FeeType = FeeType.NONE
    fee_value: float = Field(default=0, ge=0)
    render: bool = False
    size: int | None = Field(default=None, ge=64, le=4096)


class EditResponse(BaseModel):
    payload: str
    crc: str
    is_dynamic: bool
    qr_png_base64: str | None = None
