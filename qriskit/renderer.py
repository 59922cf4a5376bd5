"""QR image renderer for QRIS payloads."""
from __future__ import annotations

import base64
import io
import logging
from pathlib import Path
from typing import Any

import qrcode
from PIL import Image, ImageDraw, ImageFont
from qrcode.exceptions import DataOverflowError

from .config import settings
from .errors import err_encode

logger = logging.getLogger("qriskit.renderer")

_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


def _build_qr(data: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=_ERROR_CORRECTION[settings.image.error_correction],
        box_size=10,
        border=settings.image.border,
    )
    qr.add_data(data)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        logger.warning("qr encode failed", extra={"payload_length": len(data)})
        raise err_encode(f"Payload cannot be encoded as QR: {exc}") from exc
    return qr


def _draw_label(qr_img: Image.Image, title: str) -> Image.Image:
    width, height = qr_img.size

    label_height = 40
    margin = 40
    canvas_width = width + margin * 2
    canvas_height = height + margin * 2 + label_height

    canvas = Image.new("RGB", (canvas_width, canvas_height), color="#F5F7FA")
    canvas.paste(qr_img, (margin, margin))

    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    text = title.upper()
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    text_width, text_height = right - left, bottom - top
    text_x = (canvas_width - text_width) // 2
    text_y = margin + height + (label_height - text_height) // 2
    draw.rectangle(
        [(margin // 2, margin + height), (canvas_width - margin // 2, margin + height + label_height)],
        fill="#FFFFFF",
    )
    draw.text((text_x, text_y), text, fill="#1F2937", font=font)
    return canvas


def generate_qr_image(data: str, size: int | None = None, title: str | None = None) -> Image.Image:
    """Generate a square QR image of ``size`` pixels, optionally framed with a label."""

    qr = _build_qr(data)
    qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
    edge = size or settings.image.default_size
    qr_img = qr_img.resize((edge, edge), Image.Resampling.NEAREST)
    if title:
        return _draw_label(qr_img, title)
    return qr_img


def qr_image_to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_text_to_image(text: str, size: int | None = None) -> bytes:
    """Render ``text`` as PNG bytes."""

    return qr_image_to_png_bytes(generate_qr_image(text, size=size))


def save_qr_image(text: str, path: str | Path, size: int | None = None) -> Path:
    target = Path(path)
    try:
        target.write_bytes(encode_text_to_image(text, size=size))
    except OSError as exc:
        raise err_encode(f"Cannot write QR image to {target}: {exc}") from exc
    logger.debug("qr image saved", extra={"path": str(target)})
    return target


def render_terminal(text: str, invert: bool = False) -> str:
    """Compact half-block rendering suitable for a terminal."""

    qr = _build_qr(text)
    out = io.StringIO()
    qr.print_ascii(out=out, invert=invert)
    return out.getvalue()


def render_qr_payload(payload: str, size: int | None = None, title: str | None = None) -> dict[str, Any]:
    """Render payload into PNG bytes and base64 string."""

    png_bytes = qr_image_to_png_bytes(generate_qr_image(payload, size=size, title=title))
    return {
        "png_bytes": png_bytes,
        "png_base64": base64.b64encode(png_bytes).decode("ascii"),
    }
