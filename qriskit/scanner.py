"""Decode QR images back into payload text."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import err_decode

logger = logging.getLogger("qriskit.scanner")

ImageSource = Union[bytes, bytearray, str, Path, Image.Image]


def _open_image(source: ImageSource) -> Image.Image:
    if isinstance(source, Image.Image):
        return source
    try:
        if isinstance(source, (bytes, bytearray)):
            image = Image.open(io.BytesIO(source))
        else:
            image = Image.open(Path(source))
        # Image.open is lazy; truncated data only surfaces on load.
        image.load()
        return image
    except FileNotFoundError as exc:
        raise err_decode(f"Image not found: {source}") from exc
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise err_decode(f"Failed to open image: {exc}") from exc


def _to_bgr(image: Image.Image) -> np.ndarray:
    rgb = np.array(image.convert("RGB"))
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def decode_image_to_text(source: ImageSource) -> str:
    """Return the first QR payload found in ``source`` (bytes, path or PIL image)."""

    image = _open_image(source)
    frame = _to_bgr(image)
    detector = cv2.QRCodeDetector()
    text, points, _ = detector.detectAndDecode(frame)
    if not text:
        # Quiet zones help the detector on tightly cropped codes.
        padded = cv2.copyMakeBorder(frame, 32, 32, 32, 32, cv2.BORDER_CONSTANT, value=(255, 255, 255))
        text, points, _ = detector.detectAndDecode(padded)
    if not text:
        logger.info("no qr code decoded", extra={"found": points is not None})
        raise err_decode()
    return text.strip()
