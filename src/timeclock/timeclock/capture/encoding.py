from __future__ import annotations

import base64
import binascii
from typing import Optional

import cv2
import numpy as np

from ..core.constants import DEFAULT_JPEG_QUALITY

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def frame_size(frame: Optional[np.ndarray]) -> tuple[int, int]:
    """(width, height) of a frame; (0, 0) when there is nothing to show."""
    if frame is None or frame.ndim < 2:
        return 0, 0
    height, width = frame.shape[:2]
    return int(width), int(height)


def encode_jpeg_data_url(frame: np.ndarray, quality: int = DEFAULT_JPEG_QUALITY) -> str:
    ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise ValueError("JPEG encoding failed")
    return DATA_URL_PREFIX + base64.b64encode(buf.tobytes()).decode("ascii")


def decode_data_url(data_url: str) -> Optional[np.ndarray]:
    """Decode a browser `data:image/...;base64,` still into a BGR frame.

    Returns None when the payload is not a decodable image.
    """

    payload = data_url.split(",", 1)[1] if "," in data_url else data_url
    try:
        img_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None

    nparr = np.frombuffer(img_bytes, np.uint8)
    if nparr.size == 0:
        return None
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        return None

    # RGBA (4 channels) -> BGR
    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    # Grayscale (1 channel) -> BGR
    elif img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    return np.ascontiguousarray(img, dtype=np.uint8)
