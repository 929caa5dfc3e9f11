from __future__ import annotations

import logging
from typing import Optional, Protocol

import cv2
import numpy as np

from ..core.exceptions import DeviceUnavailable
from .encoding import decode_data_url

_logger = logging.getLogger(__name__)


class FrameStream(Protocol):
    def read(self) -> Optional[np.ndarray]:
        """Latest frame, or None while nothing is decodable yet."""
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class CameraProvider(Protocol):
    def open(self) -> FrameStream:
        """Raises PermissionDenied or DeviceUnavailable."""
        raise NotImplementedError


class _OpenCVStream:
    def __init__(self, cap: "cv2.VideoCapture"):
        self._cap = cap

    def read(self) -> Optional[np.ndarray]:
        ok, frame = self._cap.read()
        return frame if ok else None

    def release(self) -> None:
        self._cap.release()


class OpenCVCameraProvider:
    """Local camera (kiosk use), user-facing, 1280x720 preferred."""

    def __init__(self, device_index: int = 0, *, width: int = 1280, height: int = 720):
        self._device_index = int(device_index)
        self._width = int(width)
        self._height = int(height)

    def open(self) -> FrameStream:
        cap = cv2.VideoCapture(self._device_index)
        if not cap.isOpened():
            cap.release()
            raise DeviceUnavailable("Erro ao acessar a câmera. Verifique permissões.")
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._height)
        return _OpenCVStream(cap)


class _StillStream:
    def __init__(self, frame: np.ndarray):
        self._frame: Optional[np.ndarray] = frame

    def read(self) -> Optional[np.ndarray]:
        return self._frame

    def release(self) -> None:
        self._frame = None


class UploadedStillProvider:
    """A still captured by the browser, replayed as a one-frame stream."""

    def __init__(self, data_url: Optional[str]):
        self._data_url = data_url

    def open(self) -> FrameStream:
        if not self._data_url:
            raise DeviceUnavailable("Nenhuma foto recebida")
        frame = decode_data_url(self._data_url)
        if frame is None:
            _logger.warning("Uploaded still could not be decoded")
            raise DeviceUnavailable("Imagem inválida")
        return _StillStream(frame)
