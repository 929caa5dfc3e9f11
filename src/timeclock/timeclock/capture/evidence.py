from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from ..core.constants import DEFAULT_JPEG_QUALITY
from ..core.enums import CaptureState
from ..core.exceptions import CaptureError
from .encoding import encode_jpeg_data_url, frame_size
from .provider import CameraProvider, FrameStream

_logger = logging.getLogger(__name__)


class EvidenceCapture:
    """Camera state machine producing a single evidence still.

    ACQUIRING -> LIVE -> READY -> FROZEN, with ERROR on denied or missing
    devices. `retake` goes FROZEN -> ACQUIRING and `retry` goes
    ERROR -> ACQUIRING. Use as a context manager so the device is released
    on every exit path.
    """

    def __init__(
        self,
        provider: CameraProvider,
        *,
        quality: int = DEFAULT_JPEG_QUALITY,
        encoder: Callable[[np.ndarray, int], str] = encode_jpeg_data_url,
    ):
        self._provider = provider
        self._quality = int(quality)
        self._encoder = encoder

        self._state = CaptureState.ACQUIRING
        self._stream: Optional[FrameStream] = None
        self._frame: Optional[np.ndarray] = None
        self._still: Optional[str] = None
        self._error: Optional[CaptureError] = None
        self._alive = True

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def still(self) -> Optional[str]:
        return self._still

    @property
    def error(self) -> Optional[CaptureError]:
        return self._error

    @property
    def has_stream(self) -> bool:
        return self._stream is not None

    def acquire(self) -> CaptureState:
        self._release_stream()
        self._state = CaptureState.ACQUIRING
        self._error = None
        self._frame = None

        try:
            stream = self._provider.open()
        except CaptureError as e:
            if self._alive:
                self._state = CaptureState.ERROR
                self._error = e
            _logger.warning("Camera acquisition failed: %s", e)
            return self._state

        # Torn down while the device was being granted: do not attach.
        if not self._alive:
            self._safe_release(stream)
            return self._state

        self._stream = stream
        self._state = CaptureState.LIVE
        return self._state

    def retry(self) -> CaptureState:
        if self._state is not CaptureState.ERROR:
            return self._state
        return self.acquire()

    def poll(self) -> CaptureState:
        """Pull the latest frame; the first decodable one makes the capture READY."""

        if self._state not in (CaptureState.LIVE, CaptureState.READY) or self._stream is None:
            return self._state

        frame = self._stream.read()
        if frame is not None:
            self._frame = frame
            if self._state is CaptureState.LIVE:
                self._state = CaptureState.READY
        return self._state

    def capture(self) -> Optional[str]:
        """Freeze the current frame into a JPEG still.

        No-op (returns None) outside READY, or when the frame reports a zero
        width or height.
        """

        if self._state is not CaptureState.READY:
            return None

        self.poll()
        width, height = frame_size(self._frame)
        if width == 0 or height == 0:
            return None

        self._still = self._encoder(self._frame, self._quality)
        self._frame = None
        self._release_stream()
        self._state = CaptureState.FROZEN
        return self._still

    def retake(self) -> CaptureState:
        if self._state is not CaptureState.FROZEN:
            return self._state
        self._still = None
        return self.acquire()

    def close(self) -> None:
        self._alive = False
        self._release_stream()

    def __enter__(self) -> "EvidenceCapture":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _release_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            self._safe_release(stream)

    @staticmethod
    def _safe_release(stream: FrameStream) -> None:
        # Best-effort: a failing release must not mask the caller's outcome.
        try:
            stream.release()
        except Exception:
            _logger.warning("Camera release failed", exc_info=True)


def capture_still(provider: CameraProvider, *, quality: int = DEFAULT_JPEG_QUALITY, max_polls: int = 30) -> Optional[str]:
    """Run a full acquire -> poll -> capture cycle; None when no still could be made."""

    with EvidenceCapture(provider, quality=quality) as cap:
        if cap.acquire() is CaptureState.ERROR:
            return None
        for _ in range(max(1, int(max_polls))):
            if cap.poll() is CaptureState.READY:
                still = cap.capture()
                if still:
                    return still
        return None
