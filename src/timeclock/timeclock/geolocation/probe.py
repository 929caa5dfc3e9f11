from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..attendance.model import Coordinate
from ..common.datetime_utils import now_millis
from ..core.constants import DEFAULT_GEO_TIMEOUT_SECONDS, GEO_PROBE_WORKERS
from ..core.enums import LocationFailure
from ..core.exceptions import LocationError

_logger = logging.getLogger(__name__)

# Shared by every probe: a provider that overruns its timeout holds one of
# these workers instead of leaking a thread per request.
_PROBE_EXECUTOR = ThreadPoolExecutor(max_workers=GEO_PROBE_WORKERS, thread_name_prefix="geo-probe")


@dataclass(frozen=True)
class Fix:
    """A coordinate reading; `captured_at` is epoch milliseconds."""

    latitude: float
    longitude: float
    captured_at: int

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


class GeolocationProvider(Protocol):
    def current_position(self, *, high_accuracy: bool, timeout: float) -> tuple[float, float]:
        """One (latitude, longitude) reading; raises LocationError.

        Implementations should give up after `timeout` seconds.
        """
        raise NotImplementedError


class GeolocationProbe:
    """One-shot, best-effort coordinate fix.

    Each `request` is independent; the latest outcome (fix or error) is held
    and overwrites the previous one.
    """

    def __init__(
        self,
        provider: Optional[GeolocationProvider],
        *,
        timeout: float = DEFAULT_GEO_TIMEOUT_SECONDS,
        clock: Callable[[], int] = now_millis,
        executor: Optional[Executor] = None,
    ):
        self._provider = provider
        self._timeout = float(timeout)
        self._clock = clock
        self._executor = executor or _PROBE_EXECUTOR
        self.fix: Optional[Fix] = None
        self.error: Optional[LocationError] = None

    def request(self) -> Fix:
        try:
            fix = self._request_once()
        except LocationError as e:
            self.fix = None
            self.error = e
            _logger.warning("Location unavailable (%s)", e.reason.value)
            raise
        self.fix = fix
        self.error = None
        return fix

    def coordinate_or_none(self) -> Optional[Coordinate]:
        try:
            return self.request().coordinate
        except LocationError:
            return None

    def _request_once(self) -> Fix:
        if self._provider is None:
            raise LocationError(LocationFailure.UNSUPPORTED)

        future = self._executor.submit(self._provider.current_position, high_accuracy=True, timeout=self._timeout)
        try:
            latitude, longitude = future.result(timeout=self._timeout)
        except FutureTimeout:
            # Drops the call if it is still queued behind overrunning providers.
            future.cancel()
            raise LocationError(LocationFailure.TIMEOUT) from None

        return Fix(latitude=float(latitude), longitude=float(longitude), captured_at=int(self._clock()))
