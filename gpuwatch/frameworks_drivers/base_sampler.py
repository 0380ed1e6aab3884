"""
Fixed-interval background polling shared by the GPU and Ollama samplers.
"""
import asyncio
import time
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from gpuwatch.entities.sampler_status import SamplerStatus
from gpuwatch.shared.errors import GPUWatchError
from gpuwatch.shared.logger import Logger
from gpuwatch.shared.snapshot_cache import SnapshotCache
from gpuwatch.shared.time_utils import utc_timestamp

T = TypeVar("T")


class BaseSampler(ABC, Generic[T]):
    """
    Owns one snapshot cache and one background loop that refreshes it.

    Polls never overlap: the loop awaits each poll before scheduling the next,
    so a slow cycle only delays the following tick. A failed poll leaves the
    previous snapshot in place.
    """

    name = "sampler"

    def __init__(self, interval: float, enabled: bool = True):
        self.logger = Logger.get(f"{__name__}.{self.name}")
        self.interval = interval
        self.enabled = enabled
        self.cache: SnapshotCache[T] = SnapshotCache()
        self.last_success: Optional[str] = None
        self.last_error: Optional[str] = None
        self.consecutive_failures = 0
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @abstractmethod
    async def collect(self) -> T:
        """Build one complete snapshot. Raise to abort the cycle without touching the cache."""
        raise NotImplementedError

    def latest(self) -> Optional[T]:
        """Most recent complete snapshot, or None if no poll has succeeded yet."""
        return self.cache.read()

    async def poll(self) -> bool:
        """Run one cycle. Returns True if a new snapshot was stored."""
        try:
            snapshot = await self.collect()
        except GPUWatchError as e:
            self._record_failure(e)
            self.logger.warning(f"{self.name} poll failed: {e}")
            return False
        except Exception as e:
            self._record_failure(e)
            self.logger.error(f"Unexpected error in {self.name} poll: {e}", exc_info=True)
            return False

        self.cache.replace(snapshot)
        self.last_success = utc_timestamp()
        self.last_error = None
        self.consecutive_failures = 0
        self.logger.debug(f"{self.name} snapshot refreshed")
        return True

    def _record_failure(self, error: Exception) -> None:
        self.last_error = str(error) or type(error).__name__
        self.consecutive_failures += 1

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop on the running event loop."""
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run_forever(), name=f"{self.name}-sampler")

    async def run_forever(self) -> None:
        """Poll every interval until stop() is called."""
        self.logger.info(f"Starting {self.name} sampler (interval {self.interval}s)")
        while not self._stop_event.is_set():
            started = time.monotonic()
            await self.poll()
            delay = max(0.0, self.interval - (time.monotonic() - started))
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
        self.logger.info(f"{self.name} sampler stopped")

    async def stop(self) -> None:
        """Signal the loop to exit and wait for an in-flight poll to finish."""
        self.logger.info(f"Stopping {self.name} sampler")
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None

    def status(self) -> SamplerStatus:
        return SamplerStatus(
            enabled=self.enabled,
            running=self.is_running,
            has_data=self.cache.has_data,
            last_success=self.last_success,
            last_error=self.last_error,
            consecutive_failures=self.consecutive_failures,
        )
