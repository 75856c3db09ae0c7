import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, TypeVar

from mediaserve.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TranscodeRunner:
    """Runs CPU-bound image work on a thread pool kept apart from the event loop's default executor."""

    def __init__(self, max_workers: int | None = None) -> None:
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        workers = self._max_workers or get_settings().max_parallel_transcodes
        self._executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="transcode",
        )
        self._running = True
        logger.info("Transcode runner started with %d workers", workers)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        executor, self._executor = self._executor, None
        if executor is not None:
            # Drop queued work; in-flight transcodes finish and are discarded.
            executor.shutdown(wait=False, cancel_futures=True)

    async def run(self, func: Callable[..., T], *args, **kwargs) -> T:
        if not self._running or self._executor is None:
            raise RuntimeError("TranscodeRunner not running")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(func, *args, **kwargs))
