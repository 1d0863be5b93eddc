# scholarhub/infra/tasks/thread_pool.py
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from scholarhub.services._shared.ports.task_runner import TaskRunner

log = logging.getLogger(__name__)


class ThreadPoolTaskRunner(TaskRunner):
    """
    Bounded background runner on top of :class:`ThreadPoolExecutor`.

    At most ``max_pending`` jobs may be queued or running. Submitting beyond
    that never blocks the caller: the job is dropped and ``submit`` returns
    ``False``.

    :param max_workers: Worker threads.
    :param max_pending: In-flight jobs allowed before dropping.
    """

    def __init__(self, *, max_workers: int = 4, max_pending: int = 256) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="search-sync"
        )
        self._slots = threading.BoundedSemaphore(max(1, max_pending))

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> bool:
        if not self._slots.acquire(blocking=False):
            return False
        try:
            future = self._executor.submit(fn, *args, **kwargs)
        except RuntimeError:
            self._slots.release()
            raise
        future.add_done_callback(self._on_done)
        return True

    def _on_done(self, future: Future) -> None:
        self._slots.release()
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            log.error("Background task failed: %s", exc, exc_info=exc)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
