from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

log = logging.getLogger(__name__)


class TaskRunner(Protocol):
    """Port for running work outside the request that scheduled it."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> bool:
        """Schedule ``fn(*args, **kwargs)``.

        :returns: ``False`` when the job was dropped (queue full, shut down).
        """
        ...

    def shutdown(self, wait: bool = True) -> None: ...


class InlineTaskRunner(TaskRunner):
    """Run jobs synchronously in the caller's thread.

    Used by tests and CLI commands. Like a pool worker, a failing job is
    logged and does not propagate to the submitter.
    """

    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> bool:
        self.submitted += 1
        try:
            fn(*args, **kwargs)
        except Exception:
            log.exception("Inline task %s failed", getattr(fn, "__name__", fn))
        return True

    def shutdown(self, wait: bool = True) -> None:
        return None


class DeferredTaskRunner(TaskRunner):
    """Collect jobs and run them only when :meth:`run_pending` is called.

    Lets tests observe the state between commit and synchronization.
    """

    def __init__(self) -> None:
        self.pending: list[tuple[Callable[..., Any], tuple[Any, ...], dict[str, Any]]] = []

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> bool:
        self.pending.append((fn, args, kwargs))
        return True

    def run_pending(self) -> int:
        jobs, self.pending = self.pending, []
        for fn, args, kwargs in jobs:
            fn(*args, **kwargs)
        return len(jobs)

    def shutdown(self, wait: bool = True) -> None:
        self.pending.clear()
