"""Thread-pool runner for CPU-bound work awaited from the event loop."""

from __future__ import annotations

import asyncio
import contextvars
import functools
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from newsletter_service.application.ports.blocking_task_runner_port import (
    BlockingTaskRunnerPort,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ThreadPoolBlockingTaskRunner(BlockingTaskRunnerPort):
    """Run synchronous callables on a dedicated thread pool.

    Each submission runs inside a copy of the caller's `contextvars` context,
    so the request id bound by the HTTP layer stays attached to log records
    emitted by the worker. Cancelling the awaiting coroutine does not stop a
    callable that already started.
    """

    def __init__(self, *, max_workers: int, thread_name_prefix: str = "blocking-task") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )

    async def run(self, func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Submit func to the pool and await its result."""

        loop = asyncio.get_running_loop()
        context = contextvars.copy_context()
        call = functools.partial(context.run, func, *args, **kwargs)
        return await loop.run_in_executor(self._executor, call)

    def close(self) -> None:
        """Wait for in-flight work and release worker threads."""

        logger.info("blocking_task_runner_shutdown")
        self._executor.shutdown(wait=True)
