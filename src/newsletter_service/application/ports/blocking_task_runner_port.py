"""Port for running CPU-bound work off the event loop."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class BlockingTaskRunnerPort(Protocol):
    """Blocking task offloading contract."""

    async def run(self, func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Run func on a worker with the caller's context variables and await its result."""
