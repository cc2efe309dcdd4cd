"""Background task submission with per-task error isolation.

Work scheduled here runs after the HTTP response has been sent, so nobody
is waiting on its result. Each task is wrapped so that an exception is
logged and dropped instead of surfacing in the server's error output.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import BackgroundTasks

logger = logging.getLogger(__name__)


async def _run_isolated(
    func: Callable[..., Awaitable[Any]], args: tuple, kwargs: dict
) -> None:
    """Await func and log (never raise) whatever it throws."""
    name = getattr(func, "__name__", repr(func))
    try:
        await func(*args, **kwargs)
    except Exception:
        logger.error("Background task %s failed", name, exc_info=True)


def submit(
    background_tasks: BackgroundTasks,
    func: Callable[..., Awaitable[Any]],
    *args: Any,
    **kwargs: Any,
) -> None:
    """Queue func(*args, **kwargs) to run once the response is sent."""
    logger.info("Queueing background task %s", getattr(func, "__name__", repr(func)))
    background_tasks.add_task(_run_isolated, func, args, kwargs)
