import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class IdleTimer:
    """
    Single pending callback that fires after a period without reset().

    reset() always cancels the previous handle first, so at most one expiry
    is ever scheduled. Must be driven from inside a running event loop.
    """

    def __init__(self, timeout: float, on_expire: Callable[[], Awaitable[None]]):
        self.timeout = timeout
        self._on_expire = on_expire
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def reset(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.timeout, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        logger.info("Idle timeout of %ss reached", self.timeout)
        self._task = asyncio.ensure_future(self._on_expire())
        self._task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        if task is self._task:
            self._task = None
        if not task.cancelled() and task.exception() is not None:
            logger.error("Idle expiry handler failed", exc_info=task.exception())
