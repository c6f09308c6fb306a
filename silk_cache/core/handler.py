"""
Callback contexts: where results of background cache work are delivered.
"""

import asyncio
import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

log = logging.getLogger(__name__)


class Handler:
    """
    Queues callbacks for the thread that created it.

    Worker threads `post()` callbacks; the owner thread runs them by calling
    `run_pending()` from its own loop, so callbacks never execute on a worker.
    """

    def __init__(self):
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self.owner = threading.current_thread()

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        """Schedules `fn(*args)` to run on the owner thread."""
        self._queue.put((fn, args))

    def run_pending(self, timeout: float | None = 0.0) -> int:
        """
        Runs every queued callback on the calling thread.

        Args:
            timeout: How long to wait for the first callback. 0 returns immediately
            when the queue is empty; None waits indefinitely.

        Returns:
            The number of callbacks that ran.
        """
        count = 0
        block = timeout is None or timeout > 0
        try:
            fn, args = self._queue.get(block=block, timeout=timeout if block else None)
        except queue.Empty:
            return 0
        while True:
            fn(*args)
            count += 1
            try:
                fn, args = self._queue.get_nowait()
            except queue.Empty:
                return count


class LoopHandler(Handler):
    """Delivers callbacks on an asyncio event loop, from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop):
        super().__init__()
        self.loop = loop

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        self.loop.call_soon_threadsafe(fn, *args)


class ImmediateHandler(Handler):
    """Runs callbacks inline on whichever thread posts them."""

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        fn(*args)


def default_handler() -> Handler:
    """
    Returns a handler bound to the calling thread: its running event loop if it has
    one, otherwise a queue drained with `Handler.run_pending()`.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return Handler()
    log.debug("Binding cache callbacks to the running event loop.")
    return LoopHandler(loop)
