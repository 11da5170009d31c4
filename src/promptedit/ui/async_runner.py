from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class AsyncRunner:
    """
    Runs one asyncio event loop on a daemon thread so coroutines never block the
    Tk mainloop. All controller work is submitted here, which keeps every state
    transition on a single thread.
    """

    def __init__(self) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="promptedit-loop", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def submit(
        self,
        coro: Awaitable[Any],
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> concurrent.futures.Future:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)

        def done(f: concurrent.futures.Future) -> None:
            if f.cancelled():
                return
            err = f.exception()
            if err is None:
                return
            logger.error("Background task failed", exc_info=err)
            if on_error is not None:
                on_error(err)

        future.add_done_callback(done)
        return future

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        self._loop.call_soon_threadsafe(fn, *args)

    def stop(self) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=2)
        if not self._loop.is_running():
            self._loop.close()
