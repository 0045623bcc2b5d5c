"""
Background scheduler for asynchronous handlers and suggestion providers.

`CommandScope` owns one asyncio event loop running on a daemon thread. Work
is submitted from any thread and never awaited by the command that submitted
it; the returned future is there for callers that do want the result.
"""

import asyncio
import inspect
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from cmdtree.config import ScopeSettings

logger = logging.getLogger(__name__)


class CommandScope:
    """Fire-and-forget scheduler backed by an asyncio event loop."""

    def __init__(self, settings: ScopeSettings | None = None):
        self.settings = settings or ScopeSettings()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def launch(self, work: Callable[[], Any]) -> "Future[Any]":
        """
        Schedule a zero-argument unit of work.

        Coroutine functions are awaited on the scope's loop; plain callables
        run in the loop's default executor. Failures are logged here; they
        never reach the command that launched the work.

        Params:
            work: Callable taking no arguments

        Returns:
            Future completed with the work's result
        """
        loop = self._ensure_loop()
        future = asyncio.run_coroutine_threadsafe(self._run(work), loop)
        future.add_done_callback(self._report_failure)
        return future

    async def _run(self, work: Callable[[], Any]) -> Any:
        if inspect.iscoroutinefunction(work):
            return await work()
        result = await asyncio.get_running_loop().run_in_executor(None, work)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _report_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Unhandled failure in scheduled command work", exc_info=exc)

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever,
                    name=self.settings.thread_name,
                    daemon=True,
                )
                self._thread.start()
            return self._loop

    def close(self) -> None:
        """Stop the loop and wait for its thread to exit."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = self._thread = None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(self.settings.close_timeout)
        if not loop.is_running():
            loop.close()

    def __enter__(self) -> "CommandScope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
