"""Collapse concurrent calls of the same coroutine into a single flight."""

import asyncio
import concurrent.futures
import threading
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """
    Run at most one coroutine at a time and share its outcome.

    Callers arriving while a flight is running wait for it and receive the
    same result or exception. Once a flight lands, the next call starts a
    new one; memoizing the result is left to the caller.

    The shared cell is a ``concurrent.futures.Future`` so waiters on other
    threads or event loops can join the flight as well.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._future: Optional[concurrent.futures.Future] = None
        self.flights = 0

    @property
    def in_flight(self) -> bool:
        return self._future is not None

    async def run(self, func: Callable[[], Awaitable[T]]) -> T:
        with self._lock:
            future = self._future
            owner = future is None
            if owner:
                future = self._future = concurrent.futures.Future()
                self.flights += 1

        if not owner:
            return await asyncio.wrap_future(future)

        try:
            result = await func()
        except BaseException as e:
            self._land()
            future.set_exception(e)
            raise

        self._land()
        future.set_result(result)
        return result

    def _land(self) -> None:
        with self._lock:
            self._future = None
