from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


class _Abandoned(Exception):
    """The task computing the value was cancelled before it finished."""


class AsyncOnceCell(Generic[T]):
    """Write-once value computed by the first caller of :meth:`get_or_init`.

    Callers that arrive while the first computation is running await that same
    computation instead of starting their own, and observe its value or its
    exception. Only a successful result is stored. After a failure or a
    cancellation the cell is empty again and the next call recomputes.
    """

    __slots__ = ("_value", "_set", "_pending")

    def __init__(self) -> None:
        self._value: T | None = None
        self._set = False
        self._pending: asyncio.Future[T] | None = None

    def initialized(self) -> bool:
        return self._set

    def get(self) -> T | None:
        return self._value

    async def get_or_init(self, init: Callable[[], Awaitable[T]]) -> T:
        while True:
            if self._set:
                return self._value  # type: ignore[return-value]
            pending = self._pending
            if pending is None:
                return await self._run(init)
            try:
                return await asyncio.shield(pending)
            except _Abandoned:
                continue

    async def _run(self, init: Callable[[], Awaitable[T]]) -> T:
        fut: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._pending = fut
        try:
            value = await init()
        except Exception as exc:
            fut.set_exception(exc)
            raise
        else:
            self._value = value
            self._set = True
            fut.set_result(value)
            return value
        finally:
            self._pending = None
            # Cancelled or interrupted: waiters start over instead of hanging.
            if not fut.done():
                fut.set_exception(_Abandoned())
            fut.exception()
