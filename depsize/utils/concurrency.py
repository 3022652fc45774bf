"""Bounded-concurrency helpers for file I/O and subprocesses."""

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


class ConcurrencyLimiter:
    """Cap how many wrapped coroutines run at once.

    The semaphore is created on first use so it binds to the running loop.
    """

    def __init__(self, limit: int, name: str = "limiter"):
        if limit < 1:
            raise ValueError("Concurrency must be >= 1")
        self._limit = limit
        self._name = name
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._active = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        return self._active

    async def run(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._limit)
        async with self._semaphore:
            self._active += 1
            try:
                return await func(*args, **kwargs)
            finally:
                self._active -= 1

    def __repr__(self) -> str:
        return f"ConcurrencyLimiter(name={self._name!r}, limit={self._limit})"
