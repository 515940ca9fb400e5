import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import TypeVar

from app.application.interfaces.transaction_manager import TransactionManager

T = TypeVar("T")


class InMemoryTransactionManager(TransactionManager):
    """Serialises in-memory units of work with a single lock; nested starts reuse it."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._depth: ContextVar[int] = ContextVar(f"in_memory_tx_depth_{id(self)}", default=0)

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        depth = self._depth.get()
        if depth:
            token = self._depth.set(depth + 1)
            try:
                yield
            finally:
                self._depth.reset(token)
            return

        async with self._lock:
            token = self._depth.set(1)
            try:
                yield
            finally:
                self._depth.reset(token)

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        async with self.start():
            return await work()
