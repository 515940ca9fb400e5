from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.transaction_manager import TransactionManager
from app.infrastructure.db.retry import retry_on_serialization_failure

T = TypeVar("T")


class SQLAlchemyTransactionManager(TransactionManager):
    def __init__(
        self,
        session: AsyncSession,
        max_attempts: int = 3,
        base_delay: float = 0.1,
    ) -> None:
        self._session = session
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._depth = 0

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        # Commits whatever the session autobegan, including earlier reads
        self._depth = 1
        try:
            yield
        except BaseException:
            await self._session.rollback()
            raise
        else:
            await self._session.commit()
        finally:
            self._depth = 0

    async def run(self, work: Callable[[], Awaitable[T]]) -> T:
        if self._depth:
            return await work()

        async def attempt() -> T:
            async with self.start():
                return await work()

        return await retry_on_serialization_failure(
            attempt, max_attempts=self._max_attempts, base_delay=self._base_delay
        )
