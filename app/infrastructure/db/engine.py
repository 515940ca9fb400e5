from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.config import Settings

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def build_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url or DEFAULT_DATABASE_URL
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=settings.sql_echo)
        # :memory: shares a single connection, so there is no second writer to exclude
        if ":memory:" not in url:
            use_immediate_transactions(engine)
        return engine
    return create_async_engine(
        url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def use_immediate_transactions(engine: AsyncEngine) -> None:
    """
    Makes every SQLite transaction take the database write lock when it begins.

    SQLite ignores SELECT ... FOR UPDATE and pysqlite defers BEGIN until the
    first write, so two sessions could both read a free vehicle and both book
    it. BEGIN IMMEDIATE makes the second session wait for the first to commit;
    a wait longer than the driver's busy timeout surfaces as "database is
    locked", which the transaction manager retries.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
