from types import TracebackType
from typing import Self

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from transfer_ledger.domain.exceptions import PersistenceError, TransactionError
from transfer_ledger.infrastructure.repositories import (
    AccountRepository,
    EntryRepository,
    TransferRepository,
)


class UnitOfWork:
    """One session, one transaction; every repository on it shares that transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork used outside of its context")
        return self._session

    async def __aenter__(self) -> Self:
        self._session = self._session_factory()
        self.accounts = AccountRepository(self._session)
        self.entries = EntryRepository(self._session)
        self.transfers = TransferRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def begin(self) -> None:
        try:
            await self.session.begin()
            # Acquire the connection now so connectivity failures surface here
            await self.session.connection()
        except (SQLAlchemyError, OSError) as exc:
            # asyncpg connect failures arrive as plain OSError
            raise TransactionError(f"could not begin transaction: {exc}") from exc

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"commit failed: {exc}") from exc

    async def rollback(self) -> None:
        await self.session.rollback()
