from collections.abc import Mapping
from typing import Any

from sqlalchemy import Result, TextClause
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_ledger.domain.exceptions import PersistenceError


class SessionRepository:
    """Runs statements on the session it was bound to, never on its own transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _execute(self, statement: TextClause, params: Mapping[str, Any]) -> Result[Any]:
        try:
            return await self._session.execute(statement, params)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
