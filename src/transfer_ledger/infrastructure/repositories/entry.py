from typing import Any

from sqlalchemy import Row, text

from transfer_ledger.domain.models import Entry
from transfer_ledger.infrastructure.repositories.base import SessionRepository


def _to_entry(row: Row[Any]) -> Entry:
    return Entry(
        id=row.id,
        account_id=row.account_id,
        amount=row.amount,
        created_at=row.created_at,
    )


class EntryRepository(SessionRepository):
    async def create(self, account_id: int, amount: int) -> Entry:
        result = await self._execute(
            text("""
                INSERT INTO entries (account_id, amount)
                VALUES (:account_id, :amount)
                RETURNING id, account_id, amount, created_at
            """),
            {"account_id": account_id, "amount": amount},
        )
        return _to_entry(result.one())

    async def get(self, entry_id: int) -> Entry | None:
        result = await self._execute(
            text("""
                SELECT id, account_id, amount, created_at
                FROM entries
                WHERE id = :id
            """),
            {"id": entry_id},
        )
        row = result.fetchone()
        if not row:
            return None
        return _to_entry(row)

    async def list_by_account(self, account_id: int, limit: int = 100, offset: int = 0) -> list[Entry]:
        result = await self._execute(
            text("""
                SELECT id, account_id, amount, created_at
                FROM entries
                WHERE account_id = :account_id
                ORDER BY id
                LIMIT :limit OFFSET :offset
            """),
            {"account_id": account_id, "limit": limit, "offset": offset},
        )
        return [_to_entry(row) for row in result.fetchall()]
