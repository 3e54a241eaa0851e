from typing import Any, cast

from sqlalchemy import CursorResult, Row, text

from transfer_ledger.domain.exceptions import AccountNotFoundError
from transfer_ledger.domain.models import Account
from transfer_ledger.infrastructure.repositories.base import SessionRepository


def _to_account(row: Row[Any]) -> Account:
    return Account(
        id=row.id,
        owner=row.owner,
        balance=row.balance,
        currency=row.currency,
        created_at=row.created_at,
    )


class AccountRepository(SessionRepository):
    async def create(self, owner: str, balance: int, currency: str) -> Account:
        result = await self._execute(
            text("""
                INSERT INTO accounts (owner, balance, currency)
                VALUES (:owner, :balance, :currency)
                RETURNING id, owner, balance, currency, created_at
            """),
            {"owner": owner, "balance": balance, "currency": currency},
        )
        return _to_account(result.one())

    async def get(self, account_id: int) -> Account | None:
        result = await self._execute(
            text("""
                SELECT id, owner, balance, currency, created_at
                FROM accounts
                WHERE id = :id
            """),
            {"id": account_id},
        )
        row = result.fetchone()
        if not row:
            return None
        return _to_account(row)

    async def get_for_update(self, account_id: int) -> Account | None:
        result = await self._execute(
            text("""
                SELECT id, owner, balance, currency, created_at
                FROM accounts
                WHERE id = :id
                FOR NO KEY UPDATE
            """),
            {"id": account_id},
        )
        row = result.fetchone()
        if not row:
            return None
        return _to_account(row)

    async def list_all(self, limit: int = 100, offset: int = 0) -> list[Account]:
        result = await self._execute(
            text("""
                SELECT id, owner, balance, currency, created_at
                FROM accounts
                ORDER BY id
                LIMIT :limit OFFSET :offset
            """),
            {"limit": limit, "offset": offset},
        )
        return [_to_account(row) for row in result.fetchall()]

    async def add_balance(self, account_id: int, amount: int) -> Account:
        # Single statement: the row lock is taken and released with the transaction.
        result = await self._execute(
            text("""
                UPDATE accounts
                SET balance = balance + :amount
                WHERE id = :id
                RETURNING id, owner, balance, currency, created_at
            """),
            {"id": account_id, "amount": amount},
        )
        row = result.fetchone()
        if not row:
            raise AccountNotFoundError(account_id)
        return _to_account(row)

    async def delete(self, account_id: int) -> bool:
        result = cast(
            "CursorResult[Any]",
            await self._execute(
                text("DELETE FROM accounts WHERE id = :id"),
                {"id": account_id},
            ),
        )
        return (result.rowcount or 0) > 0
