import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from transfer_ledger.application.unit_of_work import UnitOfWork
from transfer_ledger.domain.exceptions import (
    RollbackError,
    TransactionError,
    TransferCancelledError,
    ValidationError,
)
from transfer_ledger.domain.models import (
    Account,
    Entry,
    Transfer,
    TransferState,
    TransferTxParams,
    TransferTxResult,
)
from transfer_ledger.infrastructure.database import Database
from transfer_ledger.infrastructure.metrics import (
    TRANSACTION_ROLLBACKS_TOTAL,
    TRANSFERS_TOTAL,
    track_transfer_duration,
)


logger = structlog.get_logger()

T = TypeVar("T")


def _ensure_not_cancelled(cancel: asyncio.Event | None, step: str) -> None:
    if cancel is not None and cancel.is_set():
        raise TransferCancelledError(step)


async def _add_money(
    uow: UnitOfWork,
    account1_id: int,
    amount1: int,
    account2_id: int,
    amount2: int,
) -> tuple[Account, Account]:
    account1 = await uow.accounts.add_balance(account1_id, amount1)
    account2 = await uow.accounts.add_balance(account2_id, amount2)
    return account1, account2


async def _add_balances(uow: UnitOfWork, params: TransferTxParams) -> tuple[Account, Account]:
    """Apply both deltas, lower account id first, and return (from_account, to_account).

    Every transfer touching the same pair locks the rows in the same order,
    whichever way the money flows, so concurrent transfers cannot wait on
    each other in a cycle.
    """
    if params.from_account_id < params.to_account_id:
        from_account, to_account = await _add_money(
            uow,
            params.from_account_id,
            -params.amount,
            params.to_account_id,
            params.amount,
        )
    else:
        to_account, from_account = await _add_money(
            uow,
            params.to_account_id,
            params.amount,
            params.from_account_id,
            -params.amount,
        )
    return from_account, to_account


class TransferService:
    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @classmethod
    def from_database(cls, database: Database) -> "TransferService":
        return cls(lambda: UnitOfWork(database.session_factory))

    async def exec_tx(
        self,
        fn: Callable[[UnitOfWork], Awaitable[T]],
        cancel: asyncio.Event | None = None,
    ) -> T:
        """Run ``fn`` inside a single transaction and commit it.

        Any failure inside ``fn`` or at commit, task cancellation included,
        rolls the transaction back and is re-raised as is. A failing rollback
        is raised as ``RollbackError`` carrying both errors.
        """
        async with self._uow_factory() as uow:
            await uow.begin()
            try:
                result = await fn(uow)
                _ensure_not_cancelled(cancel, "commit")
                await uow.commit()
            except (Exception, asyncio.CancelledError) as exc:
                await self._rollback(uow, exc)
                raise
            return result

    async def _rollback(self, uow: UnitOfWork, cause: BaseException) -> None:
        TRANSACTION_ROLLBACKS_TOTAL.labels(reason=type(cause).__name__).inc()
        try:
            await uow.rollback()
        except Exception as rollback_exc:
            raise RollbackError(cause, rollback_exc) from cause

    @track_transfer_duration
    async def transfer_tx(
        self,
        params: TransferTxParams,
        cancel: asyncio.Event | None = None,
    ) -> TransferTxResult:
        """Move ``params.amount`` from one account to the other in one transaction.

        Writes the transfer record, a debit entry for the source, a credit
        entry for the destination, then both balances. Nothing is persisted
        unless all of it is.
        """
        try:
            params.validate()
        except ValidationError:
            TRANSFERS_TOTAL.labels(outcome="invalid").inc()
            raise

        log = logger.bind(
            from_account_id=params.from_account_id,
            to_account_id=params.to_account_id,
            amount=params.amount,
        )
        log.debug("transfer_state", state=TransferState.STARTED)

        async def write(uow: UnitOfWork) -> TransferTxResult:
            _ensure_not_cancelled(cancel, TransferState.WRITING_TRANSFER.value)
            log.debug("transfer_state", state=TransferState.WRITING_TRANSFER)
            transfer = await uow.transfers.create(
                from_account_id=params.from_account_id,
                to_account_id=params.to_account_id,
                amount=params.amount,
            )

            _ensure_not_cancelled(cancel, TransferState.WRITING_ENTRIES.value)
            log.debug("transfer_state", state=TransferState.WRITING_ENTRIES)
            from_entry = await uow.entries.create(account_id=params.from_account_id, amount=-params.amount)
            to_entry = await uow.entries.create(account_id=params.to_account_id, amount=params.amount)

            _ensure_not_cancelled(cancel, TransferState.UPDATING_BALANCES.value)
            log.debug("transfer_state", state=TransferState.UPDATING_BALANCES)
            from_account, to_account = await _add_balances(uow, params)

            return TransferTxResult(
                transfer=transfer,
                from_account=from_account,
                to_account=to_account,
                from_entry=from_entry,
                to_entry=to_entry,
            )

        try:
            result = await self.exec_tx(write, cancel)
        except TransactionError:
            TRANSFERS_TOTAL.labels(outcome="begin_failed").inc()
            raise
        except (Exception, asyncio.CancelledError):
            TRANSFERS_TOTAL.labels(outcome="rolled_back").inc()
            log.info("transfer_state", state=TransferState.ROLLED_BACK)
            raise

        TRANSFERS_TOTAL.labels(outcome="committed").inc()
        log.info(
            "transfer_state",
            state=TransferState.COMMITTED,
            transfer_id=result.transfer.id,
            from_balance_after=result.from_account.balance,
            to_balance_after=result.to_account.balance,
        )
        return result

    async def create_account(self, owner: str, balance: int = 0, currency: str = "USD") -> Account:
        return await self.exec_tx(lambda uow: uow.accounts.create(owner=owner, balance=balance, currency=currency))

    async def get_account(self, account_id: int) -> Account | None:
        async with self._uow_factory() as uow:
            return await uow.accounts.get(account_id)

    async def get_transfer(self, transfer_id: int) -> Transfer | None:
        async with self._uow_factory() as uow:
            return await uow.transfers.get(transfer_id)

    async def list_entries(self, account_id: int, limit: int = 100, offset: int = 0) -> list[Entry]:
        async with self._uow_factory() as uow:
            return await uow.entries.list_by_account(account_id, limit=limit, offset=offset)
