"""Shared pytest fixtures for transfer ledger tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from transfer_ledger.application.services import TransferService
from transfer_ledger.application.unit_of_work import UnitOfWork
from transfer_ledger.domain.exceptions import AccountNotFoundError
from transfer_ledger.domain.models import Account, Entry, Transfer


def create_account(
    account_id: int,
    balance: int = 10000,
    owner: str = "owner-001",
    currency: str = "USD",
) -> Account:
    """Helper to create Account with custom values."""
    return Account(
        id=account_id,
        owner=owner,
        balance=balance,
        currency=currency,
        created_at=datetime.now(UTC),
    )


def create_entry(entry_id: int, account_id: int, amount: int) -> Entry:
    """Helper to create Entry with custom values."""
    return Entry(id=entry_id, account_id=account_id, amount=amount, created_at=datetime.now(UTC))


def create_transfer(transfer_id: int, from_account_id: int, to_account_id: int, amount: int) -> Transfer:
    """Helper to create Transfer with custom values."""
    return Transfer(
        id=transfer_id,
        from_account_id=from_account_id,
        to_account_id=to_account_id,
        amount=amount,
        created_at=datetime.now(UTC),
    )


class FakeLedger:
    """In-memory stand-in for the tables behind the mocked repositories.

    ``calls`` records every write in the order it was issued.
    """

    def __init__(self, balances: dict[int, int]) -> None:
        self.balances = dict(balances)
        self.calls: list[tuple[str, int, int]] = []
        self._next_entry_id = 1

    async def create_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> Transfer:
        self.calls.append(("transfer", from_account_id, amount))
        return create_transfer(1, from_account_id, to_account_id, amount)

    async def create_entry(self, account_id: int, amount: int) -> Entry:
        self.calls.append(("entry", account_id, amount))
        entry = create_entry(self._next_entry_id, account_id, amount)
        self._next_entry_id += 1
        return entry

    async def add_balance(self, account_id: int, amount: int) -> Account:
        self.calls.append(("balance", account_id, amount))
        if account_id not in self.balances:
            raise AccountNotFoundError(account_id)
        self.balances[account_id] += amount
        return create_account(account_id, balance=self.balances[account_id])

    def balance_order(self) -> list[int]:
        return [account_id for kind, account_id, _ in self.calls if kind == "balance"]


@pytest.fixture
def mock_account_repository() -> AsyncMock:
    """Create mock AccountRepository."""
    repo = AsyncMock()
    repo.create = AsyncMock(return_value=create_account(1))
    repo.get = AsyncMock(return_value=None)
    repo.get_for_update = AsyncMock(return_value=None)
    repo.list_all = AsyncMock(return_value=[])
    repo.add_balance = AsyncMock(return_value=None)
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_entry_repository() -> AsyncMock:
    """Create mock EntryRepository."""
    repo = AsyncMock()
    repo.create = AsyncMock(return_value=None)
    repo.get = AsyncMock(return_value=None)
    repo.list_by_account = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_transfer_repository() -> AsyncMock:
    """Create mock TransferRepository."""
    repo = AsyncMock()
    repo.create = AsyncMock(return_value=None)
    repo.get = AsyncMock(return_value=None)
    repo.list_between = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_uow(
    mock_account_repository: AsyncMock,
    mock_entry_repository: AsyncMock,
    mock_transfer_repository: AsyncMock,
) -> AsyncMock:
    """Create mock Unit of Work with all repositories."""
    uow = AsyncMock(spec=UnitOfWork)
    uow.accounts = mock_account_repository
    uow.entries = mock_entry_repository
    uow.transfers = mock_transfer_repository
    uow.begin = AsyncMock(return_value=None)
    uow.commit = AsyncMock(return_value=None)
    uow.rollback = AsyncMock(return_value=None)

    # Configure async context manager
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)

    return uow


@pytest.fixture
def ledger(mock_uow: AsyncMock) -> FakeLedger:
    """Wire the mocked repositories to an in-memory ledger with accounts 1, 2, 3 and 5."""
    fake = FakeLedger({1: 100, 2: 50, 3: 1000, 5: 1000})
    mock_uow.transfers.create.side_effect = fake.create_transfer
    mock_uow.entries.create.side_effect = fake.create_entry
    mock_uow.accounts.add_balance.side_effect = fake.add_balance
    return fake


@pytest.fixture
def service(mock_uow: AsyncMock) -> TransferService:
    """Create TransferService whose every unit of work is the mocked one."""
    return TransferService(lambda: mock_uow)
