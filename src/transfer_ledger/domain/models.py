from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from transfer_ledger.domain.exceptions import InvalidAmountError, SameAccountError


class TransferState(Enum):
    STARTED = "STARTED"
    WRITING_TRANSFER = "WRITING_TRANSFER"
    WRITING_ENTRIES = "WRITING_ENTRIES"
    UPDATING_BALANCES = "UPDATING_BALANCES"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"


@dataclass(frozen=True)
class Account:
    id: int
    owner: str
    balance: int
    currency: str = "USD"
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class Entry:
    """A single balance movement; negative amounts are debits."""

    id: int
    account_id: int
    amount: int
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class Transfer:
    id: int
    from_account_id: int
    to_account_id: int
    amount: int
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class TransferTxParams:
    from_account_id: int
    to_account_id: int
    amount: int

    def validate(self) -> None:
        if self.amount <= 0:
            raise InvalidAmountError(self.amount, "must be positive")
        if self.from_account_id == self.to_account_id:
            raise SameAccountError(self.from_account_id)


@dataclass(frozen=True)
class TransferTxResult:
    transfer: Transfer
    from_account: Account
    to_account: Account
    from_entry: Entry
    to_entry: Entry
