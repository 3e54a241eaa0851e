"""Domain layer - ledger entities and errors."""

from transfer_ledger.domain.exceptions import (
    AccountNotFoundError,
    DomainError,
    InvalidAmountError,
    NotFoundError,
    PersistenceError,
    RollbackError,
    SameAccountError,
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


__all__ = [
    "Account",
    "AccountNotFoundError",
    "DomainError",
    "Entry",
    "InvalidAmountError",
    "NotFoundError",
    "PersistenceError",
    "RollbackError",
    "SameAccountError",
    "TransactionError",
    "Transfer",
    "TransferCancelledError",
    "TransferState",
    "TransferTxParams",
    "TransferTxResult",
    "ValidationError",
]
