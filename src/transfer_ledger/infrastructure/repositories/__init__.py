"""Repository implementations."""

from transfer_ledger.infrastructure.repositories.account import AccountRepository
from transfer_ledger.infrastructure.repositories.entry import EntryRepository
from transfer_ledger.infrastructure.repositories.transfer import TransferRepository


__all__ = [
    "AccountRepository",
    "EntryRepository",
    "TransferRepository",
]
