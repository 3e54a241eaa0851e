"""Application layer - transfer orchestration and unit of work."""

from transfer_ledger.application.services import TransferService
from transfer_ledger.application.unit_of_work import UnitOfWork


__all__ = [
    "TransferService",
    "UnitOfWork",
]
