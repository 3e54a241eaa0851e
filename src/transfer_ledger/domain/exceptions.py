class DomainError(Exception):
    """Base exception for domain errors."""


class ValidationError(DomainError):
    """Raised when a transfer request is malformed."""


class InvalidAmountError(ValidationError):
    """Raised when transfer amount is invalid."""

    def __init__(self, amount: int, reason: str) -> None:
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid amount {amount}: {reason}")


class SameAccountError(ValidationError):
    """Raised when source and destination are the same account."""

    def __init__(self, account_id: int) -> None:
        self.account_id = account_id
        super().__init__(f"Cannot transfer to the same account: {account_id}")


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist at write time."""

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class AccountNotFoundError(NotFoundError):
    """Raised when an account cannot be found."""

    def __init__(self, account_id: int) -> None:
        self.account_id = account_id
        super().__init__("Account", account_id)


class TransactionError(DomainError):
    """Raised when a database transaction cannot be started."""


class PersistenceError(DomainError):
    """Raised when a write or commit statement fails."""


class RollbackError(DomainError):
    """Raised when rolling back after a failure fails as well.

    Both the failure that triggered the rollback and the rollback failure are
    kept; the connection is in an unknown state afterwards.
    """

    def __init__(self, cause: BaseException, rollback_error: BaseException) -> None:
        self.cause = cause
        self.rollback_error = rollback_error
        super().__init__(f"tx error: {cause!r}, rollback error: {rollback_error!r}")


class TransferCancelledError(DomainError):
    """Raised when the caller cancelled a transfer before it was committed."""

    def __init__(self, step: str) -> None:
        self.step = step
        super().__init__(f"Transfer cancelled during {step}")
