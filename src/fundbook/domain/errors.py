"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PersistenceError(Exception):
    """A document store write or read could not be completed."""


class UpdateRejectedError(PersistenceError):
    """The store refused a partial field update for a document."""


def account_not_found(tenant: str, account_code: str) -> str:
    """Return message for missing account."""
    return f"Account {account_code} not found for tenant '{tenant}'"


def account_code_exists(tenant: str, account_code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account {account_code} already exists for tenant '{tenant}'"


def invalid_account_type(account_type: str) -> str:
    """Return message for unsupported account type."""
    return (
        f"Invalid account type '{account_type}'. "
        "Expected one of: asset, liability, equity, income, expense"
    )


def record_not_found(collection: str, record_id: str) -> str:
    """Return message for missing transaction or movement."""
    return f"Record '{record_id}' not found in {collection}"


def unresolved_expense_account(transaction_id: str) -> str:
    """Return message for an expense without a ledger account."""
    return (
        f"Expense transaction '{transaction_id}' has no resolved account code. "
        "Resolve its category before building journal entries."
    )
