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


class DependencyError(DomainError):
    """A call to the persistence service (or another collaborator) failed."""


def account_not_found(ref) -> str:
    """Return message for a missing store or savings account."""
    return f"{ref.label} {ref.id} not found"


def account_not_active(ref, status: str) -> str:
    """Return message for an account that cannot take new postings."""
    return f"{ref.label} {ref.id} is {status}; only active accounts accept postings"


def duplicate_account_code(kind: str, code: str) -> str:
    """Return message for a duplicate store or savings account code."""
    return f"A {kind} account with code '{code}' already exists"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def transfer_not_found(reference: str) -> str:
    """Return message for missing transfer."""
    return f"Transfer '{reference}' not found"


def missing_field(field_name: str) -> str:
    """Return message for a required field that was not supplied."""
    return f"{field_name} is required"


def amount_not_positive(amount) -> str:
    """Return message for zero or negative amounts."""
    return f"Amount must be greater than zero (got {amount})"


def amount_below_cents(amount) -> str:
    """Return message for amounts with fractions of a cent."""
    return f"Amount must have at most two decimal places (got {amount})"


def insufficient_funds(ref, amount, available) -> str:
    """Return message when a transfer would overdraw its source account."""
    return (
        f"Transfer amount ({amount}) exceeds available balance ({available}) "
        f"of {ref.label.lower()} {ref.id}"
    )
