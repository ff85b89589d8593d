"""Utility for resolving account specifiers to typed references."""

from tillbook.domain.account import AccountService
from tillbook.domain.entities import AccountKind, AccountRef
from tillbook.domain.errors import NotFoundError, ValidationError

ACCOUNT_FORMAT_HINT = "use KIND:ID or KIND:CODE, e.g. store:1 or savings:SAV-01"


def resolve_account(account_service: AccountService, account: str) -> AccountRef:
    """Resolve an account specifier such as ``store:3`` or ``savings:SAV-01``.

    The part after the colon is tried as a numeric ID first, then as the
    account's external code.

    Args:
        account_service: AccountService instance
        account: Specifier in KIND:ID or KIND:CODE form

    Returns:
        AccountRef of an existing account

    Raises:
        ValidationError: If the specifier is malformed or the kind is unknown
        NotFoundError: If no matching account exists
    """
    kind_text, sep, identifier = account.strip().partition(":")
    identifier = identifier.strip()
    if not sep or not identifier:
        raise ValidationError(f"Invalid account '{account}': {ACCOUNT_FORMAT_HINT}")

    try:
        kind = AccountKind(kind_text.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid account type '{kind_text}': {ACCOUNT_FORMAT_HINT}") from None

    # Try to parse as integer (handles IDs like "1")
    try:
        account_id = int(identifier)
    except ValueError:
        account_id = None

    if account_id is not None and account_id > 0:
        ref = AccountRef(kind, account_id)
        if account_service.get_account(ref) is not None:
            return ref

    # Fall back to the external code
    found = account_service.find_by_code(kind, identifier)
    if found is not None:
        return found.ref

    raise NotFoundError(f"{kind.value.capitalize()} account '{identifier}' not found")
