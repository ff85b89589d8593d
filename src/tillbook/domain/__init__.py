"""Domain layer for tillbook application."""

# Services import the database layer, which imports domain entities; load
# them lazily so importing tillbook.domain.entities never cycles back here.
_SERVICES = {
    "AccountService": "tillbook.domain.account",
    "BalanceLedger": "tillbook.domain.balance",
    "TransactionService": "tillbook.domain.transaction",
    "TransferService": "tillbook.domain.transfer",
    "SnapshotService": "tillbook.domain.snapshot",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
