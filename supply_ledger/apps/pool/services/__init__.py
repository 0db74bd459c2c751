from .accrual import AccrualEngine, SupplyIndices
from .ledger import AccountRecord, PrincipalLedger, get_default_ledger

__all__ = [
    "AccrualEngine",
    "SupplyIndices",
    "AccountRecord",
    "PrincipalLedger",
    "get_default_ledger",
]
