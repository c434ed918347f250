"""
Payments Engine

This package provides:
- Fixed-point amounts with 4 decimal digits
- Typed deposit, withdrawal, dispute, resolve and chargeback transactions
- An in-memory account ledger that applies them in order
- Dispute lifecycle per deposit: initial → disputed → resolved / charged back
- CSV input, CSV output and an HTTP surface
"""

from .config import EngineConfig, Settings, get_settings
from .models import (
    Account,
    AccountSnapshot,
    AmountOverflowError,
    Chargeback,
    Deposit,
    Dispute,
    DisputeState,
    InvalidAmountError,
    LedgerServiceError,
    Resolve,
    Transaction,
    TransactionKind,
    TransactionRecord,
    Withdrawal,
    format_amount,
    parse_amount,
)
from .reader import InvalidTransactionError, parse_transaction, read_transactions
from .service import BalanceOverflowError, InMemoryStorage, LedgerService

__all__ = [
    "EngineConfig",
    "Settings",
    "get_settings",
    "Account",
    "AccountSnapshot",
    "AmountOverflowError",
    "Chargeback",
    "Deposit",
    "Dispute",
    "DisputeState",
    "InvalidAmountError",
    "LedgerServiceError",
    "Resolve",
    "Transaction",
    "TransactionKind",
    "TransactionRecord",
    "Withdrawal",
    "format_amount",
    "parse_amount",
    "InvalidTransactionError",
    "parse_transaction",
    "read_transactions",
    "BalanceOverflowError",
    "InMemoryStorage",
    "LedgerService",
]
