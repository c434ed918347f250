from typing import Iterable, Optional

from .config import EngineConfig
from .models import (
    BALANCE_MAX,
    BALANCE_MIN,
    Account,
    AccountSnapshot,
    Chargeback,
    Deposit,
    Dispute,
    DisputeState,
    LedgerServiceError,
    Resolve,
    Transaction,
    TransactionKind,
    TransactionRecord,
    Withdrawal,
)


class BalanceOverflowError(LedgerServiceError):
    pass


class InMemoryStorage:
    def __init__(self):
        self.accounts: dict[int, Account] = {}
        self.transactions: dict[int, TransactionRecord] = {}


class LedgerService:
    """Applies a stream of transactions to per-user accounts.

    ``apply`` never reports an inapplicable transaction: unknown accounts or
    transaction ids, locked accounts, wrong dispute states and insufficient
    funds are all absorbed as no-ops so the rest of the stream keeps flowing.
    The only exception it lets out is ``BalanceOverflowError``, raised when a
    balance leaves the signed 128-bit range.
    """

    def __init__(
        self,
        storage: Optional[InMemoryStorage] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.storage = storage or InMemoryStorage()
        self.config = config or EngineConfig()
        self._handlers = {
            TransactionKind.DEPOSIT: self._deposit,
            TransactionKind.WITHDRAWAL: self._withdraw,
            TransactionKind.DISPUTE: self._dispute,
            TransactionKind.RESOLVE: self._resolve,
            TransactionKind.CHARGEBACK: self._chargeback,
        }

    def apply(self, transaction: Transaction) -> None:
        self._handlers[transaction.kind](transaction)

    def apply_all(self, transactions: Iterable[Transaction]) -> int:
        count = 0
        for transaction in transactions:
            self.apply(transaction)
            count += 1
        return count

    def get_account(self, user: int) -> Optional[Account]:
        return self.storage.accounts.get(user)

    def get_record(self, tx: int) -> Optional[TransactionRecord]:
        return self.storage.transactions.get(tx)

    def snapshot(self) -> list[AccountSnapshot]:
        return [
            self.storage.accounts[user].to_snapshot()
            for user in sorted(self.storage.accounts)
        ]

    def _deposit(self, deposit: Deposit) -> None:
        if self.config.reject_duplicate_deposits and deposit.tx in self.storage.transactions:
            return

        account = self.storage.accounts.get(deposit.user)
        if account is None:
            account = Account(user=deposit.user)
            self.storage.accounts[deposit.user] = account

        self._update(account, available=deposit.amount, total=deposit.amount)
        self.storage.transactions[deposit.tx] = TransactionRecord(transaction=deposit)

    def _withdraw(self, withdrawal: Withdrawal) -> None:
        account = self._unlocked_account(withdrawal.user)
        if account is None or account.available < withdrawal.amount:
            return
        self._update(account, available=-withdrawal.amount, total=-withdrawal.amount)

    def _dispute(self, dispute: Dispute) -> None:
        found = self._disputable(dispute, DisputeState.INITIAL)
        if found is None:
            return
        account, record = found

        amount = record.transaction.amount
        self._update(account, available=-amount, held=amount)
        record.state = DisputeState.DISPUTED

    def _resolve(self, resolve: Resolve) -> None:
        found = self._disputable(resolve, DisputeState.DISPUTED)
        if found is None:
            return
        account, record = found

        amount = record.transaction.amount
        if self.config.resolve_releases_funds:
            self._update(account, available=amount, held=-amount)
        else:
            # Repeats the dispute transfer rather than reversing it.
            self._update(account, available=-amount, held=amount)
        record.state = DisputeState.RESOLVED

    def _chargeback(self, chargeback: Chargeback) -> None:
        found = self._disputable(chargeback, DisputeState.DISPUTED)
        if found is None:
            return
        account, record = found

        amount = record.transaction.amount
        self._update(account, held=-amount, total=-amount)
        account.locked = True
        record.state = DisputeState.CHARGED_BACK

    def _unlocked_account(self, user: int) -> Optional[Account]:
        account = self.storage.accounts.get(user)
        if account is None or account.locked:
            return None
        return account

    def _disputable(
        self, transaction: Transaction, required_state: DisputeState
    ) -> Optional[tuple[Account, TransactionRecord]]:
        account = self._unlocked_account(transaction.user)
        if account is None:
            return None

        record = self.storage.transactions.get(transaction.tx)
        if record is None or not isinstance(record.transaction, Deposit):
            return None
        if record.state != required_state:
            return None
        if self.config.strict_dispute_owner and record.transaction.user != transaction.user:
            return None
        return account, record

    def _update(self, account: Account, available: int = 0, held: int = 0, total: int = 0) -> None:
        new_available = account.available + available
        new_held = account.held + held
        new_total = account.total + total
        for value in (new_available, new_held, new_total):
            if not BALANCE_MIN <= value <= BALANCE_MAX:
                raise BalanceOverflowError(f"Balance of user {account.user} overflows")

        account.available = new_available
        account.held = new_held
        account.total = new_total
