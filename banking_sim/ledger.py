"""
Ledger Engine

Registry of accounts and the authority for id assignment and transfers.
A transfer debits one account and credits another as a single commit:
both account locks are taken in increasing id order, all checks run, and
only then are both legs applied with a shared timestamp.
"""

from decimal import Decimal
from datetime import datetime, timezone
from contextlib import ExitStack
from typing import Any, Dict, List, Optional, Tuple
import threading

from .accounts import Account
from .amounts import ZERO, quantize_amount, to_amount
from .config import BankSimConfig, get_config
from .errors import BankError, InvalidAmountError, AccountNotFoundError
from .logging_config import get_logger, log_action
from .transactions import TransactionRecord


class Ledger:
    """
    In-memory ledger owning every Account

    Safe to share between threads: the registry lock guards the account map
    and the id counter, and each account serializes its own mutations.
    """

    def __init__(self, name: Optional[str] = None, config: Optional[BankSimConfig] = None):
        self.config = config or get_config()
        self.name = name or self.config.bank_name
        self.precision = self.config.amount_precision
        self._accounts: Dict[int, Account] = {}
        self._next_account_id = 1
        self._registry_lock = threading.Lock()
        self.logger = get_logger("banksim.ledger")

    @property
    def next_account_id(self) -> int:
        """Id the next created account will receive"""
        with self._registry_lock:
            return self._next_account_id

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._accounts)

    def __contains__(self, account_id) -> bool:
        with self._registry_lock:
            return account_id in self._accounts

    def create_account(self, holder_name: str) -> int:
        """
        Open a new account with zero balance

        Args:
            holder_name: Display name of the account holder

        Returns:
            The new account id
        """
        with self._registry_lock:
            account_id = self._next_account_id
            self._next_account_id += 1
            account = Account(account_id, holder_name, precision=self.precision)
            self._accounts[account_id] = account

        log_action(
            self.logger, "info", f"Account created: #{account_id}",
            action="create_account", resource=f"account:{account_id}",
            extra={"account_id": account_id, "holder_name": account.holder_name}
        )
        return account_id

    def get_account(self, account_id: int) -> Account:
        """
        Get account by id

        Raises:
            AccountNotFoundError: If no account has this id
        """
        with self._registry_lock:
            account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id, f"Account {account_id} not found")
        return account

    def account_ids(self) -> List[int]:
        """All account ids in creation order"""
        with self._registry_lock:
            return list(self._accounts)

    def deposit(self, account_id: int, amount) -> TransactionRecord:
        """Deposit into an existing account"""
        try:
            account = self.get_account(account_id)
            record = account.deposit(amount)
        except BankError as e:
            self._log_rejected("deposit", e, account_id=account_id, amount=amount)
            raise

        self._log_committed("deposit", account_id, record)
        return record

    def withdraw(self, account_id: int, amount) -> TransactionRecord:
        """Withdraw from an existing account"""
        try:
            account = self.get_account(account_id)
            record = account.withdraw(amount)
        except BankError as e:
            self._log_rejected("withdraw", e, account_id=account_id, amount=amount)
            raise

        self._log_committed("withdraw", account_id, record)
        return record

    def transfer(self, from_account_id: int, to_account_id: int,
                 amount) -> Tuple[TransactionRecord, TransactionRecord]:
        """
        Move funds between two accounts atomically

        Checks run in a fixed order: amount validity, existence of both
        accounts, self-transfer, then sufficiency of funds.

        Args:
            from_account_id: Account to debit
            to_account_id: Account to credit
            amount: Positive amount to move

        Returns:
            (TRANSFER_OUT record of the source, TRANSFER_IN record of the destination)

        Raises:
            InvalidAmountError: If amount <= 0 or both ids are the same
            AccountNotFoundError: If either account does not exist
            InsufficientFundsError: If the source balance is below amount
        """
        try:
            value = to_amount(amount)
            if value <= ZERO:
                raise InvalidAmountError(f"Invalid amount: {value} (must be positive)")

            source = self.get_account(from_account_id)
            destination = self.get_account(to_account_id)

            if source.id == destination.id:
                raise InvalidAmountError("Cannot transfer to the same account")

            # Lock in id order so opposite transfers cannot deadlock
            with ExitStack() as stack:
                for account in sorted((source, destination), key=lambda a: a.id):
                    stack.enter_context(account.lock)

                source.ensure_funds(value)
                timestamp = datetime.now(timezone.utc)
                out_record = source.transfer_out(value, destination.id, timestamp)
                in_record = destination.transfer_in(value, source.id, timestamp)
        except BankError as e:
            self._log_rejected(
                "transfer", e,
                from_account_id=from_account_id, to_account_id=to_account_id, amount=amount
            )
            raise

        log_action(
            self.logger, "info",
            f"Transfer committed: #{from_account_id} -> #{to_account_id}",
            action="transfer", resource=f"account:{from_account_id}",
            extra={
                "from_account_id": from_account_id,
                "to_account_id": to_account_id,
                "amount": str(value),
                "from_balance_after": str(out_record.balance_after),
                "to_balance_after": str(in_record.balance_after),
            }
        )
        return out_record, in_record

    def balance_of(self, account_id: int) -> Decimal:
        """Current balance of an account"""
        return self.get_account(account_id).balance

    def history_of(self, account_id: int) -> Tuple[TransactionRecord, ...]:
        """Transaction history of an account in commit order"""
        return self.get_account(account_id).history

    def total_balance(self) -> Decimal:
        """
        Sum of all account balances; transfers never change it

        Every account lock is held, in id order, while summing, so the
        total never counts a transfer on one side only.
        """
        with self._registry_lock:
            accounts = sorted(self._accounts.values(), key=lambda a: a.id)

        total = quantize_amount(ZERO, self.precision)
        with ExitStack() as stack:
            for account in accounts:
                stack.enter_context(account.lock)
            for account in accounts:
                total += account.balance
        return total

    def verify_integrity(self) -> Dict[str, Any]:
        """
        Check every account's balance against its history

        Returns:
            Dictionary with ``valid``, ``accounts_checked`` and
            ``inconsistent_accounts`` keys
        """
        inconsistent = []
        account_ids = self.account_ids()
        for account_id in account_ids:
            if not self.get_account(account_id).verify_balance():
                inconsistent.append(account_id)

        if inconsistent:
            log_action(
                self.logger, "error", "Ledger integrity check failed",
                action="verify_integrity",
                extra={"inconsistent_accounts": inconsistent}
            )

        return {
            "valid": not inconsistent,
            "accounts_checked": len(account_ids),
            "inconsistent_accounts": inconsistent,
        }

    def _log_committed(self, action: str, account_id: int, record: TransactionRecord) -> None:
        log_action(
            self.logger, "info", f"{record.transaction_type.value.capitalize()} committed: #{account_id}",
            action=action, resource=f"account:{account_id}",
            extra={"account_id": account_id, **record.to_dict()}
        )

    def _log_rejected(self, action: str, error: BankError, **details) -> None:
        log_action(
            self.logger, "warning", f"{action.capitalize()} rejected: {error}",
            action=action,
            extra={"error": error.kind, **{k: str(v) for k, v in details.items()}}
        )
