"""
Account Management Module

An account owns a running balance and an append-only history of
TransactionRecords. Every mutation runs under the account's own lock and
either commits both the balance change and its record, or changes nothing.
"""

from decimal import Decimal
from datetime import datetime, timezone
from typing import List, Optional, Tuple
import threading

from .amounts import ZERO, DEFAULT_PRECISION, quantize_amount, to_amount
from .errors import InvalidAmountError, InsufficientFundsError
from .transactions import TransactionRecord, TransactionType


class Account:
    """
    Bank account with a balance derived from, and checked against, its history

    Accounts are created and owned by a Ledger. They never hold references
    to other accounts; transfers are orchestrated by the Ledger by id.
    """

    def __init__(self, account_id: int, holder_name: str,
                 precision: int = DEFAULT_PRECISION,
                 created_at: Optional[datetime] = None):
        if account_id <= 0:
            raise ValueError("Account id must be a positive integer")

        self._id = account_id
        self._holder_name = holder_name.strip()
        self._precision = precision
        self._created_at = created_at or datetime.now(timezone.utc)
        self._balance = quantize_amount(ZERO, precision)
        self._history: List[TransactionRecord] = []

        # Held by the ledger across both legs of a transfer
        self.lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Account(id={self._id}, holder_name={self._holder_name!r}, balance={self._balance})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def holder_name(self) -> str:
        return self._holder_name

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def balance(self) -> Decimal:
        """Current balance"""
        with self.lock:
            return self._balance

    @property
    def history(self) -> Tuple[TransactionRecord, ...]:
        """Records in commit order, as an immutable snapshot"""
        with self.lock:
            return tuple(self._history)

    def validate_amount(self, amount) -> Decimal:
        """
        Coerce and validate a mutation amount

        Raises:
            InvalidAmountError: If amount is not a number or not positive
        """
        value = to_amount(amount)
        if value <= ZERO:
            raise InvalidAmountError(f"Invalid amount: {value} (must be positive)")
        return value

    def deposit(self, amount) -> TransactionRecord:
        """
        Deposit funds into the account

        Args:
            amount: Positive amount to add

        Returns:
            The DEPOSIT record appended to history

        Raises:
            InvalidAmountError: If amount <= 0
        """
        value = self.validate_amount(amount)
        with self.lock:
            return self._commit(TransactionType.DEPOSIT, value, datetime.now(timezone.utc))

    def withdraw(self, amount) -> TransactionRecord:
        """
        Withdraw funds from the account

        Args:
            amount: Positive amount to remove, at most the current balance

        Returns:
            The WITHDRAWAL record appended to history

        Raises:
            InvalidAmountError: If amount <= 0
            InsufficientFundsError: If amount exceeds the balance
        """
        value = self.validate_amount(amount)
        with self.lock:
            self.ensure_funds(value)
            return self._commit(TransactionType.WITHDRAWAL, value, datetime.now(timezone.utc))

    def ensure_funds(self, amount: Decimal) -> None:
        """Raise InsufficientFundsError unless the balance covers ``amount``"""
        with self.lock:
            if self._balance < amount:
                raise InsufficientFundsError(
                    f"Insufficient funds: available {self._balance}, requested {amount}"
                )

    def transfer_out(self, amount: Decimal, to_account_id: int,
                     timestamp: datetime) -> TransactionRecord:
        """Debit leg of a transfer. Caller must hold the lock and have checked funds."""
        return self._commit(TransactionType.TRANSFER_OUT, amount, timestamp, to_account_id)

    def transfer_in(self, amount: Decimal, from_account_id: int,
                    timestamp: datetime) -> TransactionRecord:
        """Credit leg of a transfer. Caller must hold the lock."""
        return self._commit(TransactionType.TRANSFER_IN, amount, timestamp, from_account_id)

    def verify_balance(self) -> bool:
        """Check that the balance equals the sum of signed history amounts"""
        with self.lock:
            total = sum((record.signed_amount for record in self._history), ZERO)
            return total == self._balance

    def _commit(self, transaction_type: TransactionType, amount: Decimal,
                timestamp: datetime,
                counterparty_account_id: Optional[int] = None) -> TransactionRecord:
        signed = -amount if transaction_type.is_debit else amount
        new_balance = self._balance + signed
        if new_balance < ZERO:
            raise InsufficientFundsError(
                f"Insufficient funds: available {self._balance}, requested {amount}"
            )

        # Build the record first so a rejected record leaves state untouched
        record = TransactionRecord(
            amount=amount,
            transaction_type=transaction_type,
            timestamp=timestamp,
            balance_after=new_balance,
            counterparty_account_id=counterparty_account_id
        )
        self._balance = new_balance
        self._history.append(record)
        return record
