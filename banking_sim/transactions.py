"""
Transaction Record Module

Immutable records of balance-affecting events. An account appends exactly
one record per committed mutation; records are never edited or removed.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum


class TransactionType(Enum):
    """Kinds of balance-affecting events"""
    DEPOSIT = "deposit"              # Cash deposited into the account
    WITHDRAWAL = "withdrawal"        # Cash withdrawn from the account
    TRANSFER_OUT = "transfer_out"    # Debit leg of a transfer
    TRANSFER_IN = "transfer_in"      # Credit leg of a transfer

    @property
    def is_transfer(self) -> bool:
        return self in (TransactionType.TRANSFER_OUT, TransactionType.TRANSFER_IN)

    @property
    def is_debit(self) -> bool:
        return self in (TransactionType.WITHDRAWAL, TransactionType.TRANSFER_OUT)


@dataclass(frozen=True)
class TransactionRecord:
    """
    One committed balance change

    ``counterparty_account_id`` is the destination of a TRANSFER_OUT and the
    source of a TRANSFER_IN, so either side of a transfer can be traced from
    its own history.
    """
    amount: Decimal
    transaction_type: TransactionType
    timestamp: datetime
    balance_after: Decimal
    counterparty_account_id: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.amount, Decimal) or not isinstance(self.balance_after, Decimal):
            raise ValueError("Transaction amounts must be Decimal")

        if self.amount <= Decimal('0'):
            raise ValueError("Transaction amount must be positive")

        if self.transaction_type.is_transfer and self.counterparty_account_id is None:
            raise ValueError("Transfer records require a counterparty account")

        if not self.transaction_type.is_transfer and self.counterparty_account_id is not None:
            raise ValueError(
                f"{self.transaction_type.value} records cannot have a counterparty account"
            )

    @property
    def is_debit(self) -> bool:
        """Check if this record reduced the balance"""
        return self.transaction_type.is_debit

    @property
    def is_credit(self) -> bool:
        """Check if this record increased the balance"""
        return not self.transaction_type.is_debit

    @property
    def signed_amount(self) -> Decimal:
        """Amount as applied to the balance (negative for debits)"""
        return -self.amount if self.is_debit else self.amount

    @property
    def label(self) -> str:
        """Display label for history listings"""
        if self.transaction_type == TransactionType.TRANSFER_OUT:
            return f"TRANSFER TO #{self.counterparty_account_id}"
        if self.transaction_type == TransactionType.TRANSFER_IN:
            return f"TRANSFER FROM #{self.counterparty_account_id}"
        return self.transaction_type.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        result = {
            'amount': str(self.amount),
            'transaction_type': self.transaction_type.value,
            'timestamp': self.timestamp.isoformat(),
            'balance_after': str(self.balance_after),
        }
        if self.counterparty_account_id is not None:
            result['counterparty_account_id'] = self.counterparty_account_id
        return result
