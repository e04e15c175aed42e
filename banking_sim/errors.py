"""
Ledger Error Taxonomy

Every rejected mutation raises one of these. They subclass ValueError so
callers that treat bad input generically keep working, and each carries a
short ``kind`` string for structured logs.
"""

from typing import Optional


class BankError(ValueError):
    """Base class for recoverable ledger errors"""

    kind = "bank_error"
    default_message = "Banking operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class InvalidAmountError(BankError):
    """Amount is zero, negative, not a number, or a self-transfer"""

    kind = "invalid_amount"
    default_message = "Invalid amount"


class InsufficientFundsError(BankError):
    """Withdrawal or transfer-out exceeds the available balance"""

    kind = "insufficient_funds"
    default_message = "Insufficient Balance to complete this transaction"


class AccountNotFoundError(BankError):
    """Referenced account id does not exist in the ledger"""

    kind = "account_not_found"
    default_message = "Account not found"

    def __init__(self, account_id=None, message: Optional[str] = None):
        self.account_id = account_id
        super().__init__(message)
