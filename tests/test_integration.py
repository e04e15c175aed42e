"""
Integration tests for the banking simulator

Runs randomized operation sequences against a Ledger and checks the
invariants that must survive any mix of committed and rejected operations.
"""

import random

import pytest
from decimal import Decimal

from banking_sim.errors import (
    BankError, InvalidAmountError, InsufficientFundsError, AccountNotFoundError
)
from banking_sim.ledger import Ledger


AMOUNTS = [
    Decimal('-10.00'), Decimal('0'), Decimal('0.01'), Decimal('5.25'),
    Decimal('19.99'), Decimal('100.00'), Decimal('750.50'),
]


class TestLedgerInvariants:
    """Test invariants over randomized operation sequences"""

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_random_operation_sequence(self, seed):
        rng = random.Random(seed)
        ledger = Ledger()
        for name in ("Ada", "Bayo", "Chidi", "Dami"):
            ledger.create_account(name)

        for _ in range(400):
            operation = rng.choice(["deposit", "withdraw", "transfer"])
            amount = rng.choice(AMOUNTS)
            account_id = rng.randint(1, 5)  # 5 never exists
            snapshot = {
                i: (ledger.balance_of(i), len(ledger.history_of(i)))
                for i in ledger.account_ids()
            }

            try:
                if operation == "deposit":
                    ledger.deposit(account_id, amount)
                elif operation == "withdraw":
                    ledger.withdraw(account_id, amount)
                else:
                    other_id = rng.randint(1, 5)
                    total_before = ledger.total_balance()
                    ledger.transfer(account_id, other_id, amount)
                    assert ledger.total_balance() == total_before
            except BankError:
                # Rejected operations change nothing
                assert snapshot == {
                    i: (ledger.balance_of(i), len(ledger.history_of(i)))
                    for i in ledger.account_ids()
                }

            for i in ledger.account_ids():
                history = ledger.history_of(i)
                assert ledger.balance_of(i) == sum(r.signed_amount for r in history)
                assert ledger.balance_of(i) >= 0

        assert ledger.verify_integrity()["valid"]

    def test_rejected_deposit_never_changes_state(self):
        ledger = Ledger()
        account_id = ledger.create_account("Ada")
        ledger.deposit(account_id, Decimal('10.00'))

        for amount in (Decimal('0'), Decimal('-0.01'), Decimal('-1000')):
            with pytest.raises(InvalidAmountError):
                ledger.deposit(account_id, amount)

        assert ledger.balance_of(account_id) == Decimal('10.00')
        assert len(ledger.history_of(account_id)) == 1

    def test_transfer_history_is_auditable_from_both_sides(self):
        """Test each leg of a transfer names the other account"""
        ledger = Ledger()
        a = ledger.create_account("Ada")
        b = ledger.create_account("Bayo")
        c = ledger.create_account("Chidi")
        ledger.deposit(a, Decimal('300.00'))
        ledger.transfer(a, b, Decimal('100.00'))
        ledger.transfer(b, c, Decimal('40.00'))
        ledger.transfer(c, a, Decimal('15.00'))

        b_history = ledger.history_of(b)
        assert [(r.label, r.balance_after) for r in b_history] == [
            ("TRANSFER FROM #1", Decimal('100.00')),
            ("TRANSFER TO #3", Decimal('60.00')),
        ]
        assert [r.label for r in ledger.history_of(a)] == [
            "DEPOSIT", "TRANSFER TO #2", "TRANSFER FROM #3"
        ]
        assert ledger.total_balance() == Decimal('300.00')

    def test_error_kinds(self):
        ledger = Ledger()
        account_id = ledger.create_account("Ada")

        errors = []
        for call in (
            lambda: ledger.withdraw(account_id, Decimal('1.00')),
            lambda: ledger.deposit(account_id, Decimal('0')),
            lambda: ledger.transfer(account_id, 2, Decimal('1.00')),
        ):
            with pytest.raises(BankError) as exc_info:
                call()
            errors.append(type(exc_info.value))

        assert errors == [InsufficientFundsError, InvalidAmountError, AccountNotFoundError]
