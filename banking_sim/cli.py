"""
Interactive Banking Menu

Presentation layer over the Ledger: prompts for input, parses it, calls the
core operations and renders their results. The core never prints; all
user-facing text lives here.
"""

import argparse
import sys
from decimal import Decimal
from typing import Callable, List, Optional

from .amounts import decimal_from_string, format_amount
from .config import BankSimConfig, get_config
from .errors import BankError, AccountNotFoundError
from .ledger import Ledger
from .logging_config import setup_logging
from .transactions import TransactionRecord


MENU = """
 What would you like to process?
1. Create Account
2. Deposit
3. Withdraw
4. Transfer
5. Check Acc Balance
6. Display Transactions
7. Quit Process"""


def parse_account_id(text: str) -> int:
    """Parse a typed account id. Raises ValueError on anything but an integer."""
    return int(text.strip())


def parse_amount(text: str, symbol: str = "$") -> Decimal:
    """Parse a typed amount. Raises ValueError if it is not a plain number."""
    return decimal_from_string(text.strip(), symbols=(symbol,))


def format_transaction(record: TransactionRecord, symbol: str = "$",
                       date_format: str = "%Y-%m-%d", precision: int = 2) -> str:
    """One history line: ``2024-05-01: DEPOSIT $100.00 -> Balance: $100.00``"""
    return (
        f"{record.timestamp.strftime(date_format)}: {record.label} "
        f"{format_amount(record.amount, symbol, precision)} -> "
        f"Balance: {format_amount(record.balance_after, symbol, precision)}"
    )


class BankingCLI:
    """Menu loop driving a Ledger"""

    def __init__(
        self,
        ledger: Ledger,
        input_func: Optional[Callable[[], str]] = None,
        output_func: Optional[Callable[[str], None]] = None,
        config: Optional[BankSimConfig] = None
    ):
        self.ledger = ledger
        self.config = config or ledger.config
        self._input = input_func or input
        self._output = output_func or print
        self.actions = {
            "1": self.create_account,
            "2": self.deposit,
            "3": self.withdraw,
            "4": self.transfer,
            "5": self.check_balance,
            "6": self.display_transactions,
        }

    def run(self) -> None:
        """Run the menu until the user quits or input ends"""
        self._output("== Welcome to the Banking System Simulation! ==")
        self._output(f"You are banking with {self.ledger.name}.")

        while True:
            self._output(MENU)
            try:
                choice = self._input().strip()
            except EOFError:
                choice = "7"

            if choice == "7":
                self._output("Thank you for banking with us, See ya Next time 👋")
                break

            action = self.actions.get(choice)
            if action is None:
                self._output("Invalid choice! Please enter btw 1-7.")
                continue

            try:
                action()
            except EOFError:
                self._output("Thank you for banking with us, See ya Next time 👋")
                break
            except AccountNotFoundError as e:
                # Single-account paths keep the plain lookup message
                if action == self.transfer:
                    self._output(f"Error: {e.default_message}")
                else:
                    self._output("Account not found.")
            except BankError as e:
                self._output(f"Error: {e.default_message}")

    def create_account(self) -> None:
        holder_name = self._prompt("Enter account holder name:")
        account_id = self.ledger.create_account(holder_name)
        self._output(f"Account created with ID: {account_id}")

    def deposit(self) -> None:
        account_id = self._prompt_account_id("Enter account ID for deposit:")
        if account_id is None:
            return
        amount = self._prompt_amount("Enter amount to deposit:")
        if amount is None:
            return

        record = self.ledger.deposit(account_id, amount)
        self._output(f"Deposit of {self._money(record.amount)} successful")

    def withdraw(self) -> None:
        account_id = self._prompt_account_id("Enter account ID for withdrawal:")
        if account_id is None:
            return
        amount = self._prompt_amount("Enter amount to withdraw:")
        if amount is None:
            return

        record = self.ledger.withdraw(account_id, amount)
        self._output(f"Withdrawal of {self._money(record.amount)} was successful")

    def transfer(self) -> None:
        from_id = self._prompt_account_id("Enter sender account ID:")
        if from_id is None:
            return
        to_id = self._prompt_account_id("Enter receiver account ID:")
        if to_id is None:
            return
        amount = self._prompt_amount("Enter amount to transfer:")
        if amount is None:
            return

        out_record, _ = self.ledger.transfer(from_id, to_id, amount)
        self._output(
            f"Transferred {self._money(out_record.amount)} "
            f"from Account #{from_id} to Account #{to_id}"
        )

    def check_balance(self) -> None:
        account_id = self._prompt_account_id("Enter Account ID to check balance:")
        if account_id is None:
            return

        balance = self.ledger.balance_of(account_id)
        self._output(f"\n==> Current balance: {self._money(balance)}")

    def display_transactions(self) -> None:
        account_id = self._prompt_account_id("Enter Account ID to view transaction history:")
        if account_id is None:
            return

        history = self.ledger.history_of(account_id)
        self._output(f"\n== Transaction History for Account #{account_id} ==")
        if not history:
            self._output("No transactions yet.")
        for record in history:
            self._output(format_transaction(
                record,
                symbol=self.config.currency_symbol,
                date_format=self.config.date_format,
                precision=self.config.amount_precision
            ))

    def _prompt(self, message: str) -> str:
        self._output(message)
        return self._input()

    def _prompt_account_id(self, message: str) -> Optional[int]:
        try:
            return parse_account_id(self._prompt(message))
        except ValueError:
            self._output("Invalid account ID.")
            return None

    def _prompt_amount(self, message: str) -> Optional[Decimal]:
        try:
            return parse_amount(self._prompt(message), self.config.currency_symbol)
        except ValueError:
            self._output("Invalid amount.")
            return None

    def _money(self, amount: Decimal) -> str:
        return format_amount(amount, self.config.currency_symbol, self.config.amount_precision)


def build_parser(config: BankSimConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="banking-sim",
        description="Interactive in-memory banking ledger simulator"
    )
    parser.add_argument("--bank-name", default=config.bank_name,
                        help="Bank display name (default: %(default)s)")
    parser.add_argument("--log-level", default=config.log_level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        type=str.upper, help="Log level (default: %(default)s)")
    parser.add_argument("--log-format", default=config.log_format,
                        choices=["json", "text"], help="Log output format")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point"""
    config = get_config()
    args = build_parser(config).parse_args(argv)

    setup_logging(args.log_level, args.log_format)

    ledger = Ledger(name=args.bank_name, config=config)
    try:
        BankingCLI(ledger).run()
    except KeyboardInterrupt:
        print("\nThank you for banking with us, See ya Next time 👋")
    return 0


if __name__ == "__main__":
    sys.exit(main())
