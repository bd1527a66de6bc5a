"""
Wallet balance calculator.

A wallet's balance is never stored. It is derived from the complete
transaction history every time it is needed:

    income   into wallet            +amount
    expense  from wallet            -amount
    transfer transfer_to_id==wallet +amount
    transfer transfer_from==wallet  -amount

Anything else contributes nothing. The sum is commutative, so the order of
the input does not matter, and no date filtering is applied.
"""

from typing import Any, Iterable

from moco.calculators.formatting import to_amount
from moco.calculators.snapshots import Entry, ExpenseEntry, IncomeEntry, TransferEntry


def balance_delta(entry: Entry, wallet_id: Any) -> int:
    """The signed effect of a single entry on one wallet."""
    amount = to_amount(entry.amount)
    if isinstance(entry, IncomeEntry):
        return amount if entry.wallet_id == wallet_id else 0
    if isinstance(entry, ExpenseEntry):
        return -amount if entry.wallet_id == wallet_id else 0
    if isinstance(entry, TransferEntry):
        delta = 0
        if entry.transfer_to_id == wallet_id:
            delta += amount
        if entry.transfer_from == wallet_id:
            delta -= amount
        return delta
    return 0


def compute_wallet_balance(transactions: Iterable[Entry] | None, wallet_id: Any) -> int:
    """Derive the current balance of `wallet_id` from the full history."""
    if wallet_id is None:
        return 0
    return sum(balance_delta(entry, wallet_id) for entry in transactions or [])


def compute_wallet_balances(
    transactions: Iterable[Entry] | None,
    wallet_ids: Iterable[Any],
) -> dict[Any, int]:
    entries = list(transactions or [])
    return {wallet_id: compute_wallet_balance(entries, wallet_id) for wallet_id in wallet_ids}


def total_balance(transactions: Iterable[Entry] | None, wallet_ids: Iterable[Any]) -> int:
    """Sum of the balances of the given wallets."""
    return sum(compute_wallet_balances(transactions, wallet_ids).values())
