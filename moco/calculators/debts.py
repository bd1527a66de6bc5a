"""
Debt/loan ledger calculator.

A debt (hutang, money the user owes) or loan (piutang, money owed to the
user) has an original principal and any number of installment payments.
Remaining balance and status are always recomputed from the full payment
collection; nothing stored on the debt row is trusted. Editing or deleting
a payment is therefore reflected on the next read with no extra work.

Overpayment is not an error: remaining goes negative and the status is
still "paid".
"""

from dataclasses import dataclass
from typing import Iterable

from moco.calculators.formatting import to_amount
from moco.calculators.snapshots import DebtRecord, PaymentRecord


PAID = "paid"
UNPAID = "unpaid"

PAYABLE = "hutang"
RECEIVABLE = "piutang"


@dataclass(frozen=True)
class DebtStatus:
    total_paid: int
    remaining: int
    status: str


@dataclass(frozen=True)
class DebtSummary:
    payable_total: int
    receivable_total: int
    payable_outstanding: int
    receivable_outstanding: int


def compute_debt_status(debt: DebtRecord, payments: Iterable[PaymentRecord] | None) -> DebtStatus:
    total_paid = sum(
        to_amount(p.amount) for p in payments or [] if p.debt_id == debt.id
    )
    remaining = to_amount(debt.amount) - total_paid
    return DebtStatus(
        total_paid=total_paid,
        remaining=remaining,
        status=PAID if remaining <= 0 else UNPAID,
    )


def summarize_debts(
    debts: Iterable[DebtRecord] | None,
    payments: Iterable[PaymentRecord] | None,
) -> DebtSummary:
    """Principal and outstanding totals split by payable/receivable."""
    payment_list = list(payments or [])
    totals = {PAYABLE: 0, RECEIVABLE: 0}
    outstanding = {PAYABLE: 0, RECEIVABLE: 0}
    for debt in debts or []:
        if debt.type not in totals:
            continue
        totals[debt.type] += to_amount(debt.amount)
        remaining = compute_debt_status(debt, payment_list).remaining
        outstanding[debt.type] += max(0, remaining)
    return DebtSummary(
        payable_total=totals[PAYABLE],
        receivable_total=totals[RECEIVABLE],
        payable_outstanding=outstanding[PAYABLE],
        receivable_outstanding=outstanding[RECEIVABLE],
    )
