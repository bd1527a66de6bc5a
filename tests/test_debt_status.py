"""
Tests for the debt ledger calculator.

These tests verify:
  - Remaining and status are recomputed from payments
  - Overpayment leaves a negative remainder and reads as paid
  - Payments of other debts are ignored
  - The summary splits payable (hutang) and receivable (piutang) totals
"""

from moco.calculators.debts import (
    PAID,
    PAYABLE,
    RECEIVABLE,
    UNPAID,
    compute_debt_status,
    summarize_debts,
)
from moco.calculators.snapshots import DebtRecord, PaymentRecord


LOAN = DebtRecord(id="d1", type=PAYABLE, amount=1_000_000, name="Bank loan")


class TestDebtStatus:

    def test_no_payments(self):
        status = compute_debt_status(LOAN, [])
        assert status.total_paid == 0
        assert status.remaining == 1_000_000
        assert status.status == UNPAID

    def test_partial_payments(self):
        payments = [
            PaymentRecord(id="p1", debt_id="d1", amount=300_000),
            PaymentRecord(id="p2", debt_id="d1", amount=200_000),
        ]
        status = compute_debt_status(LOAN, payments)
        assert status.total_paid == 500_000
        assert status.remaining == 500_000
        assert status.status == UNPAID

    def test_exact_payment_is_paid(self):
        status = compute_debt_status(LOAN, [PaymentRecord(id="p", debt_id="d1", amount=1_000_000)])
        assert status.remaining == 0
        assert status.status == PAID

    def test_overpayment(self):
        status = compute_debt_status(LOAN, [PaymentRecord(id="p", debt_id="d1", amount=1_200_000)])
        assert status.remaining == -200_000
        assert status.status == PAID

    def test_other_debts_payments_ignored(self):
        payments = [PaymentRecord(id="p", debt_id="other", amount=1_000_000)]
        assert compute_debt_status(LOAN, payments).status == UNPAID


class TestDebtSummary:

    def test_split_by_type(self):
        lent = DebtRecord(id="d2", type=RECEIVABLE, amount=400_000)
        settled = DebtRecord(id="d3", type=PAYABLE, amount=100_000)
        payments = [
            PaymentRecord(id="p1", debt_id="d1", amount=250_000),
            PaymentRecord(id="p2", debt_id="d2", amount=100_000),
            # overpaid; must not reduce the other payable's outstanding
            PaymentRecord(id="p3", debt_id="d3", amount=150_000),
        ]
        summary = summarize_debts([LOAN, lent, settled], payments)
        assert summary.payable_total == 1_100_000
        assert summary.receivable_total == 400_000
        assert summary.payable_outstanding == 750_000
        assert summary.receivable_outstanding == 300_000

    def test_empty(self):
        summary = summarize_debts([], [])
        assert summary.payable_total == 0
        assert summary.receivable_outstanding == 0
