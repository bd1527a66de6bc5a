"""
Tests for savings goal progress.

These tests verify:
  - Saved is the linked wallet's typed balance
  - Percent is bounded to 0-100
  - ETA is ceil(remaining / saving_amount) in the goal's unit
  - The achieved and stalled sentinels
  - Labels are localized
"""

from moco.calculators.goals import compute_eta, compute_goal_progress, progress_percent
from moco.calculators.snapshots import (
    ExpenseEntry,
    GoalRecord,
    IncomeEntry,
    TransferEntry,
)


def _goal(target=1_000_000, saving=100_000, frequency="monthly"):
    return GoalRecord(
        id="g",
        target_amount=target,
        saving_amount=saving,
        saving_frequency=frequency,
        wallet_id="savings",
    )


class TestGoalProgress:

    def test_saved_is_wallet_balance(self):
        txs = [
            IncomeEntry(id=1, amount=300_000, wallet_id="savings"),
            TransferEntry(id=2, amount=200_000, transfer_from="cash", transfer_to_id="savings"),
            ExpenseEntry(id=3, amount=50_000, wallet_id="savings"),
            IncomeEntry(id=4, amount=999_999, wallet_id="cash"),
        ]
        progress = compute_goal_progress(_goal(), txs)
        assert progress.saved == 450_000
        assert progress.percent == 45

    def test_eta_rounds_up(self):
        txs = [IncomeEntry(id=1, amount=450_000, wallet_id="savings")]
        progress = compute_goal_progress(_goal(), txs)
        # 550,000 remaining at 100,000 a month
        assert progress.eta_periods == 6
        assert progress.eta_label == "6 month"
        assert progress.unit_label == "month"

    def test_weekly_unit(self):
        progress = compute_goal_progress(_goal(frequency="weekly", saving=250_000), [])
        assert progress.eta_periods == 4
        assert progress.eta_label == "4 week"

    def test_achieved_ignores_saving_amount(self):
        txs = [IncomeEntry(id=1, amount=1_200_000, wallet_id="savings")]
        progress = compute_goal_progress(_goal(saving=0), txs)
        assert progress.eta_periods == 0
        assert progress.eta_label == "achieved"
        assert progress.percent == 100

    def test_stalled_without_saving_plan(self):
        progress = compute_goal_progress(_goal(saving=0), [])
        assert progress.eta_periods is None
        assert progress.eta_label is None
        assert progress.percent == 0

    def test_indonesian_labels(self):
        progress = compute_goal_progress(_goal(saving=500_000), [], locale="id")
        assert progress.eta_label == "2 bulan"
        assert progress.unit_label == "bulan"

        done = compute_eta(10, 10, 0, "weekly", locale="id")
        assert done == (0, "Tercapai")
        assert compute_eta(0, 10, 5, "weekly", locale="id") == (2, "2 minggu")

    def test_unknown_locale_falls_back_to_english(self):
        assert compute_eta(0, 10, 5, "monthly", locale="fr") == (2, "2 month")


class TestProgressPercent:

    def test_bounded(self):
        assert progress_percent(-500, 1000) == 0
        assert progress_percent(5000, 1000) == 100

    def test_zero_target(self):
        assert progress_percent(100, 0) == 0

    def test_half_up(self):
        assert progress_percent(1, 8) == 13  # 12.5
