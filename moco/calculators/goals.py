"""
Goal progress calculator.

A goal's saved amount is the balance of its linked wallet, computed with
the typed wallet rules from `moco.calculators.wallets`. From that and the
goal's target and saving plan we derive:

  percent      saved / target as a 0-100 integer (0 when target <= 0)
  eta_periods  ceil(remaining / saving_amount) weeks or months
  eta_label    "<n> <unit>", or the localized "achieved" label

Two sentinels:
  achieved  saved >= target       -> eta_periods 0, label "achieved",
                                     whatever the saving amount
  stalled   no saving_amount > 0  -> eta_periods None, label None
"""

import math
from dataclasses import dataclass
from typing import Iterable

from moco.calculators.formatting import round_half_up, to_amount, to_number
from moco.calculators.snapshots import Entry, GoalRecord
from moco.calculators.wallets import compute_wallet_balance


ETA_LABELS = {
    "en": {"achieved": "achieved", "monthly": "month", "weekly": "week"},
    "id": {"achieved": "Tercapai", "monthly": "bulan", "weekly": "minggu"},
}


@dataclass(frozen=True)
class GoalProgress:
    saved: int
    percent: int
    eta_periods: int | None
    eta_label: str | None
    unit_label: str


def _labels(locale: str) -> dict:
    return ETA_LABELS.get(locale, ETA_LABELS["en"])


def unit_label(frequency: str, locale: str = "en") -> str:
    labels = _labels(locale)
    return labels["monthly"] if frequency == "monthly" else labels["weekly"]


def progress_percent(saved: int, target: int) -> int:
    if target <= 0:
        return 0
    return max(0, min(100, round_half_up(to_number(saved) * 100 / target)))


def compute_eta(
    saved: int,
    target: int,
    saving_amount: int,
    frequency: str = "weekly",
    locale: str = "en",
) -> tuple[int | None, str | None]:
    remaining = max(0, target - saved)
    if remaining <= 0:
        return 0, _labels(locale)["achieved"]
    if saving_amount <= 0:
        return None, None
    periods = math.ceil(remaining / saving_amount)
    return periods, f"{periods} {unit_label(frequency, locale)}"


def compute_goal_progress(
    goal: GoalRecord,
    transactions: Iterable[Entry] | None,
    locale: str = "en",
) -> GoalProgress:
    saved = compute_wallet_balance(transactions, goal.wallet_id)
    target = to_amount(goal.target_amount)
    saving_amount = to_amount(goal.saving_amount)
    eta_periods, eta_label = compute_eta(
        saved, target, saving_amount, goal.saving_frequency, locale
    )
    return GoalProgress(
        saved=saved,
        percent=progress_percent(saved, target),
        eta_periods=eta_periods,
        eta_label=eta_label,
        unit_label=unit_label(goal.saving_frequency, locale),
    )
