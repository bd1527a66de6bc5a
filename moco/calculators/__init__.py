"""
Pure calculators that turn a user's raw rows into derived financial state.

Nothing in this package touches the database, the network or the clock.
Every function takes immutable snapshots (see `snapshots`) and returns a
value, so the service layer can call them freely on each read.
"""

from moco.calculators.formatting import (  # noqa: F401
    format_amount,
    format_currency,
    parse_amount,
    percent_of,
    round_half_up,
    to_amount,
)
from moco.calculators.snapshots import (  # noqa: F401
    CategoryRecord,
    DebtRecord,
    ExpenseEntry,
    GoalRecord,
    IncomeEntry,
    PaymentRecord,
    Period,
    SubcategoryRecord,
    TransferEntry,
    entries_from_rows,
    entry_from_row,
)
from moco.calculators.wallets import compute_wallet_balance, compute_wallet_balances  # noqa: F401
from moco.calculators.budget import (  # noqa: F401
    BudgetSnapshot,
    allocated_for_category,
    allocated_for_subcategory,
    spent_for_category,
    spent_for_subcategory,
    total_income,
)
from moco.calculators.goals import compute_goal_progress  # noqa: F401
from moco.calculators.debts import compute_debt_status, summarize_debts  # noqa: F401
