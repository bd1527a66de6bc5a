"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. Other modules can import from moco.models directly
"""

from moco.models.user import User  # noqa: F401
from moco.models.wallet import Wallet  # noqa: F401
from moco.models.transaction import Transaction  # noqa: F401
from moco.models.budget import BudgetCategory, BudgetSubcategory  # noqa: F401
from moco.models.goal import Goal  # noqa: F401
from moco.models.debt import Debt, DebtPayment  # noqa: F401
